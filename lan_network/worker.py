from __future__ import annotations

import asyncio

from .config import configure_logging
from .services.gateway_resolver import lan_network


def main() -> int:
    configure_logging()
    assignment = asyncio.run(lan_network())
    print(assignment.model_dump_json())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
