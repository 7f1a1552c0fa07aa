from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import configure_logging, settings
from .models.assignments import GatewayAssignment, is_default_assignment
from .services.gateway_resolver import GatewayResolver, gateway_resolver


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="lan-network",
        description="Discover the machine's default gateway and local network IP",
    )
    modes = ap.add_mutually_exclusive_group()
    modes.add_argument("-p", "--probe", dest="mode", action="store_const", const="probe",
                       help="Discover gateway via UDP4 socket to publicly routed address")
    modes.add_argument("-d", "--dhcp", dest="mode", action="store_const", const="dhcp",
                       help="Discover gateway via DHCPv4 discover broadcast")
    modes.add_argument("-f", "--fallback", dest="mode", action="store_const", const="fallback",
                       help="Return highest-priority IPv4 network interface assignment")
    modes.add_argument("--default", dest="mode", action="store_const", const="default",
                       help="Try the three above modes in order")
    modes.add_argument("--serve", dest="mode", action="store_const", const="serve",
                       help="Serve the same lookups over HTTP")
    ap.add_argument("--log-level", default=None, help=f"Logging level (default: {settings.log_level})")
    ap.set_defaults(mode="default")
    return ap


def _emit(assignment: GatewayAssignment) -> int:
    print(assignment.model_dump_json(indent=2))
    return 0


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


async def run_mode(mode: str, resolver: GatewayResolver) -> int:
    if mode == "default":
        assignment = await resolver.resolve()
        if is_default_assignment(assignment):
            return _fail("No default gateway, route, or DHCP router")
        return _emit(assignment)

    if not resolver.candidates():
        return _fail("No available network interface assignments")
    if mode == "probe":
        found = await resolver.probe()
        message = "No default gateway or route"
    elif mode == "dhcp":
        found = await resolver.dhcp()
        message = "No DHCP router was discoverable"
    else:
        found = await resolver.fallback()
        message = "No available network interface assignments"
    if found is None or is_default_assignment(found):
        return _fail(message)
    return _emit(found)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    if args.mode == "serve":
        import uvicorn

        uvicorn.run("lan_network.main:app", host=settings.host, port=settings.port,
                    log_level=(args.log_level or settings.log_level).lower())
        return 0
    logger.debug("running in %s mode", args.mode)
    return asyncio.run(run_mode(args.mode, gateway_resolver))


if __name__ == "__main__":
    raise SystemExit(main())
