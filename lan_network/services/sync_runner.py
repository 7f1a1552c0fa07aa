from __future__ import annotations

import logging
import subprocess
import sys

from pydantic import ValidationError

from ..config import settings
from ..models.assignments import DEFAULT_ASSIGNMENT, GatewayAssignment


logger = logging.getLogger(__name__)

WORKER_MODULE = "lan_network.worker"


def lan_network_sync() -> GatewayAssignment:
    """Blocking variant of ``lan_network()``.

    Runs the resolution in a separate interpreter so no event loop is needed
    here. Any failure yields ``DEFAULT_ASSIGNMENT``.
    """
    try:
        p = subprocess.run(
            [sys.executable, "-m", WORKER_MODULE],
            capture_output=True,
            text=True,
            timeout=settings.sync_timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("gateway worker failed to run: %s", exc)
        return DEFAULT_ASSIGNMENT
    if p.returncode != 0:
        logger.debug("gateway worker exited with %s: %s", p.returncode, (p.stderr or "").strip())
        return DEFAULT_ASSIGNMENT
    try:
        return GatewayAssignment.model_validate_json((p.stdout or "").strip())
    except ValidationError as exc:
        logger.debug("gateway worker printed invalid output: %s", exc)
        return DEFAULT_ASSIGNMENT
