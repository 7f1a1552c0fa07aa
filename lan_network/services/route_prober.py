from __future__ import annotations

import asyncio
import logging
import socket

from ..config import settings
from ..errors import DiscoveryError, ErrorKind


logger = logging.getLogger(__name__)

NO_ROUTE_IP = "0.0.0.0"


async def probe_default_route() -> str:
    """Local address the kernel picks for outbound traffic.

    Connecting a UDP socket only performs the route lookup; no datagram is sent.
    """
    loop = asyncio.get_running_loop()
    transport, _ = await loop.create_datagram_endpoint(
        asyncio.DatagramProtocol,
        remote_addr=(settings.probe_host, settings.probe_port),
        family=socket.AF_INET,
    )
    try:
        sockname = transport.get_extra_info("sockname")
    finally:
        transport.close()
    address = sockname[0] if sockname else NO_ROUTE_IP
    if address == NO_ROUTE_IP:
        raise DiscoveryError(ErrorKind.NO_ROUTE, "No route to host")
    logger.debug("default route goes out via %s", address)
    return address
