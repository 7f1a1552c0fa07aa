from __future__ import annotations

import asyncio
import logging
import secrets
import socket
from typing import Optional, Tuple

from ..config import settings
from ..errors import DiscoveryError, ErrorKind
from ..models.assignments import NetworkAssignment
from ..utils.addresses import broadcast_address, parse_mac


logger = logging.getLogger(__name__)

PACKET_SIZE = 244
MAGIC_COOKIE = bytes([0x63, 0x82, 0x53, 0x63])
# option 53 (message type) = 1 (DISCOVER), then END
OPTIONS_TRAILER = bytes([0x35, 0x01, 0x01, 0xFF])


def dhcp_discover_packet(mac_str: str) -> bytes:
    packet = bytearray(PACKET_SIZE)
    packet[0] = 1  # op = BOOTREQUEST
    packet[1] = 1  # htype = ethernet
    packet[2] = 6  # hlen
    packet[3] = 0  # hops
    packet[4:8] = secrets.token_bytes(4)  # xid
    # secs = 0 [8:10]
    packet[10] = 0x80  # flags: broadcast
    # ciaddr, yiaddr, siaddr, giaddr = 0 [12:28]
    packet[28:34] = parse_mac(mac_str)  # chaddr, padded to 16 bytes
    # sname [44:108], file [108:236] = 0
    packet[236:240] = MAGIC_COOKIE
    packet[240:244] = OPTIONS_TRAILER
    return bytes(packet)


class _ReplyProtocol(asyncio.DatagramProtocol):
    def __init__(self, reply: "asyncio.Future[str]") -> None:
        self._reply = reply

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        if not self._reply.done():
            self._reply.set_result(addr[0])

    def error_received(self, exc: Exception) -> None:
        if not self._reply.done():
            self._reply.set_exception(exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None and not self._reply.done():
            self._reply.set_exception(exc)


def _client_socket() -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.setblocking(False)
        sock.bind(("", settings.dhcp_client_port))
    except OSError:
        sock.close()
        raise
    return sock


async def dhcp_discover(assignment: NetworkAssignment) -> str:
    """Broadcast a DHCPDISCOVER on the assignment's subnet.

    Resolves with the address of whichever peer answers first; the reply itself
    is not parsed.
    """
    target = broadcast_address(assignment.address, assignment.netmask)
    packet = dhcp_discover_packet(assignment.mac)
    loop = asyncio.get_running_loop()
    reply: "asyncio.Future[str]" = loop.create_future()
    sock = _client_socket()
    try:
        transport, _ = await loop.create_datagram_endpoint(lambda: _ReplyProtocol(reply), sock=sock)
    except BaseException:
        sock.close()
        raise
    try:
        logger.debug("sending DHCPDISCOVER on %s to %s", assignment.iname, target)
        transport.sendto(packet, (target, settings.dhcp_server_port))
        try:
            address = await asyncio.wait_for(reply, timeout=settings.dhcp_timeout)
        except asyncio.TimeoutError:
            raise DiscoveryError(
                ErrorKind.DHCP_TIMEOUT,
                f"Received no reply to DHCPDISCOVER in {int(settings.dhcp_timeout * 1000)}ms",
            )
    finally:
        transport.close()
    logger.debug("DHCP reply on %s from %s", assignment.iname, address)
    return address
