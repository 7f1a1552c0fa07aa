from __future__ import annotations

import re
from typing import List

from ..errors import DiscoveryError, ErrorKind


MASK_32 = 0xFFFFFFFF
MAC_LENGTH = 6
# Longest hardware address we look at (e.g. InfiniBand); only the first 6 octets are used
MAX_MAC_SEGMENTS = 16

HEX_SEGMENT = re.compile(r"[0-9A-Fa-f]{1,2}")
DEC_OCTET = re.compile(r"[0-9]{1,3}")


def parse_mac(mac_str: str) -> bytes:
    """Hardware address as 6 bytes; shorter addresses (e.g. 4-byte tunnels) are zero-padded."""
    segments: List[int] = []
    for seg in mac_str.split(":")[:MAX_MAC_SEGMENTS]:
        if not HEX_SEGMENT.fullmatch(seg):
            raise DiscoveryError(ErrorKind.PARSE, f"Invalid MAC address segment {seg!r} in {mac_str!r}")
        segments.append(int(seg, 16))
    return bytes(segments[:MAC_LENGTH]).ljust(MAC_LENGTH, b"\x00")


def parse_ipv4(ip_str: str) -> int:
    """Pack a dotted-quad string into a 32-bit integer, first octet most significant."""
    parts = ip_str.split(".")
    if len(parts) != 4:
        raise DiscoveryError(ErrorKind.PARSE, f"Invalid IPv4 address: {ip_str!r}")
    value = 0
    for part in parts:
        if not DEC_OCTET.fullmatch(part):
            raise DiscoveryError(ErrorKind.PARSE, f"Invalid IPv4 octet {part!r} in {ip_str!r}")
        octet = int(part, 10)
        if octet > 0xFF:
            raise DiscoveryError(ErrorKind.PARSE, f"IPv4 octet out of range in {ip_str!r}")
        value = (value << 8) | octet
    return value


def format_ipv4(value: int) -> str:
    value &= MASK_32
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def same_subnet(addr_a: str, addr_b: str, netmask: str) -> bool:
    mask = parse_ipv4(netmask)
    return (parse_ipv4(addr_a) & mask) == (parse_ipv4(addr_b) & mask)


def broadcast_address(address: str, netmask: str) -> str:
    return format_ipv4(parse_ipv4(address) | (~parse_ipv4(netmask) & MASK_32))
