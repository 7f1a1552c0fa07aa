from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Any, Dict, List, Mapping, Optional, Sequence

import psutil

from ..errors import DiscoveryError
from ..models.assignments import NetworkAssignment
from ..utils.addresses import parse_ipv4, parse_mac


logger = logging.getLogger(__name__)

ZERO_MAC = "00:00:00:00:00:00"
HYPERV_MAC_PREFIX = bytes([0x00, 0x15, 0x5D])

# Leading octet -> rank; conventional LAN ranges first, CGNAT and loopback last
SUBNET_PRIORITIES = (
    ("192.", 5),
    ("172.", 4),
    ("10.", 3),
    ("100.", 2),
    ("127.", 1),
)


def _normalize_mac(mac: Optional[str]) -> str:
    # Windows reports 00-15-5D-..., everyone else 00:15:5d:...
    if not mac:
        return ZERO_MAC
    return mac.replace("-", ":").lower()


def _cidr(address: str, netmask: Optional[str]) -> Optional[str]:
    if not netmask:
        return None
    try:
        prefix = ipaddress.ip_network(f"{address}/{netmask}", strict=False).prefixlen
    except ValueError:
        return None
    return f"{address}/{prefix}"


def network_interfaces() -> Dict[str, List[Dict[str, Any]]]:
    """Snapshot of the OS interface table as plain records.

    Each record has ``address``, ``netmask``, ``family`` ("IPv4"/"IPv6"),
    ``mac``, ``internal`` and ``cidr``, grouped by interface name.
    """
    stats = psutil.net_if_stats()
    result: Dict[str, List[Dict[str, Any]]] = {}
    for iname, addrs in psutil.net_if_addrs().items():
        mac = ZERO_MAC
        for addr in addrs:
            if addr.family == psutil.AF_LINK and addr.address:
                mac = _normalize_mac(addr.address)
        flags = getattr(stats.get(iname), "flags", "") or ""
        loopback = "loopback" in flags.split(",")
        records: List[Dict[str, Any]] = []
        for addr in addrs:
            if addr.family == socket.AF_INET:
                family = "IPv4"
            elif addr.family == socket.AF_INET6:
                family = "IPv6"
            else:
                continue
            netmask = addr.netmask or ("255.255.255.255" if family == "IPv4" else None)
            records.append({
                "address": addr.address,
                "netmask": netmask,
                "family": family,
                "mac": mac,
                "internal": loopback or addr.address.startswith("127.") or addr.address == "::1",
                "cidr": _cidr(addr.address, addr.netmask),
            })
        if records:
            result[iname] = records
    return result


def subnet_priority(address: str) -> int:
    for prefix, priority in SUBNET_PRIORITIES:
        if address.startswith(prefix):
            return priority
    return 0


def is_internal(assignment: NetworkAssignment) -> bool:
    """Loopback flag, zeroed MAC, Hyper-V MAC prefix, or a vEthernet adapter."""
    if assignment.internal:
        return True
    try:
        mac = parse_mac(assignment.mac)
    except DiscoveryError:
        # unreadable hardware address: neither zeroed nor Hyper-V
        mac = None
    if mac is not None and not any(mac):
        return True
    if mac is not None and mac[:3] == HYPERV_MAC_PREFIX:
        return True
    if "vEthernet" in assignment.iname:
        return True
    return False


def signed_address(address: str) -> int:
    """Address as a signed 32-bit value; 128.0.0.0 and above are negative."""
    value = parse_ipv4(address)
    return value - (1 << 32) if value & 0x80000000 else value


def rank_key(assignment: NetworkAssignment) -> tuple:
    return (
        int(is_internal(assignment)),
        -subnet_priority(assignment.address),
        -signed_address(assignment.address),
        assignment.iname,
    )


def interface_assignments(
    interfaces: Optional[Mapping[str, Sequence[Mapping[str, Any]]]] = None,
) -> List[NetworkAssignment]:
    if interfaces is None:
        interfaces = network_interfaces()
    candidates: List[NetworkAssignment] = []
    for iname, records in interfaces.items():
        for record in records or ():
            if record.get("family") != "IPv4":
                continue
            candidates.append(NetworkAssignment(
                iname=iname,
                address=record["address"],
                netmask=record["netmask"],
                mac=record.get("mac") or ZERO_MAC,
                internal=bool(record.get("internal")),
                cidr=record.get("cidr"),
            ))
    candidates.sort(key=rank_key)
    logger.debug("ranked %d IPv4 assignment(s): %s", len(candidates), [c.address for c in candidates])
    return candidates
