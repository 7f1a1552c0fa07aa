from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from ..errors import DiscoveryError
from ..models.assignments import DEFAULT_ASSIGNMENT, GatewayAssignment, NetworkAssignment
from ..utils.addresses import parse_ipv4
from .dhcp_discover import dhcp_discover
from .interface_ranker import interface_assignments, is_internal
from .route_prober import probe_default_route


def match_assignment(candidates: Sequence[NetworkAssignment], addr: str) -> Optional[GatewayAssignment]:
    """Find the candidate an address belongs to.

    Candidates are checked in order. The first one that either is ``addr``
    (no gateway) or has ``addr`` inside its subnet (``addr`` as gateway) wins.
    """
    raw_addr = parse_ipv4(addr)
    for candidate in candidates:
        candidate_addr = parse_ipv4(candidate.address)
        if candidate_addr == raw_addr:
            return GatewayAssignment.from_assignment(candidate, gateway=None)
        mask = parse_ipv4(candidate.netmask)
        if (candidate_addr & mask) == (raw_addr & mask):
            return GatewayAssignment.from_assignment(candidate, gateway=addr)
    return None


class GatewayResolver:
    def __init__(
        self,
        enumerate_assignments: Callable[[], List[NetworkAssignment]] = interface_assignments,
        probe: Callable[[], Awaitable[str]] = probe_default_route,
        discover: Callable[[NetworkAssignment], Awaitable[str]] = dhcp_discover,
    ) -> None:
        self._enumerate = enumerate_assignments
        self._probe = probe
        self._discover = discover

    def candidates(self) -> List[NetworkAssignment]:
        return list(self._enumerate())

    async def resolve(self) -> GatewayAssignment:
        try:
            assignments = self.candidates()
        except DiscoveryError:
            return DEFAULT_ASSIGNMENT
        if not assignments:
            return DEFAULT_ASSIGNMENT

        # Route probe: cheap, local, and fails when offline
        assignment = await self._match_probe(assignments)
        if assignment and not is_internal(assignment):
            return assignment

        assignment = await self._match_dhcp(assignments)
        if assignment:
            return assignment

        # Candidates are ordered by likelihood; may be 127.0.0.1 as a last resort
        return GatewayAssignment.from_assignment(assignments[0], gateway=None)

    async def probe(self) -> Optional[GatewayAssignment]:
        assignments = self.candidates()
        if not assignments:
            return None
        return await self._match_probe(assignments)

    async def dhcp(self) -> Optional[GatewayAssignment]:
        assignments = self.candidates()
        if not assignments:
            return None
        return await self._match_dhcp(assignments)

    async def fallback(self) -> Optional[GatewayAssignment]:
        assignments = self.candidates()
        if not assignments:
            return None
        return GatewayAssignment.from_assignment(assignments[0], gateway=None)

    async def _match_probe(self, assignments: List[NetworkAssignment]) -> Optional[GatewayAssignment]:
        try:
            default_route = await self._probe()
            return match_assignment(assignments, default_route)
        except Exception:  # noqa: BLE001
            return None

    async def _match_dhcp(self, assignments: List[NetworkAssignment]) -> Optional[GatewayAssignment]:
        # Without a gateway nothing replies, so every interface is tried at once.
        # All attempts settle before picking, first success in candidate order wins.
        discoveries = await asyncio.gather(
            *(self._discover(assignment) for assignment in assignments),
            return_exceptions=True,
        )
        for discovery in discoveries:
            if isinstance(discovery, BaseException) or not discovery:
                continue
            matched = match_assignment(assignments, discovery)
            if matched:
                return matched
        return None


gateway_resolver = GatewayResolver()


async def lan_network() -> GatewayAssignment:
    return await gateway_resolver.resolve()
