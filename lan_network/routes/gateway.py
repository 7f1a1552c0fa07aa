from fastapi import APIRouter, HTTPException

from ..models.assignments import GatewayAssignment, InterfacesResponse, RankedInterface
from ..services.gateway_resolver import gateway_resolver
from ..services.interface_ranker import is_internal, subnet_priority


router = APIRouter()
interfaces_router = APIRouter()


@router.get("/", response_model=GatewayAssignment)
async def resolve_gateway() -> GatewayAssignment:
    return await gateway_resolver.resolve()


@router.get("/probe", response_model=GatewayAssignment)
async def probe_gateway() -> GatewayAssignment:
    assignment = await gateway_resolver.probe()
    if assignment is None:
        raise HTTPException(status_code=404, detail="No default gateway or route")
    return assignment


@router.get("/dhcp", response_model=GatewayAssignment)
async def dhcp_gateway() -> GatewayAssignment:
    assignment = await gateway_resolver.dhcp()
    if assignment is None:
        raise HTTPException(status_code=404, detail="No DHCP router was discoverable")
    return assignment


@router.get("/fallback", response_model=GatewayAssignment)
async def fallback_gateway() -> GatewayAssignment:
    assignment = await gateway_resolver.fallback()
    if assignment is None:
        raise HTTPException(status_code=404, detail="No available network interface assignments")
    return assignment


@interfaces_router.get("/", response_model=InterfacesResponse)
async def list_interfaces() -> InterfacesResponse:
    return InterfacesResponse(
        interfaces=[
            RankedInterface(
                assignment=a,
                classified_internal=is_internal(a),
                subnet_priority=subnet_priority(a.address),
            )
            for a in gateway_resolver.candidates()
        ]
    )
