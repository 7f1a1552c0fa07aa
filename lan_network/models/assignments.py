from pydantic import BaseModel, ConfigDict
from typing import List, Literal, Optional


class NetworkAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    iname: str
    address: str
    netmask: str
    family: Literal["IPv4"] = "IPv4"
    mac: str
    internal: bool
    cidr: Optional[str] = None


class GatewayAssignment(NetworkAssignment):
    gateway: Optional[str] = None  # None: the interface itself is the answer
    # Set only on DEFAULT_ASSIGNMENT; serialized so it survives the worker's JSON
    is_default: bool = False

    @classmethod
    def from_assignment(cls, assignment: NetworkAssignment, gateway: Optional[str] = None) -> "GatewayAssignment":
        data = assignment.model_dump()
        data["gateway"] = gateway
        data["is_default"] = False
        return cls(**data)


DEFAULT_ASSIGNMENT = GatewayAssignment(
    iname="lo0",
    address="127.0.0.1",
    netmask="255.0.0.0",
    family="IPv4",
    mac="00:00:00:00:00:00",
    internal=True,
    cidr="127.0.0.1/8",
    gateway=None,
    is_default=True,
)


def is_default_assignment(assignment: Optional[NetworkAssignment]) -> bool:
    return bool(getattr(assignment, "is_default", False))


class RankedInterface(BaseModel):
    assignment: NetworkAssignment
    classified_internal: bool
    subnet_priority: int


class InterfacesResponse(BaseModel):
    interfaces: List[RankedInterface]
