"""Domain models for nodes, devices and instance metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class Node:
    """The orchestrator's view of a cluster member.

    ``provider_id`` is empty until the node has been registered with the
    cloud provider; resolution then falls back to the node name.
    """

    name: str
    provider_id: str = ""


@dataclass(frozen=True, slots=True)
class BareMetalDevice:
    """Snapshot of a Hivelocity bare-metal device as returned by the API."""

    device_id: int
    hostname: str = ""
    primary_ip: str = ""
    location_name: str = ""
    power_status: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    product_name: str = ""
    os_name: str = ""
    service_id: int = 0
    order_id: int = 0
    vlan_id: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BareMetalDevice":
        """Build a device from the camelCase API document.

        The API omits empty fields, so every key is optional. ``tags`` may be
        null or missing.
        """

        tags = payload.get("tags") or []
        return cls(
            device_id=int(payload.get("deviceId") or 0),
            hostname=str(payload.get("hostname") or ""),
            primary_ip=str(payload.get("primaryIp") or ""),
            location_name=str(payload.get("locationName") or ""),
            power_status=str(payload.get("powerStatus") or ""),
            tags=tuple(str(tag) for tag in tags),
            product_name=str(payload.get("productName") or ""),
            os_name=str(payload.get("osName") or ""),
            service_id=int(payload.get("serviceId") or 0),
            order_id=int(payload.get("orderId") or 0),
            vlan_id=int(payload.get("vlanId") or 0),
        )


class NodeAddressType(str, Enum):
    HOSTNAME = "Hostname"
    EXTERNAL_IP = "ExternalIP"
    INTERNAL_IP = "InternalIP"


@dataclass(frozen=True, slots=True)
class NodeAddress:
    type: NodeAddressType
    address: str


@dataclass(frozen=True, slots=True)
class InstanceMetadata:
    """Canonical instance metadata handed back to the orchestrator."""

    provider_id: str
    instance_type: str
    node_addresses: Tuple[NodeAddress, ...]
    zone: str
    region: str

    def as_dict(self) -> dict[str, object]:
        return {
            "providerID": self.provider_id,
            "instanceType": self.instance_type,
            "nodeAddresses": [
                {"type": address.type.value, "address": address.address}
                for address in self.node_addresses
            ],
            "zone": self.zone,
            "region": self.region,
        }
