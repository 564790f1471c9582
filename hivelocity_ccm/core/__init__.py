"""Core primitives for hivelocity-ccm."""

from .models import (
    BareMetalDevice,
    InstanceMetadata,
    Node,
    NodeAddress,
    NodeAddressType,
)
from .protocols import DeviceClient
from .provider_id import device_id_from_node, format_provider_id, parse_provider_id
from .tags import TagSet, extract_tag_value, is_valid_label_value

__all__ = [
    "BareMetalDevice",
    "DeviceClient",
    "InstanceMetadata",
    "Node",
    "NodeAddress",
    "NodeAddressType",
    "TagSet",
    "device_id_from_node",
    "extract_tag_value",
    "format_provider_id",
    "is_valid_label_value",
    "parse_provider_id",
]
