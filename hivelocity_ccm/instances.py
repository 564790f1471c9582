"""Instance state projection for the orchestrator.

``HivelocityInstances`` answers the three questions the orchestrator asks
about a node: does its device exist, is it shut down, and what metadata
should be recorded on registration. All three share one resolution path
through ``DeviceResolver``.
"""

from __future__ import annotations

import logging
from typing import Optional

from .constants import (
    DEFAULT_INSTANCE_TYPE_TAG,
    DEFAULT_MACHINE_NAME_TAG,
    POWER_STATUS_OFF,
    POWER_STATUS_ON,
)
from .core import (
    BareMetalDevice,
    DeviceClient,
    InstanceMetadata,
    Node,
    NodeAddress,
    NodeAddressType,
    TagSet,
)
from .errors import ErrorKind, InstanceError, TagError
from .resolver import DeviceResolver, Failed, Found, NotFound

LOGGER = logging.getLogger(__name__)


class HivelocityInstances:
    """Orchestrator-facing instances implementation backed by Hivelocity."""

    def __init__(
        self,
        client: DeviceClient,
        *,
        instance_type_key: str = DEFAULT_INSTANCE_TYPE_TAG,
        machine_name_key: str = DEFAULT_MACHINE_NAME_TAG,
    ) -> None:
        self._resolver = DeviceResolver(client, machine_name_key=machine_name_key)
        self._instance_type_key = instance_type_key

    @property
    def resolver(self) -> DeviceResolver:
        return self._resolver

    async def instance_exists(self, node: Optional[Node]) -> bool:
        """Return True if a device backs ``node``.

        A missing device is answered with False, never with an error.
        """

        node = _require_node(node, "instance_exists")
        outcome = await self._resolver.resolve(node)

        if isinstance(outcome, Failed):
            error = outcome.error
            raise error.with_context(operation="instance_exists") from error
        if isinstance(outcome, NotFound):
            LOGGER.debug("Node %s has no device: %s", node.name, outcome.reason)
            return False
        return True

    async def instance_shutdown(self, node: Optional[Node]) -> bool:
        """Return True if the device backing ``node`` is powered off.

        Raises:
            InstanceError: ``NO_DEVICE_FOUND`` if no device backs the node,
                ``UNKNOWN_POWER_STATUS`` if the power status is neither
                ``ON`` nor ``OFF``.
        """

        node = _require_node(node, "instance_shutdown")
        device = await self._require_device(node, "instance_shutdown")

        if device.power_status == POWER_STATUS_ON:
            return False
        if device.power_status == POWER_STATUS_OFF:
            return True
        raise InstanceError(
            ErrorKind.UNKNOWN_POWER_STATUS,
            "instance_shutdown: device has unknown power status",
            node_name=node.name,
            device_id=device.device_id,
            raw=device.power_status,
        )

    async def instance_metadata(self, node: Optional[Node]) -> InstanceMetadata:
        """Return the metadata recorded on the node at registration.

        Raises:
            InstanceError: ``NO_DEVICE_FOUND`` if no device backs the node.
            TagError: If the instance-type tag is missing, ambiguous or invalid.
        """

        node = _require_node(node, "instance_metadata")
        device = await self._require_device(node, "instance_metadata")

        tags = TagSet.parse(device.tags, device_id=device.device_id)
        try:
            instance_type = tags.single(self._instance_type_key)
        except TagError as exc:
            raise exc.with_context(
                node_name=node.name, operation="instance_metadata"
            ) from exc

        return InstanceMetadata(
            provider_id=str(device.device_id),
            instance_type=instance_type,
            node_addresses=(
                NodeAddress(type=NodeAddressType.EXTERNAL_IP, address=device.primary_ip),
            ),
            # Hivelocity has no zone/region split; the location (e.g. LAX2) is both.
            zone=device.location_name,
            region=device.location_name,
        )

    async def _require_device(self, node: Node, operation: str) -> BareMetalDevice:
        outcome = await self._resolver.resolve(node)

        if isinstance(outcome, Found):
            return outcome.device
        if isinstance(outcome, NotFound):
            raise InstanceError(
                ErrorKind.NO_DEVICE_FOUND,
                f"{operation}: no device found ({outcome.reason})",
                node_name=node.name,
                device_id=outcome.device_id,
            )
        raise outcome.error.with_context(operation=operation) from outcome.error


def _require_node(node: Optional[Node], operation: str) -> Node:
    if node is None:
        raise InstanceError(ErrorKind.NODE_IS_NIL, f"{operation}: node is None")
    return node
