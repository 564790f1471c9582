"""Resolution of cluster nodes to Hivelocity devices.

A node is looked up one of two ways, decided once per call:

- ``ByDeviceID``: the node carries a provider id, so the device is fetched
  directly. If the device has a machine-name tag, it must match the node
  name; a mismatch means the provider id is stale and the node is treated
  as gone.
- ``ByName``: the node has no provider id yet (first registration), so the
  whole inventory is listed and the first device whose machine-name tag
  equals the node name wins.

The result is always one of ``Found``, ``NotFound`` or ``Failed``.
``NotFound`` is a valid answer, not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .constants import DEFAULT_MACHINE_NAME_TAG
from .core import BareMetalDevice, DeviceClient, Node, TagSet, device_id_from_node
from .errors import CloudProviderError, NoSuchDeviceError, TagError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ByDeviceID:
    device_id: int


@dataclass(frozen=True, slots=True)
class ByName:
    name: str


Lookup = Union[ByDeviceID, ByName]


@dataclass(frozen=True, slots=True)
class Found:
    device: BareMetalDevice


@dataclass(frozen=True, slots=True)
class NotFound:
    reason: str
    device_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Failed:
    error: CloudProviderError


ResolutionOutcome = Union[Found, NotFound, Failed]


def lookup_for(node: Node) -> Lookup:
    """Choose the lookup strategy for ``node``.

    Raises:
        ProviderIDError: If the node has a provider id that cannot be decoded.
    """

    if node.provider_id:
        return ByDeviceID(device_id_from_node(node))
    return ByName(node.name)


class DeviceResolver:
    """Find the device backing a node."""

    def __init__(
        self,
        client: DeviceClient,
        *,
        machine_name_key: str = DEFAULT_MACHINE_NAME_TAG,
    ) -> None:
        self._client = client
        self._machine_name_key = machine_name_key

    async def resolve(self, node: Node) -> ResolutionOutcome:
        try:
            lookup = lookup_for(node)
        except CloudProviderError as exc:
            return Failed(exc)

        if isinstance(lookup, ByDeviceID):
            return await self._resolve_by_device_id(node, lookup.device_id)
        return await self._resolve_by_name(lookup.name)

    def machine_name(self, device: BareMetalDevice) -> str:
        """Return the machine-name tag of ``device``.

        Raises:
            TagError: If the tag is missing, ambiguous or invalid.
        """

        tags = TagSet.parse(device.tags, device_id=device.device_id)
        return tags.single(self._machine_name_key)

    async def _resolve_by_device_id(self, node: Node, device_id: int) -> ResolutionOutcome:
        try:
            device = await self._client.get_bare_metal_device(device_id)
        except NoSuchDeviceError:
            return NotFound(f"device {device_id} does not exist", device_id)
        except CloudProviderError as exc:
            return Failed(exc.with_context(node_name=node.name, device_id=device_id))

        try:
            tagged_name = self.machine_name(device)
        except TagError as exc:
            # No usable name tag: the provider id alone identifies the device.
            LOGGER.debug(
                "Accepting device %d for node %s without name check: %s",
                device_id,
                node.name,
                exc,
            )
            return Found(device)

        if tagged_name and tagged_name != node.name:
            LOGGER.info(
                "Device %d is tagged for machine %r, not node %r; treating as not found",
                device_id,
                tagged_name,
                node.name,
            )
            return NotFound(
                f"device {device_id} belongs to machine {tagged_name!r}", device_id
            )
        return Found(device)

    async def _resolve_by_name(self, name: str) -> ResolutionOutcome:
        try:
            devices = await self._client.list_devices()
        except CloudProviderError as exc:
            return Failed(exc.with_context(node_name=name))

        for device in devices:
            try:
                tagged_name = self.machine_name(device)
            except TagError as exc:
                LOGGER.debug("Skipping device %d: %s", device.device_id, exc)
                continue
            if tagged_name and tagged_name == name:
                return Found(device)

        return NotFound(
            f"no device tagged {self._machine_name_key}={name} among {len(devices)} devices"
        )
