"""Protocol definitions for the remote device inventory."""

from __future__ import annotations

from typing import List, Protocol

from .models import BareMetalDevice


class DeviceClient(Protocol):
    """Minimal contract for components that read the device inventory."""

    async def get_bare_metal_device(self, device_id: int) -> BareMetalDevice:
        """Fetch a single device.

        Raises:
            NoSuchDeviceError: If the inventory has no device with this id.
            RemoteAPIError: For any other failure.
        """
        ...

    async def list_devices(self) -> List[BareMetalDevice]:
        """Fetch every device visible to the API key.

        Raises:
            RemoteAPIError: If the listing fails.
        """
        ...

    async def aclose(self) -> None:
        """Close any underlying resources."""
        ...
