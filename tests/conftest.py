from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pytest

from hivelocity_ccm.core import BareMetalDevice
from hivelocity_ccm.errors import CloudProviderError, NoSuchDeviceError
from hivelocity_ccm.logging import API_LOGGER_NAME

DUMMY_DEVICE_ID = 12345
UNKNOWN_DEVICE_ID = 9999999
REGION = "LAX2"
NODE_NAME = "myNode"


class FakeDeviceClient:
    """In-memory DeviceClient used by resolver and instances tests."""

    def __init__(self, devices: List[BareMetalDevice]) -> None:
        self.devices = list(devices)
        self.get_error: Optional[CloudProviderError] = None
        self.list_error: Optional[CloudProviderError] = None
        self.get_calls: List[int] = []
        self.list_calls = 0
        self.closed = False

    async def get_bare_metal_device(self, device_id: int) -> BareMetalDevice:
        self.get_calls.append(device_id)
        if self.get_error is not None:
            raise self.get_error
        by_id: Dict[int, BareMetalDevice] = {d.device_id: d for d in self.devices}
        try:
            return by_id[device_id]
        except KeyError:
            raise NoSuchDeviceError(device_id) from None

    async def list_devices(self) -> List[BareMetalDevice]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.devices)

    async def aclose(self) -> None:
        self.closed = True


def make_device(
    device_id: int = DUMMY_DEVICE_ID,
    *,
    tags: tuple[str, ...] = ("instance-type=bare-metal-x", f"caphv-machine-name={NODE_NAME}"),
    power_status: str = "ON",
    primary_ip: str = "66.165.243.74",
    location_name: str = REGION,
) -> BareMetalDevice:
    return BareMetalDevice(
        device_id=device_id,
        primary_ip=primary_ip,
        location_name=location_name,
        power_status=power_status,
        tags=tags,
    )


@pytest.fixture
def fake_client() -> FakeDeviceClient:
    return FakeDeviceClient([make_device()])


@pytest.fixture
def restore_root_logger():
    """Drop the handlers installed by configure_logging() after a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.getLogger(API_LOGGER_NAME).setLevel(logging.NOTSET)
