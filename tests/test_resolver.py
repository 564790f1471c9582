import pytest

from conftest import DUMMY_DEVICE_ID, NODE_NAME, UNKNOWN_DEVICE_ID, FakeDeviceClient, make_device
from hivelocity_ccm.core import Node
from hivelocity_ccm.errors import ErrorKind, RemoteAPIError
from hivelocity_ccm.resolver import (
    ByDeviceID,
    ByName,
    DeviceResolver,
    Failed,
    Found,
    NotFound,
    lookup_for,
)


def test_lookup_for_node_with_provider_id():
    assert lookup_for(Node(NODE_NAME, "hivelocity://12345")) == ByDeviceID(12345)


def test_lookup_for_node_without_provider_id():
    assert lookup_for(Node(NODE_NAME)) == ByName(NODE_NAME)


@pytest.mark.asyncio
async def test_resolve_by_device_id(fake_client):
    resolver = DeviceResolver(fake_client)

    outcome = await resolver.resolve(Node(NODE_NAME, f"hivelocity://{DUMMY_DEVICE_ID}"))

    assert isinstance(outcome, Found)
    assert outcome.device.device_id == DUMMY_DEVICE_ID
    assert fake_client.get_calls == [DUMMY_DEVICE_ID]
    assert fake_client.list_calls == 0


@pytest.mark.asyncio
async def test_resolve_unknown_device_is_not_found(fake_client):
    resolver = DeviceResolver(fake_client)

    outcome = await resolver.resolve(Node(NODE_NAME, f"hivelocity://{UNKNOWN_DEVICE_ID}"))

    assert isinstance(outcome, NotFound)
    assert outcome.device_id == UNKNOWN_DEVICE_ID


@pytest.mark.asyncio
async def test_resolve_by_device_id_rejects_mismatching_name_tag(fake_client):
    resolver = DeviceResolver(fake_client)

    outcome = await resolver.resolve(Node("unknown", f"hivelocity://{DUMMY_DEVICE_ID}"))

    assert isinstance(outcome, NotFound)
    assert "myNode" in outcome.reason


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tags",
    [
        ("instance-type=bare-metal-x",),
        ("caphv-machine-name=a", "caphv-machine-name=b"),
        ("caphv-machine-name=&",),
        ("caphv-machine-name=",),
    ],
)
async def test_resolve_by_device_id_accepts_missing_or_unusable_name_tag(tags):
    client = FakeDeviceClient([make_device(tags=tags)])
    resolver = DeviceResolver(client)

    outcome = await resolver.resolve(Node("anything", f"hivelocity://{DUMMY_DEVICE_ID}"))

    assert isinstance(outcome, Found)


@pytest.mark.asyncio
async def test_resolve_bad_provider_id_fails_without_remote_call(fake_client):
    resolver = DeviceResolver(fake_client)

    outcome = await resolver.resolve(Node(NODE_NAME, "hivelocity://999999999999999999"))

    assert isinstance(outcome, Failed)
    assert outcome.error.kind is ErrorKind.MALFORMED_INTEGER
    assert outcome.error.node_name == NODE_NAME
    assert fake_client.get_calls == []


@pytest.mark.asyncio
async def test_resolve_remote_failure_carries_context(fake_client):
    fake_client.get_error = RemoteAPIError(
        ErrorKind.REMOTE_UNAVAILABLE, "request failed", status_code=500
    )
    resolver = DeviceResolver(fake_client)

    outcome = await resolver.resolve(Node(NODE_NAME, f"hivelocity://{DUMMY_DEVICE_ID}"))

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, RemoteAPIError)
    assert outcome.error.kind is ErrorKind.REMOTE_UNAVAILABLE
    assert outcome.error.node_name == NODE_NAME
    assert outcome.error.device_id == DUMMY_DEVICE_ID
    assert outcome.error.status_code == 500


@pytest.mark.asyncio
async def test_resolve_by_name_scans_inventory():
    client = FakeDeviceClient(
        [
            make_device(1, tags=("opaque",)),
            make_device(2, tags=("caphv-machine-name=a", "caphv-machine-name=b")),
            make_device(3, tags=("caphv-machine-name=other",)),
            make_device(4, tags=(f"caphv-machine-name={NODE_NAME}",)),
            make_device(5, tags=(f"caphv-machine-name={NODE_NAME}",)),
        ]
    )
    resolver = DeviceResolver(client)

    outcome = await resolver.resolve(Node(NODE_NAME))

    assert isinstance(outcome, Found)
    assert outcome.device.device_id == 4
    assert client.list_calls == 1
    assert client.get_calls == []


@pytest.mark.asyncio
async def test_resolve_by_name_without_match_is_not_found():
    client = FakeDeviceClient([make_device(tags=("caphv-machine-name=other",))])
    resolver = DeviceResolver(client)

    outcome = await resolver.resolve(Node(NODE_NAME))

    assert isinstance(outcome, NotFound)


@pytest.mark.asyncio
async def test_resolve_by_name_ignores_empty_name_tag():
    client = FakeDeviceClient([make_device(tags=("caphv-machine-name=",))])
    resolver = DeviceResolver(client)

    outcome = await resolver.resolve(Node(""))

    assert isinstance(outcome, NotFound)


@pytest.mark.asyncio
async def test_resolve_by_name_listing_failure(fake_client):
    fake_client.list_error = RemoteAPIError(ErrorKind.REMOTE_UNAVAILABLE, "boom")
    resolver = DeviceResolver(fake_client)

    outcome = await resolver.resolve(Node(NODE_NAME))

    assert isinstance(outcome, Failed)
    assert outcome.error.node_name == NODE_NAME


@pytest.mark.asyncio
async def test_custom_machine_name_key():
    client = FakeDeviceClient([make_device(tags=(f"machine={NODE_NAME}",))])
    resolver = DeviceResolver(client, machine_name_key="machine")

    outcome = await resolver.resolve(Node(NODE_NAME))

    assert isinstance(outcome, Found)
