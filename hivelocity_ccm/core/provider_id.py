"""Conversion between node provider ids and Hivelocity device ids.

A provider id looks like ``hivelocity://14730``: the provider scheme followed
by the decimal device id, which must fit a signed 32-bit integer.
"""

from __future__ import annotations

import re

from ..constants import PROVIDER_ID_PREFIX
from ..errors import ErrorKind, ProviderIDError
from .models import Node

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def parse_provider_id(provider_id: str) -> int:
    """Return the device id encoded in ``provider_id``.

    Raises:
        ProviderIDError: ``MISSING_PREFIX`` when the scheme prefix is absent,
            ``MALFORMED_INTEGER`` when the remainder is not a 32-bit integer.
    """

    if not provider_id.startswith(PROVIDER_ID_PREFIX):
        raise ProviderIDError(
            ErrorKind.MISSING_PREFIX,
            f"missing prefix {PROVIDER_ID_PREFIX!r} in provider id",
            raw=provider_id,
        )

    remainder = provider_id[len(PROVIDER_ID_PREFIX):]
    if not _DECIMAL.fullmatch(remainder):
        raise ProviderIDError(
            ErrorKind.MALFORMED_INTEGER,
            "provider id is not a decimal integer",
            raw=provider_id,
        )

    try:
        device_id = int(remainder)
    except ValueError as exc:
        # Longer than the interpreter's int conversion limit.
        raise ProviderIDError(
            ErrorKind.MALFORMED_INTEGER,
            "provider id is out of 32-bit range",
            raw=provider_id,
        ) from exc
    if not INT32_MIN <= device_id <= INT32_MAX:
        raise ProviderIDError(
            ErrorKind.MALFORMED_INTEGER,
            "provider id is out of 32-bit range",
            raw=provider_id,
        )
    return device_id


def format_provider_id(device_id: int) -> str:
    return f"{PROVIDER_ID_PREFIX}{device_id}"


def device_id_from_node(node: Node) -> int:
    """Decode ``node.provider_id``; errors carry the node name."""

    try:
        return parse_provider_id(node.provider_id)
    except ProviderIDError as exc:
        raise exc.with_context(node_name=node.name) from exc
