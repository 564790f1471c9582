"""Device tag parsing.

Hivelocity devices carry a flat list of free-text tags. Tags of the form
``key=value`` carry semantic data (``instance-type=bare-metal-x``,
``caphv-machine-name=worker-1``); anything else is opaque and ignored.

A device's tags are parsed once into a ``TagSet`` and single-valued
attributes are read from it with ``TagSet.single``. A key that appears more
than once is rejected rather than resolved by position, so a misconfigured
device surfaces as an error instead of a silent pick.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from ..errors import ErrorKind, TagError

LABEL_VALUE_MAX_LENGTH = 63

_LABEL_VALUE = re.compile(r"(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?")


def is_valid_label_value(value: str) -> bool:
    """Return True when ``value`` is usable as a label value.

    Empty is allowed. Otherwise at most 63 characters of alphanumerics,
    ``-``, ``_`` and ``.``, starting and ending with an alphanumeric.
    """

    if len(value) > LABEL_VALUE_MAX_LENGTH:
        return False
    return _LABEL_VALUE.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class TagSet:
    """Immutable ``key -> values`` view over a device's tags."""

    values: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    device_id: Optional[int] = None

    @classmethod
    def parse(cls, tags: Iterable[str], *, device_id: Optional[int] = None) -> "TagSet":
        collected: dict[str, list[str]] = {}
        for tag in tags:
            key, sep, value = tag.partition("=")
            if not sep:
                continue
            collected.setdefault(key, []).append(value.strip())
        frozen = {key: tuple(items) for key, items in collected.items()}
        return cls(values=MappingProxyType(frozen), device_id=device_id)

    def get_all(self, key: str) -> Tuple[str, ...]:
        return self.values.get(key, ())

    def single(self, key: str) -> str:
        """Return the one validated value stored under ``key``.

        Raises:
            TagError: ``TAG_NOT_FOUND`` if the key is absent,
                ``AMBIGUOUS_TAG`` if it appears more than once,
                ``INVALID_VALUE`` if the value is not a valid label value.
        """

        candidates = self.get_all(key)
        if not candidates:
            raise TagError(
                ErrorKind.TAG_NOT_FOUND,
                f"no {key!r} tag found",
                device_id=self.device_id,
            )
        if len(candidates) > 1:
            raise TagError(
                ErrorKind.AMBIGUOUS_TAG,
                f"more than one {key!r} tag found",
                device_id=self.device_id,
                raw=", ".join(candidates),
            )

        value = candidates[0]
        if not is_valid_label_value(value):
            raise TagError(
                ErrorKind.INVALID_VALUE,
                f"invalid label value in {key!r} tag",
                device_id=self.device_id,
                raw=value,
            )
        return value


def extract_tag_value(
    tags: Iterable[str], key_prefix: str, *, device_id: Optional[int] = None
) -> str:
    """Read a single-valued attribute from raw tags.

    ``key_prefix`` is the tag prefix including the separator, e.g.
    ``"instance-type="``; a bare key is accepted as well.
    """

    key = key_prefix.removesuffix("=")
    return TagSet.parse(tags, device_id=device_id).single(key)
