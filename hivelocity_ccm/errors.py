"""Error taxonomy for the Hivelocity cloud provider.

Every failure raised by this package is a ``CloudProviderError`` carrying a
closed ``ErrorKind`` plus whatever context was known when it was raised
(node name, device id, offending raw string, HTTP status). Callers branch on
``exc.kind`` instead of comparing messages.

The family subclasses exist so ``except`` clauses can stay narrow:

- ``ProviderIDError``: MISSING_PREFIX, MALFORMED_INTEGER
- ``TagError``: TAG_NOT_FOUND, INVALID_VALUE, AMBIGUOUS_TAG
- ``InstanceError``: NO_DEVICE_FOUND, UNKNOWN_POWER_STATUS, NODE_IS_NIL
- ``RemoteAPIError``: REMOTE_UNAVAILABLE, and ``NoSuchDeviceError`` for
  NO_SUCH_DEVICE
- ``ConfigurationError``: CONFIGURATION
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

_E = TypeVar("_E", bound="CloudProviderError")


class ErrorKind(str, Enum):
    MISSING_PREFIX = "missing_prefix"
    MALFORMED_INTEGER = "malformed_integer"
    TAG_NOT_FOUND = "tag_not_found"
    INVALID_VALUE = "invalid_value"
    AMBIGUOUS_TAG = "ambiguous_tag"
    NO_DEVICE_FOUND = "no_device_found"
    UNKNOWN_POWER_STATUS = "unknown_power_status"
    NODE_IS_NIL = "node_is_nil"
    NO_SUCH_DEVICE = "no_such_device"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    CONFIGURATION = "configuration"


class CloudProviderError(RuntimeError):
    """Base class for all errors raised by hivelocity-ccm."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        node_name: Optional[str] = None,
        device_id: Optional[int] = None,
        raw: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.node_name = node_name
        self.device_id = device_id
        self.raw = raw
        self.status_code = status_code
        super().__init__(self._render())

    def _render(self) -> str:
        context = []
        if self.node_name is not None:
            context.append(f"node={self.node_name!r}")
        if self.device_id is not None:
            context.append(f"deviceID={self.device_id}")
        if self.raw is not None:
            context.append(f"raw={self.raw!r}")
        if self.status_code is not None:
            context.append(f"statusCode={self.status_code}")
        text = f"[{self.kind.value}] {self.message}"
        if context:
            text = f"{text} ({', '.join(context)})"
        return text

    def with_context(
        self: _E,
        *,
        node_name: Optional[str] = None,
        device_id: Optional[int] = None,
        operation: Optional[str] = None,
    ) -> _E:
        """Return a copy of this error with missing context fields filled in.

        Fields that are already set are kept. ``operation`` prefixes the
        message once. The copy keeps the concrete class so ``except`` clauses
        keep matching after re-raising.
        """
        message = self.message
        if operation and not message.startswith(f"{operation}:"):
            message = f"{operation}: {message}"

        cls: Type[_E] = type(self)
        clone = cls.__new__(cls)
        CloudProviderError.__init__(
            clone,
            self.kind,
            message,
            node_name=self.node_name if self.node_name is not None else node_name,
            device_id=self.device_id if self.device_id is not None else device_id,
            raw=self.raw,
            status_code=self.status_code,
        )
        return clone


class ProviderIDError(CloudProviderError):
    """Raised when a node's provider id cannot be decoded."""


class TagError(CloudProviderError):
    """Raised when a single-valued device tag is missing, ambiguous or invalid."""


class InstanceError(CloudProviderError):
    """Raised when the instance state cannot be projected for a node."""


class RemoteAPIError(CloudProviderError):
    """Raised when the Hivelocity API call fails."""


class NoSuchDeviceError(RemoteAPIError):
    """Raised when the Hivelocity API reports that a device does not exist."""

    def __init__(self, device_id: int, *, status_code: Optional[int] = None) -> None:
        super().__init__(
            ErrorKind.NO_SUCH_DEVICE,
            "no such device",
            device_id=device_id,
            status_code=status_code,
        )


class ConfigurationError(CloudProviderError):
    """Raised when the provider cannot be configured."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.CONFIGURATION, message)
