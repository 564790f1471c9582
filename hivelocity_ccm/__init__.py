"""Hivelocity cloud provider: node to bare-metal device resolution."""

from .cloud import HivelocityCloud
from .errors import CloudProviderError, ErrorKind
from .instances import HivelocityInstances
from .version import __version__

__all__ = [
    "CloudProviderError",
    "ErrorKind",
    "HivelocityCloud",
    "HivelocityInstances",
    "__version__",
]
