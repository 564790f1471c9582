"""Cloud provider facade for the Hivelocity integration.

Only the instances interface is implemented. Zones, load balancers, routes
and clusters are not supported and their accessors return ``None``, the
same way a controller manager reports an unsupported interface.
"""

from __future__ import annotations

import logging
from typing import Optional

import aiohttp

from .adapters import HivelocityClient
from .config import ProviderConfig
from .constants import (
    API_KEY_ENV_VAR,
    DEFAULT_INSTANCE_TYPE_TAG,
    DEFAULT_MACHINE_NAME_TAG,
    PROVIDER_NAME,
)
from .core import DeviceClient
from .errors import ConfigurationError
from .instances import HivelocityInstances
from .version import __version__

LOGGER = logging.getLogger(__name__)


class HivelocityCloud:
    """Entry point handed to the orchestrator's provider registry."""

    def __init__(
        self,
        client: DeviceClient,
        *,
        instance_type_key: str = DEFAULT_INSTANCE_TYPE_TAG,
        machine_name_key: str = DEFAULT_MACHINE_NAME_TAG,
    ) -> None:
        self._client = client
        self._instances_v2 = HivelocityInstances(
            client,
            instance_type_key=instance_type_key,
            machine_name_key=machine_name_key,
        )

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "HivelocityCloud":
        """Build the provider from configuration.

        Raises:
            ConfigurationError: If no API key is configured.
        """

        if not config.hivelocity.api_key:
            raise ConfigurationError(
                f"Hivelocity API key is missing; set {API_KEY_ENV_VAR} or "
                f"[hivelocity] api_key in {config.path}"
            )

        client = HivelocityClient(config.hivelocity, session=session)
        LOGGER.info(
            "Hivelocity cloud provider %s started (api_url=%s)",
            __version__,
            config.hivelocity.api_url,
        )
        return cls(
            client,
            instance_type_key=config.tags.instance_type_key,
            machine_name_key=config.tags.machine_name_key,
        )

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    def has_cluster_id(self) -> bool:
        return True

    def instances_v2(self) -> HivelocityInstances:
        return self._instances_v2

    def instances(self) -> None:
        return None

    def zones(self) -> None:
        return None

    def load_balancer(self) -> None:
        return None

    def routes(self) -> None:
        return None

    def clusters(self) -> None:
        return None

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HivelocityCloud":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
