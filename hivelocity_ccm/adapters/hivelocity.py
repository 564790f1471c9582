"""Hivelocity API adapter for the bare-metal device inventory."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ..config import HivelocityConfig
from ..constants import API_KEY_HEADER
from ..core import BareMetalDevice, DeviceClient
from ..errors import ErrorKind, NoSuchDeviceError, RemoteAPIError

LOGGER = logging.getLogger(__name__)

DEVICE_NOT_FOUND_MESSAGE = "Device not found"


class HivelocityClient(DeviceClient):
    """Read-only client for the Hivelocity bare-metal device endpoints."""

    def __init__(
        self,
        config: HivelocityConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config
        self._base_url = self.config.api_url.rstrip("/")
        self._timeout = self.config.request_timeout_seconds
        self._headers = {"Accept": "application/json"}
        if self.config.api_key:
            self._headers[API_KEY_HEADER] = self.config.api_key

        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def get_bare_metal_device(self, device_id: int) -> BareMetalDevice:
        """Fetch one device by id.

        Raises:
            NoSuchDeviceError: If the API answers "Device not found".
            RemoteAPIError: For any other failure.
            asyncio.TimeoutError: If the request exceeds the configured timeout.
        """

        payload = await self._get_json(
            f"/bare-metal-devices/{device_id}", device_id=device_id
        )
        if not isinstance(payload, dict):
            raise RemoteAPIError(
                ErrorKind.REMOTE_UNAVAILABLE,
                "unexpected device payload",
                device_id=device_id,
                raw=type(payload).__name__,
            )
        return _device_from_payload(payload, device_id=device_id)

    async def list_devices(self) -> List[BareMetalDevice]:
        """Fetch every bare-metal device of the account.

        Raises:
            RemoteAPIError: If the listing fails.
            asyncio.TimeoutError: If the request exceeds the configured timeout.
        """

        payload = await self._get_json("/bare-metal-devices/")
        if not isinstance(payload, list):
            raise RemoteAPIError(
                ErrorKind.REMOTE_UNAVAILABLE,
                "unexpected device list payload",
                raw=type(payload).__name__,
            )
        devices = []
        for item in payload:
            if not isinstance(item, dict):
                raise RemoteAPIError(
                    ErrorKind.REMOTE_UNAVAILABLE,
                    "unexpected device list entry",
                    raw=type(item).__name__,
                )
            devices.append(_device_from_payload(item))
        return devices

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HivelocityClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def _get_json(self, path: str, *, device_id: Optional[int] = None) -> Any:
        session = await self._ensure_session()
        url = f"{self._base_url}{path}"

        try:
            async with asyncio.timeout(self._timeout):
                async with session.get(url, headers=self._headers) as response:
                    LOGGER.debug(
                        "Hivelocity API called (method=GET, url=%s, status=%d)",
                        url,
                        response.status,
                    )
                    if response.status >= 400:
                        detail = await response.text(errors="replace")
                        raise _error_from_response(response.status, detail, device_id)
                    try:
                        return await response.json(content_type=None)
                    except ValueError as exc:
                        raise RemoteAPIError(
                            ErrorKind.REMOTE_UNAVAILABLE,
                            "failed to decode response body",
                            device_id=device_id,
                            status_code=response.status,
                        ) from exc
        except asyncio.TimeoutError:
            LOGGER.warning(
                "Hivelocity API request timed out after %.1fs (url=%s)",
                self._timeout,
                url,
            )
            raise
        except aiohttp.ClientError as exc:
            LOGGER.debug("Hivelocity API error (method=GET, url=%s): %s", url, exc)
            raise RemoteAPIError(
                ErrorKind.REMOTE_UNAVAILABLE,
                f"request failed: {exc}",
                device_id=device_id,
            ) from exc


def _device_from_payload(
    payload: Dict[str, Any], *, device_id: Optional[int] = None
) -> BareMetalDevice:
    try:
        return BareMetalDevice.from_dict(payload)
    except (TypeError, ValueError) as exc:
        raise RemoteAPIError(
            ErrorKind.REMOTE_UNAVAILABLE,
            f"malformed device document: {exc}",
            device_id=device_id,
            raw=str(payload.get("deviceId")),
        ) from exc


def _error_from_response(
    status: int, detail: str, device_id: Optional[int]
) -> RemoteAPIError:
    """Map an error response to NoSuchDeviceError or RemoteAPIError.

    Only the API's explicit "Device not found" message means the device is
    gone; a bare 404 (wrong base URL, proxy) is an ordinary failure.
    """

    message = ""
    try:
        body = json.loads(detail)
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("message") or "")

    if device_id is not None and message == DEVICE_NOT_FOUND_MESSAGE:
        return NoSuchDeviceError(device_id, status_code=status)

    return RemoteAPIError(
        ErrorKind.REMOTE_UNAVAILABLE,
        f"request failed: {message or detail.strip()[:200]}",
        device_id=device_id,
        status_code=status,
    )
