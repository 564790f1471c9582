"""Constants used across the hivelocity-ccm package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "hivelocity-ccm"
PROVIDER_NAME = "hivelocity"
PROVIDER_ID_PREFIX = f"{PROVIDER_NAME}://"

DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path("/etc") / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_API_URL = "https://core.hivelocity.net/api/v2"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
API_KEY_ENV_VAR = "HIVELOCITY_API_KEY"  # nosec: name of the variable, not a secret
API_KEY_HEADER = "X-API-KEY"

DEFAULT_INSTANCE_TYPE_TAG = "instance-type"
DEFAULT_MACHINE_NAME_TAG = "caphv-machine-name"

POWER_STATUS_ON = "ON"
POWER_STATUS_OFF = "OFF"
