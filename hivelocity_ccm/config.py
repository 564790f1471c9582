"""Configuration loader for hivelocity-ccm."""

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from . import constants


@dataclass(slots=True)
class HivelocityConfig:
    api_url: str = constants.DEFAULT_API_URL
    api_key: Optional[str] = None
    request_timeout_seconds: float = constants.DEFAULT_REQUEST_TIMEOUT_SECONDS


@dataclass(slots=True)
class TagConfig:
    instance_type_key: str = constants.DEFAULT_INSTANCE_TYPE_TAG
    machine_name_key: str = constants.DEFAULT_MACHINE_NAME_TAG


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class ProviderConfig:
    hivelocity: HivelocityConfig
    tags: TagConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _tag_key(value: str, fallback: str) -> str:
    # Accept "instance-type=" as well as "instance-type".
    key = value.strip().removesuffix("=")
    return key or fallback


def load_config(
    path: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None
) -> ProviderConfig:
    """Load configuration from disk, applying defaults where necessary.

    The API key from the ``HIVELOCITY_API_KEY`` environment variable takes
    precedence over the one in the file.
    """

    config_path = path or constants.DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ

    parser = ConfigParser(interpolation=None)
    parser.read_dict(
        {
            "hivelocity": {
                "api_url": constants.DEFAULT_API_URL,
                "request_timeout_seconds": str(
                    constants.DEFAULT_REQUEST_TIMEOUT_SECONDS
                ),
            },
            "tags": {
                "instance_type_key": constants.DEFAULT_INSTANCE_TYPE_TAG,
                "machine_name_key": constants.DEFAULT_MACHINE_NAME_TAG,
            },
            "logging": {
                "level": "INFO",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    env_api_key = env.get(constants.API_KEY_ENV_VAR, "").strip()
    if env_api_key:
        parser.set("hivelocity", "api_key", env_api_key)

    defaults = HivelocityConfig()
    try:
        timeout_value = parser.getfloat(
            "hivelocity",
            "request_timeout_seconds",
            fallback=defaults.request_timeout_seconds,
        )
    except ValueError:
        timeout_value = defaults.request_timeout_seconds

    api_key = parser.get("hivelocity", "api_key", fallback="").strip()

    hivelocity = HivelocityConfig(
        api_url=parser.get("hivelocity", "api_url").rstrip("/"),
        api_key=api_key or None,
        request_timeout_seconds=max(0.1, timeout_value),
    )

    tags = TagConfig(
        instance_type_key=_tag_key(
            parser.get("tags", "instance_type_key"),
            constants.DEFAULT_INSTANCE_TYPE_TAG,
        ),
        machine_name_key=_tag_key(
            parser.get("tags", "machine_name_key"),
            constants.DEFAULT_MACHINE_NAME_TAG,
        ),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return ProviderConfig(
        hivelocity=hivelocity,
        tags=tags,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: ProviderConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
