from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import appdirs  # type: ignore[import-untyped]
import yaml  # type: ignore[import-untyped]

from kraken_adapter.connection.signer import API_VERSION, KRAKEN_API_URL
from kraken_adapter.connection.transport import DEFAULT_USER_AGENT
from kraken_adapter.credentials import Credentials

logger = logging.getLogger(__name__)

API_KEY_ENV = "KRAKEN_API_KEY"
API_SECRET_ENV = "KRAKEN_API_SECRET"


@dataclass
class AdapterConfig:
    api_url: str = KRAKEN_API_URL
    api_version: str = API_VERSION
    # Kraken's public tier allows roughly one call every three seconds.
    calls_per_second: float = 1 / 3
    request_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    credentials: Credentials = field(default_factory=Credentials)


def get_config_dir() -> Path:
    """
    Returns the OS-specific configuration directory for the adapter using appdirs.
    """
    return Path(appdirs.user_config_dir("kraken_adapter"))


def _positive_float(value: Any, default: float, field_name: str, config_path: Path) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)

    logger.warning(
        "%s is invalid; using default",
        field_name,
        extra={"event": "config_invalid_value", "field": field_name, "config_path": str(config_path)},
    )
    return default


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        logger.warning(
            "Configuration file not found; using defaults",
            extra={"event": "config_missing_file", "config_path": str(config_path)},
        )
        return {}

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        logger.warning(
            "Configuration file is not a mapping; falling back to defaults",
            extra={"event": "config_invalid_format", "config_path": str(config_path)},
        )
        return {}
    return raw_config


def load_config(
    config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None
) -> AdapterConfig:
    """
    Loads the adapter configuration from ``config.yaml`` in the user config dir
    (or ``config_path``). ``KRAKEN_API_KEY``/``KRAKEN_API_SECRET`` override the
    credentials found in the file.
    """
    environ = os.environ if environ is None else environ
    if config_path is None:
        config_path = get_config_dir() / "config.yaml"
    config_path = Path(config_path).expanduser()

    raw_config = _read_yaml(config_path)
    defaults = AdapterConfig()

    api_section = raw_config.get("api") or {}
    if not isinstance(api_section, dict):
        api_section = {}

    credentials = Credentials(
        api_key=api_section.get("key"),
        api_secret=api_section.get("secret"),
        source="config_file" if api_section.get("key") else None,
    )
    env_key = environ.get(API_KEY_ENV)
    env_secret = environ.get(API_SECRET_ENV)
    if env_key and env_secret:
        credentials = Credentials(api_key=env_key, api_secret=env_secret, source="environment")

    config = AdapterConfig(
        api_url=str(api_section.get("url") or defaults.api_url),
        api_version=str(api_section.get("version") or defaults.api_version),
        calls_per_second=_positive_float(
            raw_config.get("calls_per_second", defaults.calls_per_second),
            defaults.calls_per_second,
            "calls_per_second",
            config_path,
        ),
        request_timeout=_positive_float(
            raw_config.get("request_timeout", defaults.request_timeout),
            defaults.request_timeout,
            "request_timeout",
            config_path,
        ),
        user_agent=str(raw_config.get("user_agent") or defaults.user_agent),
        credentials=credentials,
    )

    logger.info(
        "Loaded adapter configuration",
        extra={
            "event": "config_loaded",
            "config_path": str(config_path),
            "credentials_source": credentials.source,
        },
    )
    return config


__all__ = ["AdapterConfig", "get_config_dir", "load_config"]
