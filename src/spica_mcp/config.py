"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables, the
process-level constants used at bootstrap (log level/format, config file
name) and `load_settings`, which resolves the Spica and documentation
credentials into an immutable Settings value. Environment variables win
over the JSON config file in the working directory.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from spica_mcp.core.logging import get_logger

logger = get_logger(__name__)


def _env_str(name: str, default: str = "", env: Optional[Mapping[str, str]] = None) -> str:
    source = os.environ if env is None else env
    raw = source.get(name)
    if raw is None:
        return default
    return raw.strip()


def _env_bool(name: str, default: bool, env: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if env is None else env
    raw = source.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float, env: Optional[Mapping[str, str]] = None) -> float:
    source = os.environ if env is None else env
    raw = source.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Logging (read before anything else logs)
LOG_LEVEL = _env_str("LOG_LEVEL", "INFO")
LOG_JSON = _env_bool("LOG_JSON", False)

# JSON fallback for SPICA_URL / SPICA_API_KEY, resolved against the cwd
CONFIG_FILE = _env_str("SPICA_CONFIG_FILE", "config.json")

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration, built once and injected into clients."""

    spica_url: str = ""
    api_key: str = ""

    openai_api_key: str = ""
    vector_store_id: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    http_verify: bool = True

    @property
    def docs_enabled(self) -> bool:
        return bool(self.openai_api_key and self.vector_store_id)


def load_file_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read the JSON config file; a missing or malformed file yields {}."""
    p = Path(path)
    if not p.exists():
        return {}

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("config_file_unreadable", path=str(p), error=str(e))
        return {}

    if not isinstance(data, dict):
        logger.error("config_file_not_an_object", path=str(p))
        return {}
    return data


def _first(*values: Any) -> str:
    for v in values:
        if isinstance(v, str) and v.strip():
            return v.strip()
    return ""


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    config_path: Optional[Union[str, Path]] = None,
) -> Settings:
    """Resolve Settings from the environment, falling back to the config file.

    Missing Spica credentials are not an error here; the request adapter
    reports them on the first call.
    """
    source = os.environ if env is None else env
    path = Path(config_path) if config_path is not None else Path.cwd() / CONFIG_FILE
    file_cfg = load_file_config(path)

    settings = Settings(
        spica_url=_first(source.get("SPICA_URL"), file_cfg.get("spicaUrl"), file_cfg.get("baseUrl")),
        api_key=_first(source.get("SPICA_API_KEY"), file_cfg.get("apiKey")),
        openai_api_key=_env_str("OPENAI_API_KEY", env=source),
        vector_store_id=_env_str("VECTOR_STORE_ID", env=source),
        openai_model=_env_str("OPENAI_MODEL", DEFAULT_OPENAI_MODEL, env=source) or DEFAULT_OPENAI_MODEL,
        http_timeout=_env_float("SPICA_TIMEOUT", DEFAULT_HTTP_TIMEOUT, env=source),
        http_verify=_env_bool("HTTP_VERIFY", True, env=source),
    )

    logger.info(
        "settings_loaded",
        spica_url=settings.spica_url or None,
        api_key_set=bool(settings.api_key),
        docs_enabled=settings.docs_enabled,
    )
    return settings
