"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from elpris.core.exceptions import ConfigError
from elpris.core.models import DiskCacheBackend, PriceZone


class FeedConfig(BaseModel):
    """Remote price feed access configuration."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://www.elprisetjustnu.se/api/v1/prices"
    request_timeout: float = 10.0
    total_timeout: float = 30.0
    rate_limit: int = 5
    user_agent: str = "elpris/0.1"

    @field_validator("base_url")
    @classmethod
    def base_url_is_http(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("request_timeout", "total_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("rate_limit")
    @classmethod
    def rate_limit_reasonable(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("rate_limit must be between 1 and 10")
        return v


class CacheConfig(BaseModel):
    """Price cache configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    backend: DiskCacheBackend = DiskCacheBackend.FILE
    cache_dir: str = "~/.elpriser_cache"
    sqlite_path: str = "~/.elpriser_cache/elpris.db"


class WindowConfig(BaseModel):
    """Charging window search configuration."""

    model_config = ConfigDict(frozen=True)

    allow_wrap: bool = True


class ElprisConfig(BaseModel):
    """Root configuration for elpris."""

    model_config = ConfigDict(frozen=True)

    feed: FeedConfig = FeedConfig()
    cache: CacheConfig = CacheConfig()
    window: WindowConfig = WindowConfig()
    default_zone: PriceZone | None = None


def load_config(
    config_path: str | None = None,
    env_prefix: str = "ELPRIS_",
) -> ElprisConfig:
    """Build the config from defaults, an optional elpris.yml and the environment.

    Environment variables win over the file; ``__`` separates nesting
    levels, so ``ELPRIS_CACHE__ENABLED=false`` sets ``cache.enabled``.
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base = _load_yaml(yaml_path) if yaml_path is not None else {}
        return ElprisConfig.model_validate(_merge_env_vars(base, env_prefix))
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    if explicit is not None:
        source, label = explicit, "config_path"
        message = f"Config file not found: {explicit}"
    elif os.environ.get("ELPRIS_CONFIG"):
        source, label = os.environ["ELPRIS_CONFIG"], "ELPRIS_CONFIG"
        message = f"Config file from ELPRIS_CONFIG not found: {source}"
    else:
        default = Path("elpris.yml")
        return default if default.exists() else None

    path = Path(source)
    if not path.exists():
        raise ConfigError(message, context={"field": label, "value": source})
    return path


def _load_yaml(path: Path) -> dict:
    context = {"field": "config_file", "value": str(path)}
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config: {e}", context=context) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"YAML config must be a mapping, got {type(data).__name__}",
            context=context,
        )
    return data


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay ``<prefix>SECTION__KEY`` variables onto a copy of ``base``."""
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        parts = [p.lower() for p in key[len(prefix) :].split("__")]
        if parts == ["config"]:
            continue

        target = result
        for part in parts[:-1]:
            nested = target.get(part)
            target[part] = dict(nested) if isinstance(nested, dict) else {}
            target = target[part]
        target[parts[-1]] = _auto_cast(value)

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value
