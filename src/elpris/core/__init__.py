"""elpris.core: foundation types, config, and exceptions."""

from elpris.core.config import (
    CacheConfig,
    ElprisConfig,
    FeedConfig,
    WindowConfig,
    load_config,
)
from elpris.core.exceptions import (
    CacheError,
    ConfigError,
    ElprisError,
    FeedError,
    ParsingError,
)
from elpris.core.models import (
    CacheKey,
    ChargingWindow,
    DiskCacheBackend,
    HourlyPrice,
    PriceRecord,
    PriceSummary,
    PriceZone,
)

__all__ = [
    # Enums
    "PriceZone",
    "DiskCacheBackend",
    # Price models
    "PriceRecord",
    "CacheKey",
    # Analysis models
    "HourlyPrice",
    "PriceSummary",
    "ChargingWindow",
    # Config
    "ElprisConfig",
    "FeedConfig",
    "CacheConfig",
    "WindowConfig",
    "load_config",
    # Exceptions
    "ElprisError",
    "ConfigError",
    "FeedError",
    "ParsingError",
    "CacheError",
]
