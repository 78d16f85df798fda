"""Price feed access: HTTP client, payload parser, and test overrides."""

from elpris.feed.client import FeedClient, PriceFetcher
from elpris.feed.overrides import PayloadOverrides
from elpris.feed.parser import FeedParser

__all__ = [
    "FeedClient",
    "FeedParser",
    "PayloadOverrides",
    "PriceFetcher",
]
