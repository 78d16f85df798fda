"""Custom exception hierarchy for elpris."""

from typing import Any


class ElprisError(Exception):
    """Base exception for all elpris errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(ElprisError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field (str): the config field that failed validation
        value (Any): the invalid value
    """


class FeedError(ElprisError):
    """Failed to fetch a day's price feed.

    Covers transport errors, timeouts and unexpected HTTP statuses. A 404
    (prices not yet published) is not an error and never raises this.

    Policy: log and return an empty price list. No automatic retry.

    Context keys:
        url (str): the URL that was being fetched
        status_code (int | None): HTTP status code if a response arrived
        zone (str): the price zone requested
        day (str): the ISO date requested
    """


class ParsingError(FeedError):
    """A single feed entry could not be turned into a PriceRecord.

    Policy: log and skip the entry. Sibling entries remain valid.

    Context keys:
        entry (str): the offending object text
        reason (str): why parsing failed
    """


class CacheError(ElprisError):
    """Disk cache could not be set up.

    Only raised for configuration problems (unknown backend). Disk read and
    write failures are logged and treated as cache misses.

    Context keys:
        backend (str): the requested backend
    """
