"""
ravenlite - Auth Header

Builds the X-Sentry-Auth header value for protocol version 2.0.

Only the public key is sent. The secret key stays in the DSN and is never
part of the header for this protocol version.
"""

from datetime import datetime, timezone
from typing import Union

from . import __version__

SENTRY_VERSION = "2.0"
CLIENT_NAME = "ravenlite"

AUTH_HEADER_TEMPLATE = (
    "Sentry sentry_version={version}, sentry_client={client}, "
    "sentry_timestamp={timestamp}, sentry_key={key}"
)


def client_id() -> str:
    """Client identifier sent with every request, e.g. "ravenlite/0.1.0"."""
    return f"{CLIENT_NAME}/{__version__}"


def unix_seconds(timestamp: Union[datetime, int, float]) -> int:
    """
    Convert a timestamp to whole Unix epoch seconds.

    Naive datetimes are treated as UTC.
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return int(timestamp.timestamp())
    return int(timestamp)


def auth_header(timestamp: Union[datetime, int, float], public_key: str) -> str:
    """
    Compute the Sentry authentication header.

    Args:
        timestamp: Time the event is sent
        public_key: Public key from the DSN

    Returns:
        str: Header value

    Example:
        >>> auth_header(1700000000, "pub")
        'Sentry sentry_version=2.0, sentry_client=ravenlite/0.1.0, sentry_timestamp=1700000000, sentry_key=pub'
    """
    return AUTH_HEADER_TEMPLATE.format(
        version=SENTRY_VERSION,
        client=client_id(),
        timestamp=unix_seconds(timestamp),
        key=public_key,
    )
