"""
ravenlite - Data Models

Event record sent to the server, plus the helpers that fill in its
generated fields (event id and timestamp).

WIRE FIELDS:
- event_id: Random version-4 UUID, lowercase hex, hyphenated (8-4-4-4-12)
- project: Project id taken from the last path segment of the DSN
- message: Plain text message
- timestamp: UTC, second precision, "YYYY-MM-DDTHH:MM:SS" (no offset)
- level: Severity ("error" unless the caller picks another)
- logger: Logger name ("root" unless the caller picks another)
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Callable, Dict, Optional
import json
import os
import uuid


# Sentry expects ISO8601 without a timezone suffix
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

DEFAULT_LEVEL = "error"
DEFAULT_LOGGER = "root"

LEVELS = ("debug", "info", "warning", "error", "fatal")


@dataclass(frozen=True)
class EventRecord:
    """
    Represents a single message event.

    Built once per capture call, encoded, then discarded.
    """

    event_id: str
    project: str
    message: str
    timestamp: str
    level: str = DEFAULT_LEVEL
    logger: str = DEFAULT_LOGGER

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary with the wire field names."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def create(
        cls,
        project: str,
        message: str,
        timestamp: datetime,
        level: str = DEFAULT_LEVEL,
        logger: str = DEFAULT_LOGGER,
        random_bytes: Optional[Callable[[int], bytes]] = None,
    ) -> "EventRecord":
        """
        Create an EventRecord with a freshly generated event id.

        Args:
            project: Project id from the DSN
            message: Message text
            timestamp: Capture time (converted to UTC)
            level: Severity level
            logger: Logger name
            random_bytes: Randomness source (defaults to os.urandom)

        Returns:
            EventRecord: New record
        """
        return cls(
            event_id=generate_event_id(random_bytes or os.urandom),
            project=project,
            message=message,
            timestamp=format_timestamp(timestamp),
            level=level,
            logger=logger,
        )


def generate_event_id(random_bytes: Callable[[int], bytes] = os.urandom) -> str:
    """
    Generate a random version-4 UUID string.

    The version nibble is forced to 4 and the variant bits to RFC 4122.
    Errors from the randomness source are not caught: a client that cannot
    get secure random bytes must not keep sending events.

    Args:
        random_bytes: Callable returning n secure random bytes

    Returns:
        str: e.g. "3f2b8c1e-9d4a-4b6f-8e2d-1a7c5b9e0f34"

    Raises:
        ValueError: If the source returned something other than 16 bytes
    """
    raw = random_bytes(16)
    if len(raw) != 16:
        raise ValueError(f"Randomness source returned {len(raw)} bytes, expected 16")

    return str(uuid.UUID(bytes=bytes(raw), version=4))


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(timestamp: datetime) -> str:
    """
    Format a datetime the way the server expects it.

    Naive datetimes are assumed to already be UTC.

    Example:
        "2025-12-10T12:05:30"
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.strftime(TIMESTAMP_FORMAT)
