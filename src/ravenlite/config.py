"""
ravenlite - Configuration

Configuration loading from environment variables.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .dsn import parse_dsn
from .errors import ParseError
from .models import DEFAULT_LOGGER

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class ClientConfig:
    """
    Configuration for the ravenlite client.

    A DSN passed straight to Client() takes precedence over the one held here.
    """

    # Connection string
    dsn: Optional[str] = None

    # Network timeout in seconds (HTTP requests and UDP sockets)
    timeout: float = DEFAULT_TIMEOUT

    # Maximum HTTP redirects followed per event
    max_redirects: int = DEFAULT_MAX_REDIRECTS

    # Logger name attached to events
    event_logger: str = DEFAULT_LOGGER

    # Level for the library's own log output
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            SENTRY_DSN: Connection string
            RAVEN_TIMEOUT: Network timeout in seconds (default: 10)
            RAVEN_MAX_REDIRECTS: Maximum redirects followed (default: 10)
            RAVEN_LOGGER: Logger name attached to events (default: root)
            RAVEN_LOG_LEVEL: Library log level (default: INFO)

        Returns:
            ClientConfig: Configuration instance
        """
        dsn = os.getenv("SENTRY_DSN") or None
        if dsn:
            logger.debug("Using DSN from SENTRY_DSN")

        timeout = _float_from_env("RAVEN_TIMEOUT", DEFAULT_TIMEOUT)
        max_redirects = _int_from_env("RAVEN_MAX_REDIRECTS", DEFAULT_MAX_REDIRECTS)

        event_logger = os.getenv("RAVEN_LOGGER") or DEFAULT_LOGGER
        log_level = os.getenv("RAVEN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

        return cls(
            dsn=dsn,
            timeout=timeout,
            max_redirects=max_redirects,
            event_logger=event_logger,
            log_level=log_level,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid: bool, errors: list[str])
        """
        errors = []

        if not self.dsn:
            errors.append("No DSN configured. Pass one to Client() or set SENTRY_DSN.")
        else:
            try:
                parse_dsn(self.dsn)
            except ParseError as e:
                errors.append(f"Invalid DSN: {e}")

        if self.timeout <= 0:
            errors.append(f"RAVEN_TIMEOUT must be positive, got {self.timeout}")

        if self.max_redirects < 0:
            errors.append(f"RAVEN_MAX_REDIRECTS must be >= 0, got {self.max_redirects}")

        if not self.event_logger:
            errors.append("RAVEN_LOGGER must not be empty")

        is_valid = len(errors) == 0
        return is_valid, errors

    def masked_dsn(self) -> Optional[str]:
        """DSN with the secret key hidden. Unparseable DSNs are not echoed."""
        if not self.dsn:
            return None
        try:
            return parse_dsn(self.dsn).masked()
        except ParseError:
            return "***INVALID***"

    def __str__(self) -> str:
        """String representation with masked secret key."""
        return (
            f"ClientConfig("
            f"dsn={self.masked_dsn()}, "
            f"timeout={self.timeout}, "
            f"max_redirects={self.max_redirects}, "
            f"event_logger={self.event_logger}, "
            f"log_level={self.log_level})"
        )


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using default {default}")
        return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using default {default}")
        return default
