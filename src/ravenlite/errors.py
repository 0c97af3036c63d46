"""
ravenlite - Error Types

Every failure surfaced by the client derives from RavenError, so callers can
catch a single type. Subclasses tell the caller which stage failed.
"""

from typing import Optional


class RavenError(Exception):
    """Base class for all ravenlite errors."""
    pass


class ParseError(RavenError):
    """
    DSN could not be used.

    Raised for malformed connection strings, unsupported schemes, or when
    no DSN is configured at all.
    """
    pass


class EncodingError(RavenError):
    """
    Event could not be serialized, compressed, or base64 encoded.

    Also raised when a format string passed to capture_messagef() does not
    match its arguments.
    """
    pass


class NetworkError(RavenError):
    """
    Transport could not reach the server.

    Covers socket open/write failures and HTTP client errors (connection
    refused, timeout, invalid URL). Carries the underlying error text.
    """
    pass


class ProtocolError(RavenError):
    """
    Server answered with a non-success, non-redirect HTTP status.

    Attributes:
        status_code: Numeric HTTP status (None if not applicable)
        status_line: Status code and reason, e.g. "500 Internal Server Error"
        body: Response body text
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_line: Optional[str] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_line = status_line
        self.body = body


class TooManyRedirects(ProtocolError):
    """Server kept redirecting past the configured maximum."""
    pass
