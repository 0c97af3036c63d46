"""
Transports for delivering encoded events to the Sentry server.

Two implementations share one contract, send(envelope, timestamp) -> str:
- UDPTransport: fire-and-forget datagram, one socket per send
- HTTPTransport: POST to the store endpoint, redirects followed explicitly

The transport is chosen once from the DSN scheme (see select_transport())
and never changes for the life of a client.
"""

import logging
import socket
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import datetime
from http import HTTPStatus
from typing import Callable, Optional
from urllib.parse import urljoin

import requests

from .auth import auth_header
from .config import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT
from .dsn import ConnectionDescriptor, TransportKind
from .errors import NetworkError, ParseError, ProtocolError, TooManyRedirects

logger = logging.getLogger(__name__)

DEFAULT_UDP_PORT = 9001

UDP_SEPARATOR = b"\n\n"

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


class Transport(ABC):
    """Delivery mechanism for encoded events."""

    @abstractmethod
    def send(self, envelope: bytes, timestamp: datetime) -> str:
        """
        Deliver one envelope.

        Args:
            envelope: Encoded event from encode_event()
            timestamp: Capture time, used for the auth header

        Returns:
            str: Server response text ("" when the protocol has no reply)

        Raises:
            NetworkError: Server could not be reached
            ProtocolError: Server rejected the event
        """

    def close(self):
        """Release any resources held between sends."""

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


def build_datagram(header: str, envelope: bytes) -> bytes:
    """Datagram payload: auth header, blank line, envelope."""
    return header.encode("utf-8") + UDP_SEPARATOR + envelope


class UDPTransport(Transport):
    """
    Sends each event as a single UDP datagram.

    No connection is kept between sends: every send() opens its own socket
    and closes it before returning, so concurrent sends never share state.
    No reply is read.
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        socket_factory: Optional[Callable[..., socket.socket]] = None,
    ):
        """
        Initialize UDP transport.

        Args:
            descriptor: Parsed DSN
            timeout: Socket timeout in seconds (None blocks)
            socket_factory: Callable with socket.socket's signature
        """
        self.public_key = descriptor.public_key
        self.host = descriptor.host
        self.port = descriptor.port or DEFAULT_UDP_PORT
        self.timeout = timeout
        self.socket_factory = socket_factory or socket.socket

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def _open(self) -> socket.socket:
        """Create a UDP socket connected to the server address."""
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            self.host, self.port, type=socket.SOCK_DGRAM
        )[0]

        sock = self.socket_factory(family, socktype, proto)
        try:
            if self.timeout is not None:
                sock.settimeout(self.timeout)
            sock.connect(sockaddr)
        except OSError:
            sock.close()
            raise
        return sock

    def send(self, envelope: bytes, timestamp: datetime) -> str:
        payload = build_datagram(auth_header(timestamp, self.public_key), envelope)

        try:
            sock = self._open()
        except OSError as e:
            logger.debug(f"Error opening the UDP socket to {self.address}: {e}")
            raise NetworkError(f"Cannot open UDP socket to {self.address}: {e}") from e

        with closing(sock):
            try:
                sock.send(payload)
            except OSError as e:
                logger.debug(f"Error writing to the UDP socket {self.address}: {e}")
                raise NetworkError(f"Cannot send datagram to {self.address}: {e}") from e

        logger.debug(f"Sent {len(payload)} byte datagram to {self.address}")
        return ""


class HTTPTransport(Transport):
    """
    Posts events to the store endpoint over HTTP(S).

    The session's own redirect handling is switched off; redirects are
    followed here, resubmitting the identical request, up to max_redirects
    hops.
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP transport.

        Args:
            descriptor: Parsed DSN
            timeout: Request timeout in seconds (None blocks)
            max_redirects: Redirects followed before giving up (default: 10)
            session: requests.Session to reuse (one is created if omitted).
                A session passed in stays open on close(); its owner closes it.
        """
        self.public_key = descriptor.public_key
        self.url = descriptor.store_url
        self.timeout = timeout
        self.max_redirects = max_redirects
        self._owns_session = session is None
        self.session = requests.Session() if session is None else session
        logger.debug(f"HTTPTransport initialized: {self.url}")

    def build_headers(self, timestamp: datetime) -> dict:
        """Request headers for one event."""
        return {
            "X-Sentry-Auth": auth_header(timestamp, self.public_key),
            "Content-Type": "application/octet-stream",
            "Connection": "close",
            # Envelope is already compressed
            "Accept-Encoding": "identity",
        }

    def send(self, envelope: bytes, timestamp: datetime) -> str:
        headers = self.build_headers(timestamp)
        location = self.url
        redirects = 0

        while True:
            try:
                response = self.session.post(
                    location,
                    data=envelope,
                    headers=headers,
                    timeout=self.timeout,
                    allow_redirects=False,
                )
            except requests.exceptions.RequestException as e:
                logger.debug(f"HTTP error posting event to {location}: {e}")
                raise NetworkError(f"Cannot reach Sentry at {location}: {e}") from e

            if response.status_code in REDIRECT_STATUSES:
                target = response.headers.get("Location")
                if not target:
                    raise ProtocolError(
                        f"{status_line(response)}: redirect without Location header",
                        status_code=response.status_code,
                        status_line=status_line(response),
                        body=response.text,
                    )

                redirects += 1
                if redirects > self.max_redirects:
                    logger.debug(f"Gave up after {self.max_redirects} redirects, last: {location}")
                    raise TooManyRedirects(
                        f"Exceeded {self.max_redirects} redirects posting to {self.url}",
                        status_code=response.status_code,
                        status_line=status_line(response),
                        body=response.text,
                    )

                # Location may be relative to the URL that answered
                location = urljoin(location, target)
                logger.debug(f"Redirected ({response.status_code}) to {location}")
                continue

            if 200 <= response.status_code < 300:
                logger.debug(f"Event accepted by {location}: {response.status_code}")
                return response.text

            line = status_line(response)
            body = response.text
            logger.debug(f"Sentry rejected event: {line}: {body[:500]}")
            raise ProtocolError(
                f"{line}: {body}",
                status_code=response.status_code,
                status_line=line,
                body=body,
            )

    def close(self):
        """Close the HTTP session if this transport created it."""
        if not self._owns_session:
            return
        self.session.close()
        logger.debug("HTTP session closed")


def status_line(response: requests.Response) -> str:
    """Status code plus reason phrase, e.g. "500 Internal Server Error"."""
    reason = response.reason
    if not reason:
        try:
            reason = HTTPStatus(response.status_code).phrase
        except ValueError:
            reason = ""
    return f"{response.status_code} {reason}".strip()


def select_transport(
    descriptor: ConnectionDescriptor,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    session: Optional[requests.Session] = None,
    socket_factory: Optional[Callable[..., socket.socket]] = None,
) -> Transport:
    """
    Create the transport matching the DSN scheme.

    Raises:
        ParseError: Descriptor names no known transport
    """
    if descriptor.kind is TransportKind.DATAGRAM:
        return UDPTransport(descriptor, timeout=timeout, socket_factory=socket_factory)
    if descriptor.kind is TransportKind.STREAM:
        return HTTPTransport(
            descriptor, timeout=timeout, max_redirects=max_redirects, session=session
        )
    raise ParseError(f"No transport for DSN scheme '{descriptor.scheme}'")
