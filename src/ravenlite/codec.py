"""
ravenlite - Event Payload Codec

Encodes an EventRecord into the envelope sent over the wire:

    base64(zlib(json(record)))

Each stage runs on a complete in-memory buffer, so a failure in any stage
raises before an envelope exists. Nothing half-written reaches a transport.
"""

import base64
import binascii
import json
import logging
import zlib
from typing import Any, Dict

from .errors import EncodingError
from .models import EventRecord

logger = logging.getLogger(__name__)


def encode_event(record: EventRecord) -> bytes:
    """
    Serialize, compress, and base64 encode an event.

    Args:
        record: Event to encode

    Returns:
        bytes: ASCII envelope, ready for a transport

    Raises:
        EncodingError: Any stage failed
    """
    try:
        serialized = json.dumps(record.to_dict()).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Failed to serialize event: {e}") from e

    try:
        compressed = zlib.compress(serialized)
    except zlib.error as e:
        raise EncodingError(f"Failed to compress event: {e}") from e

    try:
        envelope = base64.b64encode(compressed)
    except (TypeError, binascii.Error) as e:
        raise EncodingError(f"Failed to base64 encode event: {e}") from e

    logger.debug(
        f"Encoded event {record.event_id}: "
        f"{len(serialized)} bytes json, {len(envelope)} bytes envelope"
    )
    return envelope


def decode_envelope(envelope: bytes) -> Dict[str, Any]:
    """
    Reverse encode_event().

    The client never needs this for sending; it exists for tests and for
    inspecting captured payloads.

    Raises:
        EncodingError: Envelope is not valid base64/zlib/JSON
    """
    try:
        return json.loads(zlib.decompress(base64.b64decode(envelope, validate=True)))
    except (binascii.Error, zlib.error, ValueError) as e:
        raise EncodingError(f"Failed to decode envelope: {e}") from e
