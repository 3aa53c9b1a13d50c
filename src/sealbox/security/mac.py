"""HMAC-SHA256 tags appended to data.

Layout: ``data || tag`` where the tag is the 32-byte HMAC-SHA256 of ``data``.
"""
import hashlib
import hmac
import logging
from typing import Optional

from sealbox.core.exceptions import AuthenticationFailedError, InvalidKeyError

logger = logging.getLogger(__name__)

TAG_SIZE = 32


def _tag(key: bytes, data: bytes) -> bytes:
    if key is None:
        raise InvalidKeyError("MAC key is required")
    return hmac.new(key, data, hashlib.sha256).digest()


def append_hmac(key: bytes, data: Optional[bytes]) -> Optional[bytes]:
    """Return ``data`` with its 32-byte tag appended, or None if there is no data."""
    if not data:
        return None
    data = bytes(data)
    return data + _tag(key, data)


def validate_hmac(key: bytes, tagged: Optional[bytes]) -> Optional[bytes]:
    """
    Check the trailing tag and return the original data, or None if invalid.

    A buffer too short to hold a tag and a tag mismatch both yield None so
    callers cannot tell the two apart.
    """
    if key is None:
        raise InvalidKeyError("MAC key is required")
    if tagged is None or len(tagged) <= TAG_SIZE:
        return None
    tagged = bytes(tagged)
    message, mac = tagged[:-TAG_SIZE], tagged[-TAG_SIZE:]
    expected = _tag(key, message)
    if not hmac.compare_digest(mac, expected):
        logger.debug("HMAC validation failed for %d-byte message", len(message))
        return None
    return message


def verify_hmac(key: bytes, tagged: Optional[bytes]) -> bytes:
    """Like :func:`validate_hmac` but raise AuthenticationFailedError instead of returning None."""
    message = validate_hmac(key, tagged)
    if message is None:
        raise AuthenticationFailedError("message authentication failed")
    return message
