"""Authenticated encryption of byte strings under a 256-bit key.

Encryption details:
- AES-256-GCM (via :class:`cryptography.hazmat.primitives.ciphers.aead.AESGCM`)
- fresh 96-bit random nonce per call
- sealed layout: ``nonce (12) || ciphertext (len(plaintext)) || tag (16)``

The sealed blob carries everything needed to decrypt it given the key.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealbox.core.entropy import RandomSource, random_bytes
from sealbox.core.exceptions import (
    AuthenticationFailedError,
    InvalidInputError,
    InvalidKeyError,
)

logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
OVERHEAD = NONCE_SIZE + TAG_SIZE


def _check_key(key: Optional[bytes]) -> bytes:
    if key is None or not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidKeyError("key must be bytes")
    if len(key) != KEY_SIZE:
        raise InvalidKeyError(f"key must be exactly {KEY_SIZE} bytes")
    return bytes(key)


def encrypt(
    key: bytes,
    plaintext: bytes,
    associated_data: Optional[bytes] = None,
    rng: Optional[RandomSource] = None,
) -> bytes:
    """
    Encrypt ``plaintext`` and return ``nonce || ciphertext || tag``.

    Every call draws a new nonce, so encrypting the same plaintext twice
    under the same key gives different output. ``associated_data`` is
    authenticated but not encrypted and must be passed again to decrypt.
    """
    key = _check_key(key)
    if not plaintext:
        raise InvalidInputError("plaintext must not be empty")

    nonce = random_bytes(NONCE_SIZE, rng)
    ct = AESGCM(key).encrypt(nonce, bytes(plaintext), associated_data)
    logger.debug("sealed %d-byte payload", len(plaintext))
    return nonce + ct


def decrypt(key: bytes, sealed: bytes, associated_data: Optional[bytes] = None) -> bytes:
    """
    Decrypt a blob produced by :func:`encrypt` and return the plaintext.

    Raises AuthenticationFailedError if the tag does not verify (wrong key,
    wrong associated data or a modified blob). No plaintext is returned in
    that case.

    A buffer of ``OVERHEAD`` bytes or fewer cannot hold a non-empty payload
    and raises InvalidInputError before any authentication is attempted.
    """
    key = _check_key(key)
    if sealed is None or len(sealed) <= OVERHEAD:
        raise InvalidInputError("sealed data too short to contain nonce, payload and tag")

    sealed = bytes(sealed)
    nonce, ct = sealed[:NONCE_SIZE], sealed[NONCE_SIZE:]
    try:
        return AESGCM(key).decrypt(nonce, ct, associated_data)
    except InvalidTag as e:
        logger.debug("authentication failed for %d-byte sealed blob", len(sealed))
        raise AuthenticationFailedError("decryption failed: data is corrupt or the key is wrong") from e


def encrypt_json(key: bytes, obj: Dict[str, Any], rng: Optional[RandomSource] = None) -> bytes:
    """
    Encrypt a JSON-serializable dict.

    The object is serialized with :func:`json.dumps` using UTF-8 encoding
    and then passed through :func:`encrypt`.
    """
    raw = json.dumps(obj, ensure_ascii=False).encode("utf-8")
    return encrypt(key, raw, rng=rng)


def decrypt_json(key: bytes, sealed: bytes) -> Dict[str, Any]:
    """
    Decrypt a JSON blob previously produced by :func:`encrypt_json`.
    """
    raw = decrypt(key, sealed)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidInputError("decrypted payload is not a JSON document") from e
