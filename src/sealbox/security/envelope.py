"""Password-sealed blobs with a compact binary header.

Header layout (binary, all big-endian):
- 4 bytes: magic b'SLB1'
- 1 byte: version (1)
- 1 byte: kdf_id (1 = scrypt, 2 = argon2id)
- 12 bytes: three unsigned ints of KDF parameters
  (scrypt: n, r, p; argon2id: time_cost, memory_cost, parallelism)
- 32 bytes: salt

Body: the output of :func:`sealbox.security.cipher.encrypt`, with the header
bound in as associated data so it cannot be edited without detection.
"""
import logging
import struct
from typing import Optional, Tuple

from sealbox.core.entropy import RandomSource
from sealbox.core.exceptions import InvalidInputError

from .cipher import decrypt, encrypt
from .kdf import (
    DEFAULT_KDF_PARAMS,
    SALT_SIZE,
    Argon2Params,
    KdfParams,
    Password,
    ScryptParams,
    derive_key,
    generate_salt,
)

logger = logging.getLogger(__name__)

MAGIC = b"SLB1"
VERSION = 1
KDF_ID_SCRYPT = 1
KDF_ID_ARGON2ID = 2

_PREFIX = struct.Struct(">4sBB")
_PARAMS = struct.Struct(">III")
HEADER_SIZE = _PREFIX.size + _PARAMS.size + SALT_SIZE


def _pack_header(params: KdfParams, salt: bytes) -> bytes:
    header = bytearray()
    if isinstance(params, Argon2Params):
        header += _PREFIX.pack(MAGIC, VERSION, KDF_ID_ARGON2ID)
        header += _PARAMS.pack(params.time_cost, params.memory_cost, params.parallelism)
    else:
        header += _PREFIX.pack(MAGIC, VERSION, KDF_ID_SCRYPT)
        header += _PARAMS.pack(params.n, params.r, params.p)
    header += salt
    return bytes(header)


def _unpack_header(blob: bytes) -> Tuple[KdfParams, bytes]:
    if blob is None or len(blob) < HEADER_SIZE:
        raise InvalidInputError("sealed envelope too short to contain a header")
    magic, ver, kdf_id = _PREFIX.unpack_from(blob, 0)
    if magic != MAGIC:
        raise InvalidInputError("Invalid envelope format (magic mismatch)")
    if ver != VERSION:
        raise InvalidInputError("Unsupported envelope version")
    a, b, c = _PARAMS.unpack_from(blob, _PREFIX.size)
    if kdf_id == KDF_ID_SCRYPT:
        params: KdfParams = ScryptParams(n=a, r=b, p=c)
    elif kdf_id == KDF_ID_ARGON2ID:
        params = Argon2Params(time_cost=a, memory_cost=b, parallelism=c)
    else:
        raise InvalidInputError("Unsupported key derivation algorithm")
    salt = bytes(blob[_PREFIX.size + _PARAMS.size:HEADER_SIZE])
    return params, salt


def seal_with_password(
    password: Password,
    plaintext: bytes,
    params: Optional[KdfParams] = None,
    rng: Optional[RandomSource] = None,
) -> bytes:
    """Derive a key from ``password`` with a fresh salt and encrypt ``plaintext`` under it."""
    params = params if params is not None else DEFAULT_KDF_PARAMS
    if not plaintext:
        raise InvalidInputError("plaintext must not be empty")
    salt = generate_salt(rng)
    header = _pack_header(params, salt)
    key = derive_key(password, salt, params)
    logger.debug("sealing envelope with %s", params.algo)
    return header + encrypt(key, plaintext, associated_data=header, rng=rng)


def open_with_password(password: Password, blob: bytes) -> bytes:
    """Reverse of :func:`seal_with_password`."""
    params, salt = _unpack_header(blob)
    header = bytes(blob[:HEADER_SIZE])
    key = derive_key(password, salt, params)
    return decrypt(key, blob[HEADER_SIZE:], associated_data=header)
