"""Password-based key derivation for SealBox.

Passwords are stretched with scrypt (N=16384, r=8, p=1) by default; Argon2id
is available by passing :class:`Argon2Params`. Both produce a 32-byte key
from a 32-byte salt.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from sealbox.core.entropy import RandomSource, random_bytes
from sealbox.core.exceptions import CryptoUnavailableError, InvalidInputError
from sealbox.core.memory import zeroize

logger = logging.getLogger(__name__)

KEY_SIZE = 32
SALT_SIZE = 32

Password = Union[str, bytes, bytearray, memoryview]


# Upper bounds on cost parameters. Params are read back from stored records
# and envelope headers before anything is authenticated.
MAX_SCRYPT_N = 2 ** 20
MAX_SCRYPT_R = 32
MAX_SCRYPT_P = 16
MAX_SCRYPT_MEMORY = 256 * 1024 * 1024  # 128 * n * r bytes
MAX_ARGON2_TIME = 10
MAX_ARGON2_MEMORY = 256 * 1024  # KiB
MAX_ARGON2_PARALLELISM = 16


@dataclass(frozen=True)
class ScryptParams:
    n: int = 16384
    r: int = 8
    p: int = 1

    algo = "scrypt"

    def __post_init__(self):
        if self.n < 2 or self.n > MAX_SCRYPT_N or self.n & (self.n - 1):
            raise InvalidInputError(f"scrypt n must be a power of two between 2 and {MAX_SCRYPT_N}")
        if not 1 <= self.r <= MAX_SCRYPT_R or not 1 <= self.p <= MAX_SCRYPT_P:
            raise InvalidInputError(f"scrypt r must be 1..{MAX_SCRYPT_R} and p 1..{MAX_SCRYPT_P}")
        if 128 * self.n * self.r > MAX_SCRYPT_MEMORY:
            raise InvalidInputError("scrypt parameters exceed the memory limit")


@dataclass(frozen=True)
class Argon2Params:
    time_cost: int = 3
    memory_cost: int = 65536
    parallelism: int = 1

    algo = "argon2id"

    def __post_init__(self):
        if not 1 <= self.time_cost <= MAX_ARGON2_TIME:
            raise InvalidInputError(f"argon2 time_cost must be 1..{MAX_ARGON2_TIME}")
        if not 1 <= self.parallelism <= MAX_ARGON2_PARALLELISM:
            raise InvalidInputError(f"argon2 parallelism must be 1..{MAX_ARGON2_PARALLELISM}")
        # libargon2 requires at least 8 KiB per lane
        if not 8 * self.parallelism <= self.memory_cost <= MAX_ARGON2_MEMORY:
            raise InvalidInputError(
                f"argon2 memory_cost must be between 8 * parallelism and {MAX_ARGON2_MEMORY} KiB"
            )


KdfParams = Union[ScryptParams, Argon2Params]

DEFAULT_KDF_PARAMS: KdfParams = ScryptParams()


def _password_buffer(password: Optional[Password]) -> bytearray:
    if password is None:
        raise InvalidInputError("password must not be empty")
    if isinstance(password, str):
        buf = bytearray(password.encode("utf-8"))
    elif isinstance(password, (bytes, bytearray, memoryview)):
        buf = bytearray(password)
    else:
        raise InvalidInputError("password must be str or bytes")
    if not buf:
        raise InvalidInputError("password must not be empty")
    return buf


def _check_salt(salt: Optional[bytes]) -> bytes:
    if salt is None:
        raise InvalidInputError("salt is required")
    if not isinstance(salt, (bytes, bytearray, memoryview)):
        raise InvalidInputError("salt must be bytes")
    salt = bytes(salt)
    if len(salt) != SALT_SIZE:
        raise InvalidInputError(f"salt must be exactly {SALT_SIZE} bytes")
    return salt


def generate_salt(rng: Optional[RandomSource] = None) -> bytes:
    """Return a cryptographically secure random 32-byte salt."""
    return random_bytes(SALT_SIZE, rng)


def derive_key(
    password: Password,
    salt: bytes,
    params: Optional[KdfParams] = None,
) -> bytes:
    """
    Derive a 32-byte key from ``password`` and ``salt``.

    The same (password, salt, params) always yields the same key, which is
    what lets a stored salt reproduce an earlier derivation. ``str``
    passwords are encoded as UTF-8.

    Raises InvalidInputError for an empty password or a salt that is missing
    or not exactly 32 bytes, and CryptoUnavailableError if the backend cannot
    run the stretching function.
    """
    params = params if params is not None else DEFAULT_KDF_PARAMS
    secret = _password_buffer(password)
    try:
        salt = _check_salt(salt)
        logger.debug("deriving %d-byte key with %s", KEY_SIZE, params.algo)
        if isinstance(params, Argon2Params):
            return _derive_argon2(secret, salt, params)
        return _derive_scrypt(secret, salt, params)
    finally:
        zeroize(secret)


def _derive_scrypt(secret: bytearray, salt: bytes, params: ScryptParams) -> bytes:
    try:
        kdf = Scrypt(salt=salt, length=KEY_SIZE, n=params.n, r=params.r, p=params.p)
        return kdf.derive(secret)
    except (UnsupportedAlgorithm, MemoryError) as e:
        raise CryptoUnavailableError("scrypt is not available") from e


def _derive_argon2(secret: bytearray, salt: bytes, params: Argon2Params) -> bytes:
    try:
        return hash_secret_raw(
            secret=bytes(secret),
            salt=salt,
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=KEY_SIZE,
            type=Type.ID,
        )
    except (HashingError, MemoryError) as e:
        raise CryptoUnavailableError("argon2id is not available") from e


def generate_key(
    password: Password,
    params: Optional[KdfParams] = None,
    rng: Optional[RandomSource] = None,
) -> Tuple[bytes, bytes]:
    """
    Derive a key from ``password`` with a freshly generated salt.

    Returns ``(key, salt)``; the salt must be stored by the caller to derive
    the same key again with :func:`derive_key`.
    """
    # reject before consuming entropy
    zeroize(_password_buffer(password))
    salt = generate_salt(rng)
    key = derive_key(password, salt, params)
    return key, salt


def kdf_params_to_dict(params: KdfParams, salt: bytes) -> Dict:
    if isinstance(params, Argon2Params):
        return {
            "algo": params.algo,
            "salt": salt.hex(),
            "time": params.time_cost,
            "memory": params.memory_cost,
            "parallelism": params.parallelism,
        }
    return {
        "algo": params.algo,
        "salt": salt.hex(),
        "n": params.n,
        "r": params.r,
        "p": params.p,
    }


def kdf_params_from_dict(meta: Dict) -> Tuple[KdfParams, bytes]:
    """Inverse of :func:`kdf_params_to_dict`: return ``(params, salt)``."""
    try:
        algo = meta["algo"]
        salt = _check_salt(bytes.fromhex(meta["salt"]))
        if algo == ScryptParams.algo:
            params: KdfParams = ScryptParams(n=int(meta["n"]), r=int(meta["r"]), p=int(meta["p"]))
        elif algo == Argon2Params.algo:
            params = Argon2Params(
                time_cost=int(meta["time"]),
                memory_cost=int(meta["memory"]),
                parallelism=int(meta["parallelism"]),
            )
        else:
            raise InvalidInputError(f"unsupported KDF algorithm: {algo!r}")
    except InvalidInputError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError("malformed KDF parameters") from e
    return params, salt
