"""Password records: check a password later without storing the derived key.

A record holds the KDF parameters, the salt and a MAC sentinel computed over a
fixed label with the derived key. It is JSON-serializable.
"""
from __future__ import annotations

import hashlib
import hmac
from typing import Dict, Optional

from sealbox.core.entropy import RandomSource
from sealbox.core.exceptions import AuthenticationFailedError, InvalidInputError

from .kdf import (
    DEFAULT_KDF_PARAMS,
    KdfParams,
    Password,
    derive_key,
    generate_key,
    kdf_params_from_dict,
    kdf_params_to_dict,
)

VERIFIER_LABEL = b"sealbox-password-verifier"


def make_verifier(key: bytes) -> bytes:
    return hmac.new(key, VERIFIER_LABEL, hashlib.sha256).digest()


def hash_password(
    password: Password,
    params: Optional[KdfParams] = None,
    rng: Optional[RandomSource] = None,
) -> Dict:
    """Derive a key with a fresh salt and return the record to persist."""
    key, salt = generate_key(password, params=params, rng=rng)
    record = kdf_params_to_dict(params if params is not None else DEFAULT_KDF_PARAMS, salt)
    record["verifier"] = make_verifier(key).hex()
    return record


def check_password(password: Password, record: Dict) -> bytes:
    """
    Re-derive the key from ``password`` and the stored record.

    Returns the derived key when the sentinel matches; raises
    AuthenticationFailedError otherwise.
    """
    params, salt = kdf_params_from_dict(record)
    try:
        expected = bytes.fromhex(record["verifier"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError("password record has no valid verifier") from e

    key = derive_key(password, salt, params)
    if not hmac.compare_digest(make_verifier(key), expected):
        # The password does not match the stored record.
        raise AuthenticationFailedError("invalid password")
    return key
