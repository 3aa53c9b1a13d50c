"""Security helpers: key derivation, message authentication and AEAD for SealBox.

This package provides a small, reviewable surface for:
- scrypt (default) or Argon2id password-based key derivation
- HMAC-SHA256 tags appended to arbitrary data
- AES-256-GCM authenticated encryption of byte strings
- password records and password-sealed envelopes built on the above
"""

from .kdf import (
    generate_salt,
    generate_key,
    derive_key,
    kdf_params_to_dict,
    kdf_params_from_dict,
    ScryptParams,
    Argon2Params,
)
from .mac import append_hmac, validate_hmac, verify_hmac
from .cipher import encrypt, decrypt, encrypt_json, decrypt_json
from .password import hash_password, check_password
from .envelope import seal_with_password, open_with_password

__all__ = [
    "generate_salt",
    "generate_key",
    "derive_key",
    "kdf_params_to_dict",
    "kdf_params_from_dict",
    "ScryptParams",
    "Argon2Params",
    "append_hmac",
    "validate_hmac",
    "verify_hmac",
    "encrypt",
    "decrypt",
    "encrypt_json",
    "decrypt_json",
    "hash_password",
    "check_password",
    "seal_with_password",
    "open_with_password",
]
