"""SealBox: password-based key derivation, message authentication and
authenticated encryption over byte strings."""

from sealbox.core.exceptions import (
    SealBoxError,
    InvalidInputError,
    InvalidKeyError,
    AuthenticationFailedError,
    CryptoUnavailableError,
)
from sealbox.security import (
    generate_key,
    derive_key,
    append_hmac,
    validate_hmac,
    encrypt,
    decrypt,
    hash_password,
    check_password,
    seal_with_password,
    open_with_password,
)

__version__ = "0.1.0"

__all__ = [
    "SealBoxError",
    "InvalidInputError",
    "InvalidKeyError",
    "AuthenticationFailedError",
    "CryptoUnavailableError",
    "generate_key",
    "derive_key",
    "append_hmac",
    "validate_hmac",
    "encrypt",
    "decrypt",
    "hash_password",
    "check_password",
    "seal_with_password",
    "open_with_password",
]
