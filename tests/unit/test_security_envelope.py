"""
Unit tests for password-sealed envelopes.
Targets the header parsing and authentication error paths.
"""

import struct
from unittest.mock import patch

import pytest

from sealbox.core.exceptions import AuthenticationFailedError, InvalidInputError
from sealbox.security.envelope import (
    HEADER_SIZE,
    KDF_ID_ARGON2ID,
    KDF_ID_SCRYPT,
    MAGIC,
    VERSION,
    open_with_password,
    seal_with_password,
)
from sealbox.security.kdf import Argon2Params, ScryptParams

# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def params():
    return ScryptParams(n=1024, r=8, p=1)


@pytest.fixture
def sealed(params):
    return seal_with_password("test_password", b"Secret Content", params=params)


# ==============================================================================
# Tests: Round trip and layout
# ==============================================================================

def test_seal_open_roundtrip(sealed):
    assert open_with_password("test_password", sealed) == b"Secret Content"


def test_header_layout(sealed):
    assert sealed[:4] == MAGIC
    assert sealed[4] == VERSION
    assert sealed[5] == KDF_ID_SCRYPT
    assert struct.unpack(">III", sealed[6:18]) == (1024, 8, 1)
    # header + nonce + ciphertext + tag
    assert len(sealed) == HEADER_SIZE + 12 + len(b"Secret Content") + 16


def test_seal_is_randomized(params):
    a = seal_with_password("pw", b"data", params=params)
    b = seal_with_password("pw", b"data", params=params)
    assert a != b


def test_argon2_envelope_roundtrip():
    blob = seal_with_password("pw", b"payload", params=Argon2Params(time_cost=1, memory_cost=64, parallelism=1))
    assert blob[5] == KDF_ID_ARGON2ID
    assert struct.unpack(">III", blob[6:18]) == (1, 64, 1)
    assert open_with_password("pw", blob) == b"payload"


def test_seal_rejects_empty_plaintext(params):
    with pytest.raises(InvalidInputError):
        seal_with_password("pw", b"", params=params)


def test_seal_rejects_empty_password(params):
    with pytest.raises(InvalidInputError):
        seal_with_password("", b"data", params=params)


# ==============================================================================
# Tests: Open error paths
# ==============================================================================

def test_open_wrong_password(sealed):
    with pytest.raises(AuthenticationFailedError):
        open_with_password("wrong_password", sealed)


def test_open_invalid_magic(sealed):
    bad = b"BADX" + sealed[4:]
    with pytest.raises(InvalidInputError, match="magic mismatch"):
        open_with_password("test_password", bad)


def test_open_unsupported_version(sealed):
    bad = bytearray(sealed)
    bad[4] = 99
    with pytest.raises(InvalidInputError, match="Unsupported envelope version"):
        open_with_password("test_password", bytes(bad))


def test_open_unsupported_kdf(sealed):
    bad = bytearray(sealed)
    bad[5] = 99
    with pytest.raises(InvalidInputError, match="Unsupported key derivation"):
        open_with_password("test_password", bytes(bad))


@pytest.mark.parametrize(
    "kdf_id, fields",
    [
        (KDF_ID_ARGON2ID, (2000, 65536, 1)),
        (KDF_ID_ARGON2ID, (0xFFFFFFFF, 65536, 1)),
        (KDF_ID_ARGON2ID, (1, 0xFFFFFFFF, 1)),
        (KDF_ID_SCRYPT, (2 ** 20, 8, 1)),
        (KDF_ID_SCRYPT, (2 ** 31, 1, 1)),
    ],
)
def test_open_rejects_forged_cost_before_deriving(kdf_id, fields):
    forged = MAGIC + bytes([VERSION, kdf_id]) + struct.pack(">III", *fields) + b"\x00" * 61
    with patch("sealbox.security.envelope.derive_key") as mock_derive:
        with pytest.raises(InvalidInputError):
            open_with_password("pw", forged)
    mock_derive.assert_not_called()


def test_open_invalid_kdf_params(sealed):
    bad = bytearray(sealed)
    bad[6:10] = struct.pack(">I", 1000)
    with pytest.raises(InvalidInputError):
        open_with_password("test_password", bytes(bad))


@pytest.mark.parametrize("size", [0, 4, HEADER_SIZE - 1])
def test_open_truncated_header(sealed, size):
    with pytest.raises(InvalidInputError, match="too short"):
        open_with_password("test_password", sealed[:size])


def test_open_header_without_body(sealed):
    with pytest.raises(InvalidInputError):
        open_with_password("test_password", sealed[:HEADER_SIZE])


def test_open_none():
    with pytest.raises(InvalidInputError):
        open_with_password("pw", None)


def test_open_tampered_salt(sealed):
    bad = bytearray(sealed)
    bad[HEADER_SIZE - 1] ^= 0xFF
    with pytest.raises(AuthenticationFailedError):
        open_with_password("test_password", bytes(bad))


def test_open_tampered_params_still_authenticated(params):
    # r = 4 is valid, so parsing succeeds and authentication must fail
    blob = bytearray(seal_with_password("pw", b"data", params=params))
    blob[10:14] = struct.pack(">I", 4)
    with pytest.raises(AuthenticationFailedError):
        open_with_password("pw", bytes(blob))


def test_open_tampered_body(sealed):
    bad = bytearray(sealed)
    bad[-1] ^= 0x01
    with pytest.raises(AuthenticationFailedError):
        open_with_password("test_password", bytes(bad))
