"""
Exceptions for SealBox
Every failure raised by the library derives from SealBoxError so callers
have a single general error catcher.
"""


class SealBoxError(Exception):
    # general container for errors
    pass


class InvalidInputError(SealBoxError, ValueError):
    # raised for an empty password, a missing or wrong-sized salt,
    # an empty plaintext or an undersized sealed buffer
    pass


class InvalidKeyError(SealBoxError, ValueError):
    # raised when a key is missing or not the required size
    pass


class AuthenticationFailedError(SealBoxError):
    # raised on a tag mismatch (tampering, corruption or wrong key)
    pass


class CryptoUnavailableError(SealBoxError, RuntimeError):
    # raised when the random source or a primitive cannot operate
    pass
