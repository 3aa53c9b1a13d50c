"""Injectable source of cryptographically secure random bytes.

Every operation that consumes entropy accepts an optional ``rng`` argument.
When it is omitted the process-wide :class:`SystemRandomSource` is used.
Tests swap in deterministic doubles through the same argument.
"""
from __future__ import annotations

import os
from typing import Optional, Protocol

from .exceptions import CryptoUnavailableError


class RandomSource(Protocol):
    """Anything that can hand out ``size`` random bytes.

    Implementations must be safe to call from several threads at once.
    """

    def read(self, size: int) -> bytes:
        ...


class SystemRandomSource:
    """Operating system CSPRNG (``os.urandom``), thread-safe."""

    def read(self, size: int) -> bytes:
        return os.urandom(size)


_default_source = SystemRandomSource()


def get_random_source() -> RandomSource:
    return _default_source


def random_bytes(size: int, rng: Optional[RandomSource] = None) -> bytes:
    """Return exactly ``size`` random bytes or raise CryptoUnavailableError."""
    source = rng if rng is not None else _default_source
    try:
        data = source.read(size)
    except (OSError, NotImplementedError) as e:
        raise CryptoUnavailableError("random source failed to supply entropy") from e

    if data is None or len(data) != size:
        raise CryptoUnavailableError(
            f"random source returned a short read (wanted {size} bytes)"
        )
    return bytes(data)
