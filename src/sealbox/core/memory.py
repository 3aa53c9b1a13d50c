"""Best-effort wiping of sensitive buffers."""
from __future__ import annotations

from typing import Union


def zeroize(buf: Union[bytearray, memoryview]) -> None:
    """Overwrite a mutable buffer with zeros in place.

    ``bytes`` objects are immutable and cannot be wiped; copy secrets into a
    ``bytearray`` first if they must be cleared after use.
    """
    if isinstance(buf, memoryview):
        if buf.readonly:
            raise TypeError("cannot zeroize a read-only buffer")
        buf = buf.cast("B")
    for i in range(len(buf)):
        buf[i] = 0
