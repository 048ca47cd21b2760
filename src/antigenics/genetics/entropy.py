"""Injected entropy for key generation.

An entropy source is any callable taking a byte count and returning that many
bytes. The default draws from the operating system CSPRNG; tests substitute a
deterministic source.
"""
from __future__ import annotations

import secrets
from typing import Callable

from ..errors import RandomnessUnavailable

EntropySource = Callable[[int], bytes]

# Extra bytes drawn beyond the scalar width so the modular reduction bias is
# below 2**-64 (FIPS 186-4 B.4.1).
EXTRA_ENTROPY_BYTES = 8


def system_entropy(n: int) -> bytes:
    return secrets.token_bytes(n)


def draw(source: EntropySource, n: int) -> bytearray:
    try:
        data = source(n)
    except RandomnessUnavailable:
        raise
    except Exception as e:
        raise RandomnessUnavailable(f"entropy source failed: {e}") from e
    if not isinstance(data, (bytes, bytearray)) or len(data) < n:
        got = len(data) if isinstance(data, (bytes, bytearray)) else type(data).__name__
        raise RandomnessUnavailable(f"entropy source returned {got}, needed {n} bytes")
    return bytearray(data[:n])


def wipe(buf: bytearray) -> None:
    for i in range(len(buf)):
        buf[i] = 0


def scalar_from_entropy(source: EntropySource, order: int) -> int:
    """Draw a private scalar uniformly enough from [1, order - 1]."""
    width = (order.bit_length() + 7) // 8 + EXTRA_ENTROPY_BYTES
    buf = draw(source, width)
    try:
        return int.from_bytes(buf, "big") % (order - 1) + 1
    finally:
        wipe(buf)


__all__ = ["EntropySource", "system_entropy", "draw", "wipe", "scalar_from_entropy"]
