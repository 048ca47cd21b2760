"""Antigen value object and its wire encoding.

Wire format: MAGIC followed by a deterministic CBOR map
``{1: [proteins...], 2: signature, 3: molecular_pattern}``. Proteins keep
their presentation order; the signature only ever covers the canonical set.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import cbor2

from ..errors import MalformedEncoding
from .codec import validate_protein

MAGIC = b"\x89agn\r\n\x1a\n"


@dataclass(frozen=True)
class Antigen:
    proteins: Tuple[int, ...]
    signature: bytes
    molecular_pattern: str = field(default="")

    def __post_init__(self):
        object.__setattr__(self, "proteins", tuple(self.proteins))
        object.__setattr__(self, "signature", bytes(self.signature))

    def with_signature(self, signature: bytes) -> "Antigen":
        return Antigen(self.proteins, signature, self.molecular_pattern)

    def to_bytes(self) -> bytes:
        body: Dict[int, Any] = {
            1: list(self.proteins),
            2: self.signature,
            3: self.molecular_pattern,
        }
        return MAGIC + cbor2.dumps(body, canonical=True)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "Antigen":
        if not buf.startswith(MAGIC):
            raise MalformedEncoding("bad antigen magic")
        try:
            body = cbor2.loads(buf[len(MAGIC):])
        except (cbor2.CBORDecodeError, ValueError) as e:
            raise MalformedEncoding("antigen body is not valid CBOR") from e
        if not isinstance(body, dict) or set(body) != {1, 2, 3}:
            raise MalformedEncoding("antigen body must be a map with keys 1, 2, 3")
        proteins, signature, pattern = body[1], body[2], body[3]
        if not isinstance(proteins, list):
            raise MalformedEncoding("antigen proteins must be an array")
        if not isinstance(signature, bytes):
            raise MalformedEncoding("antigen signature must be a byte string")
        if not isinstance(pattern, str):
            raise MalformedEncoding("antigen molecular pattern must be text")
        return cls(tuple(validate_protein(p) for p in proteins), signature, pattern)


__all__ = ["Antigen", "MAGIC"]
