"""Canonical protein encoding and digest.

A protein set is canonicalized (deduplicated, sorted ascending), each value
written as a 2-byte big-endian integer and the concatenation hashed with
SHA-256. Presentation order and duplicates never influence the digest.
"""
from __future__ import annotations

import hashlib
from typing import Iterable, Tuple

from ..errors import EmptyProteinSet, MalformedEncoding

PROTEIN_MAX = 0xFFFF
PROTEIN_WIDTH = 2
DIGEST_SIZE = 32


def validate_protein(value) -> int:
    # bool is an int subclass but never a protein
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedEncoding(f"protein must be an int, got {type(value).__name__}")
    if not 0 <= value <= PROTEIN_MAX:
        raise MalformedEncoding(f"protein out of 16-bit range: {value}")
    return value


def canonicalize(proteins: Iterable[int]) -> Tuple[int, ...]:
    canonical = tuple(sorted({validate_protein(p) for p in proteins}))
    if not canonical:
        raise EmptyProteinSet("protein set is empty")
    return canonical


def encode(canonical: Tuple[int, ...]) -> bytes:
    return b"".join(p.to_bytes(PROTEIN_WIDTH, "big") for p in canonical)


def digest(proteins: Iterable[int]) -> bytes:
    # Canonicalizing an already canonical tuple is a no-op, so raw input is fine too.
    return hashlib.sha256(encode(canonicalize(proteins))).digest()


def digest_hex(proteins: Iterable[int]) -> str:
    return digest(proteins).hex()


__all__ = [
    "PROTEIN_MAX",
    "DIGEST_SIZE",
    "validate_protein",
    "canonicalize",
    "encode",
    "digest",
    "digest_hex",
]
