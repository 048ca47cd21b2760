"""Error kinds raised by the antigen signing and recognition protocol.

All of them derive from AntigenError so a host can catch the family in one
place. None of them are retried internally.
"""
from __future__ import annotations


class AntigenError(Exception):
    """Base class for protocol failures."""


class RandomnessUnavailable(AntigenError):
    """The entropy source could not supply enough bytes."""


class EmptyProteinSet(AntigenError):
    """A protein set with no members was signed or presented."""


class IdentityRetired(AntigenError):
    """Signing was attempted with an identity whose key has been zeroized."""


class SignatureInvalid(AntigenError):
    """Signature does not match the recomputed digest (or is not decodable)."""


class CurveMismatch(AntigenError):
    """Signature shape belongs to a different category than the public key."""


class MalformedEncoding(AntigenError, ValueError):
    """Bytes or values that cannot be parsed into a protocol object."""


__all__ = [
    "AntigenError",
    "RandomnessUnavailable",
    "EmptyProteinSet",
    "IdentityRetired",
    "SignatureInvalid",
    "CurveMismatch",
    "MalformedEncoding",
]
