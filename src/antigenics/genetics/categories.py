"""Category registry.

Every species category is bound to one NIST prime curve. Stronger curves
stand for more complex organisms:

  TIER_HIGH (human)     P-521   tag 0x01
  TIER_MID  (bacteria)  P-384   tag 0x02
  TIER_LOW  (virus)     P-224   tag 0x03

The registry also fixes the per-category DER signature length window that the
verifier uses to infer which curve produced a signature, and the molecular
pattern (first ten decimal digits of the curve's field prime) carried by
antigens for innate, non-cryptographic recognition.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Type

from cryptography.hazmat.primitives.asymmetric import ec

from ..errors import MalformedEncoding

MIN_DER_SIGNATURE_LEN = 8  # 30 06 02 01 rr 02 01 ss


def max_der_signature_len(order_bits: int) -> int:
    # Widest INTEGER: order bytes plus a possible 0x00 sign pad.
    int_len = order_bits // 8 + 1
    body = 2 * (2 + int_len)
    header = 2 if body < 0x80 else 3
    return header + body


@dataclass(frozen=True)
class CurveParams:
    tag: int
    bits: int
    curve: Type[ec.EllipticCurve]
    field_prime: int
    order: int

    @property
    def scalar_bytes(self) -> int:
        return (self.order.bit_length() + 7) // 8

    @property
    def point_bytes(self) -> int:
        # SEC1 compressed: 0x02/0x03 prefix + x coordinate
        return 1 + (self.field_prime.bit_length() + 7) // 8

    @property
    def molecular_pattern(self) -> str:
        return str(self.field_prime)[:10]


_P521 = CurveParams(
    tag=0x01,
    bits=521,
    curve=ec.SECP521R1,
    field_prime=2**521 - 1,
    order=int(
        "01FF" + "FFFFFFFF" * 7 + "FFFFFFFA"
        "51868783BF2F966B7FCC0148F709A5D03BB5C9B8899C47AEBB6FB71E91386409",
        16,
    ),
)
_P384 = CurveParams(
    tag=0x02,
    bits=384,
    curve=ec.SECP384R1,
    field_prime=2**384 - 2**128 - 2**96 + 2**32 - 1,
    order=int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
        "C7634D81F4372DDF581A0DB248B0A77AECEC196ACCC52973",
        16,
    ),
)
_P224 = CurveParams(
    tag=0x03,
    bits=224,
    curve=ec.SECP224R1,
    field_prime=2**224 - 2**96 + 1,
    order=int("FFFFFFFFFFFFFFFFFFFFFFFFFFFF16A2E0B8F03E13DD29455C5C2A3D", 16),
)


class Category(enum.Enum):
    TIER_HIGH = "tier-high"
    TIER_MID = "tier-mid"
    TIER_LOW = "tier-low"

    # Biological aliases
    HUMAN = "tier-high"
    BACTERIA = "tier-mid"
    VIRUS = "tier-low"

    @property
    def params(self) -> CurveParams:
        return _PARAMS[self]

    @property
    def tag(self) -> int:
        return self.params.tag

    @property
    def bits(self) -> int:
        return self.params.bits

    @property
    def molecular_pattern(self) -> str:
        return self.params.molecular_pattern

    def curve(self) -> ec.EllipticCurve:
        return self.params.curve()

    @property
    def signature_window(self) -> tuple[int, int]:
        """Inclusive (min, max) DER signature length for this category."""
        lower = MIN_DER_SIGNATURE_LEN
        for other in _BY_STRENGTH:
            if other.bits < self.bits:
                lower = max(lower, max_der_signature_len(other.params.order.bit_length()) + 1)
        return lower, max_der_signature_len(self.params.order.bit_length())

    @classmethod
    def from_tag(cls, tag: int) -> "Category":
        try:
            return _BY_TAG[tag]
        except KeyError:
            raise MalformedEncoding(f"unknown category tag: {tag:#04x}") from None

    @classmethod
    def from_bits(cls, bits: int) -> "Category":
        for cat in _BY_STRENGTH:
            if cat.bits == bits:
                return cat
        raise ValueError(f"no category for a {bits}-bit curve")

    @classmethod
    def from_molecular_pattern(cls, pattern: str) -> "Category | None":
        for cat in _BY_STRENGTH:
            if cat.molecular_pattern == pattern:
                return cat
        return None

    @classmethod
    def for_signature_length(cls, length: int) -> "Category | None":
        for cat in _BY_STRENGTH:
            lo, hi = cat.signature_window
            if lo <= length <= hi:
                return cat
        return None


_PARAMS: Dict[Category, CurveParams] = {
    Category.TIER_HIGH: _P521,
    Category.TIER_MID: _P384,
    Category.TIER_LOW: _P224,
}
_BY_TAG: Dict[int, Category] = {p.tag: cat for cat, p in _PARAMS.items()}
_BY_STRENGTH = (Category.TIER_LOW, Category.TIER_MID, Category.TIER_HIGH)


__all__ = ["Category", "CurveParams", "max_der_signature_len", "MIN_DER_SIGNATURE_LEN"]
