"""Antigen verification.

Checks run cheapest first and stop at the first failure:

  1. the antigen carries at least one protein     (EmptyProteinSet)
  2. the signature's DER length window names the
     same category as the public key tag          (CurveMismatch)
  3. the DER decodes to r, s within [1, n-1]      (SignatureInvalid)
  4. ECDSA over the recomputed canonical digest   (SignatureInvalid)

No cross-curve verification is ever attempted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from ..errors import AntigenError, CurveMismatch, SignatureInvalid
from ..obs.prom import observe_verification
from ..utils.logging import get_logger
from . import codec
from .antigen import Antigen
from .categories import Category
from .identity import SpeciesPublicKey

log = get_logger()

PublicKeyLike = Union[SpeciesPublicKey, bytes]


@dataclass(frozen=True)
class VerificationResult:
    category: Category
    digest_hex: str
    valid: bool = True


def _coerce_public_key(public_key: PublicKeyLike) -> SpeciesPublicKey:
    if isinstance(public_key, SpeciesPublicKey):
        return public_key
    return SpeciesPublicKey.from_bytes(bytes(public_key))


def _check_signature_shape(signature: bytes, category: Category) -> None:
    inferred = Category.for_signature_length(len(signature))
    if inferred is None:
        raise SignatureInvalid(f"signature length {len(signature)} fits no category")
    if inferred is not category:
        raise CurveMismatch(
            f"signature shaped for {inferred.value}, public key is {category.value}"
        )
    try:
        r, s = decode_dss_signature(signature)
    except ValueError as e:
        raise SignatureInvalid("signature is not a DER (r, s) pair") from e
    order = category.params.order
    if not (0 < r < order and 0 < s < order):
        raise SignatureInvalid("signature integers out of range")


def _verify(antigen: Antigen, key: SpeciesPublicKey) -> VerificationResult:
    digest = codec.digest(antigen.proteins)
    _check_signature_shape(antigen.signature, key.category)
    try:
        key.verify_digest(antigen.signature, digest)
    except InvalidSignature as e:
        raise SignatureInvalid("signature does not match protein digest") from e
    return VerificationResult(category=key.category, digest_hex=digest.hex())


def verify_antigen(antigen: Antigen, public_key: PublicKeyLike) -> VerificationResult:
    """Verify ``antigen`` against ``public_key`` (object or exported bytes).

    Returns a VerificationResult or raises EmptyProteinSet, CurveMismatch,
    SignatureInvalid, or MalformedEncoding for undecodable key bytes.
    """
    category = "unknown"
    try:
        key = _coerce_public_key(public_key)
        category = key.category.value
        result = _verify(antigen, key)
    except AntigenError as e:
        observe_verification(category, type(e).__name__)
        log.debug("antigen verification failed category=%s error=%s", category, e)
        raise
    observe_verification(category, "valid")
    return result


__all__ = ["VerificationResult", "verify_antigen"]
