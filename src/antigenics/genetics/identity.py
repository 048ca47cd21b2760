"""Species identities ("DNA") and their exported public keys.

A SpeciesIdentity owns exactly one EC private key on the curve mandated by
its category. The key never leaves the object: signing goes through
``_sign_digest`` and the only export is the public key.

Public key wire format: one category tag byte followed by the SEC1 compressed
point, e.g. for TIER_MID ``02 || 02/03 || x(48 bytes)``.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from cryptography.exceptions import InternalError
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..config import load_config
from ..errors import IdentityRetired, MalformedEncoding, RandomnessUnavailable
from ..utils.logging import get_logger
from .categories import Category
from .codec import DIGEST_SIZE, PROTEIN_MAX, validate_protein
from .entropy import EntropySource, scalar_from_entropy, system_entropy

log = get_logger()

SIGNATURE_ALGORITHM = ec.ECDSA(Prehashed(hashes.SHA256()))


@dataclass(frozen=True, eq=False)
class SpeciesPublicKey:
    category: Category
    key: ec.EllipticCurvePublicKey

    def __post_init__(self):
        if not isinstance(self.key.curve, type(self.category.curve())):
            raise MalformedEncoding(
                f"{self.key.curve.name} key cannot belong to {self.category.value}"
            )

    def point_bytes(self) -> bytes:
        return self.key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    def to_bytes(self) -> bytes:
        return bytes([self.category.tag]) + self.point_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "SpeciesPublicKey":
        if not data:
            raise MalformedEncoding("empty public key encoding")
        category = Category.from_tag(data[0])
        point = bytes(data[1:])
        if len(point) != category.params.point_bytes:
            raise MalformedEncoding(
                f"{category.value} point must be {category.params.point_bytes} bytes, got {len(point)}"
            )
        try:
            key = ec.EllipticCurvePublicKey.from_encoded_point(category.curve(), point)
        except ValueError as e:
            raise MalformedEncoding(f"invalid {category.value} point") from e
        return cls(category=category, key=key)

    def verify_digest(self, signature: bytes, digest: bytes) -> None:
        """Raises cryptography's InvalidSignature on mismatch."""
        self.key.verify(signature, digest, SIGNATURE_ALGORITHM)

    def __eq__(self, other):
        if not isinstance(other, SpeciesPublicKey):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        return f"SpeciesPublicKey({self.category.value}, {self.to_bytes().hex()[:16]}...)"


def derive_self_catalog(public_key: SpeciesPublicKey, size: int) -> FrozenSet[int]:
    """Deterministic self-protein catalog seeded by the compressed public point.

    SHA-256 blocks over ``point || counter`` are cut into big-endian 16-bit
    proteins until ``size`` distinct values are collected.
    """
    if not 1 <= size <= PROTEIN_MAX + 1:
        raise ValueError(f"catalog size out of range: {size}")
    seed = public_key.point_bytes()
    catalog = set()
    counter = 0
    while len(catalog) < size:
        block = hashlib.sha256(seed + counter.to_bytes(4, "big")).digest()
        for i in range(0, len(block), 2):
            catalog.add(int.from_bytes(block[i:i + 2], "big"))
            if len(catalog) == size:
                break
        counter += 1
    return frozenset(catalog)


class SpeciesIdentity:
    """A named genetic identity bound to a category-specific keypair.

    Not internally synchronized: callers serialize ``retire`` against signing
    on the same identity. Distinct identities are independent.
    """

    def __init__(
        self,
        name: str,
        category: Category,
        private_key: ec.EllipticCurvePrivateKey,
        self_catalog: Iterable[int],
    ):
        if not isinstance(name, str) or not name:
            raise ValueError("identity name must be a non-empty string")
        if not isinstance(private_key.curve, type(category.curve())):
            raise ValueError(
                f"{category.value} requires {category.curve().name}, got {private_key.curve.name}"
            )
        self._name = name
        self._category = category
        self._private_key: Optional[ec.EllipticCurvePrivateKey] = private_key
        self._public_key = SpeciesPublicKey(category=category, key=private_key.public_key())
        self._self_catalog = frozenset(validate_protein(p) for p in self_catalog)

    @classmethod
    def create(
        cls,
        category: Category,
        name: str,
        entropy: EntropySource | None = None,
        self_proteins: Iterable[int] | None = None,
    ) -> "SpeciesIdentity":
        """Generate a fresh identity from ``entropy`` (system CSPRNG by default).

        Raises RandomnessUnavailable when the source cannot supply enough bytes.
        With no ``self_proteins`` the catalog is derived from the public key.
        """
        source = system_entropy if entropy is None else entropy
        scalar = scalar_from_entropy(source, category.params.order)
        try:
            private_key = ec.derive_private_key(scalar, category.curve())
        finally:
            del scalar
        if self_proteins is None:
            public = SpeciesPublicKey(category=category, key=private_key.public_key())
            self_proteins = derive_self_catalog(public, load_config().self_catalog_size)
        identity = cls(name, category, private_key, self_proteins)
        log.info("identity created name=%s category=%s", name, category.value)
        return identity

    @property
    def name(self) -> str:
        return self._name

    @property
    def category(self) -> Category:
        return self._category

    @property
    def self_catalog(self) -> FrozenSet[int]:
        return self._self_catalog

    @property
    def molecular_pattern(self) -> str:
        return self._category.molecular_pattern

    @property
    def retired(self) -> bool:
        return self._private_key is None

    def public_key(self) -> SpeciesPublicKey:
        return self._public_key

    def export_public_key(self) -> bytes:
        return self._public_key.to_bytes()

    def retire(self) -> None:
        """Drop the private key. OpenSSL clears the scalar when the key is freed.

        Irreversible and idempotent; later signing raises IdentityRetired.
        """
        if self._private_key is None:
            return
        self._private_key = None
        log.info("identity retired name=%s category=%s", self._name, self._category.value)

    def _sign_digest(self, digest: bytes) -> bytes:
        if self._private_key is None:
            raise IdentityRetired(f"identity {self._name!r} has been retired")
        if len(digest) != DIGEST_SIZE:
            raise ValueError(f"digest must be {DIGEST_SIZE} bytes")
        try:
            return self._private_key.sign(digest, SIGNATURE_ALGORITHM)
        except InternalError as e:
            raise RandomnessUnavailable("backend could not generate a signing nonce") from e

    def __repr__(self):
        state = "retired" if self.retired else "active"
        return f"SpeciesIdentity(name={self._name!r}, category={self._category.value}, {state})"

    # Key material has exactly one export path.
    def __copy__(self):
        raise TypeError("SpeciesIdentity cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("SpeciesIdentity cannot be copied")

    def __reduce__(self):
        raise TypeError("SpeciesIdentity cannot be serialized")


__all__ = ["SpeciesIdentity", "SpeciesPublicKey", "derive_self_catalog", "SIGNATURE_ALGORITHM"]
