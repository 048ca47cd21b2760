"""Self/non-self recognition.

Cryptographic validity and biological recognition are separate checks run in
a fixed order: the catalog is consulted only for antigens that verified. A
failed verification yields REJECTED (untrustworthy), never NONSELF (foreign).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..errors import AntigenError
from ..obs.prom import observe_verdict
from ..utils.logging import get_logger
from . import codec
from .antigen import Antigen
from .verify import PublicKeyLike, VerificationResult, verify_antigen

log = get_logger()


class VerdictKind(enum.Enum):
    SELF = "self"
    NONSELF = "nonself"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Verdict:
    kind: VerdictKind
    error: Optional[AntigenError] = None
    foreign: FrozenSet[int] = field(default_factory=frozenset)
    verification: Optional[VerificationResult] = None

    @property
    def is_self(self) -> bool:
        return self.kind is VerdictKind.SELF


def classify(antigen: Antigen, public_key: PublicKeyLike, self_catalog: Iterable[int]) -> Verdict:
    try:
        result = verify_antigen(antigen, public_key)
    except AntigenError as e:
        observe_verdict(VerdictKind.REJECTED.value)
        log.warning("antigen rejected: %s: %s", type(e).__name__, e)
        return Verdict(kind=VerdictKind.REJECTED, error=e)
    catalog = frozenset(self_catalog)
    foreign = frozenset(p for p in codec.canonicalize(antigen.proteins) if p not in catalog)
    kind = VerdictKind.NONSELF if foreign else VerdictKind.SELF
    observe_verdict(kind.value)
    log.info("antigen classified verdict=%s digest=%s", kind.value, result.digest_hex)
    return Verdict(kind=kind, foreign=foreign, verification=result)


__all__ = ["Verdict", "VerdictKind", "classify"]
