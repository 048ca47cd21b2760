"""Antigen signing: hash-then-sign over the canonical protein set."""
from __future__ import annotations

from typing import Iterable

from ..obs.prom import observe_signature
from ..utils.logging import get_logger
from . import codec
from .antigen import Antigen
from .identity import SpeciesIdentity

log = get_logger()


def sign_antigen(identity: SpeciesIdentity, proteins: Iterable[int]) -> Antigen:
    """Sign ``proteins`` with the identity's category-bound key.

    The returned antigen keeps the caller's protein order. ECDSA nonces are
    fresh per call, so repeated signatures differ yet all verify.
    Raises EmptyProteinSet, IdentityRetired or RandomnessUnavailable.
    """
    presented = tuple(proteins)
    canonical = codec.canonicalize(presented)
    digest = codec.digest(canonical)
    signature = identity._sign_digest(digest)
    observe_signature(identity.category.value)
    log.debug(
        "antigen signed name=%s category=%s digest=%s",
        identity.name,
        identity.category.value,
        digest.hex(),
    )
    return Antigen(
        proteins=presented,
        signature=signature,
        molecular_pattern=identity.molecular_pattern,
    )


__all__ = ["sign_antigen"]
