"""Non-self protein repertoire and its partition into MHC-II groups."""
from __future__ import annotations

import random
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .codec import PROTEIN_MAX, validate_protein


def nonself_proteins(self_catalog: Iterable[int]) -> Tuple[int, ...]:
    catalog = {validate_protein(p) for p in self_catalog}
    return tuple(p for p in range(PROTEIN_MAX + 1) if p not in catalog)


def mhc_ii_groups(
    self_catalog: Iterable[int],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[FrozenSet[int]]:
    """Shuffle the non-self repertoire and deal it round-robin into ``count`` groups.

    Every non-self protein lands in exactly one group; group sizes differ by
    at most one.
    """
    if count < 1:
        raise ValueError("group count must be at least 1")
    proteins = list(nonself_proteins(self_catalog))
    (rng or random.Random()).shuffle(proteins)
    groups: List[set] = [set() for _ in range(count)]
    for i, protein in enumerate(proteins):
        groups[i % count].add(protein)
    return [frozenset(g) for g in groups]


__all__ = ["nonself_proteins", "mhc_ii_groups"]
