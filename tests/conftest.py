import hashlib

import pytest

from antigenics.config import reset_config
from antigenics.genetics.categories import Category
from antigenics.genetics.identity import SpeciesIdentity


class CounterEntropy:
    """Deterministic stand-in for a CSPRNG: SHA-256(seed || counter) blocks."""

    def __init__(self, seed: bytes):
        self.seed = seed
        self.counter = 0

    def __call__(self, n: int) -> bytes:
        out = b""
        while len(out) < n:
            out += hashlib.sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
            self.counter += 1
        return out[:n]


def _make_identity(category: Category, name: str, seed: bytes, self_proteins=None) -> SpeciesIdentity:
    return SpeciesIdentity.create(category, name, entropy=CounterEntropy(seed), self_proteins=self_proteins)


@pytest.fixture
def fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def counter_entropy():
    return CounterEntropy


@pytest.fixture
def make_identity():
    return _make_identity


@pytest.fixture
def alice():
    return _make_identity(Category.TIER_HIGH, "Alice", b"alice", self_proteins={10, 20, 30})


@pytest.fixture(params=[Category.TIER_HIGH, Category.TIER_MID, Category.TIER_LOW], ids=lambda c: c.value)
def any_identity(request):
    return _make_identity(request.param, f"species-{request.param.value}", request.param.value.encode())
