from hypothesis import given, settings, strategies as st

from antigenics.errors import CurveMismatch, EmptyProteinSet, SignatureInvalid
from antigenics.genetics.antigen import Antigen
from antigenics.genetics.categories import Category
from antigenics.genetics.classify import VerdictKind, classify
from antigenics.genetics.identity import SpeciesIdentity
from antigenics.genetics.sign import sign_antigen

HOST = SpeciesIdentity.create(Category.TIER_LOW, "host", self_proteins=range(100, 140))


def test_alice_example(alice):
    key = alice.public_key()
    own = sign_antigen(alice, [10, 20])
    assert classify(own, key, alice.self_catalog).kind is VerdictKind.SELF

    mixed = sign_antigen(alice, [10, 99])
    verdict = classify(mixed, key, alice.self_catalog)
    assert verdict.kind is VerdictKind.NONSELF
    assert verdict.foreign == frozenset({99})
    assert verdict.verification.valid

    sig = bytearray(mixed.signature)
    sig[-1] ^= 0xFF
    verdict = classify(mixed.with_signature(bytes(sig)), key, alice.self_catalog)
    assert verdict.kind is VerdictKind.REJECTED
    assert isinstance(verdict.error, SignatureInvalid)


@settings(max_examples=25, deadline=None)
@given(st.lists(st.integers(min_value=100, max_value=139), min_size=1, max_size=10))
def test_subset_of_catalog_is_self(proteins):
    verdict = classify(sign_antigen(HOST, proteins), HOST.public_key(), HOST.self_catalog)
    assert verdict.is_self


@settings(max_examples=25, deadline=None)
@given(
    st.lists(st.integers(min_value=100, max_value=139), max_size=5),
    st.lists(st.integers(min_value=140, max_value=0xFFFF), min_size=1, max_size=5),
)
def test_any_foreign_protein_is_nonself(own, foreign):
    antigen = sign_antigen(HOST, own + foreign)
    verdict = classify(antigen, HOST.public_key(), HOST.self_catalog)
    assert verdict.kind is VerdictKind.NONSELF
    assert verdict.foreign == frozenset(foreign)


def test_cross_tier_rejected_not_nonself(alice, make_identity):
    bacterium = make_identity(Category.TIER_MID, "E. coli", b"ecoli")
    antigen = sign_antigen(alice, [10])
    verdict = classify(antigen, bacterium.public_key(), alice.self_catalog)
    assert verdict.kind is VerdictKind.REJECTED
    assert isinstance(verdict.error, CurveMismatch)


def test_same_tier_impostor_rejected(alice, make_identity):
    impostor = make_identity(Category.TIER_HIGH, "Human 2", b"human2", self_proteins={10, 20, 30})
    verdict = classify(sign_antigen(impostor, [10, 20]), alice.public_key(), alice.self_catalog)
    assert verdict.kind is VerdictKind.REJECTED
    assert isinstance(verdict.error, SignatureInvalid)


def test_empty_antigen_rejected(alice):
    verdict = classify(Antigen((), b"\x30\x06\x02\x01\x01\x02\x01\x01"), alice.public_key(), alice.self_catalog)
    assert verdict.kind is VerdictKind.REJECTED
    assert isinstance(verdict.error, EmptyProteinSet)


def test_catalog_is_never_consulted_for_invalid_signature(alice):
    class ExplodingCatalog:
        def __iter__(self):
            raise AssertionError("catalog consulted before verification")

    forged = Antigen((10,), b"\x30\x06\x02\x01\x01\x02\x01\x01")
    verdict = classify(forged, alice.public_key(), ExplodingCatalog())
    assert verdict.kind is VerdictKind.REJECTED
    assert verdict.foreign == frozenset()


def test_exported_key_bytes_accepted(alice):
    verdict = classify(sign_antigen(alice, [30]), alice.export_public_key(), {30})
    assert verdict.is_self


def test_derived_catalog_recognises_own_proteins(make_identity):
    cell = make_identity(Category.TIER_HIGH, "Human 1", b"h1")
    sample = sorted(cell.self_catalog)[:5]
    assert classify(sign_antigen(cell, sample), cell.public_key(), cell.self_catalog).is_self
