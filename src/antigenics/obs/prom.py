"""Prometheus instrumentation for antigen signing, verification and recognition.

Labels stay low-cardinality: category names, outcome error kinds and verdicts.
Identity names and digests never become labels.
"""
from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, generate_latest

from ..config import load_config

REGISTRY = CollectorRegistry()

SIGNATURES = Counter(
    "antigenics_signatures_total",
    "Antigens signed, by identity category.",
    ["category"],
    registry=REGISTRY,
)
VERIFICATIONS = Counter(
    "antigenics_verifications_total",
    "Antigen verifications by public key category and outcome.",
    ["category", "outcome"],
    registry=REGISTRY,
)
VERDICTS = Counter(
    "antigenics_verdicts_total",
    "Self/non-self verdicts issued by the classifier.",
    ["verdict"],
    registry=REGISTRY,
)


def observe_signature(category: str) -> None:
    if load_config().metrics_enabled:
        SIGNATURES.labels(category=category).inc()


def observe_verification(category: str, outcome: str) -> None:
    if load_config().metrics_enabled:
        VERIFICATIONS.labels(category=category, outcome=outcome).inc()


def observe_verdict(verdict: str) -> None:
    if load_config().metrics_enabled:
        VERDICTS.labels(verdict=verdict).inc()


def render_latest() -> bytes:
    return generate_latest(REGISTRY)


__all__ = [
    "REGISTRY",
    "observe_signature",
    "observe_verification",
    "observe_verdict",
    "render_latest",
]
