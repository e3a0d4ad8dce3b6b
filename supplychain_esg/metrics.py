# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Supply-Chain ESG Core

Metrics:
    1. esg_answers_normalized_total (Counter, labels: outcome)
    2. esg_assessments_scored_total (Counter, labels: final_grade)
    3. esg_critical_violations_total (Counter, labels: grade)
    4. esg_emission_calculations_total (Counter, labels: status)
    5. esg_factor_resolutions_total (Counter, labels: outcome)
    6. esg_assessment_score (Histogram, buckets: 10-100)
    7. esg_processing_duration_seconds (Histogram, labels: operation)

The ``record_*`` helpers below are the only call sites for the metric
objects; library modules never touch the collectors directly.
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Raw answers normalised by outcome
esg_answers_normalized_total = Counter(
    "esg_answers_normalized_total",
    "Total raw answers run through normalisation",
    labelnames=["outcome"],
)

# 2. Self-assessments scored by final grade
esg_assessments_scored_total = Counter(
    "esg_assessments_scored_total",
    "Total self-assessments scored",
    labelnames=["final_grade"],
)

# 3. Critical violations found by violation grade
esg_critical_violations_total = Counter(
    "esg_critical_violations_total",
    "Total critical violations found while scoring",
    labelnames=["grade"],
)

# 4. Emission calculations by status
esg_emission_calculations_total = Counter(
    "esg_emission_calculations_total",
    "Total emission calculations performed",
    labelnames=["status"],
)

# 5. Emission-factor resolutions by outcome
esg_factor_resolutions_total = Counter(
    "esg_factor_resolutions_total",
    "Total emission-factor lookups",
    labelnames=["outcome"],
)

# 6. Normalised assessment score distribution
esg_assessment_score = Histogram(
    "esg_assessment_score",
    "Self-assessment score distribution (0-100)",
    buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
)

# 7. Processing duration by operation
esg_processing_duration_seconds = Histogram(
    "esg_processing_duration_seconds",
    "Supply-chain ESG processing duration in seconds",
    labelnames=["operation"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def record_answer_normalization(outcome: str, count: int = 1) -> None:
    """Record normalised answers.

    Args:
        outcome: ``accepted`` or ``rejected``.
        count: Number of answers with this outcome.
    """
    if count <= 0:
        return
    esg_answers_normalized_total.labels(outcome=outcome).inc(count)


def record_assessment(final_grade: str, score: int) -> None:
    """Record a completed scoring pass.

    Args:
        final_grade: Overall grade (A, B, C, D).
        score: Normalised score 0-100.
    """
    esg_assessments_scored_total.labels(final_grade=final_grade).inc()
    esg_assessment_score.observe(score)


def record_critical_violation(grade: str) -> None:
    """Record one critical violation of the given grade."""
    esg_critical_violations_total.labels(grade=grade).inc()


def record_calculation(status: str) -> None:
    """Record an emission calculation.

    Args:
        status: Calculation status (success, rejected).
    """
    esg_emission_calculations_total.labels(status=status).inc()


def record_factor_resolution(outcome: str) -> None:
    """Record an emission-factor lookup.

    Args:
        outcome: ``found`` or ``not_found``.
    """
    esg_factor_resolutions_total.labels(outcome=outcome).inc()


def record_processing_duration(operation: str, duration: float) -> None:
    """Record processing duration for an operation.

    Args:
        operation: Operation type (normalize, score, calculate, report, load).
        duration: Duration in seconds.
    """
    esg_processing_duration_seconds.labels(operation=operation).observe(duration)


__all__ = [
    "esg_answers_normalized_total",
    "esg_assessments_scored_total",
    "esg_critical_violations_total",
    "esg_emission_calculations_total",
    "esg_factor_resolutions_total",
    "esg_assessment_score",
    "esg_processing_duration_seconds",
    "record_answer_normalization",
    "record_assessment",
    "record_critical_violation",
    "record_calculation",
    "record_factor_resolution",
    "record_processing_duration",
]
