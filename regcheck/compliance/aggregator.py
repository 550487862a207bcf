"""Violation aggregation shared by the building and fire-safety evaluators."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from regcheck.models.results import CheckOutcome, CheckResult, Violation


class Aggregate(NamedTuple):
    checks: list[CheckResult]
    violations: list[Violation]
    overall_compliant: bool


def aggregate(outcomes: Iterable[CheckOutcome]) -> Aggregate:
    """Collect check outcomes into ordered results and violations.

    Order is the order of *outcomes*, i.e. the order the evaluator declares
    its checks in, so the same input always yields the same violation list.
    ``overall_compliant`` is true iff no outcome raised a violation.
    """
    checks: list[CheckResult] = []
    violations: list[Violation] = []

    for outcome in outcomes:
        checks.append(outcome.result)
        violations.extend(outcome.violations)

    return Aggregate(checks, violations, not violations)
