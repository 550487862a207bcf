"""Result value objects shared by both evaluators."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class CheckResult(BaseModel):
    """Outcome of a single check, pass or fail."""

    model_config = ConfigDict(frozen=True)

    check_id: str
    """Stable identifier, e.g. 'coverage_ratio', 'smoke_detectors'."""

    compliant: bool
    required_value: Any = None
    actual_value: Any = None
    unit: str = ""
    explanation: str = ""

    binding_constraint: str | None = None
    """Which rule produced the required value (height check only)."""

    advisory: bool = False
    """Informational check; never contributes a violation."""

    details: dict[str, Any] = Field(default_factory=dict)
    """Additional sizing outputs (items, counts, ratings)."""


class Violation(BaseModel):
    """A business non-compliance recorded in a report."""

    model_config = ConfigDict(frozen=True)

    code: str
    """Stable identifier, e.g. 'BCR-001'."""

    regulation_reference: str
    description: str
    severity: Severity


class CheckOutcome(BaseModel):
    """A check result together with the violations it raised."""

    model_config = ConfigDict(frozen=True)

    result: CheckResult
    violations: tuple[Violation, ...] = ()
