"""Compliance Evaluation Engine: building-code and fire-safety checks."""

from regcheck.compliance.building import BuildingComplianceEvaluator
from regcheck.compliance.engine import ComplianceEngine, ComplianceRequest
from regcheck.compliance.fire_safety import FireSafetyEvaluator, requires_fire_review
from regcheck.compliance.report import (
    BuildingComplianceReport,
    CombinedComplianceReport,
    ComplianceReport,
    FireSafetyReport,
)

__all__ = [
    "BuildingComplianceEvaluator",
    "BuildingComplianceReport",
    "CombinedComplianceReport",
    "ComplianceEngine",
    "ComplianceReport",
    "ComplianceRequest",
    "FireSafetyEvaluator",
    "FireSafetyReport",
    "requires_fire_review",
]
