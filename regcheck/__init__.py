"""regcheck: regulatory compliance evaluation for building and fire-safety codes."""

__version__ = "1.0.0"

import functools
from typing import Any

from regcheck.compliance.building import BuildingComplianceEvaluator
from regcheck.compliance.engine import ComplianceEngine, ComplianceRequest
from regcheck.compliance.fire_safety import FireSafetyEvaluator, requires_fire_review
from regcheck.compliance.report import (
    BuildingComplianceReport,
    CombinedComplianceReport,
    ComplianceReport,
    FireSafetyReport,
)
from regcheck.config import configure_logging, load_config
from regcheck.models.profiles import (
    BuildingCategory,
    BuildingProfile,
    FireSafetyProfile,
    LotProfile,
    ParkingProfile,
    SetbackProfile,
    ZoneType,
)
from regcheck.models.results import CheckResult, Severity, Violation
from regcheck.reference.registry import JurisdictionRegistry, default_registry
from regcheck.reference.tables import ReferenceTables


@functools.lru_cache(maxsize=1)
def _default_engine() -> ComplianceEngine:
    return ComplianceEngine()


def evaluate_building_compliance(
    lot: Any, building: Any, setback: Any, parking: Any
) -> BuildingComplianceReport:
    """Evaluate building-code compliance against the embedded tables."""
    return _default_engine().evaluate_building_compliance(lot, building, setback, parking)


def evaluate_fire_safety(fire_safety: Any) -> FireSafetyReport:
    """Evaluate fire-safety requirements against the embedded tables."""
    return _default_engine().evaluate_fire_safety(fire_safety)


__all__ = [
    "__version__",
    # Facade
    "ComplianceEngine",
    "ComplianceRequest",
    "evaluate_building_compliance",
    "evaluate_fire_safety",
    "requires_fire_review",
    # Evaluators and reports
    "BuildingComplianceEvaluator",
    "BuildingComplianceReport",
    "CombinedComplianceReport",
    "ComplianceReport",
    "FireSafetyEvaluator",
    "FireSafetyReport",
    # Models
    "BuildingCategory",
    "BuildingProfile",
    "CheckResult",
    "FireSafetyProfile",
    "LotProfile",
    "ParkingProfile",
    "SetbackProfile",
    "Severity",
    "Violation",
    "ZoneType",
    # Reference tables and configuration
    "JurisdictionRegistry",
    "ReferenceTables",
    "configure_logging",
    "default_registry",
    "load_config",
]
