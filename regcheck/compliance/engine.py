"""ComplianceEngine: the single entry point for compliance evaluation.

Usage::

    from regcheck import ComplianceEngine

    engine = ComplianceEngine()
    report = engine.evaluate_compliance(lot, building, setback, parking, fire_safety)
    report.overall_compliant
    report.building_report.violations

Profiles may be passed as models or as plain dicts; dicts are validated
before any check runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from regcheck.compliance.building import BuildingComplianceEvaluator
from regcheck.compliance.fire_safety import FireSafetyEvaluator
from regcheck.compliance.fire_safety import requires_fire_review as _requires_fire_review
from regcheck.compliance.report import (
    BuildingComplianceReport,
    CombinedComplianceReport,
    FireSafetyReport,
)
from regcheck.config import load_config
from regcheck.models.profiles import (
    BuildingProfile,
    FireSafetyProfile,
    LotProfile,
    ParkingProfile,
    SetbackProfile,
)
from regcheck.reference.registry import JurisdictionRegistry, default_registry
from regcheck.reference.tables import ReferenceTables

logger = logging.getLogger(__name__)


class ComplianceRequest(BaseModel):
    """Profile bundle for one building."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lot: LotProfile
    building: BuildingProfile
    setback: SetbackProfile
    parking: ParkingProfile
    fire_safety: FireSafetyProfile


class ComplianceEngine:
    """Dispatch profile bundles to the building and fire-safety evaluators.

    Parameters
    ----------
    tables:
        Reference tables to evaluate against.  Takes precedence over
        *jurisdiction*.
    jurisdiction:
        Jurisdiction to look up in *registry* when *tables* is not given.
    registry:
        Jurisdiction registry.  Defaults to one holding the embedded tables.
    """

    def __init__(
        self,
        tables: ReferenceTables | None = None,
        *,
        jurisdiction: str | None = None,
        registry: JurisdictionRegistry | None = None,
    ) -> None:
        if tables is None:
            if jurisdiction is None:
                tables = ReferenceTables.default()
            else:
                tables = (registry or default_registry()).get(jurisdiction)
        self.tables = tables
        self.building_evaluator = BuildingComplianceEvaluator(tables)
        self.fire_safety_evaluator = FireSafetyEvaluator(tables)

    @classmethod
    def from_config(cls, project_path: str | Path = ".") -> ComplianceEngine:
        """Build an engine from ``REGCHECK_*`` settings.

        A ``REGCHECK_REFERENCE_TABLES`` path is registered and used as-is;
        otherwise ``REGCHECK_JURISDICTION`` is looked up in the default
        registry.
        """
        config = load_config(project_path)
        registry = default_registry()

        tables_path = config["REGCHECK_REFERENCE_TABLES"]
        if tables_path:
            return cls(registry.register_file(tables_path))

        return cls(jurisdiction=config["REGCHECK_JURISDICTION"], registry=registry)

    @property
    def jurisdiction(self) -> str:
        return self.tables.jurisdiction

    # -- Evaluation ------------------------------------------------------------

    def evaluate_building_compliance(
        self,
        lot: LotProfile | dict[str, Any],
        building: BuildingProfile | dict[str, Any],
        setback: SetbackProfile | dict[str, Any],
        parking: ParkingProfile | dict[str, Any],
    ) -> BuildingComplianceReport:
        """Run the building-code checks.

        Raises ``pydantic.ValidationError`` if any profile is invalid.
        """
        return self.building_evaluator.evaluate(
            LotProfile.model_validate(lot),
            BuildingProfile.model_validate(building),
            SetbackProfile.model_validate(setback),
            ParkingProfile.model_validate(parking),
        )

    def evaluate_fire_safety(
        self,
        fire_safety: FireSafetyProfile | dict[str, Any],
    ) -> FireSafetyReport:
        """Run the fire-safety sizing and gate checks."""
        return self.fire_safety_evaluator.evaluate(
            FireSafetyProfile.model_validate(fire_safety)
        )

    def evaluate_compliance(
        self,
        lot: LotProfile | dict[str, Any],
        building: BuildingProfile | dict[str, Any],
        setback: SetbackProfile | dict[str, Any],
        parking: ParkingProfile | dict[str, Any],
        fire_safety: FireSafetyProfile | dict[str, Any],
    ) -> CombinedComplianceReport:
        """Run both evaluators and return the combined report."""
        return self.evaluate(
            {
                "lot": lot,
                "building": building,
                "setback": setback,
                "parking": parking,
                "fire_safety": fire_safety,
            }
        )

    def evaluate(self, request: ComplianceRequest | dict[str, Any]) -> CombinedComplianceReport:
        """Evaluate a complete profile bundle.

        The whole bundle is validated before either evaluator runs.
        """
        req = ComplianceRequest.model_validate(request)
        return CombinedComplianceReport(
            building_report=self.building_evaluator.evaluate(
                req.lot, req.building, req.setback, req.parking
            ),
            fire_safety_report=self.fire_safety_evaluator.evaluate(req.fire_safety),
        )

    def evaluate_batch(
        self,
        requests: Iterable[ComplianceRequest | dict[str, Any]],
    ) -> list[CombinedComplianceReport]:
        """Evaluate many bundles; reports are returned in input order."""
        reports = [self.evaluate(request) for request in requests]
        logger.info(
            "Evaluated %d buildings (%s): %d compliant",
            len(reports),
            self.jurisdiction,
            sum(1 for r in reports if r.overall_compliant),
        )
        return reports

    def requires_fire_review(
        self,
        total_floor_area: float,
        floors_above_grade: int,
        building_category: str,
    ) -> bool:
        """Return True if the building must be routed to manual fire review."""
        return _requires_fire_review(total_floor_area, floors_above_grade, building_category)
