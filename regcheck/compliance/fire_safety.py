"""FireSafetyEvaluator: fire-safety equipment sizing and system gates.

The five sizing checks (extinguishers, egress distance, egress width, smoke
detectors, emergency lighting) are advisory outputs: they report what must
be provided and never raise a violation.  Two gate checks do raise
violations: a missing fire alarm over 300 m2 and a missing sprinkler system
above 11 floors.
"""

from __future__ import annotations

import logging
import math

from regcheck.compliance.aggregator import aggregate
from regcheck.compliance.report import (
    EgressDistanceRequirement,
    EgressWidthRequirement,
    EmergencyLightingRequirement,
    ExtinguisherRequirement,
    FireSafetyReport,
    SmokeDetectorRequirement,
)
from regcheck.models.profiles import FireSafetyProfile, normalize_category
from regcheck.models.results import CheckOutcome, CheckResult, Severity, Violation
from regcheck.reference.tables import ReferenceTables

logger = logging.getLogger(__name__)

_CODE = "Fire Safety Equipment Installation Standards"

EXTINGUISHER_TYPE = "ABC dry chemical"
EXTINGUISHER_COVERAGE_M2 = 100.0
EXTINGUISHER_COVERAGE_SPRINKLERED_M2 = 150.0

MIN_EXIT_WIDTH_CM = 120.0
EXIT_WIDTH_PER_100_PERSONS_CM = 60.0

SMOKE_DETECTOR_AREA_M2 = 300.0
SMOKE_DETECTOR_COVERAGE_M2 = 60.0  # standard 3 m ceiling
SMOKE_DETECTOR_SPACING_M = 8.0

EMERGENCY_LIGHT_COVERAGE_M2 = 50.0
EMERGENCY_LIGHT_DURATION_MIN = 30
EMERGENCY_LIGHT_ILLUMINATION_LUX = 1.0

FIRE_ALARM_AREA_M2 = 300.0
SPRINKLER_FLOORS = 11

REVIEW_AREA_M2 = 500.0
REVIEW_FLOORS = 5
REVIEW_CATEGORIES = frozenset({"assembly", "medical", "hotel"})


def requires_fire_review(
    total_floor_area: float,
    floors_above_grade: int,
    building_category: str,
) -> bool:
    """Return True if the building must be routed to manual fire review."""
    if total_floor_area > REVIEW_AREA_M2:
        return True
    if floors_above_grade > REVIEW_FLOORS:
        return True
    return normalize_category(building_category) in REVIEW_CATEGORIES


class FireSafetyEvaluator:
    """Size fire-safety equipment and check the mandatory systems.

    Parameters
    ----------
    tables:
        Jurisdiction reference tables.  Defaults to the embedded tables.
    """

    def __init__(self, tables: ReferenceTables | None = None) -> None:
        self.tables = tables or ReferenceTables.default()

    def evaluate(self, profile: FireSafetyProfile) -> FireSafetyReport:
        """Run the sizing and gate checks and aggregate them into a report."""
        extinguishers = self._extinguishers(profile)
        egress_distance = self._egress_distance(profile)
        egress_width = self._egress_width(profile)
        smoke_detectors = self._smoke_detectors(profile)
        emergency_lighting = self._emergency_lighting(profile)

        outcomes = [
            _sizing_outcome(
                "extinguishers",
                extinguishers.count,
                "units",
                f"{extinguishers.count} x {extinguishers.extinguisher_type} "
                f"{extinguishers.rating}, walking distance {extinguishers.spacing_m:g} m.",
            ),
            _sizing_outcome(
                "egress_distance",
                egress_distance.max_distance_m,
                "m",
                "Maximum travel distance to an exit; requires a measured "
                "floor-plan distance to verify.",
            ),
            _sizing_outcome(
                "egress_width",
                egress_width.total_required_cm,
                "cm",
                f"Total exit width for {profile.occupant_load} occupants; "
                f"minimum {egress_width.min_exit_width_cm:g} cm per exit.",
            ),
            _sizing_outcome(
                "smoke_detectors",
                smoke_detectors.count,
                "units",
                f"{'Required' if smoke_detectors.required else 'Not required'}; "
                f"{smoke_detectors.coverage_m2:g} m2 per detector.",
                required=smoke_detectors.required,
            ),
            _sizing_outcome(
                "emergency_lighting",
                emergency_lighting.count,
                "units",
                f"{'Required' if emergency_lighting.required else 'Not required'}; "
                f"{emergency_lighting.duration_min} min at "
                f"{emergency_lighting.illumination_lux:g} lux.",
                required=emergency_lighting.required,
            ),
            self._check_fire_alarm(profile),
            self._check_sprinkler(profile),
        ]
        checks, violations, compliant = aggregate(outcomes)

        logger.debug(
            "Fire safety evaluated (%s): %d checks, %d violations",
            self.tables.jurisdiction,
            len(checks),
            len(violations),
        )
        return FireSafetyReport(
            jurisdiction=self.tables.jurisdiction,
            checks=checks,
            violations=violations,
            overall_compliant=compliant,
            extinguishers=extinguishers,
            egress_distance=egress_distance,
            egress_width=egress_width,
            smoke_detectors=smoke_detectors,
            emergency_lighting=emergency_lighting,
        )

    # -- Sizing ----------------------------------------------------------------

    def _extinguishers(self, profile: FireSafetyProfile) -> ExtinguisherRequirement:
        standard = self.tables.extinguisher_standard(profile.building_category)
        if profile.has_automatic_sprinkler:
            coverage_per_unit = EXTINGUISHER_COVERAGE_SPRINKLERED_M2
        else:
            coverage_per_unit = EXTINGUISHER_COVERAGE_M2

        count_by_coverage = math.ceil(profile.total_floor_area / coverage_per_unit)
        count_by_spacing = math.ceil(
            profile.total_floor_area / (math.pi * standard.spacing_m**2)
        )

        return ExtinguisherRequirement(
            required=True,
            count=max(count_by_coverage, count_by_spacing, 1),
            extinguisher_type=EXTINGUISHER_TYPE,
            rating=standard.rating,
            spacing_m=standard.spacing_m,
            coverage_per_unit_m2=coverage_per_unit,
        )

    def _egress_distance(self, profile: FireSafetyProfile) -> EgressDistanceRequirement:
        standard = self.tables.egress_distance_standard(profile.building_category)
        if profile.has_automatic_sprinkler:
            max_distance = standard.with_sprinkler_m
        else:
            max_distance = standard.normal_m
        return EgressDistanceRequirement(
            max_distance_m=max_distance,
            standard_distance_m=standard.normal_m,
        )

    def _egress_width(self, profile: FireSafetyProfile) -> EgressWidthRequirement:
        by_occupancy = profile.occupant_load * EXIT_WIDTH_PER_100_PERSONS_CM / 100
        total = max(by_occupancy, MIN_EXIT_WIDTH_CM)
        return EgressWidthRequirement(
            min_exit_width_cm=MIN_EXIT_WIDTH_CM,
            total_required_cm=math.ceil(total),
            width_per_100_persons_cm=EXIT_WIDTH_PER_100_PERSONS_CM,
        )

    def _smoke_detectors(self, profile: FireSafetyProfile) -> SmokeDetectorRequirement:
        return SmokeDetectorRequirement(
            required=profile.total_floor_area > SMOKE_DETECTOR_AREA_M2,
            count=math.ceil(profile.total_floor_area / SMOKE_DETECTOR_COVERAGE_M2),
            spacing_m=SMOKE_DETECTOR_SPACING_M,
            coverage_m2=SMOKE_DETECTOR_COVERAGE_M2,
        )

    def _emergency_lighting(self, profile: FireSafetyProfile) -> EmergencyLightingRequirement:
        return EmergencyLightingRequirement(
            required=profile.floors_above_grade > 1 or profile.floors_below_grade > 0,
            count=math.ceil(profile.total_floor_area / EMERGENCY_LIGHT_COVERAGE_M2),
            duration_min=EMERGENCY_LIGHT_DURATION_MIN,
            illumination_lux=EMERGENCY_LIGHT_ILLUMINATION_LUX,
        )

    # -- Gates -----------------------------------------------------------------

    def _check_fire_alarm(self, profile: FireSafetyProfile) -> CheckOutcome:
        required = profile.total_floor_area > FIRE_ALARM_AREA_M2
        compliant = profile.has_fire_alarm or not required

        result = CheckResult(
            check_id="fire_alarm",
            compliant=compliant,
            required_value=required,
            actual_value=profile.has_fire_alarm,
            explanation=(
                f"Automatic fire alarm {'required' if required else 'not required'} "
                f"above {FIRE_ALARM_AREA_M2:g} m2."
            ),
        )
        if compliant:
            return CheckOutcome(result=result)
        return CheckOutcome(
            result=result,
            violations=(
                Violation(
                    code="FSA-001",
                    regulation_reference=f"{_CODE}, automatic fire alarm equipment",
                    description=(
                        f"Floor area exceeds {FIRE_ALARM_AREA_M2:g} m² "
                        "requires automatic fire alarm"
                    ),
                    severity=Severity.MAJOR,
                ),
            ),
        )

    def _check_sprinkler(self, profile: FireSafetyProfile) -> CheckOutcome:
        required = profile.floors_above_grade > SPRINKLER_FLOORS
        compliant = profile.has_automatic_sprinkler or not required

        result = CheckResult(
            check_id="automatic_sprinkler",
            compliant=compliant,
            required_value=required,
            actual_value=profile.has_automatic_sprinkler,
            explanation=(
                f"Automatic sprinkler {'required' if required else 'not required'} "
                f"above {SPRINKLER_FLOORS} floors."
            ),
        )
        if compliant:
            return CheckOutcome(result=result)
        return CheckOutcome(
            result=result,
            violations=(
                Violation(
                    code="FSS-001",
                    regulation_reference=f"{_CODE}, automatic sprinkler equipment",
                    description=(
                        f"Buildings above {SPRINKLER_FLOORS} floors require "
                        "automatic sprinkler system"
                    ),
                    severity=Severity.CRITICAL,
                ),
            ),
        )


def _sizing_outcome(
    check_id: str,
    required_value: float | int,
    unit: str,
    explanation: str,
    *,
    required: bool = True,
) -> CheckOutcome:
    """Wrap a sizing output as an advisory check."""
    return CheckOutcome(
        result=CheckResult(
            check_id=check_id,
            compliant=True,
            required_value=required_value,
            unit=unit,
            explanation=explanation,
            advisory=True,
            details={"required": required},
        )
    )
