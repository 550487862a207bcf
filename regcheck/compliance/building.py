"""BuildingComplianceEvaluator: building-code checks for a single building.

Six independent checks run in a fixed order with no short-circuiting:
coverage ratio, floor-area ratio, height, setback, parking and
accessibility.  The accessibility check is advisory and never blocks
``overall_compliant``.
"""

from __future__ import annotations

import logging
import math

from regcheck.compliance.aggregator import aggregate
from regcheck.compliance.report import BuildingComplianceReport
from regcheck.models.profiles import (
    BuildingProfile,
    LotProfile,
    ParkingProfile,
    SetbackProfile,
)
from regcheck.models.results import CheckOutcome, CheckResult, Severity, Violation
from regcheck.reference.tables import ReferenceTables

logger = logging.getLogger(__name__)

_CODE = "Building Technical Regulations, Design and Construction"

# Height caps
ROAD_WIDTH_HEIGHT_FACTOR = 1.5
ROAD_WIDTH_HEIGHT_ALLOWANCE_M = 6.0
LOW_COVERAGE_THRESHOLD = 60.0
LOW_COVERAGE_HEIGHT_CAP_M = 50.0
HIGH_COVERAGE_HEIGHT_CAP_M = 36.0

BINDING_ROAD_WIDTH = "road_width"
BINDING_COVERAGE_RATIO = "coverage_ratio"

# Setbacks
WIDE_ROAD_M = 15.0
FRONT_SETBACK_M = 3.0
MID_RISE_FLOORS = 5
REAR_SETBACK_LOW_M = 2.0
REAR_SETBACK_HIGH_M = 4.0
SIDE_SETBACK_HEIGHT_M = 21.0
SIDE_SETBACK_LOW_M = 1.5
SIDE_SETBACK_HIGH_M = 3.0

# Parking
ACCESSIBLE_PARKING_PERCENT = 2

# Accessibility
ACCESSIBILITY_AREA_M2 = 200.0
ACCESSIBLE_FACILITIES_AREA_M2 = 300.0


def coverage_ratio(building: BuildingProfile) -> float:
    """Building footprint as a percentage of site area."""
    return building.building_area * 100 / building.site_area


def floor_area_ratio(building: BuildingProfile) -> float:
    """Total floor area as a percentage of site area."""
    return building.total_floor_area * 100 / building.site_area


def height_caps(lot: LotProfile, building: BuildingProfile) -> tuple[float, str, float, float]:
    """Return ``(max_allowed, binding_constraint, cap_by_road, cap_by_coverage)``.

    The lower cap governs; the road-width cap wins an exact tie.
    """
    cap_by_road = lot.front_road_width * ROAD_WIDTH_HEIGHT_FACTOR + ROAD_WIDTH_HEIGHT_ALLOWANCE_M
    if coverage_ratio(building) <= LOW_COVERAGE_THRESHOLD:
        cap_by_coverage = LOW_COVERAGE_HEIGHT_CAP_M
    else:
        cap_by_coverage = HIGH_COVERAGE_HEIGHT_CAP_M

    if cap_by_road <= cap_by_coverage:
        return cap_by_road, BINDING_ROAD_WIDTH, cap_by_road, cap_by_coverage
    return cap_by_coverage, BINDING_COVERAGE_RATIO, cap_by_road, cap_by_coverage


def required_parking(total_floor_area: float, divisor: float) -> tuple[int, int]:
    """Return ``(required_spaces, accessible_spaces_required)``."""
    required = math.ceil(total_floor_area / divisor)
    accessible = max(1, math.ceil(required * ACCESSIBLE_PARKING_PERCENT / 100))
    return required, accessible


class BuildingComplianceEvaluator:
    """Evaluate a building against zoning and building-code limits.

    Parameters
    ----------
    tables:
        Jurisdiction reference tables.  Defaults to the embedded tables.
    """

    def __init__(self, tables: ReferenceTables | None = None) -> None:
        self.tables = tables or ReferenceTables.default()

    def evaluate(
        self,
        lot: LotProfile,
        building: BuildingProfile,
        setback: SetbackProfile,
        parking: ParkingProfile,
    ) -> BuildingComplianceReport:
        """Run all six checks and aggregate them into a report."""
        outcomes = [
            self._check_coverage(lot, building),
            self._check_floor_area(lot, building),
            self._check_height(lot, building),
            self._check_setback(lot, building, setback),
            self._check_parking(building, parking),
            self._check_accessibility(building, parking),
        ]
        checks, violations, compliant = aggregate(outcomes)

        logger.debug(
            "Building compliance evaluated (%s): %d checks, %d violations",
            self.tables.jurisdiction,
            len(checks),
            len(violations),
        )
        return BuildingComplianceReport(
            jurisdiction=self.tables.jurisdiction,
            checks=checks,
            violations=violations,
            overall_compliant=compliant,
        )

    # -- Checks ----------------------------------------------------------------

    def _check_coverage(self, lot: LotProfile, building: BuildingProfile) -> CheckOutcome:
        if lot.legal_coverage_ratio is not None:
            allowed = lot.legal_coverage_ratio
        else:
            allowed = self.tables.zone_standard(lot.zone_type).coverage_ratio
        actual = coverage_ratio(building)
        compliant = actual <= allowed

        result = CheckResult(
            check_id="coverage_ratio",
            compliant=compliant,
            required_value=allowed,
            actual_value=actual,
            unit="%",
            explanation=f"Coverage ratio {actual:.1f}% against allowed {allowed:g}%.",
        )
        if compliant:
            return CheckOutcome(result=result)
        return CheckOutcome(
            result=result,
            violations=(
                Violation(
                    code="BCR-001",
                    regulation_reference=f"{_CODE}, Art. 27",
                    description=f"Coverage ratio {actual:.1f}% exceeds allowed {allowed:g}%",
                    severity=Severity.CRITICAL,
                ),
            ),
        )

    def _check_floor_area(self, lot: LotProfile, building: BuildingProfile) -> CheckOutcome:
        if lot.legal_floor_area_ratio is not None:
            base = lot.legal_floor_area_ratio
        else:
            base = self.tables.zone_standard(lot.zone_type).floor_area_ratio
        allowed = base + lot.floor_area_bonus
        actual = floor_area_ratio(building)
        compliant = actual <= allowed

        result = CheckResult(
            check_id="floor_area_ratio",
            compliant=compliant,
            required_value=allowed,
            actual_value=actual,
            unit="%",
            explanation=f"Floor-area ratio {actual:.1f}% against allowed {allowed:g}%.",
            details={"base_allowed": base, "bonus": lot.floor_area_bonus},
        )
        if compliant:
            return CheckOutcome(result=result)
        return CheckOutcome(
            result=result,
            violations=(
                Violation(
                    code="FAR-001",
                    regulation_reference=f"{_CODE}, Art. 28",
                    description=f"Floor-area ratio {actual:.1f}% exceeds allowed {allowed:g}%",
                    severity=Severity.CRITICAL,
                ),
            ),
        )

    def _check_height(self, lot: LotProfile, building: BuildingProfile) -> CheckOutcome:
        max_allowed, binding, cap_by_road, cap_by_coverage = height_caps(lot, building)
        actual = building.building_height
        compliant = actual <= max_allowed

        result = CheckResult(
            check_id="height",
            compliant=compliant,
            required_value=max_allowed,
            actual_value=actual,
            unit="m",
            explanation=(
                f"Height {actual:g} m against {max_allowed:g} m "
                f"({binding.replace('_', ' ')} limit)."
            ),
            binding_constraint=binding,
            details={"cap_by_road": cap_by_road, "cap_by_coverage": cap_by_coverage},
        )
        if compliant:
            return CheckOutcome(result=result)
        return CheckOutcome(
            result=result,
            violations=(
                Violation(
                    code="HGT-001",
                    regulation_reference=f"{_CODE}, Art. 164",
                    description=f"Building height {actual:g} m exceeds limit {max_allowed:g} m",
                    severity=Severity.CRITICAL,
                ),
            ),
        )

    def _check_setback(
        self,
        lot: LotProfile,
        building: BuildingProfile,
        setback: SetbackProfile,
    ) -> CheckOutcome:
        front_required = 0.0 if lot.front_road_width >= WIDE_ROAD_M else FRONT_SETBACK_M
        if building.floors_above_grade > MID_RISE_FLOORS:
            rear_required = REAR_SETBACK_HIGH_M
        else:
            rear_required = REAR_SETBACK_LOW_M
        if building.building_height > SIDE_SETBACK_HEIGHT_M:
            side_required = SIDE_SETBACK_HIGH_M
        else:
            side_required = SIDE_SETBACK_LOW_M

        required = {"front": front_required, "rear": rear_required, "side": side_required}
        actual = {"front": setback.front, "rear": setback.rear, "side": setback.side}

        shortfalls: list[str] = []
        for yard in ("front", "rear", "side"):
            if actual[yard] < required[yard]:
                shortfalls.append(
                    f"{yard.capitalize()} setback insufficient: requires "
                    f"{required[yard]:g} m, provided {actual[yard]:g} m"
                )

        result = CheckResult(
            check_id="setback",
            compliant=not shortfalls,
            required_value=required,
            actual_value=actual,
            unit="m",
            explanation="; ".join(shortfalls) if shortfalls else "All setbacks satisfied.",
        )
        violations = tuple(
            Violation(
                code=f"STB-{i:03d}",
                regulation_reference=f"{_CODE}, Art. 110",
                description=text,
                severity=Severity.MAJOR,
            )
            for i, text in enumerate(shortfalls, start=1)
        )
        return CheckOutcome(result=result, violations=violations)

    def _check_parking(self, building: BuildingProfile, parking: ParkingProfile) -> CheckOutcome:
        divisor = self.tables.parking_divisor(building.building_category)
        required, accessible_required = required_parking(building.total_floor_area, divisor)
        compliant = (
            parking.spaces_provided >= required
            and parking.accessible_spaces_provided >= accessible_required
        )

        result = CheckResult(
            check_id="parking",
            compliant=compliant,
            required_value=required,
            actual_value=parking.spaces_provided,
            unit="spaces",
            explanation=(
                f"{required} spaces ({accessible_required} accessible) required; "
                f"{parking.spaces_provided} ({parking.accessible_spaces_provided} "
                "accessible) provided."
            ),
            details={
                "floor_area_per_space_m2": divisor,
                "accessible_required": accessible_required,
                "accessible_provided": parking.accessible_spaces_provided,
                "motorcycle_provided": parking.motorcycle_spaces_provided,
                "bicycle_provided": parking.bicycle_spaces_provided,
            },
        )
        if compliant:
            return CheckOutcome(result=result)
        return CheckOutcome(
            result=result,
            violations=(
                Violation(
                    code="PKG-001",
                    regulation_reference=f"{_CODE}, Art. 59",
                    description=(
                        f"Insufficient parking: requires {required} "
                        f"({accessible_required} accessible), provided "
                        f"{parking.spaces_provided} ({parking.accessible_spaces_provided} accessible)"
                    ),
                    severity=Severity.MAJOR,
                ),
            ),
        )

    def _check_accessibility(
        self,
        building: BuildingProfile,
        parking: ParkingProfile,
    ) -> CheckOutcome:
        items: list[str] = []
        if building.floors_above_grade > 1 or building.floors_below_grade > 0:
            items.append("accessible_elevator")
        if building.total_floor_area > ACCESSIBLE_FACILITIES_AREA_M2:
            items.append("accessible_restroom")
            items.append("accessible_route")
        if parking.spaces_provided > 0:
            items.append("accessible_parking")

        required = building.total_floor_area > ACCESSIBILITY_AREA_M2

        # Advisory until a per-item checklist is available (Art. 167-170)
        result = CheckResult(
            check_id="accessibility",
            compliant=True,
            required_value=required,
            unit="",
            explanation=(
                f"Accessible facilities {'required' if required else 'not required'}; "
                f"items: {', '.join(items) if items else 'none'}."
            ),
            advisory=True,
            details={"required": required, "items": items},
        )
        return CheckOutcome(result=result)
