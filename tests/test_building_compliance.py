"""Tests for the Building Compliance Evaluator.

Covers: coverage ratio, floor-area ratio, height caps, setbacks, parking,
accessibility, input validation and report determinism.
"""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from regcheck.compliance.building import (
    BINDING_COVERAGE_RATIO,
    BINDING_ROAD_WIDTH,
    BuildingComplianceEvaluator,
    height_caps,
    required_parking,
)
from regcheck.compliance.report import BuildingComplianceReport
from regcheck.models.profiles import (
    BuildingProfile,
    LotProfile,
    ParkingProfile,
    SetbackProfile,
    ZoneType,
)
from regcheck.models.results import Severity


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def evaluator() -> BuildingComplianceEvaluator:
    return BuildingComplianceEvaluator()


def _lot(**overrides) -> LotProfile:
    data = {"front_road_width": 10, "zone_type": "residential1"}
    data.update(overrides)
    return LotProfile(**data)


def _building(**overrides) -> BuildingProfile:
    data = {
        "building_category": "residential",
        "site_area": 1000,
        "building_area": 550,
        "total_floor_area": 1500,
        "floors_above_grade": 3,
        "floors_below_grade": 0,
        "building_height": 12,
    }
    data.update(overrides)
    return BuildingProfile(**data)


def _setback(**overrides) -> SetbackProfile:
    data = {"front": 3, "rear": 2, "side": 1.5}
    data.update(overrides)
    return SetbackProfile(**data)


def _parking(**overrides) -> ParkingProfile:
    data = {"spaces_provided": 10, "accessible_spaces_provided": 1}
    data.update(overrides)
    return ParkingProfile(**data)


def _evaluate(
    evaluator: BuildingComplianceEvaluator,
    lot: LotProfile | None = None,
    building: BuildingProfile | None = None,
    setback: SetbackProfile | None = None,
    parking: ParkingProfile | None = None,
) -> BuildingComplianceReport:
    return evaluator.evaluate(
        lot or _lot(),
        building or _building(),
        setback or _setback(),
        parking or _parking(),
    )


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------


class TestBaseline:
    def test_compliant_building(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator)
        assert report.overall_compliant is True
        assert report.violations == []

    def test_six_checks_in_declared_order(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator)
        assert [c.check_id for c in report.checks] == [
            "coverage_ratio",
            "floor_area_ratio",
            "height",
            "setback",
            "parking",
            "accessibility",
        ]

    def test_report_carries_jurisdiction(self, evaluator: BuildingComplianceEvaluator) -> None:
        assert _evaluate(evaluator).jurisdiction == "TW"


# ---------------------------------------------------------------------------
# Coverage ratio
# ---------------------------------------------------------------------------


class TestCoverageRatio:
    def test_within_zone_limit(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator)
        check = report.get_check("coverage_ratio")
        assert check is not None
        assert check.compliant is True
        assert check.actual_value == 55.0
        assert check.required_value == 60
        assert "BCR-001" not in report.violation_codes

    def test_exceeds_zone_limit(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator, building=_building(building_area=650))
        check = report.get_check("coverage_ratio")
        assert check is not None
        assert check.compliant is False
        assert check.actual_value == 65.0
        bcr = [v for v in report.violations if v.code == "BCR-001"]
        assert len(bcr) == 1
        assert bcr[0].severity == Severity.CRITICAL
        assert "65.0%" in bcr[0].description
        assert report.overall_compliant is False

    def test_exactly_at_limit_is_compliant(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator, building=_building(building_area=600))
        assert report.get_check("coverage_ratio").compliant is True

    def test_lot_override_takes_precedence(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(
            evaluator,
            lot=_lot(legal_coverage_ratio=70),
            building=_building(building_area=650),
        )
        check = report.get_check("coverage_ratio")
        assert check.required_value == 70
        assert check.compliant is True

    def test_unknown_zone_uses_baseline(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator, lot=_lot(zone_type="special_district"))
        assert report.get_check("coverage_ratio").required_value == 60
        assert report.get_check("floor_area_ratio").required_value == 200

    def test_zone_enum_accepted(self, evaluator: BuildingComplianceEvaluator) -> None:
        lot = _lot(zone_type=ZoneType.COMMERCIAL1)
        assert lot.zone_type == "commercial1"
        report = _evaluate(evaluator, lot=lot, building=_building(building_area=750))
        assert report.get_check("coverage_ratio").required_value == 80
        assert report.get_check("coverage_ratio").compliant is True


# ---------------------------------------------------------------------------
# Floor-area ratio
# ---------------------------------------------------------------------------


class TestFloorAreaRatio:
    def test_within_limit(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator).get_check("floor_area_ratio")
        assert check.actual_value == 150.0
        assert check.required_value == 180
        assert check.compliant is True

    def test_exceeds_limit(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator, building=_building(total_floor_area=2000))
        assert report.get_check("floor_area_ratio").compliant is False
        far = [v for v in report.violations if v.code == "FAR-001"]
        assert len(far) == 1
        assert far[0].severity == Severity.CRITICAL

    def test_override(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(
            evaluator,
            lot=_lot(legal_floor_area_ratio=250),
            building=_building(total_floor_area=2000),
        )
        assert report.get_check("floor_area_ratio").compliant is True

    def test_bonus_added_to_allowed(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(
            evaluator,
            lot=_lot(floor_area_bonus=30),
            building=_building(total_floor_area=2000),
        )
        check = report.get_check("floor_area_ratio")
        assert check.required_value == 210
        assert check.details["base_allowed"] == 180
        assert check.compliant is True


# ---------------------------------------------------------------------------
# Height
# ---------------------------------------------------------------------------


class TestHeight:
    def test_road_width_binds(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator).get_check("height")
        assert check.required_value == 21
        assert check.binding_constraint == BINDING_ROAD_WIDTH
        assert check.details["cap_by_road"] == 21
        assert check.details["cap_by_coverage"] == 50

    def test_coverage_cap_binds_on_wide_road(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator, lot=_lot(front_road_width=30)).get_check("height")
        assert check.required_value == 50
        assert check.binding_constraint == BINDING_COVERAGE_RATIO

    def test_high_coverage_lowers_cap(self) -> None:
        max_allowed, binding, _, cap_by_coverage = height_caps(
            _lot(front_road_width=30, legal_coverage_ratio=80),
            _building(building_area=700),
        )
        assert cap_by_coverage == 36
        assert max_allowed == 36
        assert binding == BINDING_COVERAGE_RATIO

    def test_tie_goes_to_road_width(self) -> None:
        max_allowed, binding, cap_by_road, cap_by_coverage = height_caps(
            _lot(front_road_width=20), _building(building_area=650)
        )
        assert cap_by_road == cap_by_coverage == 36
        assert max_allowed == 36
        assert binding == BINDING_ROAD_WIDTH

    def test_cap_is_minimum_of_both(self) -> None:
        for width in (1, 5, 10, 20, 29, 30, 45):
            for area in (300, 600, 601, 900):
                max_allowed, _, cap_by_road, cap_by_coverage = height_caps(
                    _lot(front_road_width=width), _building(building_area=area)
                )
                assert max_allowed == min(cap_by_road, cap_by_coverage)

    def test_too_tall(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator, building=_building(building_height=25))
        hgt = [v for v in report.violations if v.code == "HGT-001"]
        assert len(hgt) == 1
        assert hgt[0].severity == Severity.CRITICAL

    def test_zero_height_still_evaluated(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator, building=_building(building_height=0)).get_check("height")
        assert check.actual_value == 0
        assert check.compliant is True


# ---------------------------------------------------------------------------
# Setback
# ---------------------------------------------------------------------------


class TestSetback:
    def test_all_satisfied(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator).get_check("setback")
        assert check.compliant is True
        assert check.required_value == {"front": 3, "rear": 2, "side": 1.5}

    def test_each_shortfall_is_its_own_violation(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        report = _evaluate(evaluator, setback=_setback(front=0, rear=0, side=0))
        stb = [v for v in report.violations if v.code.startswith("STB-")]
        assert [v.code for v in stb] == ["STB-001", "STB-002", "STB-003"]
        assert [v.description.split()[0] for v in stb] == ["Front", "Rear", "Side"]
        assert all(v.severity == Severity.MAJOR for v in stb)

    def test_numbering_is_sequential_over_failures(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        report = _evaluate(evaluator, setback=_setback(rear=1))
        stb = [v for v in report.violations if v.code.startswith("STB-")]
        assert len(stb) == 1
        assert stb[0].code == "STB-001"
        assert stb[0].description.startswith("Rear")

    def test_wide_road_needs_no_front_setback(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        report = _evaluate(evaluator, lot=_lot(front_road_width=15), setback=_setback(front=0))
        check = report.get_check("setback")
        assert check.required_value["front"] == 0
        assert check.compliant is True

    def test_taller_buildings_need_deeper_yards(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        report = _evaluate(
            evaluator,
            lot=_lot(front_road_width=14),
            building=_building(floors_above_grade=6, building_height=22),
        )
        check = report.get_check("setback")
        assert check.required_value == {"front": 3, "rear": 4, "side": 3}
        assert check.compliant is False
        assert [v.code for v in report.violations] == ["STB-001", "STB-002"]


# ---------------------------------------------------------------------------
# Parking
# ---------------------------------------------------------------------------


class TestParking:
    def test_residential_requirement(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator).get_check("parking")
        assert check.required_value == 10
        assert check.details["accessible_required"] == 1
        assert check.compliant is True

    @pytest.mark.parametrize(
        ("category", "expected"),
        [
            ("residential", 10),
            ("office", 15),
            ("commercial", 19),
            ("industrial", 8),
            ("H1", 10),
            ("G2", 15),
            ("B3", 19),
            ("h1", 10),
            ("g2", 15),
            (" b ", 19),
        ],
    )
    def test_category_divisors(
        self,
        evaluator: BuildingComplianceEvaluator,
        category: str,
        expected: int,
    ) -> None:
        report = _evaluate(evaluator, building=_building(building_category=category))
        assert report.get_check("parking").required_value == expected

    def test_shortfall_raises_violation(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(evaluator, parking=_parking(spaces_provided=9))
        pkg = [v for v in report.violations if v.code == "PKG-001"]
        assert len(pkg) == 1
        assert pkg[0].severity == Severity.MAJOR

    def test_accessible_shortfall_raises_violation(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        report = _evaluate(evaluator, parking=_parking(accessible_spaces_provided=0))
        assert "PKG-001" in report.violation_codes

    def test_two_wheeler_spaces_reported(self, evaluator: BuildingComplianceEvaluator) -> None:
        parking = _parking(motorcycle_spaces_provided=12, bicycle_spaces_provided=20)
        check = _evaluate(evaluator, parking=parking).get_check("parking")
        assert check.details["motorcycle_provided"] == 12
        assert check.details["bicycle_provided"] == 20
        assert check.compliant is True

    def test_accessible_rounding(self) -> None:
        assert required_parking(15000, 150) == (100, 2)
        assert required_parking(15001, 150) == (101, 3)

    def test_accessible_never_below_one(self) -> None:
        assert required_parking(0, 150) == (0, 1)
        assert required_parking(1, 200) == (1, 1)

    def test_monotonic_in_floor_area(self) -> None:
        previous = 0
        for step in range(0, 200):
            area = step * 37.5
            required, accessible = required_parking(area, 150)
            assert isinstance(required, int)
            assert required >= previous
            assert required == math.ceil(area / 150)
            assert accessible >= 1
            previous = required


# ---------------------------------------------------------------------------
# Accessibility
# ---------------------------------------------------------------------------


class TestAccessibility:
    def test_items_enumerated(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator).get_check("accessibility")
        assert check.details["required"] is True
        assert check.details["items"] == [
            "accessible_elevator",
            "accessible_restroom",
            "accessible_route",
            "accessible_parking",
        ]

    def test_small_single_storey(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(
            evaluator,
            building=_building(
                building_area=150, total_floor_area=150, floors_above_grade=1
            ),
            parking=_parking(spaces_provided=0, accessible_spaces_provided=1),
        )
        check = report.get_check("accessibility")
        assert check.details["required"] is False
        assert check.details["items"] == []

    def test_basement_requires_elevator(self, evaluator: BuildingComplianceEvaluator) -> None:
        report = _evaluate(
            evaluator,
            building=_building(
                building_area=250,
                total_floor_area=250,
                floors_above_grade=1,
                floors_below_grade=1,
            ),
        )
        items = report.get_check("accessibility").details["items"]
        assert "accessible_elevator" in items
        assert "accessible_restroom" not in items

    def test_advisory_never_blocks(self, evaluator: BuildingComplianceEvaluator) -> None:
        check = _evaluate(evaluator).get_check("accessibility")
        assert check.advisory is True
        assert check.compliant is True


# ---------------------------------------------------------------------------
# Aggregation and determinism
# ---------------------------------------------------------------------------


class TestAggregation:
    def test_all_checks_run_without_short_circuit(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        report = _evaluate(
            evaluator,
            building=_building(building_area=700, total_floor_area=2500, building_height=40),
            setback=_setback(front=0, rear=0, side=0),
            parking=_parking(spaces_provided=0, accessible_spaces_provided=0),
        )
        assert len(report.checks) == 6
        assert report.violation_codes == [
            "BCR-001",
            "FAR-001",
            "HGT-001",
            "STB-001",
            "STB-002",
            "STB-003",
            "PKG-001",
        ]

    def test_overall_compliant_iff_no_violations(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        scenarios = [
            {},
            {"building": _building(building_area=650)},
            {"setback": _setback(side=0)},
            {"parking": _parking(spaces_provided=0)},
            {"lot": _lot(front_road_width=2)},
        ]
        for kwargs in scenarios:
            report = _evaluate(evaluator, **kwargs)
            assert report.overall_compliant == (not report.violations)

    def test_repeat_evaluation_is_byte_identical(
        self, evaluator: BuildingComplianceEvaluator
    ) -> None:
        first = _evaluate(evaluator, building=_building(building_area=650))
        second = _evaluate(evaluator, building=_building(building_area=650))
        assert first.to_json() == second.to_json()

    def test_markdown_lists_violations(self, evaluator: BuildingComplianceEvaluator) -> None:
        md = _evaluate(evaluator, building=_building(building_area=650)).to_markdown()
        assert "# Building Compliance Report" in md
        assert "NON-COMPLIANT" in md
        assert "BCR-001" in md
        assert "Art. 27" in md


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_negative_site_area(self) -> None:
        with pytest.raises(ValidationError, match="site_area"):
            _building(site_area=-1)

    def test_zero_site_area(self) -> None:
        with pytest.raises(ValidationError, match="site_area"):
            _building(site_area=0)

    def test_negative_total_floor_area(self) -> None:
        with pytest.raises(ValidationError, match="total_floor_area"):
            _building(total_floor_area=-5)

    def test_building_area_larger_than_site(self) -> None:
        with pytest.raises(ValidationError, match="must not exceed site_area"):
            _building(site_area=500, building_area=650)

    def test_floor_area_below_footprint(self) -> None:
        with pytest.raises(ValidationError, match="must be at least building_area"):
            _building(total_floor_area=500)

    def test_nan_height(self) -> None:
        with pytest.raises(ValidationError, match="building_height"):
            _building(building_height=float("nan"))

    def test_zero_road_width(self) -> None:
        with pytest.raises(ValidationError, match="front_road_width"):
            _lot(front_road_width=0)

    def test_negative_setback(self) -> None:
        with pytest.raises(ValidationError, match="rear"):
            _setback(rear=-1)

    def test_negative_parking(self) -> None:
        with pytest.raises(ValidationError, match="spaces_provided"):
            _parking(spaces_provided=-1)

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _lot(road_width=10)

    def test_profiles_are_immutable(self) -> None:
        lot = _lot()
        with pytest.raises(ValidationError):
            lot.front_road_width = 20  # type: ignore[misc]

    def test_use_group_code_normalised(self) -> None:
        assert _building(building_category="H2").building_category == "residential"
        assert _building(building_category=" Office ").building_category == "office"
        assert _building(building_category="laboratory").building_category == "laboratory"
