"""Compliance report models and Markdown rendering for compliance records.

Reports carry no timestamps or other ambient state: evaluating the same
profiles twice yields byte-identical ``to_json()`` output.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from regcheck.models.results import CheckResult, Violation


class ComplianceReport(BaseModel):
    """Ordered check results and violations from one evaluator."""

    model_config = ConfigDict(frozen=True)

    report_title: ClassVar[str] = "Compliance Report"

    jurisdiction: str = ""
    checks: list[CheckResult] = Field(default_factory=list)
    violations: list[Violation] = Field(default_factory=list)
    overall_compliant: bool = True
    """True iff ``violations`` is empty."""

    def get_check(self, check_id: str) -> CheckResult | None:
        """Return the result for *check_id*, or None."""
        for check in self.checks:
            if check.check_id == check_id:
                return check
        return None

    @property
    def violation_codes(self) -> list[str]:
        return [v.code for v in self.violations]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        """Return the report as canonical JSON for audit records."""
        return json.dumps(self.to_dict(), indent=2, sort_keys=True)

    def to_markdown(self) -> str:
        """Render the report as a Markdown compliance record."""
        lines: list[str] = []

        lines.append(f"# {self.report_title}")
        lines.append("")
        if self.jurisdiction:
            lines.append(f"**Jurisdiction:** {self.jurisdiction}")
        lines.append(f"**Status:** {_status_badge(self.overall_compliant)}")
        lines.append("")
        lines.extend(self._markdown_body())
        return "\n".join(lines)

    def _markdown_body(self) -> list[str]:
        lines: list[str] = []

        passes = sum(1 for c in self.checks if c.compliant and not c.advisory)
        fails = sum(1 for c in self.checks if not c.compliant)
        advisory = sum(1 for c in self.checks if c.advisory)
        lines.append(
            f"**Checks:** {passes} passed, {fails} failed, {advisory} advisory"
        )
        lines.append("")

        if self.checks:
            lines.append("## Check Results")
            lines.append("")
            lines.append("| Status | Check | Required | Actual | Unit | Detail |")
            lines.append("|--------|-------|----------|--------|------|--------|")
            for c in self.checks:
                detail = c.explanation.replace("|", "\\|")
                lines.append(
                    f"| {_check_icon(c)} | {c.check_id} | {_fmt(c.required_value)} "
                    f"| {_fmt(c.actual_value)} | {c.unit} | {detail} |"
                )
            lines.append("")

        if self.violations:
            lines.append("## Violations")
            lines.append("")
            for v in self.violations:
                lines.append(f"- **{v.code}** ({v.severity.value}): {v.description}")
                lines.append(f"  *Regulation:* {v.regulation_reference}")
            lines.append("")
        else:
            lines.append("No violations found.")
            lines.append("")

        return lines


class BuildingComplianceReport(ComplianceReport):
    """Result of the six building-code checks."""

    report_title: ClassVar[str] = "Building Compliance Report"


class ExtinguisherRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: bool = True
    count: int
    extinguisher_type: str
    rating: str
    spacing_m: float
    coverage_per_unit_m2: float


class EgressDistanceRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_distance_m: float
    """Governing maximum travel distance (sprinkler allowance applied)."""

    standard_distance_m: float
    """Base travel distance without the sprinkler allowance."""


class EgressWidthRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_exit_width_cm: float
    """Minimum width of any single exit."""

    total_required_cm: int
    width_per_100_persons_cm: float


class SmokeDetectorRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: bool
    count: int
    spacing_m: float
    coverage_m2: float


class EmergencyLightingRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: bool
    count: int
    duration_min: int
    illumination_lux: float


class FireSafetyReport(ComplianceReport):
    """Fire-safety sizing outputs plus the gate-check violations."""

    report_title: ClassVar[str] = "Fire Safety Report"

    extinguishers: ExtinguisherRequirement
    egress_distance: EgressDistanceRequirement
    egress_width: EgressWidthRequirement
    smoke_detectors: SmokeDetectorRequirement
    emergency_lighting: EmergencyLightingRequirement

    def _markdown_body(self) -> list[str]:
        lines: list[str] = []

        lines.append("## Required Equipment")
        lines.append("")
        lines.append("| System | Required | Quantity | Specification |")
        lines.append("|--------|----------|----------|---------------|")
        ext = self.extinguishers
        lines.append(
            f"| Extinguishers | {_yes_no(ext.required)} | {ext.count} "
            f"| {ext.extinguisher_type} {ext.rating}, spacing {_fmt(ext.spacing_m)} m |"
        )
        sd = self.smoke_detectors
        lines.append(
            f"| Smoke detectors | {_yes_no(sd.required)} | {sd.count} "
            f"| spacing {_fmt(sd.spacing_m)} m, {_fmt(sd.coverage_m2)} m2 each |"
        )
        el = self.emergency_lighting
        lines.append(
            f"| Emergency lighting | {_yes_no(el.required)} | {el.count} "
            f"| {el.duration_min} min, {_fmt(el.illumination_lux)} lux |"
        )
        lines.append("")
        lines.append(
            f"**Max egress distance:** {_fmt(self.egress_distance.max_distance_m)} m "
            f"(base {_fmt(self.egress_distance.standard_distance_m)} m)"
        )
        lines.append(
            f"**Total exit width:** {self.egress_width.total_required_cm} cm "
            f"(min {_fmt(self.egress_width.min_exit_width_cm)} cm per exit)"
        )
        lines.append("")

        lines.extend(super()._markdown_body())
        return lines


class CombinedComplianceReport(BaseModel):
    """Building and fire-safety reports for one building."""

    model_config = ConfigDict(frozen=True)

    building_report: BuildingComplianceReport
    fire_safety_report: FireSafetyReport

    @property
    def overall_compliant(self) -> bool:
        return (
            self.building_report.overall_compliant
            and self.fire_safety_report.overall_compliant
        )

    @property
    def violations(self) -> list[Violation]:
        return [*self.building_report.violations, *self.fire_safety_report.violations]

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        data["overall_compliant"] = self.overall_compliant
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True)

    def to_markdown(self) -> str:
        return "\n".join(
            [
                self.building_report.to_markdown(),
                "",
                self.fire_safety_report.to_markdown(),
            ]
        )


def _status_badge(compliant: bool) -> str:
    return "COMPLIANT" if compliant else "NON-COMPLIANT"


def _check_icon(check: CheckResult) -> str:
    if not check.compliant:
        return "FAIL"
    if check.advisory:
        return "INFO"
    return "PASS"


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def _fmt(value: Any) -> str:
    """Format a required/actual value for a Markdown table cell."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    if isinstance(value, dict):
        return ", ".join(f"{k} {_fmt(v)}" for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ", ".join(_fmt(v) for v in value)
    return str(value)
