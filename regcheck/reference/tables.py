"""ReferenceTables: jurisdiction constants consulted by the evaluators.

Tables are immutable and injected into each evaluator at construction time.
Every lookup fails closed: a key without a table entry resolves to the
documented default instead of raising, so the evaluators stay total.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from regcheck.reference import seed_data

logger = logging.getLogger(__name__)


class ZoneStandard(BaseModel):
    """Coverage and floor-area ratio limits for a zoning category (percent)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    coverage_ratio: float = Field(gt=0)
    floor_area_ratio: float = Field(gt=0)


class ExtinguisherStandard(BaseModel):
    """Extinguisher walking-distance spacing and minimum rating."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    spacing_m: float = Field(gt=0)
    rating: str


class EgressDistanceStandard(BaseModel):
    """Maximum travel distance to an exit, with and without sprinklers."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    normal_m: float = Field(gt=0)
    with_sprinkler_m: float = Field(gt=0)


class ReferenceTables(BaseModel):
    """A complete, versionable set of jurisdiction constants.

    Parameters
    ----------
    jurisdiction:
        Identifier of the code set (e.g. ``'TW'``).
    source:
        Citation of the regulations the values come from.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    jurisdiction: str = seed_data.DEFAULT_JURISDICTION
    source: str = ""

    zone_standards: dict[str, ZoneStandard] = Field(default_factory=dict)
    default_zone_standard: ZoneStandard = Field(
        default_factory=lambda: ZoneStandard(**seed_data.DEFAULT_ZONE_STANDARD)
    )

    extinguisher_standards: dict[str, ExtinguisherStandard] = Field(default_factory=dict)
    default_extinguisher_standard: ExtinguisherStandard = Field(
        default_factory=lambda: ExtinguisherStandard(
            **seed_data.DEFAULT_EXTINGUISHER_STANDARD
        )
    )

    egress_distance_standards: dict[str, EgressDistanceStandard] = Field(
        default_factory=dict
    )
    default_egress_distance_standard: EgressDistanceStandard = Field(
        default_factory=lambda: EgressDistanceStandard(
            **seed_data.DEFAULT_EGRESS_DISTANCE_STANDARD
        )
    )

    parking_divisors: dict[str, Annotated[float, Field(gt=0)]] = Field(default_factory=dict)
    default_parking_divisor: float = Field(default=seed_data.DEFAULT_PARKING_DIVISOR, gt=0)

    # -- Construction --------------------------------------------------------

    @classmethod
    def default(cls) -> ReferenceTables:
        """Return the embedded default tables."""
        return cls.model_validate(seed_data.default_table_document())

    @classmethod
    def from_json(cls, text: str) -> ReferenceTables:
        """Parse a JSON table document.

        Raises ``pydantic.ValidationError`` if the document is malformed.
        """
        return cls.model_validate_json(text)

    @classmethod
    def from_file(cls, path: str | Path) -> ReferenceTables:
        """Load a JSON table document from disk."""
        tables = cls.from_json(Path(path).read_text(encoding="utf-8"))
        logger.info(
            "Loaded reference tables for %s from %s", tables.jurisdiction, path
        )
        return tables

    def to_json(self) -> str:
        """Serialise the tables back to a JSON table document."""
        return json.dumps(self.model_dump(mode="json"), indent=2, sort_keys=True)

    # -- Lookups -------------------------------------------------------------

    def zone_standard(self, zone_type: str) -> ZoneStandard:
        """Return the limits for *zone_type*, or the conservative baseline."""
        standard = self.zone_standards.get(zone_type)
        if standard is None:
            logger.debug("Zone %r not in %s tables; using baseline.", zone_type, self.jurisdiction)
            return self.default_zone_standard
        return standard

    def extinguisher_standard(self, category: str) -> ExtinguisherStandard:
        """Return extinguisher spacing/rating for *category*."""
        standard = self.extinguisher_standards.get(category)
        if standard is None:
            logger.debug("No extinguisher standard for %r; using default.", category)
            return self.default_extinguisher_standard
        return standard

    def egress_distance_standard(self, category: str) -> EgressDistanceStandard:
        """Return the egress travel-distance limits for *category*."""
        standard = self.egress_distance_standards.get(category)
        if standard is None:
            logger.debug("No egress distance standard for %r; using default.", category)
            return self.default_egress_distance_standard
        return standard

    def parking_divisor(self, category: str) -> float:
        """Return floor area (m2) per required parking space for *category*."""
        divisor = self.parking_divisors.get(category)
        if divisor is None:
            logger.debug("No parking divisor for %r; using default.", category)
            return self.default_parking_divisor
        return divisor

    def summary(self) -> dict[str, Any]:
        """Return entry counts per table."""
        return {
            "jurisdiction": self.jurisdiction,
            "zones": len(self.zone_standards),
            "extinguisher_categories": len(self.extinguisher_standards),
            "egress_categories": len(self.egress_distance_standards),
            "parking_categories": len(self.parking_divisors),
        }
