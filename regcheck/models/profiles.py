"""Input profiles: the structured building description an evaluation consumes.

Every profile is an immutable pydantic model.  Constructing one validates it,
so malformed input (negative or non-finite numbers, a footprint larger than
the site) fails fast with a ``pydantic.ValidationError`` naming the field,
before any check runs.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from regcheck.reference.seed_data import USE_GROUP_CATEGORIES

_USE_GROUP_RE = re.compile(r"^([A-I])[0-9]?$", re.IGNORECASE)


class ZoneType(str, Enum):
    """Zoning categories with an entry in the default tables."""

    RESIDENTIAL1 = "residential1"
    RESIDENTIAL2 = "residential2"
    RESIDENTIAL3 = "residential3"
    RESIDENTIAL4 = "residential4"
    COMMERCIAL1 = "commercial1"
    COMMERCIAL2 = "commercial2"
    COMMERCIAL3 = "commercial3"
    COMMERCIAL4 = "commercial4"
    INDUSTRIAL = "industrial"
    INDUSTRIAL_SPECIAL = "industrial_special"
    AGRICULTURAL = "agricultural"


class BuildingCategory(str, Enum):
    """Building categories with an entry in the default tables."""

    RESIDENTIAL = "residential"
    OFFICE = "office"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    WAREHOUSE = "warehouse"
    ASSEMBLY = "assembly"
    EDUCATIONAL = "educational"
    MEDICAL = "medical"
    HOTEL = "hotel"


def normalize_category(value: Any) -> Any:
    """Normalise a building category.

    Use-group codes (``'H1'``, ``'G2'``, ``'B3'`` ...) map to their category;
    other strings are lower-cased.  Unknown categories are kept as-is and
    resolved later through the fail-closed table defaults.
    """
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return value
    value = value.strip()
    m = _USE_GROUP_RE.match(value)
    if m:
        return USE_GROUP_CATEGORIES[m.group(1).upper()]
    return value.lower()


def _normalize_zone(value: Any) -> Any:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.strip().lower()
    return value


class _Profile(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="forbid")


class LotProfile(_Profile):
    """The site a building sits on."""

    front_road_width: float = Field(gt=0)
    """Width of the fronting road (m)."""

    zone_type: str
    """Zoning category; see :class:`ZoneType` for the tabulated values."""

    legal_coverage_ratio: float | None = Field(default=None, gt=0)
    """Override of the zone's coverage ratio (percent)."""

    legal_floor_area_ratio: float | None = Field(default=None, gt=0)
    """Override of the zone's floor-area ratio (percent)."""

    floor_area_bonus: float = Field(default=0.0, ge=0)
    """Incentive bonus added to the allowed floor-area ratio (percent)."""

    @field_validator("zone_type", mode="before")
    @classmethod
    def normalize_zone_type(cls, v: Any) -> Any:
        return _normalize_zone(v)


class BuildingProfile(_Profile):
    """Massing of the building under evaluation.  Areas in m2, heights in m."""

    building_category: str
    site_area: float = Field(gt=0)
    building_area: float = Field(ge=0)
    total_floor_area: float = Field(ge=0)
    floors_above_grade: int = Field(ge=0)
    floors_below_grade: int = Field(default=0, ge=0)
    building_height: float = Field(ge=0)

    @field_validator("building_category", mode="before")
    @classmethod
    def normalize_building_category(cls, v: Any) -> Any:
        return normalize_category(v)

    @model_validator(mode="after")
    def check_areas(self) -> BuildingProfile:
        if self.building_area > self.site_area:
            raise ValueError(
                f"building_area ({self.building_area}) must not exceed "
                f"site_area ({self.site_area})"
            )
        if self.total_floor_area < self.building_area:
            raise ValueError(
                f"total_floor_area ({self.total_floor_area}) must be at least "
                f"building_area ({self.building_area})"
            )
        return self


class SetbackProfile(_Profile):
    """Provided yard depths (m)."""

    front: float = Field(ge=0)
    rear: float = Field(ge=0)
    side: float = Field(ge=0)


class ParkingProfile(_Profile):
    """Provided parking."""

    spaces_provided: int = Field(ge=0)
    accessible_spaces_provided: int = Field(default=0, ge=0)
    motorcycle_spaces_provided: int = Field(default=0, ge=0)
    bicycle_spaces_provided: int = Field(default=0, ge=0)


class FireSafetyProfile(_Profile):
    """Occupancy and installed systems relevant to fire-safety sizing."""

    building_category: str
    total_floor_area: float = Field(ge=0)
    floors_above_grade: int = Field(ge=0)
    floors_below_grade: int = Field(default=0, ge=0)
    occupant_load: int = Field(default=0, ge=0)
    has_automatic_sprinkler: bool = False
    has_fire_alarm: bool = False

    @field_validator("building_category", mode="before")
    @classmethod
    def normalize_building_category(cls, v: Any) -> Any:
        return normalize_category(v)
