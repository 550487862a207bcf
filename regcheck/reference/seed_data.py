"""Embedded default reference tables: no external data files required.

Jurisdiction constants for the Taiwan building technical regulations and the
fire safety equipment installation standards.  Values are plain dicts so they
can be serialised to (and reloaded from) a JSON table document.
"""

from __future__ import annotations

from typing import Any

DEFAULT_JURISDICTION = "TW"

SOURCE = "Building Technical Regulations (Design and Construction); Fire Safety Equipment Installation Standards"

# zone_type -> {coverage_ratio, floor_area_ratio}, both in percent
ZONE_STANDARDS: dict[str, dict[str, float]] = {
    "residential1": {"coverage_ratio": 60, "floor_area_ratio": 180},
    "residential2": {"coverage_ratio": 60, "floor_area_ratio": 240},
    "residential3": {"coverage_ratio": 50, "floor_area_ratio": 225},
    "residential4": {"coverage_ratio": 50, "floor_area_ratio": 300},
    "commercial1": {"coverage_ratio": 80, "floor_area_ratio": 360},
    "commercial2": {"coverage_ratio": 70, "floor_area_ratio": 630},
    "commercial3": {"coverage_ratio": 70, "floor_area_ratio": 560},
    "commercial4": {"coverage_ratio": 70, "floor_area_ratio": 800},
    "industrial": {"coverage_ratio": 70, "floor_area_ratio": 300},
    "industrial_special": {"coverage_ratio": 70, "floor_area_ratio": 420},
    "agricultural": {"coverage_ratio": 10, "floor_area_ratio": 60},
}

# Conservative baseline for zones without a table entry
DEFAULT_ZONE_STANDARD: dict[str, float] = {"coverage_ratio": 60, "floor_area_ratio": 200}

# building_category -> {spacing_m, rating}
EXTINGUISHER_STANDARDS: dict[str, dict[str, Any]] = {
    "residential": {"spacing_m": 25, "rating": "3A10B"},
    "office": {"spacing_m": 20, "rating": "3A10B"},
    "commercial": {"spacing_m": 15, "rating": "4A20B"},
    "industrial": {"spacing_m": 15, "rating": "4A40B"},
    "warehouse": {"spacing_m": 20, "rating": "4A40B"},
    "assembly": {"spacing_m": 15, "rating": "4A20B"},
    "educational": {"spacing_m": 20, "rating": "3A10B"},
    "medical": {"spacing_m": 15, "rating": "3A10B"},
    "hotel": {"spacing_m": 20, "rating": "3A10B"},
}

# Strictest spacing and heaviest rating in the table
DEFAULT_EXTINGUISHER_STANDARD: dict[str, Any] = {"spacing_m": 15, "rating": "4A40B"}

# building_category -> {normal_m, with_sprinkler_m}: maximum travel distance to an exit
EGRESS_DISTANCE_STANDARDS: dict[str, dict[str, float]] = {
    "residential": {"normal_m": 40, "with_sprinkler_m": 50},
    "office": {"normal_m": 30, "with_sprinkler_m": 40},
    "commercial": {"normal_m": 30, "with_sprinkler_m": 40},
    "industrial": {"normal_m": 40, "with_sprinkler_m": 50},
    "warehouse": {"normal_m": 50, "with_sprinkler_m": 60},
    "assembly": {"normal_m": 25, "with_sprinkler_m": 30},
    "educational": {"normal_m": 30, "with_sprinkler_m": 40},
    "medical": {"normal_m": 25, "with_sprinkler_m": 30},
    "hotel": {"normal_m": 30, "with_sprinkler_m": 40},
}

DEFAULT_EGRESS_DISTANCE_STANDARD: dict[str, float] = {"normal_m": 25, "with_sprinkler_m": 30}

# building_category -> floor area (m2) per required parking space
PARKING_DIVISORS: dict[str, float] = {
    "residential": 150,
    "office": 100,
    "commercial": 80,
}

DEFAULT_PARKING_DIVISOR = 200.0

# Building use-group code prefix -> building category
USE_GROUP_CATEGORIES: dict[str, str] = {
    "A": "assembly",
    "B": "commercial",
    "C": "industrial",
    "D": "educational",
    "E": "assembly",
    "F": "medical",
    "G": "office",
    "H": "residential",
    "I": "industrial",
}


def default_table_document() -> dict[str, Any]:
    """Return the embedded tables as a JSON-compatible document."""
    return {
        "jurisdiction": DEFAULT_JURISDICTION,
        "source": SOURCE,
        "zone_standards": {k: dict(v) for k, v in ZONE_STANDARDS.items()},
        "default_zone_standard": dict(DEFAULT_ZONE_STANDARD),
        "extinguisher_standards": {k: dict(v) for k, v in EXTINGUISHER_STANDARDS.items()},
        "default_extinguisher_standard": dict(DEFAULT_EXTINGUISHER_STANDARD),
        "egress_distance_standards": {
            k: dict(v) for k, v in EGRESS_DISTANCE_STANDARDS.items()
        },
        "default_egress_distance_standard": dict(DEFAULT_EGRESS_DISTANCE_STANDARD),
        "parking_divisors": dict(PARKING_DIVISORS),
        "default_parking_divisor": DEFAULT_PARKING_DIVISOR,
    }
