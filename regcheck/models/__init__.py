"""Value objects: input profiles and check results."""

from regcheck.models.profiles import (
    BuildingCategory,
    BuildingProfile,
    FireSafetyProfile,
    LotProfile,
    ParkingProfile,
    SetbackProfile,
    ZoneType,
)
from regcheck.models.results import CheckOutcome, CheckResult, Severity, Violation

__all__ = [
    "BuildingCategory",
    "BuildingProfile",
    "CheckOutcome",
    "CheckResult",
    "FireSafetyProfile",
    "LotProfile",
    "ParkingProfile",
    "SetbackProfile",
    "Severity",
    "Violation",
    "ZoneType",
]
