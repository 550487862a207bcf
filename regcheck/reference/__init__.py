"""Reference Tables: jurisdiction constants for zoning, fire equipment and egress."""

from regcheck.reference.registry import JurisdictionRegistry, default_registry
from regcheck.reference.tables import (
    EgressDistanceStandard,
    ExtinguisherStandard,
    ReferenceTables,
    ZoneStandard,
)

__all__ = [
    "EgressDistanceStandard",
    "ExtinguisherStandard",
    "JurisdictionRegistry",
    "ReferenceTables",
    "ZoneStandard",
    "default_registry",
]
