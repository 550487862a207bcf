"""JurisdictionRegistry: register and look up reference tables by jurisdiction."""

from __future__ import annotations

import logging
from pathlib import Path

from regcheck.reference.tables import ReferenceTables

logger = logging.getLogger(__name__)


class JurisdictionRegistry:
    """Central registry of reference tables, keyed by jurisdiction identifier.

    A registry is an ordinary object; engines receive the tables they need
    at construction time, so there is no process-wide table state.
    """

    def __init__(self) -> None:
        self._tables: dict[str, ReferenceTables] = {}

    def register(self, tables: ReferenceTables) -> None:
        """Add (or replace) the tables for ``tables.jurisdiction``."""
        if tables.jurisdiction in self._tables:
            logger.info("Replacing reference tables for %s", tables.jurisdiction)
        self._tables[tables.jurisdiction] = tables
        logger.info("Registered jurisdiction: %s", tables.jurisdiction)

    def register_file(self, path: str | Path) -> ReferenceTables:
        """Load a JSON table document and register it."""
        tables = ReferenceTables.from_file(path)
        self.register(tables)
        return tables

    def auto_discover(self, directory: str | Path | None = None) -> None:
        """Register the embedded tables, then every ``*.json`` document in *directory*.

        Documents are loaded in sorted filename order, so a later file
        replaces an earlier one for the same jurisdiction.
        """
        self.register(ReferenceTables.default())
        if directory is None:
            return
        for path in sorted(Path(directory).glob("*.json")):
            self.register_file(path)

    def get(self, jurisdiction: str) -> ReferenceTables:
        """Return the tables for *jurisdiction*.

        Raises ``KeyError`` for an unregistered jurisdiction.
        """
        try:
            return self._tables[jurisdiction]
        except KeyError:
            raise KeyError(
                f"No reference tables registered for jurisdiction {jurisdiction!r}; "
                f"known: {sorted(self._tables)}"
            ) from None

    def __contains__(self, jurisdiction: object) -> bool:
        return jurisdiction in self._tables

    def list_jurisdictions(self) -> list[str]:
        """Return registered jurisdiction identifiers, sorted."""
        return sorted(self._tables)


def default_registry() -> JurisdictionRegistry:
    """Return a registry pre-loaded with the embedded tables."""
    registry = JurisdictionRegistry()
    registry.auto_discover()
    return registry
