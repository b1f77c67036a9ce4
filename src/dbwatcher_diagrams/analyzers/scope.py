"""Session-derived table scope shared by all analyzers."""

from __future__ import annotations

from loguru import logger

from dbwatcher_diagrams.errors import AnalyzerError
from dbwatcher_diagrams.schemas import AnalysisContext, SchemaSnapshot


class ScopeFilter:
    """Tables touched by a session; an empty set means global scope."""

    def __init__(self, tables: list[str] | None = None):
        self.tables = list(dict.fromkeys(t for t in (tables or []) if t))

    @classmethod
    def from_context(cls, context: AnalysisContext) -> ScopeFilter:
        return cls(context.scope_tables())

    @property
    def is_global(self) -> bool:
        return not self.tables

    def in_scope(self, table_name: str | None) -> bool:
        """Whether a table belongs to the analysis; everything does in global scope."""
        if self.is_global:
            return True
        return bool(table_name) and table_name in self.tables

    def target_in_scope(self, table_name: str | None) -> bool:
        """Whether an association target may be drawn; unknown targets are kept."""
        if self.is_global or not table_name:
            return True
        return table_name in self.tables

    def resolve_tables(self, schema: SchemaSnapshot) -> list[str]:
        """Tables to inspect: the scope, or the whole schema when global.

        Raises:
            AnalyzerError: If a scoped table does not exist in a non-empty schema.
        """
        if self.is_global:
            return schema.table_names
        known = set(schema.table_names)
        missing = [t for t in self.tables if t not in known]
        if missing:
            msg = f"Tables not found in schema: {', '.join(missing)}"
            raise AnalyzerError(msg, context={"missing_tables": missing})
        logger.debug(f"Scope limited to {len(self.tables)} session tables")
        return list(self.tables)
