"""Relationships inferred from naming conventions when no constraints are declared."""

from __future__ import annotations

from itertools import combinations
from typing import Any

from loguru import logger

from dbwatcher_diagrams.analyzers.base import BaseAnalyzer
from dbwatcher_diagrams.analyzers.scope import ScopeFilter
from dbwatcher_diagrams.schemas import AnalysisContext, Cardinality, Dataset, SchemaSnapshot, TableDescriptor
from dbwatcher_diagrams.utils import pluralize, singularize

SELF_REFERENCE_COLUMNS = frozenset({
    "parent_id", "ancestor_id", "child_id", "reply_to_id", "reference_id",
    "original_id", "source_id", "target_id", "superior_id", "manager_id",
    "supervisor_id", "predecessor_id", "successor_id", "previous_id", "next_id",
    "related_id", "duplicate_id", "clone_id", "copy_id", "forwarded_id", "replied_to_id",
})
HIERARCHY_PREFIXES = ("parent", "child", "ancestor", "descendant", "superior", "subordinate", "manager", "supervisor")
RELATION_PREFIXES = ("related", "linked", "connected", "associated", "referenced")
DIRECTIONAL_PREFIXES = ("previous", "next", "original", "copy", "source", "target")

AUDIT_COLUMNS = ("created_by_id", "updated_by_id", "deleted_by_id", "author_id", "modifier_id")
USER_TABLES = ("users", "user", "accounts", "account", "people", "person")

RELATIONSHIP_CARDINALITIES = {
    "inferred_belongs_to": Cardinality.MANY_TO_ONE,
    "inferred_audit": Cardinality.MANY_TO_ONE,
    "inferred_many_to_many": Cardinality.MANY_TO_MANY,
}


def is_self_referential_column(column_name: str, table_name: str, primary_key: str | None = "id") -> bool:
    """Guess whether a column points back at its own table.

    Args:
        column_name: Column under test, e.g. ``parent_id``
        table_name: Table the column lives on
        primary_key: That table's primary key column

    Returns:
        True for hierarchy, versioning and ``<singular table>_id`` style columns
    """
    if not column_name or column_name == primary_key:
        return False
    if column_name in SELF_REFERENCE_COLUMNS:
        return True

    singular = singularize(table_name)
    if singular and column_name == f"{singular}_id":
        return True

    if column_name.endswith("_id"):
        if column_name.endswith("_of_id"):
            return True
        prefixes = HIERARCHY_PREFIXES + RELATION_PREFIXES + DIRECTIONAL_PREFIXES
        if any(column_name.startswith(f"{prefix}_") for prefix in prefixes):
            return True

    return bool(primary_key and singular) and column_name == f"{singular}_{primary_key}"


class InferredRelationshipAnalyzer(BaseAnalyzer):
    """Heuristic edges from ``*_id`` columns, junction tables and audit columns."""

    is_self_referential_column = staticmethod(is_self_referential_column)

    @property
    def analyzer_type(self) -> str:
        return "inferred_relationship"

    def analyze(self, context: AnalysisContext) -> list[dict[str, Any]]:
        schema = context.schema_snapshot
        if not schema.tables:
            logger.info("InferredRelationshipAnalyzer: no schema available")
            return []

        tables = ScopeFilter.from_context(context).resolve_tables(schema)
        logger.debug(f"InferredRelationshipAnalyzer: analyzing {len(tables)} tables")

        naming = self._naming_conventions(schema, tables)
        claimed = {(r["from_table"], r["from_column"]) for r in naming}

        records = []
        records.extend(naming)
        records.extend(self._junction_tables(schema, tables))
        records.extend(self._audit_columns(schema, tables, claimed))
        logger.info(f"InferredRelationshipAnalyzer: found {len(records)} inferred relationships")
        return records

    def transform_to_dataset(self, raw_data: list[dict[str, Any]], context: AnalysisContext) -> Dataset:
        schema = context.schema_snapshot
        analyzed = ScopeFilter.from_context(context).resolve_tables(schema) if schema.tables else []
        dataset = self.create_empty_dataset(
            total_relationships=len(raw_data),
            tables_analyzed=len(analyzed),
            inference_types=list(dict.fromkeys(r["inference_type"] for r in raw_data)),
        )

        involved = [t for r in raw_data for t in (r["from_table"], r["to_table"])]
        for table_name in dict.fromkeys(involved):
            table = schema.table(table_name)
            attributes = self.attributes_from_columns(table.columns, table.primary_key_name) if table else []
            dataset.add_entity(self.create_entity(
                entity_id=table_name,
                name=table_name,
                entity_type="table",
                attributes=attributes,
                metadata={"table_name": table_name, "source": "inferred_analysis"},
            ))

        for record in raw_data:
            if record["from_table"] == record["to_table"]:
                logger.debug(
                    f"InferredRelationshipAnalyzer: self-referential {record['from_table']}.{record['from_column']}"
                )
            dataset.add_relationship(self.create_relationship(
                source_id=record["from_table"],
                target_id=record["to_table"],
                relationship_type=record["type"],
                label=record["label"],
                cardinality=RELATIONSHIP_CARDINALITIES.get(record["type"]),
                metadata={
                    "inference_type": record["inference_type"],
                    "confidence": record["confidence"],
                    "from_column": record["from_column"],
                    "to_column": record["to_column"],
                    "original_type": record["type"],
                },
            ))
        return dataset

    def _naming_conventions(self, schema: SchemaSnapshot, tables: list[str]) -> list[dict[str, Any]]:
        records = []
        for table_name in tables:
            table = schema.table(table_name)
            primary_key = table.primary_key_name
            for column in self._id_columns(table):
                if is_self_referential_column(column, table_name, primary_key):
                    records.append(self._record(table_name, table_name, column, "self_referential", 0.9))
                    continue
                referenced = self.infer_table_from_column(column, schema)
                if referenced and referenced in tables:
                    records.append(self._record(table_name, referenced, column, "naming_convention", 0.8))
        return records

    def _junction_tables(self, schema: SchemaSnapshot, tables: list[str]) -> list[dict[str, Any]]:
        records = []
        for table_name in tables:
            table = schema.table(table_name)
            if not self.is_junction_table(table):
                continue
            for first, second in combinations(self._id_columns(table), 2):
                left = self.infer_table_from_column(first, schema)
                right = self.infer_table_from_column(second, schema)
                if not (left and right and left in tables and right in tables):
                    continue
                records.append({
                    "from_table": left,
                    "to_table": right,
                    "type": "inferred_many_to_many",
                    "inference_type": "junction_table",
                    "confidence": 0.9,
                    "from_column": "id",
                    "to_column": "id",
                    "label": f"many-to-many via {table_name}",
                })
        return records

    def _audit_columns(
        self,
        schema: SchemaSnapshot,
        tables: list[str],
        claimed: set[tuple[str, str]] | None = None,
    ) -> list[dict[str, Any]]:
        """Audit edges to the user table, skipping columns a naming-convention edge already covers."""
        claimed = claimed or set()
        user_table = next((t for t in USER_TABLES if t in tables), None)
        if user_table is None:
            return []
        records = []
        for table_name in tables:
            for column in schema.table(table_name).column_names:
                if column not in AUDIT_COLUMNS:
                    continue
                if (table_name, column) in claimed:
                    logger.debug(f"InferredRelationshipAnalyzer: {table_name}.{column} already inferred by name")
                    continue
                records.append({
                    "from_table": table_name,
                    "to_table": user_table,
                    "type": "inferred_audit",
                    "inference_type": "audit_pattern",
                    "confidence": 0.6,
                    "from_column": column,
                    "to_column": "id",
                    "label": f"audit ({column})",
                })
        return records

    @staticmethod
    def infer_table_from_column(column_name: str, schema: SchemaSnapshot) -> str | None:
        """``user_id`` -> ``users`` (or ``user``) when such a table exists."""
        base = column_name[:-3] if column_name.endswith("_id") else column_name
        known = set(schema.table_names)
        for candidate in (pluralize(base), base):
            if candidate in known:
                return candidate
        return None

    @classmethod
    def is_junction_table(cls, table: TableDescriptor) -> bool:
        """Two or more id columns and little else."""
        id_columns = cls._id_columns(table)
        return len(id_columns) >= 2 and len(table.columns) <= len(id_columns) + 3

    @staticmethod
    def _id_columns(table: TableDescriptor) -> list[str]:
        return [c for c in table.column_names if c.endswith("_id") and c != table.primary_key_name]

    @staticmethod
    def _record(from_table: str, to_table: str, column: str, inference_type: str, confidence: float) -> dict[str, Any]:
        return {
            "from_table": from_table,
            "to_table": to_table,
            "type": "inferred_belongs_to",
            "inference_type": inference_type,
            "confidence": confidence,
            "from_column": column,
            "to_column": "id",
            "label": f"inferred ({column})",
        }
