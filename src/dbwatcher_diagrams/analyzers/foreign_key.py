"""Relationships from declared foreign-key constraints."""

from __future__ import annotations

from typing import Any

from loguru import logger

from dbwatcher_diagrams.analyzers.base import BaseAnalyzer
from dbwatcher_diagrams.analyzers.scope import ScopeFilter
from dbwatcher_diagrams.schemas import AnalysisContext, Cardinality, Dataset, Entity, TableDescriptor


class ForeignKeyAnalyzer(BaseAnalyzer):
    """One entity per table, one many-to-one edge per foreign key (owning side to referenced table)."""

    @property
    def analyzer_type(self) -> str:
        return "foreign_key"

    def analyze(self, context: AnalysisContext) -> list[dict[str, Any]]:
        schema = context.schema_snapshot
        if not schema.tables:
            logger.info("ForeignKeyAnalyzer: no schema available")
            return []

        scope = ScopeFilter.from_context(context)
        records = []
        for table_name in scope.resolve_tables(schema):
            try:
                records.extend(self._table_records(schema.table(table_name), scope))
            except Exception as e:
                logger.warning(f"ForeignKeyAnalyzer: skipping foreign keys of {table_name}: {e}")
        logger.info(f"ForeignKeyAnalyzer: found {len(records)} foreign keys")
        return records

    def _table_records(self, table: TableDescriptor, scope: ScopeFilter) -> list[dict[str, Any]]:
        records = []
        for fk in table.foreign_keys:
            if not scope.target_in_scope(fk.to_table):
                logger.debug(f"ForeignKeyAnalyzer: skipping {table.name}.{fk.column} -> {fk.to_table} (out of scope)")
                continue
            records.append({
                "from_table": table.name,
                "to_table": fk.to_table,
                "type": "foreign_key",
                "constraint_name": fk.name,
                "from_column": fk.column,
                "to_column": fk.primary_key,
                "on_delete": fk.on_delete,
                "on_update": fk.on_update,
                "unique": self._is_unique_column(table, fk.column),
            })
        return records

    def transform_to_dataset(self, raw_data: list[dict[str, Any]], context: AnalysisContext) -> Dataset:
        schema = context.schema_snapshot
        analyzed = ScopeFilter.from_context(context).resolve_tables(schema) if schema.tables else []
        dataset = self.create_empty_dataset(tables_analyzed=len(analyzed))

        referenced = [r["to_table"] for r in raw_data]
        for table_name in dict.fromkeys(analyzed + referenced):
            try:
                dataset.add_entity(self._table_entity(table_name, schema.table(table_name)))
            except Exception as e:
                logger.warning(f"ForeignKeyAnalyzer: skipping table {table_name!r}: {e}")

        for record in raw_data:
            try:
                self._add_foreign_key(dataset, record)
            except Exception as e:
                logger.warning(
                    f"ForeignKeyAnalyzer: skipping {record['from_table']}.{record['from_column']} "
                    f"-> {record['to_table']!r}: {e}"
                )

        dataset.metadata["total_relationships"] = len(dataset.relationships)
        return dataset

    def _table_entity(self, table_name: str, table: TableDescriptor | None) -> Entity:
        attributes = []
        if table is not None:
            fk_columns = {fk.column for fk in table.foreign_keys}
            attributes = self.attributes_from_columns(table.columns, table.primary_key_name, fk_columns)
        return self.create_entity(
            entity_id=table_name,
            name=table_name,
            entity_type="table",
            attributes=attributes,
            metadata={"table_name": table_name, "source": "database_schema"},
        )

    def _add_foreign_key(self, dataset: Dataset, record: dict[str, Any]) -> None:
        for endpoint in (record["from_table"], record["to_table"]):
            if not dataset.has_entity(endpoint):
                msg = f"table {endpoint!r} has no entity"
                raise ValueError(msg)
        cardinality = Cardinality.ONE_TO_ONE if record["unique"] else Cardinality.MANY_TO_ONE
        dataset.add_relationship(self.create_relationship(
            source_id=record["from_table"],
            target_id=record["to_table"],
            relationship_type=record["type"],
            label=record["from_column"],
            cardinality=cardinality,
            metadata={
                "constraint_name": record["constraint_name"],
                "from_column": record["from_column"],
                "to_column": record["to_column"],
                "on_delete": record["on_delete"],
                "on_update": record["on_update"],
                "original_type": record["type"],
            },
        ))

    @staticmethod
    def _is_unique_column(table: TableDescriptor, column: str) -> bool:
        """A FK that is also the primary key or uniquely indexed points one-to-one."""
        return column == table.primary_key_name or table.has_unique_index_on(column)
