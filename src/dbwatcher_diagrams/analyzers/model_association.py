"""Relationships from declared ORM model associations."""

from __future__ import annotations

from typing import Any

from loguru import logger

from dbwatcher_diagrams.analyzers.base import BaseAnalyzer
from dbwatcher_diagrams.analyzers.scope import ScopeFilter
from dbwatcher_diagrams.schemas import (
    AnalysisContext,
    AssociationDescriptor,
    Dataset,
    MethodInfo,
    ModelDescriptor,
    Relationship,
)
from dbwatcher_diagrams.utils import singularize, tableize

ATTACHMENT_MODEL = "ActiveStorage::Attachment"
ATTACHMENT_TABLE = "active_storage_attachments"
NODE_ONLY = "node_only"


class ModelAssociationAnalyzer(BaseAnalyzer):
    """One entity per model and one edge per association, limited to the session's tables."""

    @property
    def analyzer_type(self) -> str:
        return "model_association"

    def analyze(self, context: AnalysisContext) -> list[dict[str, Any]]:
        scope = ScopeFilter.from_context(context)
        models = self.select_models(context.models, scope)
        if not models:
            logger.info("ModelAssociationAnalyzer: no models in scope")
            return []

        records = []
        for model in models:
            try:
                associations = self._associations_for(model)
            except Exception as e:
                logger.warning(f"ModelAssociationAnalyzer: could not read associations for {model.name}: {e}")
                associations = []

            model_records = []
            for association in associations:
                try:
                    record = self._association_record(model, association, scope)
                except Exception as e:
                    logger.warning(f"ModelAssociationAnalyzer: skipping {model.name}.{association.name}: {e}")
                    continue
                if record:
                    model_records.append(record)

            if not model_records:
                model_records.append(self._placeholder(model))
            records.extend(model_records)

        logger.info(
            f"ModelAssociationAnalyzer: {sum(1 for r in records if r['target_model'])} associations "
            f"across {len(models)} models"
        )
        return records

    def transform_to_dataset(self, raw_data: list[dict[str, Any]], context: AnalysisContext) -> Dataset:
        models = self.select_models(context.models, ScopeFilter.from_context(context))
        dataset = self.create_empty_dataset(
            total_models=len(models),
            model_names=[m.name for m in models],
        )

        for model in models:
            if dataset.has_entity(model.table_name):
                logger.debug(f"ModelAssociationAnalyzer: {model.name} shares table {model.table_name}, skipping")
                continue
            try:
                dataset.add_entity(self.create_entity(
                    entity_id=model.table_name,
                    name=model.name,
                    entity_type="model",
                    attributes=self.attributes_from_columns(model.columns, model.primary_key),
                    methods=self._methods_for(model) if context.show_methods else [],
                    metadata={"table_name": model.table_name, "model_class": model.name},
                ))
            except Exception as e:
                logger.warning(f"ModelAssociationAnalyzer: skipping model {model.name!r}: {e}")

        for record in raw_data:
            if record["type"] == NODE_ONLY or not record["target_model"]:
                continue
            try:
                self._add_association(dataset, record)
            except Exception as e:
                logger.warning(
                    f"ModelAssociationAnalyzer: skipping association "
                    f"{record['source_model']}.{record['association_name']}: {e}"
                )

        dataset.metadata["total_relationships"] = len(dataset.relationships)
        return dataset

    def _add_association(self, dataset: Dataset, record: dict[str, Any]) -> None:
        if not dataset.has_entity(record["source_table"]):
            msg = f"source model {record['source_model']!r} has no entity"
            raise ValueError(msg)
        if not dataset.has_entity(record["target_table"]):
            dataset.add_entity(self.create_entity(
                entity_id=record["target_table"],
                name=record["target_model"],
                entity_type="model",
                metadata={
                    "table_name": record["target_table"],
                    "model_class": record["target_model"],
                    "placeholder": True,
                },
            ))
        dataset.add_relationship(self.create_relationship(
            source_id=record["source_table"],
            target_id=record["target_table"],
            relationship_type=record["type"],
            label=record["label"],
            cardinality=Relationship.infer_cardinality(record["type"]),
            metadata={
                "association_name": record["association_name"],
                "source_model": record["source_model"],
                "target_model": record["target_model"],
                "original_type": record["type"],
            },
        ))

    @staticmethod
    def select_models(models: list[ModelDescriptor], scope: ScopeFilter) -> list[ModelDescriptor]:
        """Models whose table the session touched, or all models in global scope."""
        return [m for m in models if scope.in_scope(m.table_name)]

    def _associations_for(self, model: ModelDescriptor) -> list[AssociationDescriptor]:
        return list(model.associations)

    def _association_record(
        self,
        model: ModelDescriptor,
        association: AssociationDescriptor,
        scope: ScopeFilter,
    ) -> dict[str, Any] | None:
        if association.polymorphic:
            logger.debug(f"ModelAssociationAnalyzer: skipping polymorphic {model.name}.{association.name}")
            return None

        kind = association.kind
        target_model = association.target_model
        target_table = association.target_table
        label = association.name

        if kind == "has_many" and association.through:
            kind = "has_many_through"
            label = f"{association.name} (through {association.through})"
        elif kind not in ("belongs_to", "has_one", "has_many", "has_and_belongs_to_many"):
            if not association.name.endswith(("_attachment", "_attachments")):
                logger.warning(f"ModelAssociationAnalyzer: unsupported association {kind} on {model.name}")
                return None
            kind = "has_one"
            target_model = ATTACHMENT_MODEL
            target_table = ATTACHMENT_TABLE

        if not target_model:
            logger.debug(f"ModelAssociationAnalyzer: {model.name}.{association.name} has no target model")
            return None
        target_table = target_table or tableize(target_model)

        if not scope.target_in_scope(target_table):
            logger.debug(f"ModelAssociationAnalyzer: {model.name}.{association.name} -> {target_table} out of scope")
            return None

        return {
            "type": kind,
            "source_model": model.name,
            "source_table": model.table_name,
            "target_model": target_model,
            "target_table": target_table,
            "association_name": association.name,
            "label": label,
        }

    @staticmethod
    def _placeholder(model: ModelDescriptor) -> dict[str, Any]:
        return {
            "type": NODE_ONLY,
            "source_model": model.name,
            "source_table": model.table_name,
            "target_model": None,
            "target_table": None,
            "association_name": None,
            "label": None,
        }

    @staticmethod
    def _methods_for(model: ModelDescriptor) -> list[MethodInfo]:
        """Public methods minus setters, column readers and association accessors."""
        excluded = set(model.column_names)
        for association in model.associations:
            excluded.update({association.name, f"{association.name}="})
            excluded.add(f"{singularize(association.name)}_ids")
        return [
            MethodInfo(name=name)
            for name in dict.fromkeys(model.methods)
            if name and not name.endswith("=") and name not in excluded
        ]
