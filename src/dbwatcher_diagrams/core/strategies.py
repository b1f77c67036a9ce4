"""Diagram strategies: one analyzer bound to one builder per diagram type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from dbwatcher_diagrams.analyzers import (
    BaseAnalyzer,
    ForeignKeyAnalyzer,
    InferredRelationshipAnalyzer,
    ModelAssociationAnalyzer,
)
from dbwatcher_diagrams.mermaid import BaseBuilder, ClassDiagramBuilder, ERDiagramBuilder, FlowchartBuilder
from dbwatcher_diagrams.schemas import AnalysisContext, Dataset


@dataclass(frozen=True)
class DiagramStrategy:
    """A selectable diagram type."""
    name: str
    display_name: str
    description: str
    analyzer_class: type[BaseAnalyzer]
    builder_class: type[BaseBuilder]
    category: str = "general"
    empty_message: str = "No data available for this diagram"
    default_config: dict[str, Any] = field(default_factory=dict)
    features: tuple[str, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True

    @property
    def mermaid_type(self) -> str:
        return self.builder_class().mermaid_type

    def builder(self) -> BaseBuilder:
        return self.builder_class(self.default_config)

    def analyze(self, context: AnalysisContext) -> Dataset:
        return self.analyzer_class().call(context)

    def render(self, dataset: Dataset, config: dict[str, Any] | None = None) -> str:
        """Markup for a dataset, or the placeholder diagram when it has no entities."""
        builder = self.builder()
        if not dataset.entities:
            return builder.build_empty(self.empty_message, config)
        return builder.build_from_dataset(dataset, config)

    def generate(self, context: AnalysisContext, config: dict[str, Any] | None = None) -> tuple[str, Dataset]:
        dataset = self.analyze(context)
        return self.render(dataset, config), dataset

    def metadata(self) -> dict[str, Any]:
        return {
            "name": self.display_name,
            "description": self.description,
            "mermaid_type": self.mermaid_type,
            "category": self.category,
            "enabled": self.enabled,
            "features": list(self.features),
            "configuration": dict(self.options),
        }


LAYOUT_OPTION = {"type": "select", "options": ["LR", "TD", "RL", "BT"], "default": "LR"}

BUILTIN_STRATEGIES: tuple[DiagramStrategy, ...] = (
    DiagramStrategy(
        name="database_tables",
        display_name="Database Schema (ERD)",
        description="Entity-relationship diagram of tables and their declared foreign keys",
        analyzer_class=ForeignKeyAnalyzer,
        builder_class=ERDiagramBuilder,
        category="schema",
        empty_message="No tables or foreign keys found",
        features=("table_columns", "data_types", "primary_keys", "foreign_keys"),
        options={
            "show_columns": {"type": "boolean", "default": True},
            "show_data_types": {"type": "boolean", "default": True},
            "max_tables": {"type": "integer", "default": 50},
        },
    ),
    DiagramStrategy(
        name="database_tables_inferred",
        display_name="Database Schema (Inferred)",
        description="Entity-relationship diagram with relationships inferred from column naming",
        analyzer_class=InferredRelationshipAnalyzer,
        builder_class=ERDiagramBuilder,
        category="schema",
        empty_message="No inferred relationships found",
        features=("naming_conventions", "junction_tables", "audit_columns", "self_references"),
        options={"max_tables": {"type": "integer", "default": 50}},
    ),
    DiagramStrategy(
        name="model_associations",
        display_name="Model Associations (Class Diagram)",
        description="Class diagram of models, their attributes and associations",
        analyzer_class=ModelAssociationAnalyzer,
        builder_class=ClassDiagramBuilder,
        category="models",
        empty_message="No model associations or entities found",
        features=("associations", "attributes", "methods", "cardinality"),
        options={
            "show_methods": {"type": "boolean", "default": False},
            "max_models": {"type": "integer", "default": 30},
            "layout_direction": LAYOUT_OPTION,
        },
    ),
    DiagramStrategy(
        name="model_associations_flowchart",
        display_name="Model Associations",
        description="Flowchart of models connected by their associations",
        analyzer_class=ModelAssociationAnalyzer,
        builder_class=FlowchartBuilder,
        category="models",
        empty_message="No model associations found",
        features=("associations", "cardinality"),
        options={
            "max_models": {"type": "integer", "default": 30},
            "layout_direction": LAYOUT_OPTION,
        },
    ),
)
