"""Tests for the diagram type registry and the generator."""

from __future__ import annotations

from typing import Any

import pytest

from dbwatcher_diagrams.analyzers import BaseAnalyzer
from dbwatcher_diagrams.core import DiagramGenerator, DiagramStrategy, DiagramTypeRegistry
from dbwatcher_diagrams.errors import ErrorCode, InvalidDiagramTypeError, RegistrationError
from dbwatcher_diagrams.mermaid import ERDiagramBuilder, FlowchartBuilder
from dbwatcher_diagrams.schemas import AnalysisContext, Dataset


class DanglingAnalyzer(BaseAnalyzer):
    """Produces a relationship whose target entity is missing."""

    @property
    def analyzer_type(self) -> str:
        return "dangling"

    def analyze(self, context: AnalysisContext) -> list[dict[str, Any]]:
        return [{"source": "orders", "target": "ghosts"}]

    def transform_to_dataset(self, raw_data: list[dict[str, Any]], context: AnalysisContext) -> Dataset:
        dataset = self.create_empty_dataset()
        dataset.add_entity(self.create_entity("orders", "orders", "table"))
        for record in raw_data:
            dataset.add_relationship(self.create_relationship(record["source"], record["target"], "belongs_to"))
        return dataset


def dangling_strategy(name: str = "dangling_tables") -> DiagramStrategy:
    return DiagramStrategy(
        name=name,
        display_name="Dangling",
        description="Always produces an invalid dataset",
        analyzer_class=DanglingAnalyzer,
        builder_class=FlowchartBuilder,
        category="testing",
    )


class TestDiagramTypeRegistry:
    def test_builtin_types(self) -> None:
        registry = DiagramTypeRegistry.default()

        assert registry.available_types() == [
            "database_tables",
            "database_tables_inferred",
            "model_associations",
            "model_associations_flowchart",
        ]
        assert registry.default_type == "database_tables"
        assert len(registry) == 4
        assert "model_associations" in registry
        assert "nope" not in registry

    def test_metadata(self) -> None:
        registry = DiagramTypeRegistry.default()
        metadata = registry.type_metadata("model_associations")

        assert metadata["name"] == "Model Associations (Class Diagram)"
        assert metadata["mermaid_type"] == "classDiagram"
        assert registry.type_metadata("database_tables")["mermaid_type"] == "erDiagram"
        assert registry.type_metadata("model_associations_flowchart")["mermaid_type"] == "flowchart"
        assert set(registry.available_types_with_metadata()) == set(registry.available_types())

    def test_types_by_category(self) -> None:
        registry = DiagramTypeRegistry.default()
        assert registry.types_by_category("schema") == ["database_tables", "database_tables_inferred"]
        assert registry.types_by_category("unknown") == []

    def test_unknown_type_lists_valid_types(self) -> None:
        with pytest.raises(InvalidDiagramTypeError, match="Valid types: database_tables"):
            DiagramTypeRegistry.default().get_strategy("pie_chart")

    def test_with_type_returns_new_registry(self) -> None:
        registry = DiagramTypeRegistry.default()
        extended = registry.with_type(dangling_strategy())

        assert "dangling_tables" in extended
        assert "dangling_tables" not in registry

    @pytest.mark.parametrize("name", ["Bad-Name", "", "has space"])
    def test_rejects_malformed_names(self, name: str) -> None:
        with pytest.raises(RegistrationError):
            DiagramTypeRegistry.default().with_type(dangling_strategy(name))

    def test_rejects_duplicates(self) -> None:
        with pytest.raises(RegistrationError, match="already registered"):
            DiagramTypeRegistry.default().with_type(dangling_strategy("database_tables"))

    def test_default_type_must_exist(self) -> None:
        with pytest.raises(RegistrationError):
            DiagramTypeRegistry([dangling_strategy()], default_type="database_tables")

    def test_configured_default_type(self) -> None:
        assert DiagramTypeRegistry.default("model_associations").default_type == "model_associations"


class TestDiagramGenerator:
    def test_generates_erd(self, blog_context: AnalysisContext) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate("database_tables", blog_context)

        assert result.success
        assert result.content.startswith("erDiagram")
        assert result.mermaid_type == "erDiagram"
        assert result.metadata["analysis"]["entity_count"] == 2
        assert result.metadata["analysis"]["analyzer_type"] == "foreign_key"
        assert "requested_type" not in result.metadata

    def test_generates_class_diagram(self, blog_context: AnalysisContext) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate("model_associations", blog_context)

        assert result.success
        assert result.content.startswith("classDiagram\n    direction LR")
        assert "    class User {" in result.content

    def test_config_overrides_reach_builder(self, blog_context: AnalysisContext) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate(
            "model_associations_flowchart", blog_context, {"direction": "TD"},
        )
        assert result.content.startswith("flowchart TD")

    def test_unknown_type_falls_back_to_default(self, blog_context: AnalysisContext) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate("pie_chart", blog_context)

        assert result.success
        assert result.diagram_type == "database_tables"
        assert result.metadata["requested_type"] == "pie_chart"

    def test_blank_type_uses_default_without_note(self, blog_context: AnalysisContext) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate(None, blog_context)
        assert result.diagram_type == "database_tables"
        assert "requested_type" not in result.metadata

    def test_type_is_normalized(self, blog_context: AnalysisContext) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate("  Model_Associations ", blog_context)
        assert result.diagram_type == "model_associations"
        assert "requested_type" not in result.metadata

    def test_empty_context_renders_placeholder(self) -> None:
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate("database_tables", AnalysisContext())

        assert result.success
        assert "EMPTY_STATE" in result.content
        assert "No tables or foreign keys found" in result.content

    def test_analyzer_failure_becomes_error_result(self, blog_context: AnalysisContext, session_factory) -> None:
        context = blog_context.model_copy(update={"session": session_factory("s", "ghosts")})
        result = DiagramGenerator(DiagramTypeRegistry.default()).generate("database_tables", context)

        assert not result.success
        assert result.content is None
        assert result.error_code == ErrorCode.ANALYZER_ERROR.value
        assert "ghosts" in result.error

    def test_invalid_dataset_is_rejected(self) -> None:
        registry = DiagramTypeRegistry([dangling_strategy()], default_type="dangling_tables")
        result = DiagramGenerator(registry).generate("dangling_tables", AnalysisContext())

        assert not result.success
        assert result.error_code == ErrorCode.SYNTAX_VALIDATION_FAILED.value
        assert "ghosts" in result.error


def test_strategy_render_uses_builder_defaults() -> None:
    strategy = DiagramStrategy(
        name="upper_tables",
        display_name="Upper",
        description="ERD with upper-cased tables",
        analyzer_class=DanglingAnalyzer,
        builder_class=ERDiagramBuilder,
        default_config={"preserve_table_case": False},
    )
    dataset = Dataset()
    dataset.add_entity(DanglingAnalyzer.create_entity("orders", "orders", "table"))

    assert strategy.render(dataset) == "erDiagram\n    ORDERS {\n    }"
    assert strategy.metadata()["mermaid_type"] == "erDiagram"
