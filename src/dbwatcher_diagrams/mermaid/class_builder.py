"""Class diagram syntax."""

from __future__ import annotations

from typing import Any

from dbwatcher_diagrams.mermaid.base_builder import INDENT, BaseBuilder
from dbwatcher_diagrams.mermaid.cardinality import CardinalityMapper
from dbwatcher_diagrams.mermaid.sanitizer import Sanitizer
from dbwatcher_diagrams.schemas.diagram_data import Dataset, Entity, Relationship

DIVIDER = f"{INDENT * 2}%% ----------------------"


class ClassDiagramBuilder(BaseBuilder):
    """Build ``classDiagram`` markup with attribute, method and statistics sections."""

    DEFAULT_CONFIG = {**BaseBuilder.DEFAULT_CONFIG, "cardinality_format": "standard"}

    @property
    def mermaid_type(self) -> str:
        return "classDiagram"

    def render(self, dataset: Dataset, config: dict[str, Any]) -> list[str]:
        lines = ["classDiagram", f"{INDENT}direction {self.direction(config)}"]

        for entity in dataset.entities.values():
            lines.extend(self._class_block(entity, config))

        if dataset.relationships:
            lines.append("")
            lines.append(f"{INDENT}%% Relationships")
            for relationship in dataset.relationships:
                lines.append(self._relationship_line(relationship, dataset, config))
        return lines

    def render_empty(self, message: str, config: dict[str, Any]) -> list[str]:
        return [
            "classDiagram",
            f"{INDENT}direction {self.direction(config)}",
            f"{INDENT}class EmptyState {{",
            f"{INDENT * 2}+string message",
            f"{INDENT}}}",
            f'{INDENT}note for EmptyState "{Sanitizer.text(message)}"',
        ]

    def _class_block(self, entity: Entity, config: dict[str, Any]) -> list[str]:
        lines = [f"{INDENT}class {Sanitizer.class_name(entity.name)} {{"]
        attributes = entity.attributes
        methods = entity.methods
        show_methods = bool(config["show_methods"]) and bool(methods)
        sections = 0

        if config["show_attributes"] and attributes:
            limit = int(config["max_attributes"])
            lines.append(f"{INDENT * 2}%% Attributes")
            for attribute in attributes[:limit]:
                type_name = Sanitizer.attribute_type(attribute.type) if attribute.type else "any"
                lines.append(
                    f"{INDENT * 2}{attribute.visibility or '+'}{type_name} {Sanitizer.table_name(attribute.name)}"
                )
            if len(attributes) > limit:
                lines.append(f"{INDENT * 2}%% ... {len(attributes) - limit} more attributes")
            sections += 1

        if show_methods:
            limit = int(config["max_methods"])
            if sections:
                lines.append(DIVIDER)
            lines.append(f"{INDENT * 2}%% Methods")
            for method in methods[:limit]:
                lines.append(f"{INDENT * 2}{method.visibility or '+'}{Sanitizer.method_name(method.name)}")
            if len(methods) > limit:
                lines.append(f"{INDENT * 2}%% ... {len(methods) - limit} more methods")
            sections += 1

        if sections:
            lines.append(DIVIDER)
        lines.append(f"{INDENT * 2}%% Statistics")
        lines.append(f"{INDENT * 2}+Stats: {len(attributes)} attributes")
        if show_methods:
            lines.append(f"{INDENT * 2}+Stats: {len(methods)} methods")
        lines.append(f"{INDENT}}}")
        lines.append("")
        return lines

    def _relationship_line(self, relationship: Relationship, dataset: Dataset, config: dict[str, Any]) -> str:
        source = Sanitizer.class_name(self.entity_for(dataset, relationship.source_id).name)
        target = Sanitizer.class_name(self.entity_for(dataset, relationship.target_id).name)
        label = self.relationship_label(relationship)

        arrow = f"{source} --> {target}"
        if config["show_cardinality"] and relationship.cardinality:
            notation = CardinalityMapper.to_class(relationship.cardinality, config["cardinality_format"])
            arrow = f'{source} "{notation}" --> {target}'
        if label:
            return f"{INDENT}{arrow} : {label}"
        return f"{INDENT}{arrow}"
