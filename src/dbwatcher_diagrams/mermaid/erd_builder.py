"""Entity-relationship diagram syntax."""

from __future__ import annotations

from typing import Any

from dbwatcher_diagrams.mermaid.base_builder import INDENT, BaseBuilder
from dbwatcher_diagrams.mermaid.cardinality import CardinalityMapper
from dbwatcher_diagrams.mermaid.sanitizer import Sanitizer
from dbwatcher_diagrams.schemas.diagram_data import Attribute, Dataset, Entity


class ERDiagramBuilder(BaseBuilder):
    """Build ``erDiagram`` markup: one block per table, one line per relationship."""

    @property
    def mermaid_type(self) -> str:
        return "erDiagram"

    def render(self, dataset: Dataset, config: dict[str, Any]) -> list[str]:
        lines = ["erDiagram"]
        preserve = bool(config["preserve_table_case"])

        for entity in dataset.entities.values():
            lines.extend(self._entity_block(entity, config, preserve))

        if dataset.relationships:
            if lines[-1]:
                lines.append("")
            for relationship in dataset.relationships:
                source = self.entity_for(dataset, relationship.source_id)
                target = self.entity_for(dataset, relationship.target_id)
                notation = CardinalityMapper.to_erd(relationship.cardinality)
                label = self.relationship_label(relationship) or Sanitizer.label(relationship.type)
                lines.append(
                    f"{INDENT}{Sanitizer.table_name(source.name, preserve)} {notation} "
                    f'{Sanitizer.table_name(target.name, preserve)} : "{label}"'
                )
        return lines

    def render_empty(self, message: str, config: dict[str, Any]) -> list[str]:
        return [
            "erDiagram",
            f"{INDENT}EMPTY_STATE {{",
            f'{INDENT * 2}string message "{Sanitizer.text(message)}"',
            f"{INDENT}}}",
        ]

    def _entity_block(self, entity: Entity, config: dict[str, Any], preserve: bool) -> list[str]:
        lines = [f"{INDENT}{Sanitizer.table_name(entity.name, preserve)} {{"]
        if config["show_attributes"]:
            for attribute in entity.attributes[: int(config["max_attributes"])]:
                lines.append(f"{INDENT * 2}{self._attribute_line(attribute)}")
        lines.append(f"{INDENT}}}")
        lines.append("")
        return lines

    @staticmethod
    def _attribute_line(attribute: Attribute) -> str:
        type_name = Sanitizer.attribute_type(attribute.type) if attribute.type else "any"
        line = f"{type_name} {Sanitizer.table_name(attribute.name)}"
        if attribute.primary_key:
            line += " PK"
        elif attribute.foreign_key:
            line += " FK"
        return line
