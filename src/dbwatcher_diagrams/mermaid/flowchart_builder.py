"""Flowchart syntax."""

from __future__ import annotations

from typing import Any

from dbwatcher_diagrams.mermaid.base_builder import INDENT, BaseBuilder
from dbwatcher_diagrams.mermaid.cardinality import CardinalityMapper
from dbwatcher_diagrams.mermaid.sanitizer import Sanitizer
from dbwatcher_diagrams.schemas.diagram_data import Dataset, Relationship


class FlowchartBuilder(BaseBuilder):
    """Build ``flowchart`` markup: one node per entity, one labelled edge per relationship."""

    @property
    def mermaid_type(self) -> str:
        return "flowchart"

    def render(self, dataset: Dataset, config: dict[str, Any]) -> list[str]:
        lines = [f"flowchart {self.direction(config)}"]

        for entity in dataset.entities.values():
            node = Sanitizer.node_name(entity.name)
            lines.append(f'{INDENT}{node}["{Sanitizer.label(Sanitizer.display_name(entity.name))}"]')

        if dataset.relationships:
            lines.append("")
            for relationship in dataset.relationships:
                lines.append(self._edge_line(relationship, dataset, config))
        return lines

    def render_empty(self, message: str, config: dict[str, Any]) -> list[str]:
        return [
            f"flowchart {self.direction(config)}",
            f'{INDENT}EmptyState["{Sanitizer.label(message)}"]',
        ]

    def _edge_line(self, relationship: Relationship, dataset: Dataset, config: dict[str, Any]) -> str:
        source = Sanitizer.node_name(self.entity_for(dataset, relationship.source_id).name)
        target = Sanitizer.node_name(self.entity_for(dataset, relationship.target_id).name)
        label = self.relationship_label(relationship)

        if config["show_cardinality"] and relationship.cardinality:
            notation = CardinalityMapper.to_simple(relationship.cardinality)
            label = f"{label} ({notation})" if label else notation
        if label:
            return f'{INDENT}{source} -->|"{label}"| {target}'
        return f"{INDENT}{source} --> {target}"
