"""Shared configuration and helpers for Mermaid syntax builders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from dbwatcher_diagrams.mermaid.sanitizer import Sanitizer
from dbwatcher_diagrams.schemas.diagram_data import Dataset, Entity, Relationship

INDENT = "    "
DIRECTIONS = ("LR", "TD", "TB", "RL", "BT")


class BaseBuilder(ABC):
    """Render a :class:`Dataset` as one Mermaid dialect."""

    DEFAULT_CONFIG: dict[str, Any] = {
        "show_attributes": True,
        "show_methods": False,
        "show_cardinality": True,
        "max_attributes": 10,
        "max_methods": 5,
        "direction": "LR",
        "preserve_table_case": True,
        "cardinality_format": "simple",
    }

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = self._merge(self.DEFAULT_CONFIG, config)

    @property
    @abstractmethod
    def mermaid_type(self) -> str:
        """Mermaid header keyword for this dialect."""

    @abstractmethod
    def render(self, dataset: Dataset, config: dict[str, Any]) -> list[str]:
        """Produce markup lines for a dataset using a resolved config."""

    @abstractmethod
    def render_empty(self, message: str, config: dict[str, Any]) -> list[str]:
        """Produce markup lines for a placeholder diagram."""

    def build_from_dataset(self, dataset: Dataset, config: dict[str, Any] | None = None) -> str:
        """Render a dataset to Mermaid markup.

        Args:
            dataset: Entities and relationships to draw
            config: Per-call overrides merged over the builder config

        Returns:
            Mermaid source text

        Raises:
            ValueError: If a relationship references an entity missing from the dataset.
        """
        resolved = self._merge(self.config, config)
        return "\n".join(self.render(dataset, resolved)).rstrip("\n")

    def build_empty(self, message: str, config: dict[str, Any] | None = None) -> str:
        resolved = self._merge(self.config, config)
        return "\n".join(self.render_empty(message, resolved))

    @staticmethod
    def _merge(base: dict[str, Any], overrides: dict[str, Any] | None) -> dict[str, Any]:
        merged = dict(base)
        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value
        return merged

    @staticmethod
    def direction(config: dict[str, Any]) -> str:
        value = str(config.get("direction") or "LR").upper()
        return value if value in DIRECTIONS else "LR"

    @staticmethod
    def entity_for(dataset: Dataset, entity_id: str) -> Entity:
        """Look up a relationship endpoint, failing loudly on a dangling id."""
        entity = dataset.get_entity(entity_id)
        if entity is None:
            msg = f"Relationship references unknown entity: {entity_id}"
            raise ValueError(msg)
        return entity

    @staticmethod
    def relationship_label(relationship: Relationship) -> str:
        return Sanitizer.label(relationship.label)
