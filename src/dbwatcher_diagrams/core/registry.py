"""Immutable lookup of diagram type name to strategy."""

from __future__ import annotations

import re
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from loguru import logger

from dbwatcher_diagrams.core.strategies import BUILTIN_STRATEGIES, DiagramStrategy
from dbwatcher_diagrams.errors import InvalidDiagramTypeError, RegistrationError

DEFAULT_DIAGRAM_TYPE = "database_tables"
_TYPE_NAME = re.compile(r"^[a-z0-9_]+$")


class DiagramTypeRegistry:
    """Diagram types available to the generator.

    Built once and never mutated; :meth:`with_type` returns a new registry.
    """

    def __init__(self, strategies: Iterable[DiagramStrategy], default_type: str = DEFAULT_DIAGRAM_TYPE):
        table: dict[str, DiagramStrategy] = {}
        for strategy in strategies:
            self._validate(strategy, table)
            table[strategy.name] = strategy
        if default_type not in table:
            msg = f"Default diagram type '{default_type}' is not registered"
            raise RegistrationError(msg)
        self._strategies = MappingProxyType(table)
        self._default_type = default_type

    @classmethod
    def default(cls, default_type: str = DEFAULT_DIAGRAM_TYPE) -> DiagramTypeRegistry:
        """Registry with the built-in diagram types."""
        return cls(BUILTIN_STRATEGIES, default_type)

    @property
    def default_type(self) -> str:
        return self._default_type

    def with_type(self, strategy: DiagramStrategy) -> DiagramTypeRegistry:
        """Copy of this registry with one more diagram type.

        Raises:
            RegistrationError: If the name is malformed, taken, or the strategy is incomplete.
        """
        registry = DiagramTypeRegistry([*self._strategies.values(), strategy], self._default_type)
        logger.info(f"Registered diagram type: {strategy.name}")
        return registry

    def available_types(self) -> list[str]:
        return [name for name, strategy in self._strategies.items() if strategy.enabled]

    def available_types_with_metadata(self) -> dict[str, dict[str, Any]]:
        return {
            name: strategy.metadata()
            for name, strategy in self._strategies.items()
            if strategy.enabled
        }

    def type_exists(self, name: str | None) -> bool:
        strategy = self._strategies.get(name or "")
        return strategy is not None and strategy.enabled

    def get_strategy(self, name: str) -> DiagramStrategy:
        """Strategy for a type name.

        Raises:
            InvalidDiagramTypeError: If the type is unknown or disabled.
        """
        if not self.type_exists(name):
            msg = f"Unknown diagram type: {name}. Valid types: {', '.join(self.available_types())}"
            raise InvalidDiagramTypeError(msg, context={"diagram_type": name})
        return self._strategies[name]

    def type_metadata(self, name: str) -> dict[str, Any]:
        return self.get_strategy(name).metadata()

    def types_by_category(self, category: str) -> list[str]:
        return [
            name for name, strategy in self._strategies.items()
            if strategy.enabled and strategy.category == category
        ]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.type_exists(name)

    def __len__(self) -> int:
        return len(self.available_types())

    @staticmethod
    def _validate(strategy: DiagramStrategy, existing: dict[str, DiagramStrategy]) -> None:
        if not strategy.name or not _TYPE_NAME.match(strategy.name):
            msg = f"Invalid diagram type name: {strategy.name!r} (use lowercase letters, digits and underscores)"
            raise RegistrationError(msg)
        if strategy.name in existing:
            msg = f"Diagram type already registered: {strategy.name}"
            raise RegistrationError(msg)
        if strategy.analyzer_class is None or strategy.builder_class is None:
            msg = f"Diagram type {strategy.name} needs both an analyzer and a builder"
            raise RegistrationError(msg)
