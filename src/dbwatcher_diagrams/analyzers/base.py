"""Base analyzer: inspect a data source and produce a Dataset."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from dbwatcher_diagrams.errors import AnalyzerError, DiagramGenerationError
from dbwatcher_diagrams.schemas import (
    AnalysisContext,
    Attribute,
    Cardinality,
    ColumnDescriptor,
    Dataset,
    Entity,
    MethodInfo,
    Relationship,
)
from dbwatcher_diagrams.utils import utc_now_iso

EMPTY_REASON = "No data found or analysis failed"


class BaseAnalyzer(ABC):
    """Two-stage analyzer: ``analyze`` gathers raw records, ``transform_to_dataset`` normalizes them."""

    @property
    @abstractmethod
    def analyzer_type(self) -> str:
        """Short identifier recorded in dataset metadata."""

    @abstractmethod
    def analyze(self, context: AnalysisContext) -> list[dict[str, Any]]:
        """Collect raw relationship records from the context."""

    @abstractmethod
    def transform_to_dataset(self, raw_data: list[dict[str, Any]], context: AnalysisContext) -> Dataset:
        """Turn raw records into a populated dataset."""

    def call(self, context: AnalysisContext) -> Dataset:
        """Run the analysis.

        Args:
            context: Session scope plus schema and model descriptors

        Returns:
            Dataset stamped with analyzer metadata

        Raises:
            AnalyzerError: If the analysis cannot produce any dataset.
        """
        name = self.__class__.__name__
        logger.info(f"{name}: starting analysis")
        try:
            raw_data = self.analyze(context)
            dataset = self.transform_to_dataset(raw_data, context)
        except DiagramGenerationError:
            raise
        except Exception as e:
            logger.error(f"{name}: analysis failed: {e}")
            msg = f"{name} failed: {e}"
            raise AnalyzerError(msg, context={"analyzer": self.analyzer_type}, original_error=e) from e

        dataset.metadata.setdefault("analyzer", name)
        dataset.metadata.setdefault("analyzer_type", self.analyzer_type)
        dataset.metadata.setdefault("generated_at", utc_now_iso())
        if not dataset.entities:
            dataset.metadata.setdefault("empty_reason", EMPTY_REASON)

        if not dataset.is_valid():
            logger.warning(f"{name}: produced invalid dataset: {dataset.validation_errors()}")

        logger.info(
            f"{name}: completed with {len(dataset.entities)} entities "
            f"and {len(dataset.relationships)} relationships"
        )
        return dataset

    def create_empty_dataset(self, **metadata: Any) -> Dataset:
        return Dataset(metadata={
            "analyzer": self.__class__.__name__,
            "analyzer_type": self.analyzer_type,
            "generated_at": utc_now_iso(),
            **metadata,
        })

    @staticmethod
    def create_entity(
        entity_id: str,
        name: str,
        entity_type: str = "default",
        attributes: list[Attribute] | None = None,
        methods: list[MethodInfo] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Entity:
        return Entity(
            id=entity_id,
            name=name,
            type=entity_type,
            attributes=attributes or [],
            methods=methods or [],
            metadata=metadata or {},
        )

    @staticmethod
    def create_relationship(
        source_id: str,
        target_id: str,
        relationship_type: str,
        label: str | None = None,
        cardinality: Cardinality | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Relationship:
        return Relationship(
            source_id=source_id,
            target_id=target_id,
            type=relationship_type,
            label=label,
            cardinality=cardinality,
            metadata=metadata or {},
        )

    @classmethod
    def attributes_from_columns(
        cls,
        columns: list[ColumnDescriptor],
        primary_key: str | None,
        foreign_key_columns: set[str] | None = None,
    ) -> list[Attribute]:
        """Attributes in column order; ``*_id`` and declared FK columns are flagged."""
        foreign_key_columns = foreign_key_columns or set()
        attributes = []
        for column in columns:
            extras = {
                key: value
                for key, value in (("limit", column.limit), ("precision", column.precision), ("scale", column.scale))
                if value is not None
            }
            attributes.append(cls.create_attribute(
                name=column.name,
                type_name=column.type,
                nullable=column.nullable,
                default=column.default,
                primary_key=column.primary_key or column.name == primary_key,
                foreign_key=column.name.endswith("_id") or column.name in foreign_key_columns,
                metadata=extras,
            ))
        return attributes

    @staticmethod
    def create_attribute(
        name: str,
        type_name: str | None = None,
        nullable: bool = True,
        default: Any = None,
        primary_key: bool = False,
        foreign_key: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> Attribute:
        return Attribute(
            name=name,
            type=type_name,
            nullable=nullable,
            default=default,
            primary_key=primary_key,
            foreign_key=foreign_key,
            metadata=metadata or {},
        )
