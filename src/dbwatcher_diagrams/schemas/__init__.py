"""Pydantic schemas for the diagram pipeline."""

from dbwatcher_diagrams.schemas.descriptors import (
    AnalysisContext,
    AssociationDescriptor,
    ChangeRecord,
    ColumnDescriptor,
    ForeignKeyDescriptor,
    IndexDescriptor,
    ModelDescriptor,
    Operation,
    SchemaSnapshot,
    Session,
    TableDescriptor,
)
from dbwatcher_diagrams.schemas.diagram_data import (
    Attribute,
    Cardinality,
    Dataset,
    Entity,
    MethodInfo,
    Relationship,
)
from dbwatcher_diagrams.schemas.result import DiagramResult

__all__ = [
    "AnalysisContext",
    "AssociationDescriptor",
    "Attribute",
    "Cardinality",
    "ChangeRecord",
    "ColumnDescriptor",
    "Dataset",
    "DiagramResult",
    "Entity",
    "ForeignKeyDescriptor",
    "IndexDescriptor",
    "MethodInfo",
    "ModelDescriptor",
    "Operation",
    "Relationship",
    "SchemaSnapshot",
    "Session",
    "TableDescriptor",
]
