"""Input descriptors supplied by the recording and introspection collaborators."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Operation(str, Enum):
    """Kinds of recorded database mutations."""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeRecord(BaseModel):
    """One mutation captured during a session."""
    table_name: str | None = None
    operation: Operation
    timestamp: datetime | None = None
    record_snapshot: dict[str, Any] = Field(default_factory=dict)


class Session(BaseModel):
    """A bounded recording window of change records."""
    id: str
    name: str | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    changes: list[ChangeRecord] = Field(default_factory=list)

    def touched_tables(self) -> list[str]:
        """Unique table names in first-seen order."""
        seen: list[str] = []
        for change in self.changes:
            if change.table_name and change.table_name not in seen:
                seen.append(change.table_name)
        return seen


class ColumnDescriptor(BaseModel):
    """A column as reported by schema introspection."""
    name: str
    type: str | None = None
    nullable: bool = True
    default: Any = None
    primary_key: bool = False
    limit: int | None = None
    precision: int | None = None
    scale: int | None = None


class IndexDescriptor(BaseModel):
    name: str | None = None
    columns: list[str] = Field(default_factory=list)
    unique: bool = False


class ForeignKeyDescriptor(BaseModel):
    """A declared foreign-key constraint on the owning table."""
    column: str
    to_table: str
    primary_key: str = "id"
    name: str | None = None
    on_delete: str | None = None
    on_update: str | None = None


class TableDescriptor(BaseModel):
    """A table with its columns, constraints and indexes."""
    name: str
    columns: list[ColumnDescriptor] = Field(default_factory=list)
    foreign_keys: list[ForeignKeyDescriptor] = Field(default_factory=list)
    indexes: list[IndexDescriptor] = Field(default_factory=list)
    primary_key: str | None = None

    def column(self, name: str) -> ColumnDescriptor | None:
        return next((c for c in self.columns if c.name == name), None)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def primary_key_name(self) -> str:
        """Declared primary key, else the first flagged column, else ``id``."""
        if self.primary_key:
            return self.primary_key
        flagged = next((c.name for c in self.columns if c.primary_key), None)
        return flagged or "id"

    def has_unique_index_on(self, column: str) -> bool:
        return any(index.unique and index.columns == [column] for index in self.indexes)


class SchemaSnapshot(BaseModel):
    """All tables known to the database at analysis time."""
    tables: list[TableDescriptor] = Field(default_factory=list)

    def table(self, name: str) -> TableDescriptor | None:
        return next((t for t in self.tables if t.name == name), None)

    @property
    def table_names(self) -> list[str]:
        return [t.name for t in self.tables]


class AssociationDescriptor(BaseModel):
    """A declared model association (``belongs_to :user`` and friends)."""
    name: str
    kind: str
    target_model: str | None = None
    target_table: str | None = None
    through: str | None = None
    polymorphic: bool = False


class ModelDescriptor(BaseModel):
    """An ORM model, already extracted by a caller-side adapter."""
    name: str
    table_name: str
    primary_key: str = "id"
    columns: list[ColumnDescriptor] = Field(default_factory=list)
    associations: list[AssociationDescriptor] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


class AnalysisContext(BaseModel):
    """Everything an analyzer may inspect for one generation call."""
    session: Session | None = None
    schema_snapshot: SchemaSnapshot = Field(default_factory=SchemaSnapshot)
    models: list[ModelDescriptor] = Field(default_factory=list)
    show_methods: bool = False

    def scope_tables(self) -> list[str]:
        """Tables touched by the session; empty means global scope."""
        return self.session.touched_tables() if self.session else []
