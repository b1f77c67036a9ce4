"""Shared test fixtures."""

from __future__ import annotations

import pytest

from dbwatcher_diagrams.config import Settings
from dbwatcher_diagrams.core import DiagramCache, DiagramDataService, DiagramTypeRegistry, InMemorySource
from dbwatcher_diagrams.core import set_diagram_service
from dbwatcher_diagrams.schemas import (
    AnalysisContext,
    AssociationDescriptor,
    ChangeRecord,
    ColumnDescriptor,
    ForeignKeyDescriptor,
    ModelDescriptor,
    SchemaSnapshot,
    Session,
    TableDescriptor,
)


def make_session(session_id: str, *tables: str) -> Session:
    return Session(
        id=session_id,
        name=f"session {session_id}",
        changes=[ChangeRecord(table_name=t, operation="INSERT", record_snapshot={"id": 1}) for t in tables],
    )


@pytest.fixture
def blog_schema() -> SchemaSnapshot:
    return SchemaSnapshot(tables=[
        TableDescriptor(
            name="users",
            columns=[
                ColumnDescriptor(name="id", type="integer", nullable=False, primary_key=True),
                ColumnDescriptor(name="name", type="string"),
            ],
        ),
        TableDescriptor(
            name="posts",
            columns=[
                ColumnDescriptor(name="id", type="integer", nullable=False, primary_key=True),
                ColumnDescriptor(name="user_id", type="integer", nullable=False),
                ColumnDescriptor(name="title", type="string"),
            ],
            foreign_keys=[ForeignKeyDescriptor(column="user_id", to_table="users", name="fk_posts_users")],
        ),
    ])


@pytest.fixture
def blog_models() -> list[ModelDescriptor]:
    return [
        ModelDescriptor(
            name="User",
            table_name="users",
            columns=[
                ColumnDescriptor(name="id", type="integer", primary_key=True),
                ColumnDescriptor(name="name", type="string"),
            ],
            associations=[AssociationDescriptor(name="posts", kind="has_many", target_model="Post", target_table="posts")],
            methods=["full_name", "name", "name=", "posts", "posts=", "post_ids"],
        ),
        ModelDescriptor(
            name="Post",
            table_name="posts",
            columns=[
                ColumnDescriptor(name="id", type="integer", primary_key=True),
                ColumnDescriptor(name="user_id", type="integer"),
                ColumnDescriptor(name="title", type="string"),
            ],
            associations=[
                AssociationDescriptor(name="user", kind="belongs_to", target_model="User", target_table="users"),
                AssociationDescriptor(name="commentable", kind="belongs_to", polymorphic=True),
            ],
        ),
        ModelDescriptor(
            name="Tag",
            table_name="tags",
            columns=[ColumnDescriptor(name="id", type="integer", primary_key=True)],
        ),
    ]


@pytest.fixture
def blog_context(blog_schema: SchemaSnapshot, blog_models: list[ModelDescriptor]) -> AnalysisContext:
    return AnalysisContext(schema_snapshot=blog_schema, models=blog_models)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_path="unused",
        diagram_show_methods=False,
        model_associations_ttl=7200,
        database_tables_ttl=3600,
        fallback_ttl=1800,
    )


@pytest.fixture
def source(blog_schema: SchemaSnapshot, blog_models: list[ModelDescriptor]) -> InMemorySource:
    return InMemorySource(
        sessions=[make_session("s1", "users", "posts"), make_session("s2", "posts")],
        schema=blog_schema,
        models=blog_models,
    )


@pytest.fixture
def service(source: InMemorySource, settings: Settings) -> DiagramDataService:
    return DiagramDataService(
        registry=DiagramTypeRegistry.default(),
        source=source,
        cache=DiagramCache(),
        settings=settings,
    )


@pytest.fixture(autouse=True)
def reset_service():
    yield
    set_diagram_service(None)


@pytest.fixture
def session_factory():
    return make_session
