"""Tests for relationship inference from naming conventions."""

from __future__ import annotations

import pytest

from dbwatcher_diagrams.analyzers import InferredRelationshipAnalyzer, is_self_referential_column
from dbwatcher_diagrams.schemas import AnalysisContext, Cardinality, ColumnDescriptor, SchemaSnapshot, TableDescriptor


def table(name: str, *columns: str, primary_key: str = "id") -> TableDescriptor:
    names = [primary_key, *columns] if primary_key not in columns else list(columns)
    return TableDescriptor(
        name=name,
        primary_key=primary_key,
        columns=[ColumnDescriptor(name=c, type="integer", primary_key=c == primary_key) for c in names],
    )


@pytest.mark.parametrize(
    ("column", "table_name", "primary_key", "expected"),
    [
        ("parent_id", "comments", "id", True),
        ("user_id", "posts", "id", False),
        ("comment_id", "comments", "id", True),
        ("post_id", "comments", "id", False),
        ("custom_id", "custom_table", "custom_id", False),
        ("category_id", "categories", "id", True),
        ("category_id", "products", "id", False),
        ("manager_staff_id", "staff", "id", True),
        ("parent_of_id", "nodes", "id", True),
        ("custom_table_id", "custom_table", "custom_id", True),
        ("related_article_id", "articles", "id", True),
        ("previous_version_id", "documents", "id", True),
        ("reply_to_id", "messages", "id", True),
        ("parent_id", "comments", "parent_id", False),
    ],
)
def test_self_referential_detection(column: str, table_name: str, primary_key: str, expected: bool) -> None:
    assert is_self_referential_column(column, table_name, primary_key) is expected
    assert InferredRelationshipAnalyzer.is_self_referential_column(column, table_name, primary_key) is expected


def test_naming_convention_and_self_reference() -> None:
    schema = SchemaSnapshot(tables=[
        table("users", "name"),
        table("comments", "user_id", "parent_id", "body"),
    ])
    dataset = InferredRelationshipAnalyzer().call(AnalysisContext(schema_snapshot=schema))

    by_column = {r.metadata["from_column"]: r for r in dataset.relationships}
    assert by_column["user_id"].target_id == "users"
    assert by_column["user_id"].metadata["inference_type"] == "naming_convention"
    assert by_column["user_id"].metadata["confidence"] == 0.8
    assert by_column["user_id"].label == "inferred (user_id)"
    assert by_column["user_id"].cardinality is Cardinality.MANY_TO_ONE

    assert by_column["parent_id"].self_referential is True
    assert by_column["parent_id"].metadata["inference_type"] == "self_referential"
    assert by_column["parent_id"].metadata["confidence"] == 0.9
    assert dataset.get_entity("comments").metadata["source"] == "inferred_analysis"
    assert set(dataset.metadata["inference_types"]) == {"naming_convention", "self_referential"}


def test_junction_table_yields_many_to_many() -> None:
    schema = SchemaSnapshot(tables=[
        table("posts", "title"),
        table("tags", "label"),
        table("post_tags", "post_id", "tag_id"),
    ])
    dataset = InferredRelationshipAnalyzer().call(AnalysisContext(schema_snapshot=schema))

    junction = [r for r in dataset.relationships if r.type == "inferred_many_to_many"]
    assert len(junction) == 1
    assert (junction[0].source_id, junction[0].target_id) == ("posts", "tags")
    assert junction[0].label == "many-to-many via post_tags"
    assert junction[0].cardinality is Cardinality.MANY_TO_MANY


def test_wide_table_is_not_a_junction() -> None:
    wide = table("orders", "user_id", "product_id", "a", "b", "c", "d")
    assert InferredRelationshipAnalyzer.is_junction_table(wide) is False


def test_audit_columns_point_at_user_table() -> None:
    schema = SchemaSnapshot(tables=[
        table("accounts", "email"),
        table("invoices", "created_by_id", "total"),
    ])
    dataset = InferredRelationshipAnalyzer().call(AnalysisContext(schema_snapshot=schema))

    audit = [r for r in dataset.relationships if r.type == "inferred_audit"]
    assert len(audit) == 1
    assert audit[0].target_id == "accounts"
    assert audit[0].label == "audit (created_by_id)"
    assert audit[0].metadata["confidence"] == 0.6


def test_author_column_yields_single_edge_when_authors_table_exists() -> None:
    schema = SchemaSnapshot(tables=[
        table("users", "email"),
        table("authors", "pen_name"),
        table("posts", "author_id", "created_by_id", "title", "body", "published_at", "slug"),
    ])
    dataset = InferredRelationshipAnalyzer().call(AnalysisContext(schema_snapshot=schema))

    edges = sorted(
        (r.source_id, r.target_id, r.metadata["from_column"], r.metadata["inference_type"])
        for r in dataset.relationships
    )
    assert edges == [
        ("posts", "authors", "author_id", "naming_convention"),
        ("posts", "users", "created_by_id", "audit_pattern"),
    ]
    assert dataset.metadata["total_relationships"] == 2


def test_out_of_scope_tables_are_not_inferred(session_factory) -> None:
    schema = SchemaSnapshot(tables=[table("users", "name"), table("posts", "user_id")])
    context = AnalysisContext(schema_snapshot=schema, session=session_factory("s", "posts"))
    dataset = InferredRelationshipAnalyzer().call(context)

    assert dataset.relationships == []
    assert dataset.metadata["tables_analyzed"] == 1


def test_infer_table_from_column_tries_plural_then_singular() -> None:
    schema = SchemaSnapshot(tables=[table("categories"), table("staff")])
    assert InferredRelationshipAnalyzer.infer_table_from_column("category_id", schema) == "categories"
    assert InferredRelationshipAnalyzer.infer_table_from_column("staff_id", schema) == "staff"
    assert InferredRelationshipAnalyzer.infer_table_from_column("widget_id", schema) is None
