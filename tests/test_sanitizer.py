"""Tests for Mermaid sanitization and cardinality notation."""

from __future__ import annotations

import pytest

from dbwatcher_diagrams.mermaid import CardinalityMapper, Sanitizer
from dbwatcher_diagrams.schemas import Cardinality

NASTY_INPUTS = [None, "", "   ", "!!!", "::", 'a"b', "line\nbreak", "ünïcödé", "Admin::User", "a\\b", 42]


def test_class_name_replaces_namespace_and_punctuation() -> None:
    assert Sanitizer.class_name("User") == "User"
    assert Sanitizer.class_name("Admin::User") == "Admin__User"
    assert Sanitizer.class_name("user-profile") == "user_profile"
    assert Sanitizer.class_name("My Class!") == "My_Class_"


@pytest.mark.parametrize("raw", [None, ""])
def test_class_and_display_name_fallback(raw) -> None:
    assert Sanitizer.class_name(raw) == "UnknownClass"
    assert Sanitizer.display_name(raw) == "UnknownClass"


def test_display_name_keeps_namespace() -> None:
    assert Sanitizer.display_name("Admin::User") == "Admin::User"


def test_node_name_matches_class_name() -> None:
    assert Sanitizer.node_name("User::Profile") == "User__Profile"
    assert Sanitizer.node_name("user-profile") == "user_profile"


def test_table_name_preserves_case() -> None:
    assert Sanitizer.table_name("Users") == "Users"
    assert Sanitizer.table_name("user-accounts") == "user_accounts"
    assert Sanitizer.table_name("users", preserve_case=False) == "USERS"
    assert Sanitizer.table_name("") == "UNKNOWN_TABLE"


def test_label_escapes_quotes_backslashes_and_newlines() -> None:
    assert Sanitizer.label('say "hi"') == 'say \\"hi\\"'
    assert Sanitizer.label("a\\b") == "a\\\\b"
    assert Sanitizer.label("first\nsecond") == "first second"
    assert Sanitizer.label(None) == ""
    assert Sanitizer.label("") == ""


def test_method_name_appends_parentheses_once() -> None:
    assert Sanitizer.method_name("user-info") == "user_info()"
    assert Sanitizer.method_name("calculate_total()") == "calculate_total()"
    assert Sanitizer.method_name("") == "unknown_method()"


def test_attribute_type_flattens_precision() -> None:
    assert Sanitizer.attribute_type("decimal(10,2)") == "decimal_10_2"
    assert Sanitizer.attribute_type("varchar(255)") == "varchar_255"
    assert Sanitizer.attribute_type("integer") == "integer"
    assert Sanitizer.attribute_type(None) == "string"
    assert Sanitizer.attribute_type("()") == "string"


@pytest.mark.parametrize("raw", NASTY_INPUTS)
def test_sanitizer_never_raises(raw) -> None:
    for method in (
        Sanitizer.class_name,
        Sanitizer.node_name,
        Sanitizer.display_name,
        Sanitizer.table_name,
        Sanitizer.label,
        Sanitizer.method_name,
        Sanitizer.attribute_type,
        Sanitizer.text,
    ):
        assert isinstance(method(raw), str)


@pytest.mark.parametrize("raw", NASTY_INPUTS)
def test_class_name_is_idempotent(raw) -> None:
    once = Sanitizer.class_name(raw)
    assert Sanitizer.class_name(once) == once


@pytest.mark.parametrize(
    ("cardinality", "erd", "klass", "simple"),
    [
        ("one_to_many", "||--o{", "1..*", "1:N"),
        ("many_to_one", "}o--||", "*..*", "N:1"),
        ("one_to_one", "||--||", "1..1", "1:1"),
        ("many_to_many", "}o--o{", "*..*", "N:N"),
    ],
)
def test_cardinality_rows(cardinality: str, erd: str, klass: str, simple: str) -> None:
    assert CardinalityMapper.to_erd(cardinality) == erd
    assert CardinalityMapper.to_class(cardinality) == klass
    assert CardinalityMapper.to_simple(cardinality) == simple
    assert CardinalityMapper.to_erd(Cardinality(cardinality)) == erd


@pytest.mark.parametrize("unknown", [None, "", "sideways", 7])
def test_cardinality_defaults_to_one_to_many(unknown) -> None:
    assert CardinalityMapper.to_erd(unknown) == "||--o{"
    assert CardinalityMapper.to_class(unknown) == "1..*"
    assert CardinalityMapper.to_simple(unknown) == "1:N"


def test_cardinality_optional_variants() -> None:
    assert CardinalityMapper.to_erd(Cardinality.ZERO_OR_ONE_TO_MANY) == "|o--o{"
    assert CardinalityMapper.to_erd(Cardinality.ONE_TO_ZERO_OR_ONE) == "||--|o"
    assert CardinalityMapper.to_class("one_to_many", fmt="simple") == "1:N"
