"""Tests for the normalized diagram data model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dbwatcher_diagrams.schemas import Attribute, Cardinality, Dataset, Entity, Relationship


def make_dataset() -> Dataset:
    dataset = Dataset()
    dataset.add_entity(Entity(id="users", name="User", type="model"))
    dataset.add_entity(Entity(id="posts", name="Post", type="model"))
    dataset.add_entity(Entity(id="tags", name="Tag", type="model"))
    dataset.add_relationship(Relationship(source_id="users", target_id="posts", type="has_many", label="posts"))
    return dataset


def test_attribute_is_immutable() -> None:
    attribute = Attribute(name="id", type="integer", primary_key=True)
    with pytest.raises(ValidationError):
        attribute.name = "other"


def test_attribute_validation() -> None:
    assert Attribute(name="id").is_valid()
    assert Attribute(name=" ").validation_errors() == ["Attribute name cannot be blank"]


def test_entity_validation_reports_bad_type_and_attributes() -> None:
    entity = Entity(id="users", name="User", type="widget", attributes=[Attribute(name="")])
    errors = entity.validation_errors()
    assert any("Entity type" in e for e in errors)
    assert any("Attribute" in e for e in errors)


def test_entity_primary_and_foreign_keys() -> None:
    entity = Entity(
        id="posts",
        name="Post",
        attributes=[
            Attribute(name="id", primary_key=True),
            Attribute(name="user_id", foreign_key=True),
            Attribute(name="title"),
        ],
    )
    assert entity.primary_key.name == "id"
    assert [a.name for a in entity.foreign_keys] == ["user_id"]


def test_self_referential_follows_endpoints() -> None:
    loop = Relationship(source_id="comments", target_id="comments", type="belongs_to")
    edge = Relationship(source_id="posts", target_id="users", type="belongs_to", self_referential=True)
    assert loop.self_referential is True
    assert edge.self_referential is False


def test_relationship_rejects_unknown_cardinality() -> None:
    with pytest.raises(ValidationError):
        Relationship(source_id="a", target_id="b", type="x", cardinality="lots")


def test_infer_cardinality() -> None:
    assert Relationship.infer_cardinality("has_many") is Cardinality.ONE_TO_MANY
    assert Relationship.infer_cardinality("belongs_to") is Cardinality.MANY_TO_ONE
    assert Relationship.infer_cardinality("has_one") is Cardinality.ONE_TO_ONE
    assert Relationship.infer_cardinality("has_and_belongs_to_many") is Cardinality.MANY_TO_MANY
    assert Relationship.infer_cardinality("has_many_through") is Cardinality.MANY_TO_MANY
    assert Relationship.infer_cardinality("delegates_to") is None


def test_add_entity_rejects_duplicates_and_invalid() -> None:
    dataset = make_dataset()
    with pytest.raises(ValueError, match="Duplicate"):
        dataset.add_entity(Entity(id="users", name="Again"))
    with pytest.raises(ValueError, match="Invalid entity"):
        dataset.add_entity(Entity(id="", name="Nameless"))


def test_add_relationship_rejects_blank_type() -> None:
    with pytest.raises(ValueError, match="Invalid relationship"):
        Dataset().add_relationship(Relationship(source_id="a", target_id="b", type=""))


def test_insertion_order_is_preserved() -> None:
    assert list(make_dataset().entities) == ["users", "posts", "tags"]


def test_relationships_for_direction() -> None:
    dataset = make_dataset()
    assert len(dataset.relationships_for("users", "outgoing")) == 1
    assert dataset.relationships_for("users", "incoming") == []
    assert len(dataset.relationships_for("posts")) == 1


def test_isolated_and_connected_entities() -> None:
    dataset = make_dataset()
    assert [e.id for e in dataset.isolated_entities()] == ["tags"]
    assert [e.id for e in dataset.connected_entities()] == ["users", "posts"]


def test_remove_entity_drops_its_relationships() -> None:
    dataset = make_dataset()
    assert dataset.remove_entity("posts") is True
    assert dataset.relationships == []
    assert dataset.remove_entity("missing") is False


def test_remove_relationship() -> None:
    dataset = make_dataset()
    relationship = dataset.relationships[0]
    assert dataset.remove_relationship(relationship) is True
    assert dataset.remove_relationship(relationship) is False


def test_dangling_reference_is_invalid() -> None:
    dataset = make_dataset()
    dataset.add_relationship(Relationship(source_id="users", target_id="ghosts", type="has_many"))
    assert not dataset.is_valid()
    assert "missing target entity: ghosts" in dataset.validation_errors()[0]


def test_stats() -> None:
    stats = make_dataset().stats()
    assert stats["entity_count"] == 3
    assert stats["relationship_count"] == 1
    assert stats["entity_types"] == {"model": 3}
    assert stats["relationship_types"] == {"has_many": 1}
    assert stats["isolated_entities"] == 1
    assert stats["connected_entities"] == 2


def test_dict_round_trip_keeps_graph() -> None:
    dataset = make_dataset()
    dataset.metadata["analyzer"] = "test"
    restored = Dataset.from_dict(dataset.to_dict())
    assert list(restored.entities) == list(dataset.entities)
    assert restored.relationships == dataset.relationships
    assert restored.metadata == {"analyzer": "test"}


def test_clear_and_empty() -> None:
    dataset = make_dataset()
    assert not dataset.is_empty()
    dataset.clear()
    assert dataset.is_empty()
