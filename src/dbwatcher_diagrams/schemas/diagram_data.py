"""Normalized entity-relationship data shared by analyzers and builders."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Cardinality(str, Enum):
    """Multiplicity of a relationship."""
    ONE_TO_MANY = "one_to_many"
    MANY_TO_ONE = "many_to_one"
    ONE_TO_ONE = "one_to_one"
    MANY_TO_MANY = "many_to_many"
    ZERO_OR_ONE_TO_MANY = "zero_or_one_to_many"
    ONE_TO_ZERO_OR_MANY = "one_to_zero_or_many"
    ZERO_OR_ONE_TO_ONE = "zero_or_one_to_one"
    ONE_TO_ZERO_OR_ONE = "one_to_zero_or_one"


ASSOCIATION_CARDINALITIES: dict[str, Cardinality] = {
    "has_many": Cardinality.ONE_TO_MANY,
    "belongs_to": Cardinality.MANY_TO_ONE,
    "has_one": Cardinality.ONE_TO_ONE,
    "has_and_belongs_to_many": Cardinality.MANY_TO_MANY,
    "has_many_through": Cardinality.MANY_TO_MANY,
}

ENTITY_TYPES = ("model", "table", "default")


class Attribute(BaseModel):
    """A single column or field of an entity."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str | None = None
    nullable: bool = True
    default: Any = None
    primary_key: bool = False
    foreign_key: bool = False
    visibility: str = "+"
    metadata: dict[str, Any] = Field(default_factory=dict)

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.name or not self.name.strip():
            errors.append("Attribute name cannot be blank")
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attribute:
        return cls.model_validate(data)


class MethodInfo(BaseModel):
    """A method listed on a class-diagram entity."""
    model_config = ConfigDict(frozen=True)

    name: str
    visibility: str = "+"


class Entity(BaseModel):
    """A diagram node: one table or model."""

    id: str
    name: str
    type: str = "default"
    attributes: list[Attribute] = Field(default_factory=list)
    methods: list[MethodInfo] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def add_attribute(self, attribute: Attribute) -> None:
        self.attributes.append(attribute)

    @property
    def primary_key(self) -> Attribute | None:
        """First attribute flagged as primary key."""
        return next((a for a in self.attributes if a.primary_key), None)

    @property
    def foreign_keys(self) -> list[Attribute]:
        return [a for a in self.attributes if a.foreign_key]

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.id or not str(self.id).strip():
            errors.append("Entity id cannot be blank")
        if not self.name or not self.name.strip():
            errors.append("Entity name cannot be blank")
        if self.type not in ENTITY_TYPES:
            errors.append(f"Entity type must be one of {', '.join(ENTITY_TYPES)}")
        for attribute in self.attributes:
            errors.extend(f"Attribute '{attribute.name}': {e}" for e in attribute.validation_errors())
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entity:
        return cls.model_validate(data)


class Relationship(BaseModel):
    """A directed edge between two entities.

    ``self_referential`` is derived from the endpoint ids at construction and
    cannot disagree with them.
    """
    model_config = ConfigDict(frozen=True)

    source_id: str
    target_id: str
    type: str
    label: str | None = None
    cardinality: Cardinality | None = None
    self_referential: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _derive_self_referential(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["self_referential"] = bool(data.get("source_id")) and data.get("source_id") == data.get("target_id")
        return data

    @staticmethod
    def infer_cardinality(association_type: str | None) -> Cardinality | None:
        """Map an association kind (``has_many`` etc.) to its cardinality."""
        return ASSOCIATION_CARDINALITIES.get(association_type or "")

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.source_id or not self.source_id.strip():
            errors.append("Relationship source_id cannot be blank")
        if not self.target_id or not self.target_id.strip():
            errors.append("Relationship target_id cannot be blank")
        if not self.type or not self.type.strip():
            errors.append("Relationship type cannot be blank")
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Relationship:
        return cls.model_validate(data)


class Dataset(BaseModel):
    """Entities plus relationships produced by one analyzer pass."""

    entities: dict[str, Entity] = Field(default_factory=dict)
    relationships: list[Relationship] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def add_entity(self, entity: Entity) -> Entity:
        """Add an entity, rejecting invalid ones and duplicate ids.

        Raises:
            ValueError: If the entity is invalid or its id is already present.
        """
        errors = entity.validation_errors()
        if errors:
            msg = f"Invalid entity {entity.id!r}: {'; '.join(errors)}"
            raise ValueError(msg)
        if entity.id in self.entities:
            msg = f"Duplicate entity id: {entity.id}"
            raise ValueError(msg)
        self.entities[entity.id] = entity
        return entity

    def add_relationship(self, relationship: Relationship) -> Relationship:
        """Add a relationship.

        Raises:
            ValueError: If the relationship is invalid.
        """
        errors = relationship.validation_errors()
        if errors:
            msg = f"Invalid relationship {relationship.source_id!r} -> {relationship.target_id!r}: {'; '.join(errors)}"
            raise ValueError(msg)
        self.relationships.append(relationship)
        return relationship

    def get_entity(self, entity_id: str) -> Entity | None:
        return self.entities.get(entity_id)

    def has_entity(self, entity_id: str) -> bool:
        return entity_id in self.entities

    def remove_entity(self, entity_id: str) -> bool:
        """Remove an entity and every relationship touching it."""
        if entity_id not in self.entities:
            return False
        del self.entities[entity_id]
        self.relationships = [
            r for r in self.relationships
            if r.source_id != entity_id and r.target_id != entity_id
        ]
        return True

    def remove_relationship(self, relationship: Relationship) -> bool:
        for index, existing in enumerate(self.relationships):
            if existing == relationship:
                del self.relationships[index]
                return True
        return False

    def relationships_for(self, entity_id: str, direction: str = "all") -> list[Relationship]:
        """Relationships touching an entity: ``outgoing``, ``incoming`` or ``all``."""
        if direction == "outgoing":
            return [r for r in self.relationships if r.source_id == entity_id]
        if direction == "incoming":
            return [r for r in self.relationships if r.target_id == entity_id]
        return [r for r in self.relationships if entity_id in (r.source_id, r.target_id)]

    def connected_entities(self) -> list[Entity]:
        linked = {r.source_id for r in self.relationships} | {r.target_id for r in self.relationships}
        return [e for e in self.entities.values() if e.id in linked]

    def isolated_entities(self) -> list[Entity]:
        linked = {r.source_id for r in self.relationships} | {r.target_id for r in self.relationships}
        return [e for e in self.entities.values() if e.id not in linked]

    def is_empty(self) -> bool:
        return not self.entities and not self.relationships

    def clear(self) -> None:
        self.entities.clear()
        self.relationships.clear()
        self.metadata.clear()

    def validation_errors(self) -> list[str]:
        errors = []
        for entity in self.entities.values():
            errors.extend(f"Entity {entity.id}: {e}" for e in entity.validation_errors())
        for relationship in self.relationships:
            errors.extend(relationship.validation_errors())
            if relationship.source_id not in self.entities:
                errors.append(f"Relationship references missing source entity: {relationship.source_id}")
            if relationship.target_id not in self.entities:
                errors.append(f"Relationship references missing target entity: {relationship.target_id}")
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def stats(self) -> dict[str, Any]:
        entity_types: dict[str, int] = {}
        for entity in self.entities.values():
            entity_types[entity.type] = entity_types.get(entity.type, 0) + 1
        relationship_types: dict[str, int] = {}
        for relationship in self.relationships:
            relationship_types[relationship.type] = relationship_types.get(relationship.type, 0) + 1
        isolated = len(self.isolated_entities())
        return {
            "entity_count": len(self.entities),
            "relationship_count": len(self.relationships),
            "entity_types": entity_types,
            "relationship_types": relationship_types,
            "isolated_entities": isolated,
            "connected_entities": len(self.entities) - isolated,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.entities.values()],
            "relationships": [r.to_dict() for r in self.relationships],
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dataset:
        """Rebuild a dataset, re-running entity and relationship validation."""
        dataset = cls(metadata=dict(data.get("metadata") or {}))
        entities = data.get("entities") or []
        if isinstance(entities, dict):
            entities = list(entities.values())
        for entity_data in entities:
            dataset.add_entity(Entity.from_dict(entity_data))
        for relationship_data in data.get("relationships") or []:
            dataset.add_relationship(Relationship.from_dict(relationship_data))
        return dataset
