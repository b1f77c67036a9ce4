"""Relationship cardinality notation per Mermaid dialect."""

from __future__ import annotations

from dbwatcher_diagrams.schemas.diagram_data import Cardinality

ERD_NOTATION: dict[Cardinality, str] = {
    Cardinality.ONE_TO_MANY: "||--o{",
    Cardinality.MANY_TO_ONE: "}o--||",
    Cardinality.ONE_TO_ONE: "||--||",
    Cardinality.MANY_TO_MANY: "}o--o{",
    Cardinality.ZERO_OR_ONE_TO_MANY: "|o--o{",
    Cardinality.ONE_TO_ZERO_OR_MANY: "||--o{",
    Cardinality.ZERO_OR_ONE_TO_ONE: "|o--||",
    Cardinality.ONE_TO_ZERO_OR_ONE: "||--|o",
}

CLASS_NOTATION: dict[Cardinality, str] = {
    Cardinality.ONE_TO_MANY: "1..*",
    Cardinality.MANY_TO_ONE: "*..*",
    Cardinality.ONE_TO_ONE: "1..1",
    Cardinality.MANY_TO_MANY: "*..*",
    Cardinality.ZERO_OR_ONE_TO_MANY: "0..1..*",
    Cardinality.ONE_TO_ZERO_OR_MANY: "1..0..*",
    Cardinality.ZERO_OR_ONE_TO_ONE: "0..1..1",
    Cardinality.ONE_TO_ZERO_OR_ONE: "1..0..1",
}

SIMPLE_NOTATION: dict[Cardinality, str] = {
    Cardinality.ONE_TO_MANY: "1:N",
    Cardinality.MANY_TO_ONE: "N:1",
    Cardinality.ONE_TO_ONE: "1:1",
    Cardinality.MANY_TO_MANY: "N:N",
    Cardinality.ZERO_OR_ONE_TO_MANY: "0,1:N",
    Cardinality.ONE_TO_ZERO_OR_MANY: "1:0,N",
    Cardinality.ZERO_OR_ONE_TO_ONE: "0,1:1",
    Cardinality.ONE_TO_ZERO_OR_ONE: "1:0,1",
}

DEFAULT_CARDINALITY = Cardinality.ONE_TO_MANY


class CardinalityMapper:
    """Total lookup from cardinality tags to notation; unknown input maps to one-to-many."""

    @staticmethod
    def normalize(cardinality: Cardinality | str | None) -> Cardinality:
        if isinstance(cardinality, Cardinality):
            return cardinality
        try:
            return Cardinality(str(cardinality))
        except ValueError:
            return DEFAULT_CARDINALITY

    @classmethod
    def to_erd(cls, cardinality: Cardinality | str | None) -> str:
        return ERD_NOTATION[cls.normalize(cardinality)]

    @classmethod
    def to_class(cls, cardinality: Cardinality | str | None, fmt: str = "standard") -> str:
        """Class-diagram multiplicity; ``fmt="simple"`` yields ``1:N`` style instead."""
        if fmt == "simple":
            return cls.to_simple(cardinality)
        return CLASS_NOTATION[cls.normalize(cardinality)]

    @classmethod
    def to_simple(cls, cardinality: Cardinality | str | None) -> str:
        return SIMPLE_NOTATION[cls.normalize(cardinality)]
