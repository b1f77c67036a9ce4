"""Mermaid syntax generation."""

from dbwatcher_diagrams.mermaid.base_builder import BaseBuilder
from dbwatcher_diagrams.mermaid.cardinality import CardinalityMapper
from dbwatcher_diagrams.mermaid.class_builder import ClassDiagramBuilder
from dbwatcher_diagrams.mermaid.erd_builder import ERDiagramBuilder
from dbwatcher_diagrams.mermaid.flowchart_builder import FlowchartBuilder
from dbwatcher_diagrams.mermaid.sanitizer import Sanitizer

__all__ = [
    "BaseBuilder",
    "CardinalityMapper",
    "ClassDiagramBuilder",
    "ERDiagramBuilder",
    "FlowchartBuilder",
    "Sanitizer",
]
