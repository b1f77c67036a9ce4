"""Mermaid diagrams of the tables and models touched by recorded database sessions."""

from dbwatcher_diagrams.core import DiagramDataService, DiagramGenerator, DiagramTypeRegistry
from dbwatcher_diagrams.schemas import AnalysisContext, Dataset, DiagramResult

__version__ = "0.1.0"

__all__ = [
    "AnalysisContext",
    "Dataset",
    "DiagramDataService",
    "DiagramGenerator",
    "DiagramResult",
    "DiagramTypeRegistry",
]
