"""Core module exports."""

from dbwatcher_diagrams.core.cache import DiagramCache
from dbwatcher_diagrams.core.data_service import DiagramDataService, get_diagram_service, set_diagram_service
from dbwatcher_diagrams.core.generator import DiagramGenerator
from dbwatcher_diagrams.core.registry import DEFAULT_DIAGRAM_TYPE, DiagramTypeRegistry
from dbwatcher_diagrams.core.sources import DiagramSource, InMemorySource, JsonDirectorySource
from dbwatcher_diagrams.core.strategies import BUILTIN_STRATEGIES, DiagramStrategy

__all__ = [
    "BUILTIN_STRATEGIES",
    "DEFAULT_DIAGRAM_TYPE",
    "DiagramCache",
    "DiagramDataService",
    "DiagramGenerator",
    "DiagramSource",
    "DiagramStrategy",
    "DiagramTypeRegistry",
    "InMemorySource",
    "JsonDirectorySource",
    "get_diagram_service",
    "set_diagram_service",
]
