"""MCP tool implementations."""

from dbwatcher_diagrams.tools.clear_diagram_cache import clear_diagram_cache
from dbwatcher_diagrams.tools.generate_diagram import generate_diagram
from dbwatcher_diagrams.tools.list_diagram_types import list_diagram_types
from dbwatcher_diagrams.tools.render_dataset import render_dataset

__all__ = [
    "clear_diagram_cache",
    "generate_diagram",
    "list_diagram_types",
    "render_dataset",
]
