"""list_diagram_types MCP tool implementation."""

from __future__ import annotations

from dbwatcher_diagrams.core import get_diagram_service


async def list_diagram_types() -> dict:
    """List selectable diagram types with their metadata and the default type."""
    return get_diagram_service().available_types()
