"""generate_diagram MCP tool implementation."""

from __future__ import annotations

from loguru import logger

from dbwatcher_diagrams.core import get_diagram_service


async def generate_diagram(
    session_id: str,
    diagram_type: str | None = None,
    refresh: bool = False,
) -> dict:
    """Generate a Mermaid diagram for a recorded session.

    Args:
        session_id: Identifier of the recorded session
        diagram_type: "database_tables", "database_tables_inferred", "model_associations"
            or "model_associations_flowchart" (default: database_tables)
        refresh: Ignore any cached diagram and regenerate

    Returns:
        Diagram response with Mermaid content, metadata and cache info, or an error payload
    """
    logger.info(f"Generating {diagram_type or 'default'} diagram for session {session_id}")

    service = get_diagram_service()
    response = service.call(session_id, diagram_type, refresh=refresh)

    if response.get("success"):
        logger.info(f"Diagram ready: {response['diagram_type']} ({len(response['content'])} chars)")
    else:
        logger.warning(f"Diagram generation returned error: {response.get('error')}")
    return response
