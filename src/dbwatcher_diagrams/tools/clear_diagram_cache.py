"""clear_diagram_cache MCP tool implementation."""

from __future__ import annotations

from loguru import logger

from dbwatcher_diagrams.core import get_diagram_service


async def clear_diagram_cache(session_id: str) -> dict:
    """Forget cached diagrams for a session.

    Args:
        session_id: Identifier of the recorded session

    Returns:
        The session id and how many cached diagrams were dropped
    """
    result = get_diagram_service().clear_session(session_id)
    logger.info(f"Cleared {result['cleared']} cached diagrams for session {session_id}")
    return result
