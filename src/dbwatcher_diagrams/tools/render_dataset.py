"""render_dataset MCP tool implementation."""

from __future__ import annotations

import json

from loguru import logger

from dbwatcher_diagrams.core import get_diagram_service
from dbwatcher_diagrams.schemas import Dataset


async def render_dataset(
    dataset_json: str,
    diagram_type: str | None = None,
    direction: str | None = None,
) -> dict:
    """Render a serialized dataset with the builder of a diagram type.

    Args:
        dataset_json: Dataset as produced by ``Dataset.to_dict`` (JSON string)
        diagram_type: Diagram type whose builder to use (default: database_tables)
        direction: Optional layout direction for class diagrams and flowcharts

    Returns:
        Mermaid content and basic dataset statistics
    """
    service = get_diagram_service()
    resolved = service.normalize_diagram_type(diagram_type)
    strategy = service.registry.get_strategy(resolved)

    try:
        dataset = Dataset.from_dict(json.loads(dataset_json))
    except ValueError as e:
        logger.error(f"Invalid dataset payload: {e}")
        raise

    errors = dataset.validation_errors()
    if errors:
        msg = f"Dataset failed validation: {'; '.join(errors[:5])}"
        raise ValueError(msg)

    content = strategy.render(dataset, {"direction": direction} if direction else None)
    logger.info(f"Rendered dataset as {resolved} ({len(dataset.entities)} entities)")
    return {
        "diagram_type": resolved,
        "type": strategy.mermaid_type,
        "content": content,
        "stats": dataset.stats(),
    }
