"""Diagram generation results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DiagramResult(BaseModel):
    """Outcome of one generation call; exactly one of content/error is set."""
    diagram_type: str
    content: str | None = None
    error: str | None = None
    error_code: str | None = None
    mermaid_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.error is None and self.content is not None
