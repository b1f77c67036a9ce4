"""Diagram generator: resolve a type, analyze, build, never raise."""

from __future__ import annotations

from typing import Any

from loguru import logger

from dbwatcher_diagrams.core.registry import DiagramTypeRegistry
from dbwatcher_diagrams.errors import DatasetValidationError, DiagramErrorHandler
from dbwatcher_diagrams.schemas import AnalysisContext, DiagramResult
from dbwatcher_diagrams.utils import utc_now_iso


class DiagramGenerator:
    """Generate Mermaid markup for one diagram type and analysis context."""

    def __init__(self, registry: DiagramTypeRegistry, error_handler: DiagramErrorHandler | None = None):
        self.registry = registry
        self.error_handler = error_handler or DiagramErrorHandler()

    def resolve_type(self, diagram_type: str | None) -> str:
        """Normalize a requested type; blank or unknown names fall back to the default."""
        normalized = (diagram_type or "").strip().lower()
        if self.registry.type_exists(normalized):
            return normalized
        if normalized:
            logger.warning(f"Unknown diagram type '{diagram_type}', using {self.registry.default_type}")
        return self.registry.default_type

    def generate(
        self,
        diagram_type: str | None,
        context: AnalysisContext,
        config: dict[str, Any] | None = None,
    ) -> DiagramResult:
        """Generate a diagram.

        Args:
            diagram_type: Requested type name; unknown names use the default type
            context: Session scope plus schema and model descriptors
            config: Builder overrides (direction, show_methods, ...)

        Returns:
            DiagramResult with either content or error set
        """
        resolved = self.resolve_type(diagram_type)
        metadata: dict[str, Any] = {"diagram_type": resolved, "generated_at": utc_now_iso()}
        if diagram_type and resolved != diagram_type.strip().lower():
            metadata["requested_type"] = diagram_type

        try:
            strategy = self.registry.get_strategy(resolved)
            metadata["mermaid_type"] = strategy.mermaid_type
            dataset = strategy.analyze(context)

            errors = dataset.validation_errors()
            if errors:
                msg = f"Dataset failed validation: {'; '.join(errors[:5])}"
                raise DatasetValidationError(msg, context={"errors": errors})

            content = strategy.render(dataset, config)
        except Exception as e:
            code = self.error_handler.categorize(e)
            logger.error(f"Diagram generation failed for {resolved}: {e}")
            return DiagramResult(
                diagram_type=resolved,
                error=str(e) or e.__class__.__name__,
                error_code=code.value,
                metadata=metadata,
            )

        metadata["analysis"] = {**dataset.metadata, **dataset.stats()}
        logger.info(f"Generated {resolved} diagram ({len(content)} chars)")
        return DiagramResult(
            diagram_type=resolved,
            content=content,
            mermaid_type=strategy.mermaid_type,
            metadata=metadata,
        )
