"""API boundary: cached diagram responses for a session."""

from __future__ import annotations

from typing import Any

from loguru import logger

from dbwatcher_diagrams.config import Settings, get_settings
from dbwatcher_diagrams.core.cache import DiagramCache
from dbwatcher_diagrams.core.generator import DiagramGenerator
from dbwatcher_diagrams.core.registry import DiagramTypeRegistry
from dbwatcher_diagrams.core.sources import DiagramSource, JsonDirectorySource
from dbwatcher_diagrams.errors import (
    DiagramErrorHandler,
    DiagramGenerationError,
    ErrorCode,
    InvalidDiagramTypeError,
    SessionNotFoundError,
)
from dbwatcher_diagrams.schemas import AnalysisContext
from dbwatcher_diagrams.utils import utc_now_iso

SERVICE_NAME = "diagram_data"


class DiagramDataService:
    """Serve diagram responses with type validation, caching and uniform errors."""

    def __init__(
        self,
        registry: DiagramTypeRegistry,
        source: DiagramSource,
        cache: DiagramCache | None = None,
        settings: Settings | None = None,
        error_handler: DiagramErrorHandler | None = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry
        self.source = source
        self.cache = cache or DiagramCache(
            namespace=self.settings.cache_namespace,
            default_ttl=self.settings.cache_default_ttl,
            max_size=self.settings.cache_max_size,
        )
        self.error_handler = error_handler or DiagramErrorHandler()
        self.generator = DiagramGenerator(registry, self.error_handler)

    def call(self, session_id: str, diagram_type: str | None = None, refresh: bool = False) -> dict[str, Any]:
        """Diagram response for a session.

        Args:
            session_id: Recorded session identifier
            diagram_type: Requested type; blank means the default type
            refresh: Bypass and replace any cached response

        Returns:
            JSON-serializable response dict (success or error shape)
        """
        request = {"session_id": session_id, "diagram_type": diagram_type, "refresh": refresh}
        try:
            resolved = self.normalize_diagram_type(diagram_type)
            key = self.cache_key(session_id, resolved, refresh)
            ttl = self.settings.cache_ttl_for(resolved)

            if refresh:
                self.cache.delete(self.cache_key(session_id, resolved, False))
                self.cache.delete(key)

            # _generate raises on failure, so only successful responses are cached
            return self.cache.fetch(key, lambda: self._generate(session_id, resolved, key, ttl, refresh), ttl)
        except Exception as e:
            return self.error_handler.handle(e, request)

    def clear_session(self, session_id: str) -> dict[str, Any]:
        """Drop every cached diagram of a session so the next call regenerates it."""
        cleared = self.cache.clear_session_cache(session_id)
        return {"session_id": session_id, "cleared": cleared}

    def available_types(self) -> dict[str, Any]:
        return {
            "types": [
                {"name": name, **metadata}
                for name, metadata in self.registry.available_types_with_metadata().items()
            ],
            "default_type": self.registry.default_type,
        }

    def supports(self, diagram_type: str | None) -> bool:
        return self.registry.type_exists((diagram_type or "").strip().lower())

    def normalize_diagram_type(self, diagram_type: str | None) -> str:
        """Lower-cased known type, default for blank input.

        Raises:
            InvalidDiagramTypeError: If a non-blank type is not registered.
        """
        normalized = (diagram_type or "").strip().lower()
        if not normalized:
            return self.registry.default_type
        if not self.registry.type_exists(normalized):
            msg = f"Invalid diagram type '{diagram_type}'. Valid types: {', '.join(self.registry.available_types())}"
            raise InvalidDiagramTypeError(msg, context={"diagram_type": diagram_type})
        return normalized

    @staticmethod
    def cache_key(session_id: str, diagram_type: str, refresh: bool = False) -> str:
        key = f"api_{SERVICE_NAME}_{session_id}_{diagram_type}"
        return f"{key}_refresh" if refresh else key

    def _generate(self, session_id: str, diagram_type: str, key: str, ttl: int, refresh: bool) -> dict[str, Any]:
        session = self.source.find_session(session_id)
        if session is None:
            msg = f"Session not found: {session_id}"
            raise SessionNotFoundError(msg, context={"session_id": session_id})

        context = AnalysisContext(
            session=session,
            schema_snapshot=self.source.schema(),
            models=self.source.models(),
            show_methods=self.settings.diagram_show_methods,
        )
        result = self.generator.generate(diagram_type, context, self.settings.builder_config())
        if not result.success:
            code = ErrorCode(result.error_code) if result.error_code else ErrorCode.SYSTEM_ERROR
            raise DiagramGenerationError(result.error or "Diagram generation failed", error_code=code)

        return {
            "success": True,
            "diagram_type": diagram_type,
            "session_id": session_id,
            "content": result.content,
            "type": result.mermaid_type,
            "error": None,
            "metadata": {
                "generated_at": result.metadata.get("generated_at", utc_now_iso()),
                "diagram_type": diagram_type,
                "available_types": self.registry.available_types(),
                "cache_duration": ttl,
                "supports_refresh": True,
                "analysis": result.metadata.get("analysis", {}),
            },
            "cache_info": {
                "cache_key": key,
                "expires_in": ttl,
                "can_refresh": not refresh,
            },
        }


_service: DiagramDataService | None = None


def get_diagram_service() -> DiagramDataService:
    """Process-wide service reading sessions from the configured storage path."""
    global _service
    if _service is None:
        settings = get_settings()
        logger.info(f"Initializing diagram service with storage at {settings.storage_path}")
        _service = DiagramDataService(
            registry=DiagramTypeRegistry.default(settings.default_diagram_type),
            source=JsonDirectorySource(settings.storage_path),
            settings=settings,
        )
    return _service


def set_diagram_service(service: DiagramDataService | None) -> None:
    """Replace (or with None, reset) the process-wide service."""
    global _service
    _service = service
