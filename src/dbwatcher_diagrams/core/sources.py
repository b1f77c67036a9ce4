"""Where sessions, schema snapshots and model descriptors come from."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from dbwatcher_diagrams.schemas import ModelDescriptor, SchemaSnapshot, Session


class DiagramSource(ABC):
    """Read-only access to recorded sessions and introspection data."""

    @abstractmethod
    def find_session(self, session_id: str) -> Session | None:
        """Session by id, or None when it does not exist."""

    @abstractmethod
    def schema(self) -> SchemaSnapshot:
        """Current database schema."""

    @abstractmethod
    def models(self) -> list[ModelDescriptor]:
        """Model descriptors extracted by the host application."""


class InMemorySource(DiagramSource):
    """Source backed by already-built descriptors."""

    def __init__(
        self,
        sessions: list[Session] | None = None,
        schema: SchemaSnapshot | None = None,
        models: list[ModelDescriptor] | None = None,
    ):
        self._sessions = {s.id: s for s in sessions or []}
        self._schema = schema or SchemaSnapshot()
        self._models = list(models or [])

    def find_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def schema(self) -> SchemaSnapshot:
        return self._schema

    def models(self) -> list[ModelDescriptor]:
        return list(self._models)


class JsonDirectorySource(DiagramSource):
    """Flat JSON files: ``sessions/<id>.json``, ``schema.json`` and ``models.json``."""

    def __init__(self, storage_path: str | Path):
        self.storage_path = Path(storage_path)

    def find_session(self, session_id: str) -> Session | None:
        if not session_id or "/" in session_id or "\\" in session_id or session_id.startswith("."):
            logger.warning(f"Rejected session id: {session_id!r}")
            return None
        path = self.storage_path / "sessions" / f"{session_id}.json"
        data = self._read(path)
        if data is None:
            return None
        data.setdefault("id", session_id)
        return Session.model_validate(data)

    def schema(self) -> SchemaSnapshot:
        data = self._read(self.storage_path / "schema.json")
        if data is None:
            return SchemaSnapshot()
        if isinstance(data, list):
            data = {"tables": data}
        return SchemaSnapshot.model_validate(data)

    def models(self) -> list[ModelDescriptor]:
        data = self._read(self.storage_path / "models.json") or []
        if isinstance(data, dict):
            data = data.get("models", [])
        models = []
        for item in data:
            try:
                models.append(ModelDescriptor.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed model descriptor {item.get('name', '?')}: {e}")
        return models

    @staticmethod
    def _read(path: Path) -> dict | list | None:
        if not path.exists():
            logger.debug(f"Not found: {path}")
            return None
        with path.open(encoding="utf-8") as f:
            return json.load(f)
