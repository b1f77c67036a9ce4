"""Application settings using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env before Settings reads the environment
load_dotenv(override=False)

Direction = Literal["LR", "TD", "TB", "RL", "BT"]


class Settings(BaseSettings):
    """Diagram subsystem configuration."""

    # Storage of recorded sessions (flat JSON files)
    storage_path: Path = Path("tmp/dbwatcher")

    # Diagram rendering
    diagram_show_methods: bool = False
    diagram_show_attributes: bool = True
    diagram_show_cardinality: bool = True
    diagram_max_attributes: int = 10
    diagram_direction: Direction = "LR"
    default_diagram_type: str = "database_tables"

    # Cache
    cache_namespace: str = "dbwatcher:diagrams"
    cache_default_ttl: int = 3600
    cache_max_size: int = 1000
    model_associations_ttl: int = 7200  # reflection over models is the slow path
    database_tables_ttl: int = 3600
    fallback_ttl: int = 1800

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "DBWATCHER_LOG_LEVEL"),
    )

    model_config = SettingsConfigDict(
        env_prefix="DBWATCHER_",
        env_file=None,  # loaded above with dotenv
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    def cache_ttl_for(self, diagram_type: str) -> int:
        """Cache duration in seconds for a diagram type."""
        if diagram_type.startswith("model_associations"):
            return self.model_associations_ttl
        if diagram_type.startswith("database_tables"):
            return self.database_tables_ttl
        return self.fallback_ttl

    def builder_config(self) -> dict:
        """Builder options derived from settings."""
        return {
            "show_attributes": self.diagram_show_attributes,
            "show_methods": self.diagram_show_methods,
            "show_cardinality": self.diagram_show_cardinality,
            "max_attributes": self.diagram_max_attributes,
            "direction": self.diagram_direction,
        }


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
