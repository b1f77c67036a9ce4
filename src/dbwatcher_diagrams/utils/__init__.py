"""Utility functions."""

from __future__ import annotations

import re
import sys
from datetime import datetime, timezone

from loguru import logger

LOG_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"

_UNCOUNTABLE = {"data", "equipment", "information", "metadata", "news", "series", "species", "staff"}
_VOWEL_Y = ("ay", "ey", "iy", "oy", "uy")


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def singularize(word: str | None) -> str:
    """Rule-based singular form of a table name (``categories`` -> ``category``)."""
    if not word:
        return word or ""
    if word in _UNCOUNTABLE:
        return word
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith(("sses", "shes", "ches", "xes", "zes")):
        return word[:-2]
    if word.endswith(("ss", "us", "is")):
        return word
    if word.endswith("s"):
        return word[:-1]
    return word


def underscore(name: str | None) -> str:
    """CamelCase to snake_case, dropping any namespace (``Admin::BlogPost`` -> ``blog_post``)."""
    if not name:
        return ""
    last = name.split("::")[-1]
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", last).lower()


def tableize(model_name: str | None) -> str:
    """Conventional table name for a model class name."""
    return pluralize(underscore(model_name))


def pluralize(word: str | None) -> str:
    """Rule-based plural form of a model/column base name (``category`` -> ``categories``)."""
    if not word:
        return word or ""
    if word in _UNCOUNTABLE:
        return word
    if word.endswith("y") and not word.endswith(_VOWEL_Y):
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "pluralize",
    "singularize",
    "tableize",
    "underscore",
    "utc_now_iso",
]
