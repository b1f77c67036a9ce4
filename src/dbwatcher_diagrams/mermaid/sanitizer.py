"""Mermaid-safe identifiers and labels."""

from __future__ import annotations

import re

_UNSAFE = re.compile(r"[^A-Za-z0-9_]")
_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9_]+")
_NAMESPACE = "::"


class Sanitizer:
    """Normalize arbitrary text into tokens Mermaid accepts.

    Every method is total: ``None``, empty strings and punctuation-only input
    return a defined fallback instead of raising.
    """

    UNKNOWN_CLASS = "UnknownClass"
    UNKNOWN_TABLE = "UNKNOWN_TABLE"
    UNKNOWN_METHOD = "unknown_method()"
    DEFAULT_TYPE = "string"

    @staticmethod
    def class_name(raw: object) -> str:
        """Node-safe identifier; ``Admin::User`` becomes ``Admin__User``."""
        text = "" if raw is None else str(raw)
        if not text:
            return Sanitizer.UNKNOWN_CLASS
        return _UNSAFE.sub("_", text.replace(_NAMESPACE, "__"))

    @staticmethod
    def node_name(raw: object) -> str:
        """Flowchart node identifier, same rules as :meth:`class_name`."""
        return Sanitizer.class_name(raw)

    @staticmethod
    def display_name(raw: object) -> str:
        """Human-readable name; only empty input is replaced."""
        text = "" if raw is None else str(raw)
        return text or Sanitizer.UNKNOWN_CLASS

    @staticmethod
    def table_name(raw: object, preserve_case: bool = True) -> str:
        text = "" if raw is None else str(raw)
        if not text:
            return Sanitizer.UNKNOWN_TABLE
        safe = _UNSAFE.sub("_", text)
        return safe if preserve_case else safe.upper()

    @staticmethod
    def label(raw: object) -> str:
        """Text safe inside a double-quoted Mermaid label."""
        text = "" if raw is None else str(raw)
        if not text:
            return ""
        text = text.replace("\\", "\\\\").replace('"', '\\"')
        text = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
        return text.strip()

    @staticmethod
    def method_name(raw: object) -> str:
        """Method signature ending in ``()``."""
        text = "" if raw is None else str(raw).strip()
        if text.endswith("()"):
            text = text[:-2]
        if not text:
            return Sanitizer.UNKNOWN_METHOD
        return _UNSAFE.sub("_", text) + "()"

    @staticmethod
    def attribute_type(raw: object) -> str:
        """Bare type token; ``decimal(10,2)`` becomes ``decimal_10_2``."""
        text = "" if raw is None else str(raw)
        safe = _UNSAFE_RUN.sub("_", text).strip("_")
        return safe or Sanitizer.DEFAULT_TYPE

    @staticmethod
    def text(raw: object) -> str:
        """Free text for comments and notes: quotes and line breaks become spaces."""
        text = "" if raw is None else str(raw)
        return re.sub(r'["\r\n]', " ", text).strip()
