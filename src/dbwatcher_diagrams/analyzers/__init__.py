"""Analyzers that turn recorded data into diagram datasets."""

from dbwatcher_diagrams.analyzers.base import BaseAnalyzer
from dbwatcher_diagrams.analyzers.foreign_key import ForeignKeyAnalyzer
from dbwatcher_diagrams.analyzers.inferred import InferredRelationshipAnalyzer, is_self_referential_column
from dbwatcher_diagrams.analyzers.model_association import ModelAssociationAnalyzer
from dbwatcher_diagrams.analyzers.scope import ScopeFilter

__all__ = [
    "BaseAnalyzer",
    "ForeignKeyAnalyzer",
    "InferredRelationshipAnalyzer",
    "ModelAssociationAnalyzer",
    "ScopeFilter",
    "is_self_referential_column",
]
