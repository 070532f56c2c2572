"""Exception hierarchy for semantic-tree-diff."""

from __future__ import annotations

__all__ = [
    "ClassificationError",
    "ConfigurationError",
    "MatchingInvariantError",
    "SemanticDiffError",
]


class SemanticDiffError(Exception):
    """Base exception for all semantic-tree-diff errors."""


class ConfigurationError(SemanticDiffError, ValueError):
    """Raised when a dimension, behavior, profile or option name is invalid.

    Configuration problems are reported at resolution time and are never
    replaced by a silent default.
    """


class MatchingInvariantError(SemanticDiffError, RuntimeError):
    """Raised when a node would become the endpoint of two matched pairs."""


class ClassificationError(SemanticDiffError, RuntimeError):
    """Raised when a DiffNode's classification flags would be overwritten."""
