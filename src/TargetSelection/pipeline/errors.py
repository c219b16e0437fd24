"""Custom exception hierarchy for target-aware class selection."""
from __future__ import annotations


class TargetSelectionError(Exception):
    """Base exception for the target selection engine."""


class ConfigurationError(TargetSelectionError):
    """Raised when search options or targets are invalid before a search starts."""


class GraphError(ConfigurationError):
    """Raised when the coupling graph is malformed (dangling edge, bad weight)."""


class SelectionError(TargetSelectionError):
    """Raised when the selection stage encounters an unrecoverable error."""
