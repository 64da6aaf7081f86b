"""Base exception types shared by the platform and component layers."""

from __future__ import annotations


class ReadinessError(RuntimeError):
    """Base class for all agent-readiness errors."""


class ConfigurationError(ReadinessError, ValueError):
    """Raised when the metrics configuration is structurally invalid."""
