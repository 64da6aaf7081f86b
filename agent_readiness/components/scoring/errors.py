"""Exception types raised by the reconciliation engine."""

from __future__ import annotations

from ...shared.errors import ConfigurationError, ReadinessError

__all__ = ["ConfigurationError", "MissingCategoryError", "ReadinessError"]


class MissingCategoryError(ConfigurationError):
    """Raised when a weighted category has no score to aggregate."""

    def __init__(self, category: str, message: str | None = None):
        self.category = str(category)
        super().__init__(
            message or f"Category '{self.category}' is weighted but has no category score"
        )
