"""Closed set of readiness categories and wire-name parsing."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Category(str, Enum):
    """Closed set of readiness dimensions scored by the engine."""

    DOCUMENTATION = "documentation"
    INSTRUCTION_CLARITY = "instructionClarity"
    WORKFLOW_AUTOMATION = "workflowAutomation"
    RISK_COMPLIANCE = "riskCompliance"
    INTEGRATION_STRUCTURE = "integrationStructure"
    FILE_SIZE_OPTIMIZATION = "fileSizeOptimization"

    def __str__(self) -> str:
        return self.value


ALL_CATEGORIES = tuple(Category)


def parse_category(value: Any) -> Category | None:
    """Resolve a category from its wire name, enum member name, or enum value."""
    if isinstance(value, Category):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return Category(text)
    except ValueError:
        pass
    try:
        return Category[text.upper()]
    except KeyError:
        pass
    lowered = text.replace("_", "").lower()
    for category in Category:
        if category.value.lower() == lowered:
            return category
    return None
