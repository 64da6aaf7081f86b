"""Errors raised by analysis and assessment providers."""

from __future__ import annotations

from ...shared.errors import ReadinessError


class NotFoundError(ReadinessError):
    """The subject (repository or website) could not be located."""


class InvalidInputError(ReadinessError, ValueError):
    """The subject identifier or analysis payload is malformed."""


class AssessmentProviderError(ReadinessError):
    """A generative-model provider produced no usable assessment."""
