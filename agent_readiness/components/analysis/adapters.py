from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Union

from .schemas import AIAssessment, RepositoryAnalysis, WebsiteAnalysis

StaticAnalysisResult = Union[RepositoryAnalysis, WebsiteAnalysis]


class StaticAnalysisAdapter(Protocol):
    """Locates a subject and returns its static analysis.

    Raises ``NotFoundError`` when the subject does not exist and
    ``InvalidInputError`` for malformed identifiers.
    """

    def analyze(self, identifier: str) -> Union[StaticAnalysisResult, Mapping[str, Any]]: ...


class AssessmentAdapter(Protocol):
    """Produces a generative-model assessment, or ``None`` when it cannot."""

    def assess(self, static_analysis: StaticAnalysisResult) -> Optional[Union[AIAssessment, Mapping[str, Any]]]: ...
