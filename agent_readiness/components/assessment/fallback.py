"""Deterministic stand-in for the generative-model assessment.

Used when Claude is unavailable. Scores follow a fixed point table over the
repository's static indicators, reported on the same 0-20 per-category scale
as a model reply so the engine treats both identically.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ...shared.categories import Category
from ...shared.utils import clamp
from ..analysis.adapters import StaticAnalysisResult
from ..analysis.schemas import AIAssessment, RepositoryAnalysis
from ..scoring.rules import (
    CRITICAL_FILES_FINDING,
    CRITICAL_FILES_RECOMMENDATION,
    LARGE_FILES_FINDING,
    LARGE_FILES_RECOMMENDATION,
    POOR_CONTEXT_FINDING,
    POOR_CONTEXT_RECOMMENDATION,
)

logger = logging.getLogger(__name__)

FILE_SIZE_BASE = 15
LARGE_FILE_PENALTY = 2
SUBOPTIMAL_CRITICAL_PENALTY = 3
CONTEXT_EFFICIENCY_ADJUSTMENT = {"excellent": 5, "good": 3, "poor": -5}

# (flag attribute, finding when set, finding when unset, recommendation when unset)
_INDICATORS = (
    (
        "has_readme",
        "README.md present with comprehensive documentation",
        "No README.md file found",
        "Create a comprehensive README.md with setup instructions and usage examples",
    ),
    (
        "has_contributing",
        "CONTRIBUTING.md present for contributor guidance",
        "No CONTRIBUTING.md file found",
        "Add CONTRIBUTING.md to guide contributors and AI agents",
    ),
    (
        "has_agents",
        "AGENTS.md present for AI agent instructions",
        "No AGENTS.md file found",
        "Create AGENTS.md specifically for AI agent interaction guidelines",
    ),
    (
        "has_license",
        "LICENSE file present for usage clarity",
        "No LICENSE file found",
        "Add a LICENSE file to clarify usage rights",
    ),
    (
        "has_workflows",
        "CI/CD workflows detected for automated processes",
        "No CI/CD workflows detected",
        "Set up GitHub Actions for automated testing and deployment",
    ),
    (
        "has_tests",
        "Test files detected for quality assurance",
        "No test files detected",
        "Add comprehensive test suite for better reliability",
    ),
    (
        "error_handling",
        "Error handling patterns detected in codebase",
        "Limited error handling detected",
        "Implement proper error handling and logging throughout the codebase",
    ),
)

_WELL_DOCUMENTED_RECOMMENDATIONS = (
    "Repository is well-documented and ready for AI agent consumption",
    "Consider adding more detailed API documentation for better AI agent understanding",
    "Regularly update AGENTS.md with new AI agent capabilities and best practices",
)


def heuristic_category_points(analysis: RepositoryAnalysis) -> Dict[Category, float]:
    a = analysis
    points = {
        Category.DOCUMENTATION: 8 * a.has_readme + 4 * a.has_contributing + 4 * a.has_agents + 4 * a.has_license,
        Category.INSTRUCTION_CLARITY: 12 * a.has_readme + 4 * a.has_contributing + 4 * a.has_agents,
        Category.WORKFLOW_AUTOMATION: 15 * a.has_workflows + 5 * a.has_tests,
        Category.RISK_COMPLIANCE: 5 * a.has_license + 10 * a.error_handling + 5 * a.has_tests,
        Category.INTEGRATION_STRUCTURE: 10 + 5 * bool(a.languages) + 5 * a.has_tests,
    }

    file_size = FILE_SIZE_BASE
    report = a.file_size_analysis
    if report is not None:
        file_size -= LARGE_FILE_PENALTY * len(report.large_files)
        file_size -= SUBOPTIMAL_CRITICAL_PENALTY * len(report.suboptimal_critical_files)
        file_size += CONTEXT_EFFICIENCY_ADJUSTMENT.get(report.context_consumption.context_efficiency, 0)
    points[Category.FILE_SIZE_OPTIMIZATION] = file_size
    return {category: float(value) for category, value in points.items()}


class HeuristicAssessmentProvider:
    """Rule-based assessor for repositories; websites are not assessed."""

    def assess(self, static_analysis: StaticAnalysisResult) -> Optional[AIAssessment]:
        if static_analysis.kind != "repository":
            logger.info("Heuristic assessment skipped for kind=%s", static_analysis.kind)
            return None

        points = heuristic_category_points(static_analysis)
        findings: List[str] = []
        recommendations: List[str] = []

        for attribute, present, absent, recommendation in _INDICATORS:
            if getattr(static_analysis, attribute):
                findings.append(present)
            else:
                findings.append(absent)
                recommendations.append(recommendation)

        report = static_analysis.file_size_analysis
        if report is not None:
            if report.large_files:
                findings.append(LARGE_FILES_FINDING.format(count=len(report.large_files)))
                recommendations.append(LARGE_FILES_RECOMMENDATION)
            suboptimal = report.suboptimal_critical_files
            if suboptimal:
                findings.append(CRITICAL_FILES_FINDING.format(count=len(suboptimal)))
                recommendations.append(CRITICAL_FILES_RECOMMENDATION)
            if report.context_consumption.context_efficiency == "poor":
                findings.append(POOR_CONTEXT_FINDING)
                recommendations.append(POOR_CONTEXT_RECOMMENDATION)
            recommendations.extend(report.recommendations)

        if all(getattr(static_analysis, attribute) for attribute, *_ in _INDICATORS[:6]):
            recommendations.extend(_WELL_DOCUMENTED_RECOMMENDATIONS)

        return AIAssessment(
            readiness_score=min(sum(points.values()), 100.0),
            categories={category: clamp(value, 0.0, 20.0) for category, value in points.items()},
            findings=findings,
            recommendations=recommendations,
            file_size_analysis=report,
            source="heuristic",
        )
