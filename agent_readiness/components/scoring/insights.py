from __future__ import annotations

from typing import List, Mapping, Optional

from ...platform.config import DEFAULT_METRICS_CONFIG, MetricsConfig
from ...shared.categories import ALL_CATEGORIES, Category
from ...shared.utils import format_score
from ..analysis.adapters import StaticAnalysisResult
from ..analysis.schemas import AIAssessment
from .rules import (
    EXCELLENT_FINDING,
    EXCELLENT_SCORE,
    FOCUS_RECOMMENDATION,
    LOW_AI_CONFIDENCE_FINDING,
    LOW_AI_CONFIDENCE_RECOMMENDATION,
    LOW_FINDING,
    LOW_SCORE,
    REPOSITORY_INSIGHTS,
    WEBSITE_INSIGHTS,
)
from .schemas import CategoryScore, Insights


def low_confidence_categories(
    ai_assessment: Optional[AIAssessment],
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> List[Category]:
    if ai_assessment is None:
        return []
    return [
        category
        for category in ALL_CATEGORIES
        if category in ai_assessment.confidence
        and ai_assessment.confidence[category] < config.min_confidence_threshold
    ]


def generate_insights(
    category_scores: Mapping[Category, CategoryScore],
    analysis: Optional[StaticAnalysisResult],
    ai_assessment: Optional[AIAssessment] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> Insights:
    """Subject-level findings and recommendations for the whole assessment."""
    findings: List[str] = []
    recommendations: List[str] = []
    scale = format_score(config.category_scale)

    for category, category_score in category_scores.items():
        value = category_score.score.value
        params = {"category": category.value, "value": format_score(value), "scale": scale}
        if value < LOW_SCORE:
            findings.append(LOW_FINDING.format(**params))
            recommendations.append(FOCUS_RECOMMENDATION.format(category=category.value))
        elif value >= EXCELLENT_SCORE:
            findings.append(EXCELLENT_FINDING.format(**params))

    if analysis is not None:
        gaps = WEBSITE_INSIGHTS if analysis.kind == "website" else REPOSITORY_INSIGHTS
        for predicate, finding, recommendation in gaps:
            if predicate(analysis):
                findings.append(finding)
                recommendations.append(recommendation)

    low_confidence = low_confidence_categories(ai_assessment, config)
    if low_confidence:
        findings.append(
            LOW_AI_CONFIDENCE_FINDING.format(categories=", ".join(c.value for c in low_confidence))
        )
        recommendations.append(LOW_AI_CONFIDENCE_RECOMMENDATION)

    return Insights(findings=findings, recommendations=recommendations)
