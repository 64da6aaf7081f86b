"""Map heuristic point totals and AI category scores onto the canonical scales."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ...platform.config import DEFAULT_METRICS_CONFIG, MetricsConfig
from ...shared.categories import ALL_CATEGORIES, Category
from ...shared.utils import clamp, safe_number
from ..analysis.schemas import AIAssessment, RepositoryAnalysis, WebsiteAnalysis
from .rules import (
    COMPATIBILITY_DIVISOR,
    DEFAULT_FILE_SIZE_SCORE,
    REPOSITORY_POINTS,
    WEBSITE_POINTS,
    sum_points,
)


def _scale(raw: Any, max_raw: Any, target: float) -> float:
    max_value = safe_number(max_raw)
    if max_value <= 0:
        return 0.0
    return clamp(safe_number(raw) / max_value * target, 0.0, target)


def normalize_to_category_scale(
    raw: Any,
    max_raw: Optional[float] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> float:
    """Linear scaling onto ``[0, category_scale]``; ``max_raw`` defaults to the raw category max."""
    if max_raw is None:
        max_raw = config.raw_category_max
    return _scale(raw, max_raw, config.category_scale)


def normalize_to_overall_scale(
    raw: Any,
    max_raw: Optional[float] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> float:
    """Linear scaling onto ``[0, overall_scale]``; ``max_raw`` defaults to the category scale."""
    if max_raw is None:
        max_raw = config.category_scale
    return _scale(raw, max_raw, config.overall_scale)


def repository_raw_scores(analysis: RepositoryAnalysis) -> Dict[Category, float]:
    scores = {category: sum_points(table, analysis) for category, table in REPOSITORY_POINTS.items()}
    report = analysis.file_size_analysis
    if report is not None:
        scores[Category.FILE_SIZE_OPTIMIZATION] = report.agent_compatibility.overall / COMPATIBILITY_DIVISOR
    else:
        scores[Category.FILE_SIZE_OPTIMIZATION] = DEFAULT_FILE_SIZE_SCORE
    return scores


def website_raw_scores(analysis: WebsiteAnalysis) -> Dict[Category, float]:
    return {category: sum_points(table, analysis) for category, table in WEBSITE_POINTS.items()}


def static_raw_scores(analysis: RepositoryAnalysis | WebsiteAnalysis) -> Dict[Category, float]:
    if analysis.kind == "website":
        return website_raw_scores(analysis)
    return repository_raw_scores(analysis)


def static_category_scores(
    analysis: RepositoryAnalysis | WebsiteAnalysis,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> Dict[Category, float]:
    """Static-source score for every category, on the category scale."""
    raw = static_raw_scores(analysis)
    return {
        category: normalize_to_category_scale(raw.get(category, 0.0), config=config)
        for category in ALL_CATEGORIES
    }


def ai_category_scores(
    assessment: Optional[AIAssessment],
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> Dict[Category, Optional[float]]:
    """AI-source score per category on the category scale; ``None`` means not assessed."""
    scores: Dict[Category, Optional[float]] = {}
    for category in ALL_CATEGORIES:
        raw = assessment.score_for(category) if assessment is not None else None
        scores[category] = None if raw is None else normalize_to_category_scale(raw, config=config)
    return scores
