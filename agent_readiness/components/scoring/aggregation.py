"""Per-category and overall aggregation of reconciled metrics."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from ...platform.config import DEFAULT_METRICS_CONFIG, MetricsConfig
from ...shared.categories import ALL_CATEGORIES, Category, parse_category
from ...shared.utils import format_score, round_half_up
from ..analysis.adapters import StaticAnalysisResult
from ..analysis.schemas import AIAssessment, FileSizeAnalysis
from .errors import MissingCategoryError
from .normalizer import normalize_to_category_scale, normalize_to_overall_scale
from .reconciler import create_unified_metric
from .rules import (
    CRITICAL_FILES_FINDING,
    CRITICAL_FILES_RECOMMENDATION,
    EXCELLENT_FINDING,
    EXCELLENT_SCORE,
    FOCUS_RECOMMENDATION,
    LARGE_FILES_FINDING,
    LARGE_FILES_RECOMMENDATION,
    LOW_FINDING,
    LOW_SCORE,
    POOR_CONTEXT_FINDING,
    POOR_CONTEXT_RECOMMENDATION,
    REPOSITORY_GAPS,
    VERY_LOW_FINDING,
    VERY_LOW_SCORE,
    WEBSITE_GAPS,
)
from .schemas import CategoryScore, MetricSource, UnifiedMetric

logger = logging.getLogger(__name__)


def file_size_report(
    analysis: StaticAnalysisResult,
    ai_assessment: Optional[AIAssessment] = None,
) -> Optional[FileSizeAnalysis]:
    """The file-size sub-report for a repository, preferring the static one."""
    if analysis.kind != "repository":
        return None
    if analysis.file_size_analysis is not None:
        return analysis.file_size_analysis
    if ai_assessment is not None:
        return ai_assessment.file_size_analysis
    return None


def _file_size_messages(report: Optional[FileSizeAnalysis]) -> List[Tuple[str, str]]:
    if report is None:
        return []
    messages: List[Tuple[str, str]] = []
    if report.large_files:
        messages.append((
            LARGE_FILES_FINDING.format(count=len(report.large_files)),
            LARGE_FILES_RECOMMENDATION,
        ))
    suboptimal = report.suboptimal_critical_files
    if suboptimal:
        messages.append((
            CRITICAL_FILES_FINDING.format(count=len(suboptimal)),
            CRITICAL_FILES_RECOMMENDATION,
        ))
    if report.context_consumption.context_efficiency == "poor":
        messages.append((POOR_CONTEXT_FINDING, POOR_CONTEXT_RECOMMENDATION))
    return messages


def _gap_messages(
    category: Category,
    analysis: StaticAnalysisResult,
    ai_assessment: Optional[AIAssessment],
) -> List[Tuple[str, str]]:
    gaps = WEBSITE_GAPS if analysis.kind == "website" else REPOSITORY_GAPS
    messages = [(finding, rec) for predicate, finding, rec in gaps.get(category, []) if predicate(analysis)]
    if category == Category.FILE_SIZE_OPTIMIZATION:
        messages.extend(_file_size_messages(file_size_report(analysis, ai_assessment)))
    return messages


def category_findings(
    category: Category,
    metric: UnifiedMetric,
    analysis: StaticAnalysisResult,
    ai_assessment: Optional[AIAssessment] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> List[str]:
    findings: List[str] = []
    params = {
        "category": category.value,
        "value": format_score(metric.value),
        "scale": format_score(config.category_scale),
    }
    if metric.value < VERY_LOW_SCORE:
        findings.append(VERY_LOW_FINDING.format(**params))
    elif metric.value < LOW_SCORE:
        findings.append(LOW_FINDING.format(**params))
    elif metric.value >= EXCELLENT_SCORE:
        findings.append(EXCELLENT_FINDING.format(**params))

    findings.extend(finding for finding, _ in _gap_messages(category, analysis, ai_assessment))
    return findings


def category_recommendations(
    category: Category,
    metric: UnifiedMetric,
    analysis: StaticAnalysisResult,
    ai_assessment: Optional[AIAssessment] = None,
) -> List[str]:
    recommendations: List[str] = []
    if metric.value < LOW_SCORE:
        recommendations.append(FOCUS_RECOMMENDATION.format(category=category.value))
    recommendations.extend(rec for _, rec in _gap_messages(category, analysis, ai_assessment))
    return recommendations


def create_sub_metrics(
    category: Category,
    analysis: StaticAnalysisResult,
    ai_assessment: Optional[AIAssessment] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> Dict[str, UnifiedMetric]:
    """Per-agent compatibility metrics; only fileSizeOptimization carries any."""
    if category != Category.FILE_SIZE_OPTIMIZATION:
        return {}
    report = file_size_report(analysis, ai_assessment)
    if report is None:
        return {}
    return {
        agent: create_unified_metric(
            normalize_to_category_scale(compatibility, max_raw=100, config=config),
            None,
            config.static_confidence,
            config=config,
        )
        for agent, compatibility in report.agent_compatibility.per_agent().items()
    }


def build_category_score(
    category: Category,
    static_score: float,
    ai_score: Optional[float],
    analysis: StaticAnalysisResult,
    ai_assessment: Optional[AIAssessment] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> CategoryScore:
    ai_confidence = None
    if ai_assessment is not None:
        ai_confidence = ai_assessment.confidence_for(category)
    if ai_confidence is None:
        ai_confidence = config.default_ai_confidence

    metric = create_unified_metric(
        static_score,
        ai_score,
        config.static_confidence,
        ai_confidence,
        config=config,
    )
    return CategoryScore(
        score=metric,
        sub_metrics=create_sub_metrics(category, analysis, ai_assessment, config),
        findings=category_findings(category, metric, analysis, ai_assessment, config),
        recommendations=category_recommendations(category, metric, analysis, ai_assessment),
    )


def build_category_scores(
    analysis: StaticAnalysisResult,
    static_scores: Mapping[Category, float],
    ai_scores: Mapping[Category, Optional[float]],
    ai_assessment: Optional[AIAssessment] = None,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> Dict[Category, CategoryScore]:
    """One fresh ``CategoryScore`` per category, in canonical order."""
    return {
        category: build_category_score(
            category,
            static_scores.get(category, 0.0),
            ai_scores.get(category),
            analysis,
            ai_assessment,
            config,
        )
        for category in ALL_CATEGORIES
    }


def calculate_overall_score(
    category_scores: Mapping[Category | str, CategoryScore],
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> UnifiedMetric:
    """Weighted sum of category values, rescaled to the overall scale.

    Confidence is the plain mean of the category confidences. Raises
    ``MissingCategoryError`` when a weighted category has no score.
    """
    scores: Dict[Category, CategoryScore] = {}
    for key, score in category_scores.items():
        category = parse_category(key)
        if category is not None:
            scores[category] = score

    weighted_sum = 0.0
    for category, weight in config.category_weights.items():
        score = scores.get(category)
        if score is None:
            raise MissingCategoryError(category.value)
        weighted_sum += weight * score.score.value

    average_confidence = sum(s.score.confidence for s in scores.values()) / len(scores)
    value = round_half_up(normalize_to_overall_scale(weighted_sum, config.category_scale, config))
    logger.debug("Overall score weighted_sum=%.3f value=%s", weighted_sum, value)
    return UnifiedMetric(
        value=value,
        confidence=round_half_up(average_confidence),
        source=MetricSource.HYBRID,
        is_validated=True,
    )
