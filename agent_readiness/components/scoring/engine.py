"""Reconciliation engine facade.

The stable public API lives here; the scoring heuristics are split across
``normalizer``, ``reconciler``, ``aggregation``, ``validator`` and
``insights``. An engine captures an immutable ``MetricsConfig`` at
construction and holds no other state, so one instance can serve concurrent
callers.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ... import __version__
from ...platform.config import MetricsConfig, get_metrics_config
from ...shared.categories import Category
from ...shared.utils import utcnow
from ..analysis.schemas import AIAssessment, parse_ai_assessment, parse_static_analysis
from .aggregation import build_category_scores, calculate_overall_score
from .insights import generate_insights
from .normalizer import (
    ai_category_scores,
    normalize_to_category_scale,
    normalize_to_overall_scale,
    static_category_scores,
)
from .reconciler import create_unified_metric
from .schemas import (
    AssessmentMetadata,
    AssessmentResult,
    AssessmentStatus,
    AssessmentValidation,
    CategoryScore,
    MetricSource,
    UnifiedMetric,
)
from .validator import ConsistencyValidator

logger = logging.getLogger("readiness.engine")


class ReconciliationEngine:
    """Combines static and AI category scores into one ``AssessmentResult``."""

    def __init__(self, config: Optional[MetricsConfig] = None, **overrides: Any):
        base = config if config is not None else get_metrics_config()
        self.config = base.with_overrides(**overrides) if overrides else base
        self.validator = ConsistencyValidator(self.config)

    def normalize_to_category_scale(self, raw: Any, max_raw: Optional[float] = None) -> float:
        return normalize_to_category_scale(raw, max_raw, self.config)

    def normalize_to_overall_scale(self, raw: Any, max_raw: Optional[float] = None) -> float:
        return normalize_to_overall_scale(raw, max_raw, self.config)

    def create_unified_metric(
        self,
        static_value: Any,
        ai_value: Any = None,
        static_confidence: Any = None,
        ai_confidence: Any = None,
    ) -> UnifiedMetric:
        if static_confidence is None:
            static_confidence = self.config.static_confidence
        if ai_confidence is None:
            ai_confidence = self.config.default_ai_confidence
        return create_unified_metric(static_value, ai_value, static_confidence, ai_confidence, self.config)

    def calculate_overall_score(self, category_scores: Mapping[Category | str, CategoryScore]) -> UnifiedMetric:
        return calculate_overall_score(category_scores, self.config)

    def assess(
        self,
        static_analysis: Any,
        ai_assessment: Any = None,
        analysis_duration_ms: float = 0.0,
    ) -> AssessmentResult:
        """Reconcile one static analysis with an optional AI assessment.

        ``static_analysis`` may be a parsed model or a raw provider mapping;
        ``ai_assessment`` may be absent, in which case every category is
        static-only. Only structural misconfiguration raises.
        """
        analysis = parse_static_analysis(static_analysis)
        ai: Optional[AIAssessment] = parse_ai_assessment(ai_assessment)

        static_scores = static_category_scores(analysis, self.config)
        ai_scores = ai_category_scores(ai, self.config)

        categories = build_category_scores(analysis, static_scores, ai_scores, ai, self.config)
        overall = calculate_overall_score(categories, self.config)

        check = self.validator.check_consistency(static_scores, ai_scores)
        report = self.validator.validate_metrics(
            static_scores,
            ai_scores,
            ai_confidence=ai.confidence if ai is not None else None,
        )
        if not check.is_valid:
            logger.warning(
                "Consistency check failed kind=%s categories=%s",
                analysis.kind,
                ",".join(issue.category for issue in check.issues),
            )

        insights = generate_insights(categories, analysis, ai, self.config)
        hybrid = any(score.score.source == MetricSource.HYBRID for score in categories.values())

        result = AssessmentResult(
            overall_score=overall,
            categories=categories,
            validation=AssessmentValidation(
                is_valid=check.is_valid,
                variances=check.variances,
                recommendations=check.recommendations,
                alignment_score=report.alignment_score,
                issues=report.issues,
            ),
            insights=insights,
            assessment_status=AssessmentStatus(
                static_analysis_enabled=True,
                ai_analysis_enabled=ai is not None,
                hybrid_mode=hybrid,
                validation_passed=check.is_valid,
                last_validation=utcnow(),
            ),
            metadata=AssessmentMetadata(
                subject_kind=analysis.kind,
                total_files=analysis.file_count,
                analysis_duration_ms=max(0.0, float(analysis_duration_ms or 0.0)),
                version=__version__,
                ai_source=ai.source if ai is not None else None,
            ),
        )
        logger.info(
            "Assessment reconciled kind=%s overall=%s confidence=%s hybrid=%s valid=%s",
            analysis.kind,
            overall.value,
            overall.confidence,
            hybrid,
            check.is_valid,
        )
        return result
