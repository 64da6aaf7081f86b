"""Cross-source consistency validation.

The validator compares static and AI scores that are already on the category
scale. It never raises on bad data: every anomaly is returned as a
``ValidationIssue``. Three alignment formulas coexist: ``validate_metrics``
uses ``100 - 2 * mean variance`` for its issue report,
``generate_alignment_report`` uses ``100 - 5 * variance`` per category and
``validate_overall_assessment`` subtracts a per-severity penalty.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from ...platform.config import DEFAULT_METRICS_CONFIG, MetricsConfig
from ...shared.categories import ALL_CATEGORIES, Category, parse_category
from ...shared.utils import format_score, is_missing_number, round_half_up, safe_number
from ..analysis.adapters import StaticAnalysisResult
from ..analysis.schemas import AIAssessment, FileSizeAnalysis
from .normalizer import ai_category_scores, static_category_scores
from .rules import (
    ADJUST_DATA_QUALITY_RECOMMENDATION,
    ADJUST_WEIGHTING_RECOMMENDATION,
    ALIGNMENT_REVIEW_THRESHOLD,
    ALIGN_METHODS_RECOMMENDATION,
    CATEGORY_ALIGNMENT_FOCUS_THRESHOLD,
    COMPATIBILITY_VARIANCE_LIMIT,
    HIGH_CONFIDENCE_LEVEL,
    HIGH_VARIANCE_RECOMMENDATION,
    IMPROVE_CONFIDENCE_RECOMMENDATION,
    LARGE_FILE_COUNT_TOLERANCE,
    MAX_HIGH_SEVERITY_ISSUES,
    MEDIUM_CONFIDENCE_LEVEL,
    REVIEW_ALGORITHMS_RECOMMENDATION,
    SEVERE_CONFIDENCE,
    SEVERITY_PENALTIES,
    SYSTEM_WIDE_REVIEW_ISSUE_COUNT,
    SYSTEM_WIDE_REVIEW_RECOMMENDATION,
)
from .schemas import (
    AlignmentReport,
    CategoryScore,
    ConfidenceLevel,
    ConsistencyCheck,
    FullValidationReport,
    IssueType,
    MetricConsistency,
    OverallHealth,
    Severity,
    UnifiedMetric,
    ValidationIssue,
    ValidationReport,
    ValidationSummary,
)

logger = logging.getLogger(__name__)

ScoreMap = Mapping[Category | str, Optional[float]]

# validate_metric escalates on absolute variance / confidence
CRITICAL_VARIANCE = 20
HIGH_VARIANCE = 15
VERY_LOW_AI_CONFIDENCE = 30


def _scores_by_category(scores: Optional[ScoreMap]) -> Dict[Category, Optional[float]]:
    resolved: Dict[Category, Optional[float]] = {}
    for key, value in (scores or {}).items():
        category = parse_category(key)
        if category is None:
            continue
        resolved[category] = None if is_missing_number(value) else safe_number(value)
    return resolved


def _pair(
    category: Category,
    static_scores: Dict[Category, Optional[float]],
    ai_scores: Dict[Category, Optional[float]],
) -> Tuple[float, Optional[float], float]:
    """(static, ai, variance) for one category; an absent AI score has no variance."""
    static = static_scores.get(category) or 0.0
    ai = ai_scores.get(category)
    variance = 0.0 if ai is None else abs(static - ai)
    return static, ai, variance


class ConsistencyValidator:
    """Stateless checks over (static, AI) category score pairs."""

    def __init__(self, config: MetricsConfig = DEFAULT_METRICS_CONFIG):
        self.config = config

    def determine_severity(self, variance: float, threshold: Optional[float] = None) -> Severity:
        if threshold is None:
            threshold = self.config.max_score_variance
        if variance <= threshold * 0.5:
            return Severity.LOW
        if variance <= threshold:
            return Severity.MEDIUM
        if variance <= threshold * 1.5:
            return Severity.HIGH
        return Severity.CRITICAL

    def variance_recommendation(self, category: str, static_value: float, ai_value: float, variance: float) -> str:
        limit = self.config.max_score_variance
        if variance <= limit:
            return f"{category} metrics are well aligned"
        higher, lower = ("static", "AI") if static_value > ai_value else ("AI", "static")
        if variance > limit * 2:
            return (
                f"Critical variance in {category}: {higher} analysis "
                f"({format_score(max(static_value, ai_value))}) significantly higher than {lower} "
                f"({format_score(min(static_value, ai_value))}). Review scoring algorithms."
            )
        return (
            f"Moderate variance in {category}: {higher} analysis shows higher score. "
            "Consider adjusting weighting or improving data quality."
        )

    # ------------------------------------------------------------------
    # Threshold gate used for AssessmentResult.validation
    # ------------------------------------------------------------------

    def check_consistency(self, static_scores: ScoreMap, ai_scores: Optional[ScoreMap]) -> ConsistencyCheck:
        """Any category at or above the variance threshold fails the check."""
        statics = _scores_by_category(static_scores)
        ais = _scores_by_category(ai_scores)
        variances: Dict[Category, float] = {}
        recommendations: List[str] = []
        issues: List[ValidationIssue] = []

        for category in ALL_CATEGORIES:
            static, ai, variance = _pair(category, statics, ais)
            variances[category] = variance
            if ai is None or variance < self.config.max_score_variance:
                continue
            recommendations.append(
                HIGH_VARIANCE_RECOMMENDATION.format(
                    category=category.value,
                    static=format_score(static),
                    ai=format_score(ai),
                    variance=format_score(variance),
                )
            )
            issues.append(
                ValidationIssue(
                    type=IssueType.VARIANCE,
                    category=category.value,
                    severity=self.determine_severity(variance),
                    message=f"High variance detected in {category.value}",
                    static_value=static,
                    ai_value=ai,
                    variance=variance,
                )
            )

        is_valid = not issues
        if not is_valid:
            recommendations.append(REVIEW_ALGORITHMS_RECOMMENDATION)
            recommendations.append(ADJUST_WEIGHTING_RECOMMENDATION)
        return ConsistencyCheck(
            is_valid=is_valid,
            variances=variances,
            recommendations=recommendations,
            issues=issues,
        )

    # ------------------------------------------------------------------
    # Issue report
    # ------------------------------------------------------------------

    def validate_metrics(
        self,
        static_scores: ScoreMap,
        ai_scores: Optional[ScoreMap],
        static_confidence: Optional[Mapping[Category | str, float]] = None,
        ai_confidence: Optional[Mapping[Category | str, float]] = None,
    ) -> ValidationReport:
        statics = _scores_by_category(static_scores)
        ais = _scores_by_category(ai_scores)
        static_conf = _scores_by_category(static_confidence)
        ai_conf = _scores_by_category(ai_confidence)
        threshold = self.config.min_confidence_threshold

        issues: List[ValidationIssue] = []
        recommendations: List[str] = []
        total_variance = 0.0

        for category in ALL_CATEGORIES:
            name = category.value
            static, ai, variance = _pair(category, statics, ais)
            total_variance += variance

            if ai is not None and variance >= self.config.max_score_variance:
                issues.append(
                    ValidationIssue(
                        type=IssueType.VARIANCE,
                        category=name,
                        severity=self.determine_severity(variance),
                        message=(
                            f"High variance detected: static={format_score(static)}, "
                            f"ai={format_score(ai)}, variance={format_score(variance)}"
                        ),
                        static_value=static,
                        ai_value=ai,
                        variance=variance,
                    )
                )
                recommendations.append(self.variance_recommendation(name, static, ai, variance))

            if static == 0 and (ai is None or ai == 0):
                issues.append(
                    ValidationIssue(
                        type=IssueType.MISSING_DATA,
                        category=name,
                        severity=Severity.MEDIUM,
                        message=f"No data available for {name} in both static and AI analysis",
                    )
                )
                recommendations.append(f"Investigate why {name} has no measurable data")

            category_static_conf = static_conf.get(category)
            if category_static_conf is None:
                category_static_conf = self.config.static_confidence
            category_ai_conf = ai_conf.get(category)
            if category_ai_conf is None:
                category_ai_conf = self.config.default_ai_confidence

            if category_static_conf < threshold:
                issues.append(
                    ValidationIssue(
                        type=IssueType.CONFIDENCE,
                        category=name,
                        severity=Severity.MEDIUM,
                        message=f"Low static analysis confidence: {format_score(category_static_conf)}%",
                        expected_value=threshold,
                    )
                )
            if category_ai_conf < threshold:
                issues.append(
                    ValidationIssue(
                        type=IssueType.CONFIDENCE,
                        category=name,
                        severity=Severity.MEDIUM,
                        message=f"Low AI analysis confidence: {format_score(category_ai_conf)}%",
                        expected_value=threshold,
                    )
                )
                recommendations.append(f"Improve AI analysis quality for {name} by providing more context")

        average_variance = total_variance / len(ALL_CATEGORIES)
        alignment_score = max(0.0, 100.0 - average_variance * 2)

        critical = sum(1 for issue in issues if issue.severity == Severity.CRITICAL)
        high = sum(1 for issue in issues if issue.severity == Severity.HIGH)
        is_valid = critical == 0 and high <= MAX_HIGH_SEVERITY_ISSUES

        if alignment_score < ALIGNMENT_REVIEW_THRESHOLD:
            recommendations.append(REVIEW_ALGORITHMS_RECOMMENDATION)
            recommendations.append(ADJUST_DATA_QUALITY_RECOMMENDATION)
        if len(issues) > SYSTEM_WIDE_REVIEW_ISSUE_COUNT:
            recommendations.append(SYSTEM_WIDE_REVIEW_RECOMMENDATION)

        return ValidationReport(
            is_valid=is_valid,
            alignment_score=alignment_score,
            issues=issues,
            recommendations=recommendations,
        )

    def generate_alignment_report(
        self,
        static_scores: ScoreMap,
        ai_scores: Optional[ScoreMap],
        static_confidence: Optional[Mapping[Category | str, float]] = None,
        ai_confidence: Optional[Mapping[Category | str, float]] = None,
    ) -> AlignmentReport:
        statics = _scores_by_category(static_scores)
        ais = _scores_by_category(ai_scores)
        alignments: Dict[Category, float] = {}
        critical_issues: List[ValidationIssue] = []
        suggestions: List[str] = []

        for category in ALL_CATEGORIES:
            static, ai, variance = _pair(category, statics, ais)
            alignment = max(0.0, 100.0 - variance * 5)
            alignments[category] = alignment
            if variance > self.config.max_score_variance * 2:
                critical_issues.append(
                    ValidationIssue(
                        type=IssueType.VARIANCE,
                        category=category.value,
                        severity=Severity.CRITICAL,
                        message=f"Critical variance in {category.value}: {format_score(variance)} points difference",
                        static_value=static,
                        ai_value=ai,
                        variance=variance,
                    )
                )
            if alignment < CATEGORY_ALIGNMENT_FOCUS_THRESHOLD:
                suggestions.append(
                    f"Focus on aligning {category.value} scoring between static and AI analysis"
                )

        confidences = [
            value
            for value in list(_scores_by_category(static_confidence).values())
            + list(_scores_by_category(ai_confidence).values())
            if value is not None
        ]
        level = ConfidenceLevel.LOW
        if confidences:
            average = sum(confidences) / len(confidences)
            if average >= HIGH_CONFIDENCE_LEVEL:
                level = ConfidenceLevel.HIGH
            elif average >= MEDIUM_CONFIDENCE_LEVEL:
                level = ConfidenceLevel.MEDIUM

        return AlignmentReport(
            overall_alignment=round_half_up(sum(alignments.values()) / len(alignments)),
            category_alignments=alignments,
            critical_issues=critical_issues,
            improvement_suggestions=suggestions,
            confidence_level=level,
        )

    # ------------------------------------------------------------------
    # Single metric checks
    # ------------------------------------------------------------------

    def validate_metric(
        self,
        metric_name: str,
        static_value: float,
        ai_value: float,
        ai_confidence: float,
    ) -> List[ValidationIssue]:
        static = safe_number(static_value)
        ai = safe_number(ai_value)
        confidence = safe_number(ai_confidence)
        variance = abs(static - ai)
        issues: List[ValidationIssue] = []

        if variance >= self.config.max_score_variance:
            if variance >= CRITICAL_VARIANCE:
                severity = Severity.CRITICAL
            elif variance >= HIGH_VARIANCE:
                severity = Severity.HIGH
            else:
                severity = Severity.MEDIUM
            issues.append(
                ValidationIssue(
                    type=IssueType.VARIANCE,
                    category=metric_name,
                    severity=severity,
                    message=(
                        f"High variance between static ({format_score(static)}) "
                        f"and AI ({format_score(ai)}) scores"
                    ),
                    static_value=static,
                    ai_value=ai,
                    variance=variance,
                )
            )

        if confidence < self.config.min_confidence_threshold:
            issues.append(
                ValidationIssue(
                    type=IssueType.CONFIDENCE,
                    category=metric_name,
                    severity=Severity.HIGH if confidence < VERY_LOW_AI_CONFIDENCE else Severity.MEDIUM,
                    message=f"Low AI confidence ({format_score(confidence)}%) for {metric_name}",
                    ai_value=ai,
                    expected_value=self.config.min_confidence_threshold,
                )
            )
        return issues

    def validate_category_scores(
        self, categories: Mapping[Category | str, CategoryScore]
    ) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for key, category_score in categories.items():
            name = str(key)
            score = category_score.score
            if score.confidence < self.config.min_confidence_threshold:
                issues.append(
                    ValidationIssue(
                        type=IssueType.CONFIDENCE,
                        category=name,
                        severity=Severity.HIGH if score.confidence < SEVERE_CONFIDENCE else Severity.MEDIUM,
                        message=f"Low confidence ({format_score(score.confidence)}%) for {name}",
                        expected_value=self.config.min_confidence_threshold,
                    )
                )
            if score.variance > self.config.max_score_variance:
                issues.append(
                    ValidationIssue(
                        type=IssueType.VARIANCE,
                        category=name,
                        severity=Severity.CRITICAL if score.variance > CRITICAL_VARIANCE else Severity.HIGH,
                        message=f"High variance ({format_score(score.variance)}) for {name}",
                        variance=score.variance,
                    )
                )
        return issues

    def validate_overall_assessment(
        self,
        overall_score: UnifiedMetric,
        categories: Mapping[Category | str, CategoryScore],
    ) -> ValidationReport:
        """Check a finished assessment: overall confidence plus every category score.

        The alignment score here is a severity penalty over the issues found,
        not a variance measure.
        """
        issues: List[ValidationIssue] = []
        threshold = self.config.min_confidence_threshold
        if overall_score.confidence < threshold:
            issues.append(
                ValidationIssue(
                    type=IssueType.CONFIDENCE,
                    category="overall",
                    severity=Severity.HIGH,
                    message=f"Low overall confidence ({format_score(overall_score.confidence)}%)",
                    expected_value=threshold,
                )
            )
        issues.extend(self.validate_category_scores(categories))

        penalty = sum(SEVERITY_PENALTIES[issue.severity.value] for issue in issues)
        recommendations: List[str] = []
        if any(issue.type == IssueType.VARIANCE for issue in issues):
            recommendations.append(ALIGN_METHODS_RECOMMENDATION)
        if any(issue.type == IssueType.CONFIDENCE for issue in issues):
            recommendations.append(IMPROVE_CONFIDENCE_RECOMMENDATION)

        return ValidationReport(
            is_valid=not issues,
            alignment_score=float(max(0, 100 - penalty)),
            issues=issues,
            recommendations=recommendations,
        )

    def validate_sub_metrics(
        self, category_name: str, sub_metrics: Mapping[str, UnifiedMetric]
    ) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for metric_name, metric in sub_metrics.items():
            if metric.confidence >= self.config.min_confidence_threshold:
                continue
            issues.append(
                ValidationIssue(
                    type=IssueType.CONFIDENCE,
                    category=f"{category_name}.{metric_name}",
                    severity=Severity.HIGH if metric.confidence < SEVERE_CONFIDENCE else Severity.MEDIUM,
                    message=f"Low confidence ({format_score(metric.confidence)}%) for {metric_name}",
                    expected_value=self.config.min_confidence_threshold,
                )
            )
        return issues

    def validate_metric_consistency(
        self,
        static_value: float,
        ai_value: float,
        category: str,
        expected_range: Optional[Tuple[float, float]] = None,
    ) -> MetricConsistency:
        static = safe_number(static_value)
        ai = safe_number(ai_value)
        variance = abs(static - ai)
        is_consistent = variance <= self.config.max_score_variance
        if expected_range is not None:
            low, high = expected_range
            if not (low <= static <= high and low <= ai <= high):
                is_consistent = False
        return MetricConsistency(
            is_consistent=is_consistent,
            variance=variance,
            severity=self.determine_severity(variance),
            recommendation=self.variance_recommendation(category, static, ai, variance),
        )

    # ------------------------------------------------------------------
    # File-size sub-report and combined report
    # ------------------------------------------------------------------

    def validate_file_size_consistency(
        self,
        static_report: Optional[FileSizeAnalysis],
        ai_report: Optional[FileSizeAnalysis],
    ) -> ValidationReport:
        category = Category.FILE_SIZE_OPTIMIZATION.value
        if static_report is None or ai_report is None:
            return ValidationReport(
                is_valid=False,
                alignment_score=0.0,
                issues=[
                    ValidationIssue(
                        type=IssueType.MISSING_DATA,
                        category=category,
                        severity=Severity.HIGH,
                        message="File size analysis data missing from static or AI analysis",
                    )
                ],
                recommendations=["Ensure file size analysis is performed in both static and AI analysis"],
            )

        issues: List[ValidationIssue] = []
        recommendations: List[str] = []
        static_compat = static_report.agent_compatibility.overall
        ai_compat = ai_report.agent_compatibility.overall
        variance = abs(static_compat - ai_compat)
        if variance > COMPATIBILITY_VARIANCE_LIMIT:
            issues.append(
                ValidationIssue(
                    type=IssueType.VARIANCE,
                    category=category,
                    severity=Severity.HIGH,
                    message=(
                        f"High variance in agent compatibility: static={format_score(static_compat)}%, "
                        f"ai={format_score(ai_compat)}%"
                    ),
                    static_value=static_compat,
                    ai_value=ai_compat,
                    variance=variance,
                )
            )
            recommendations.append("Review file size analysis algorithms for consistency")

        static_large = len(static_report.large_files)
        ai_large = len(ai_report.large_files)
        if abs(static_large - ai_large) > LARGE_FILE_COUNT_TOLERANCE:
            issues.append(
                ValidationIssue(
                    type=IssueType.INCONSISTENCY,
                    category=category,
                    severity=Severity.MEDIUM,
                    message=f"Inconsistent large file detection: static={static_large}, ai={ai_large}",
                )
            )
            recommendations.append("Ensure consistent file size thresholds across analysis methods")

        if variance <= COMPATIBILITY_VARIANCE_LIMIT:
            alignment_score = 100.0 - variance
        else:
            alignment_score = max(0.0, 100.0 - variance * 2)
        return ValidationReport(
            is_valid=not issues,
            alignment_score=alignment_score,
            issues=issues,
            recommendations=recommendations,
        )

    def generate_validation_report(
        self,
        static_analysis: StaticAnalysisResult,
        ai_assessment: Optional[AIAssessment],
        file_size_analysis: Optional[FileSizeAnalysis] = None,
    ) -> FullValidationReport:
        static_scores = static_category_scores(static_analysis, self.config)
        ai_scores = ai_category_scores(ai_assessment, self.config)
        ai_confidence = ai_assessment.confidence if ai_assessment is not None else None

        overall = self.validate_metrics(static_scores, ai_scores, ai_confidence=ai_confidence)

        static_report = file_size_analysis
        if static_report is None and static_analysis.kind == "repository":
            static_report = static_analysis.file_size_analysis
        ai_report = ai_assessment.file_size_analysis if ai_assessment is not None else None
        if static_report is None and ai_report is None:
            file_size = ValidationReport(is_valid=True, alignment_score=100.0)
        else:
            file_size = self.validate_file_size_consistency(static_report, ai_report)

        alignment = self.generate_alignment_report(static_scores, ai_scores, ai_confidence=ai_confidence)

        total_issues = len(overall.issues) + len(file_size.issues)
        critical_issues = overall.count(Severity.CRITICAL) + file_size.count(Severity.CRITICAL)
        if critical_issues > 0 or total_issues > 10:
            health = OverallHealth.POOR
        elif total_issues > 5:
            health = OverallHealth.FAIR
        elif total_issues > 2:
            health = OverallHealth.GOOD
        else:
            health = OverallHealth.EXCELLENT

        if health in (OverallHealth.POOR, OverallHealth.FAIR):
            logger.warning(
                "Validation health=%s total_issues=%s critical=%s",
                health.value,
                total_issues,
                critical_issues,
            )

        return FullValidationReport(
            overall=overall,
            file_size=file_size,
            alignment=alignment,
            summary=ValidationSummary(
                total_issues=total_issues,
                critical_issues=critical_issues,
                recommendations=[
                    *overall.recommendations,
                    *file_size.recommendations,
                    *alignment.improvement_suggestions,
                ],
                overall_health=health,
            ),
        )
