"""Tests for cross-source consistency validation."""

import pytest

from agent_readiness.components.analysis.schemas import (
    AIAssessment,
    FileSizeAnalysis,
    RepositoryAnalysis,
    parse_static_analysis,
)
from agent_readiness.shared.categories import ALL_CATEGORIES, Category
from agent_readiness.components.scoring.reconciler import create_unified_metric
from agent_readiness.components.scoring.schemas import (
    CategoryScore,
    ConfidenceLevel,
    IssueType,
    MetricSource,
    OverallHealth,
    Severity,
    UnifiedMetric,
)
from agent_readiness.components.scoring.validator import ConsistencyValidator


@pytest.fixture
def validator():
    return ConsistencyValidator()


def _all(value):
    return {category: value for category in ALL_CATEGORIES}


# ===========================================================================
# determine_severity / variance_recommendation
# ===========================================================================


class TestSeverity:
    @pytest.mark.parametrize(
        "variance,expected",
        [
            (0, Severity.LOW),
            (7.5, Severity.LOW),
            (10, Severity.MEDIUM),
            (15, Severity.MEDIUM),
            (20, Severity.HIGH),
            (22.5, Severity.HIGH),
            (25, Severity.CRITICAL),
        ],
    )
    def test_bands_relative_to_threshold(self, validator, variance, expected):
        assert validator.determine_severity(variance) == expected

    def test_explicit_threshold(self, validator):
        assert validator.determine_severity(6, threshold=10) == Severity.MEDIUM

    def test_aligned_recommendation(self, validator):
        assert validator.variance_recommendation("documentation", 10, 12, 2) == (
            "documentation metrics are well aligned"
        )

    def test_moderate_recommendation(self, validator):
        message = validator.variance_recommendation("documentation", 2, 20, 18)
        assert message.startswith("Moderate variance in documentation: AI analysis shows higher score")

    def test_critical_recommendation(self, validator):
        message = validator.variance_recommendation("documentation", 35, 2, 33)
        assert message == (
            "Critical variance in documentation: static analysis (35) significantly "
            "higher than AI (2). Review scoring algorithms."
        )


# ===========================================================================
# check_consistency
# ===========================================================================


class TestCheckConsistency:
    def test_variance_at_threshold_fails(self, validator):
        static = _all(10.0)
        static[Category.DOCUMENTATION] = 5.0
        ai = {Category.DOCUMENTATION: 20.0}
        check = validator.check_consistency(static, ai)

        assert check.is_valid is False
        assert check.variances[Category.DOCUMENTATION] == 15
        assert len(check.issues) == 1
        issue = check.issues[0]
        assert issue.type == IssueType.VARIANCE
        assert issue.category == "documentation"
        assert issue.variance > 10
        assert (
            "High variance detected in documentation: static=5, ai=20, variance=15"
            in check.recommendations
        )
        assert "Increase confidence thresholds or adjust weighting factors" in check.recommendations

    def test_below_threshold_passes(self, validator):
        check = validator.check_consistency(_all(10.0), _all(14.0))
        assert check.is_valid is True
        assert check.recommendations == []
        assert all(v == pytest.approx(4.0) for v in check.variances.values())

    def test_absent_ai_has_no_variance(self, validator):
        check = validator.check_consistency(_all(0.0), None)
        assert check.is_valid is True
        assert set(check.variances.values()) == {0.0}

    def test_string_keys_resolved(self, validator):
        check = validator.check_consistency({"documentation": 0}, {"documentation": 20})
        assert check.is_valid is False
        assert check.variances[Category.DOCUMENTATION] == 20


# ===========================================================================
# validate_metrics
# ===========================================================================


class TestValidateMetrics:
    def test_aligned_scores(self, validator):
        report = validator.validate_metrics(_all(10.0), _all(10.0))
        assert report.is_valid is True
        assert report.passed is True
        assert report.alignment_score == 100
        assert report.issues == []

    def test_single_high_variance(self, validator):
        ai = _all(10.0)
        static = _all(10.0)
        static[Category.RISK_COMPLIANCE] = 0.0
        ai[Category.RISK_COMPLIANCE] = 20.0
        report = validator.validate_metrics(static, ai)

        assert report.is_valid is True
        assert report.count(Severity.HIGH) == 1
        assert report.issues[0].message == "High variance detected: static=0, ai=20, variance=20"
        assert report.alignment_score == pytest.approx(100 - (20 / 6) * 2)

    def test_too_many_high_issues_invalid(self, validator):
        static = _all(10.0)
        ai = _all(10.0)
        for category in ALL_CATEGORIES[:3]:
            static[category] = 0.0
            ai[category] = 20.0
        assert validator.validate_metrics(static, ai).is_valid is False

    def test_critical_variance_invalid(self, validator):
        report = validator.validate_metrics({"documentation": 0}, {"documentation": 25})
        assert report.count(Severity.CRITICAL) == 1
        assert report.is_valid is False

    def test_missing_data(self, validator):
        static = _all(10.0)
        static[Category.WORKFLOW_AUTOMATION] = 0.0
        report = validator.validate_metrics(static, None)
        missing = [i for i in report.issues if i.type == IssueType.MISSING_DATA]
        assert len(missing) == 1
        assert missing[0].message == (
            "No data available for workflowAutomation in both static and AI analysis"
        )
        assert "Investigate why workflowAutomation has no measurable data" in report.recommendations

    def test_low_ai_confidence(self, validator):
        report = validator.validate_metrics(
            _all(10.0), _all(10.0), ai_confidence={"documentation": 40}
        )
        assert len(report.issues) == 1
        assert report.issues[0].type == IssueType.CONFIDENCE
        assert report.issues[0].message == "Low AI analysis confidence: 40%"
        assert report.recommendations == [
            "Improve AI analysis quality for documentation by providing more context"
        ]

    def test_low_static_confidence(self, validator):
        report = validator.validate_metrics(
            _all(10.0), _all(10.0), static_confidence={"documentation": 50}
        )
        assert [i.message for i in report.issues] == ["Low static analysis confidence: 50%"]

    def test_system_wide_review_over_five_issues(self, validator):
        report = validator.validate_metrics(_all(0.0), _all(0.0))
        assert len(report.issues) == 6
        assert report.is_valid is True
        assert (
            "High number of validation issues detected - consider system-wide review"
            in report.recommendations
        )

    def test_poor_alignment_recommendations(self, validator):
        report = validator.validate_metrics(_all(0.0), _all(20.0))
        assert report.alignment_score == pytest.approx(60.0)
        assert "Consider reviewing scoring algorithms for better alignment" in report.recommendations
        assert "Increase data quality or adjust weighting factors" in report.recommendations

    def test_alignment_never_negative(self, validator):
        report = validator.validate_metrics(_all(0.0), _all(80.0))
        assert report.alignment_score == 0


# ===========================================================================
# generate_alignment_report
# ===========================================================================


class TestAlignmentReport:
    def test_category_alignment(self, validator):
        report = validator.generate_alignment_report({"documentation": 0}, {"documentation": 20})
        assert report.category_alignments[Category.DOCUMENTATION] == 0
        assert report.category_alignments[Category.RISK_COMPLIANCE] == 100
        assert report.overall_alignment == 83
        assert report.critical_issues == []
        assert report.improvement_suggestions == [
            "Focus on aligning documentation scoring between static and AI analysis"
        ]

    def test_critical_issue_above_twice_threshold(self, validator):
        report = validator.generate_alignment_report({"documentation": 0}, {"documentation": 35})
        assert len(report.critical_issues) == 1
        assert report.critical_issues[0].severity == Severity.CRITICAL

    def test_confidence_level_without_data(self, validator):
        report = validator.generate_alignment_report(_all(10.0), _all(10.0))
        assert report.confidence_level == ConfidenceLevel.LOW

    @pytest.mark.parametrize(
        "confidence,expected",
        [(90, ConfidenceLevel.HIGH), (70, ConfidenceLevel.MEDIUM), (50, ConfidenceLevel.LOW)],
    )
    def test_confidence_level(self, validator, confidence, expected):
        report = validator.generate_alignment_report(
            _all(10.0), _all(10.0), static_confidence=_all(confidence), ai_confidence=_all(confidence)
        )
        assert report.confidence_level == expected


# ===========================================================================
# Single metric checks
# ===========================================================================


class TestMetricChecks:
    def test_validate_metric_critical(self, validator):
        issues = validator.validate_metric("documentation", 0, 20, 80)
        assert [i.severity for i in issues] == [Severity.CRITICAL]

    def test_validate_metric_high(self, validator):
        issues = validator.validate_metric("documentation", 0, 16, 80)
        assert [i.severity for i in issues] == [Severity.HIGH]

    def test_validate_metric_confidence(self, validator):
        assert validator.validate_metric("documentation", 10, 10, 25)[0].severity == Severity.HIGH
        assert validator.validate_metric("documentation", 10, 10, 50)[0].severity == Severity.MEDIUM
        assert validator.validate_metric("documentation", 10, 10, 80) == []

    def test_validate_category_scores(self, validator):
        categories = {
            Category.DOCUMENTATION: CategoryScore(score=create_unified_metric(0, 20, 30, 30)),
            Category.RISK_COMPLIANCE: CategoryScore(score=create_unified_metric(10, 10)),
        }
        issues = validator.validate_category_scores(categories)
        assert {(i.type, i.severity) for i in issues} == {
            (IssueType.CONFIDENCE, Severity.HIGH),
            (IssueType.VARIANCE, Severity.HIGH),
        }
        assert all(i.category == "documentation" for i in issues)

    def test_validate_sub_metrics(self, validator):
        sub_metrics = {
            "cursor": create_unified_metric(10, None, 50),
            "claudeApi": create_unified_metric(10, None, 90),
        }
        issues = validator.validate_sub_metrics("fileSizeOptimization", sub_metrics)
        assert len(issues) == 1
        assert issues[0].category == "fileSizeOptimization.cursor"
        assert issues[0].severity == Severity.MEDIUM

    def test_metric_consistency(self, validator):
        result = validator.validate_metric_consistency(10, 12, "documentation")
        assert result.is_consistent is True
        assert result.severity == Severity.LOW

    def test_metric_consistency_out_of_range(self, validator):
        result = validator.validate_metric_consistency(10, 12, "documentation", expected_range=(0, 11))
        assert result.is_consistent is False


class TestOverallAssessment:
    def _overall(self, confidence):
        return UnifiedMetric(value=50, confidence=confidence, source=MetricSource.HYBRID)

    def test_clean_assessment(self, validator):
        categories = {c: CategoryScore(score=create_unified_metric(10, 10)) for c in ALL_CATEGORIES}
        report = validator.validate_overall_assessment(self._overall(80), categories)
        assert report.is_valid is True
        assert report.passed is True
        assert report.alignment_score == 100
        assert report.issues == []
        assert report.recommendations == []

    def test_low_overall_confidence(self, validator):
        report = validator.validate_overall_assessment(self._overall(40), {})
        assert report.is_valid is False
        [issue] = report.issues
        assert issue.type == IssueType.CONFIDENCE
        assert issue.category == "overall"
        assert issue.severity == Severity.HIGH
        assert issue.message == "Low overall confidence (40%)"
        assert issue.expected_value == 60
        assert report.alignment_score == 85
        assert report.recommendations == [
            "Improve data quality and analysis methods for better confidence"
        ]

    def test_includes_category_issues(self, validator):
        categories = {Category.DOCUMENTATION: CategoryScore(score=create_unified_metric(0, 20, 30, 30))}
        report = validator.validate_overall_assessment(self._overall(40), categories)
        assert len(report.issues) == 3
        assert all(i.severity == Severity.HIGH for i in report.issues)
        assert report.alignment_score == 55
        assert report.recommendations == [
            "Review and align static and AI analysis methods",
            "Improve data quality and analysis methods for better confidence",
        ]

    def test_variance_only_recommendation(self, validator):
        categories = {Category.DOCUMENTATION: CategoryScore(score=create_unified_metric(0, 25))}
        report = validator.validate_overall_assessment(self._overall(80), categories)
        assert [i.severity for i in report.issues] == [Severity.CRITICAL]
        assert report.alignment_score == 75
        assert report.recommendations == ["Review and align static and AI analysis methods"]

    def test_medium_issue_penalty(self, validator):
        categories = {Category.DOCUMENTATION: CategoryScore(score=create_unified_metric(10, 10, 50, 50))}
        report = validator.validate_overall_assessment(self._overall(80), categories)
        assert [i.severity for i in report.issues] == [Severity.MEDIUM]
        assert report.alignment_score == 92

    def test_alignment_floors_at_zero(self, validator):
        categories = {c: CategoryScore(score=create_unified_metric(0, 25)) for c in ALL_CATEGORIES}
        report = validator.validate_overall_assessment(self._overall(40), categories)
        assert report.count(Severity.CRITICAL) == 6
        assert report.alignment_score == 0


# ===========================================================================
# File-size consistency and combined report
# ===========================================================================


def _report(overall, large_files=0):
    return FileSizeAnalysis.model_validate(
        {
            "agentCompatibility": {"overall": overall},
            "largeFiles": [{"path": f"big{i}.bin"} for i in range(large_files)],
        }
    )


class TestFileSizeConsistency:
    def test_missing_report(self, validator):
        report = validator.validate_file_size_consistency(_report(80), None)
        assert report.is_valid is False
        assert report.alignment_score == 0
        assert report.issues[0].type == IssueType.MISSING_DATA
        assert report.issues[0].severity == Severity.HIGH

    def test_aligned(self, validator):
        report = validator.validate_file_size_consistency(_report(80), _report(70))
        assert report.is_valid is True
        assert report.alignment_score == 90

    def test_compatibility_variance(self, validator):
        report = validator.validate_file_size_consistency(_report(90), _report(60))
        assert report.is_valid is False
        assert report.alignment_score == 40
        assert report.issues[0].severity == Severity.HIGH

    def test_large_file_count_mismatch(self, validator):
        report = validator.validate_file_size_consistency(_report(80), _report(80, large_files=3))
        assert [i.type for i in report.issues] == [IssueType.INCONSISTENCY]


class TestValidationReport:
    def test_static_only_empty_repository(self, validator):
        report = validator.generate_validation_report(RepositoryAnalysis(), None)
        assert report.summary.total_issues == 5
        assert report.summary.critical_issues == 0
        assert report.summary.overall_health == OverallHealth.GOOD
        assert report.file_size.is_valid is True

    def test_complete_repository_with_matching_ai(self, validator, complete_repository, full_ai_assessment):
        analysis = parse_static_analysis(complete_repository)
        ai = AIAssessment.model_validate(
            {**full_ai_assessment, "fileSizeAnalysis": complete_repository["fileSizeAnalysis"]}
        )
        report = validator.generate_validation_report(analysis, ai)
        assert report.file_size.alignment_score == 100
        assert report.summary.overall_health == OverallHealth.EXCELLENT

    def test_only_one_file_size_report(self, validator, complete_repository):
        report = validator.generate_validation_report(parse_static_analysis(complete_repository), None)
        assert report.file_size.is_valid is False
        assert report.file_size.issues[0].type == IssueType.MISSING_DATA

    def test_many_issues_make_health_fair(self, validator):
        # five high-variance categories plus one low-confidence category
        ai = AIAssessment.model_validate(
            {"categories": _all_values(20), "confidence": {"documentation": 40}}
        )
        report = validator.generate_validation_report(RepositoryAnalysis(), ai)
        assert report.summary.total_issues == 6
        assert report.summary.overall_health == OverallHealth.FAIR

    def test_over_ten_issues_make_health_poor(self, validator):
        ai = AIAssessment.model_validate(
            {"categories": _all_values(20), "confidence": _all_values(40)}
        )
        report = validator.generate_validation_report(RepositoryAnalysis(), ai)
        assert report.summary.total_issues == 11
        assert report.summary.overall_health == OverallHealth.POOR


def _all_values(value):
    return {category.value: value for category in ALL_CATEGORIES}
