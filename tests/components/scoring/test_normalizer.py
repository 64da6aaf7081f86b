"""Tests for scale normalization and static/AI category score extraction."""

import pytest

from agent_readiness.components.analysis.schemas import (
    AIAssessment,
    RepositoryAnalysis,
    parse_static_analysis,
)
from agent_readiness.shared.categories import ALL_CATEGORIES, Category
from agent_readiness.components.scoring.normalizer import (
    ai_category_scores,
    normalize_to_category_scale,
    normalize_to_overall_scale,
    repository_raw_scores,
    static_category_scores,
    website_raw_scores,
)
from agent_readiness.platform.config import DEFAULT_METRICS_CONFIG


# ===========================================================================
# normalize_to_category_scale / normalize_to_overall_scale
# ===========================================================================


class TestScaling:
    def test_linear_scaling(self):
        assert normalize_to_category_scale(10, 20) == 10.0
        assert normalize_to_category_scale(50, 100) == 10.0

    def test_default_max_is_raw_category_max(self):
        assert normalize_to_category_scale(20) == 20.0

    def test_clamped_above_scale(self):
        assert normalize_to_category_scale(25, 20) == 20.0
        assert normalize_to_overall_scale(25, 20) == 100.0

    def test_negative_clamped_to_zero(self):
        assert normalize_to_category_scale(-5, 20) == 0.0

    def test_non_positive_max_yields_zero(self):
        assert normalize_to_category_scale(10, 0) == 0.0
        assert normalize_to_overall_scale(10, -1) == 0.0

    def test_malformed_raw_is_zero(self):
        assert normalize_to_category_scale("abc", 20) == 0.0
        assert normalize_to_category_scale(None, 20) == 0.0
        assert normalize_to_category_scale(float("nan"), 20) == 0.0

    def test_overall_scale_defaults_to_category_scale_max(self):
        assert normalize_to_overall_scale(10) == 50.0

    @pytest.mark.parametrize("raw", [-100, -1, 0, 3.3, 7, 19.99, 20, 21, 1e9])
    def test_results_always_in_range(self, raw):
        value = normalize_to_category_scale(raw, 20)
        assert 0.0 <= value <= DEFAULT_METRICS_CONFIG.category_scale


# ===========================================================================
# Static category scores
# ===========================================================================


class TestRepositoryScores:
    def test_bare_repository_points(self, bare_repository):
        raw = repository_raw_scores(parse_static_analysis(bare_repository))
        assert raw[Category.DOCUMENTATION] == 10.0
        assert raw[Category.INSTRUCTION_CLARITY] == 12.0
        assert raw[Category.WORKFLOW_AUTOMATION] == 0.0
        assert raw[Category.RISK_COMPLIANCE] == 5.0
        assert raw[Category.INTEGRATION_STRUCTURE] == 0.0

    def test_file_size_defaults_without_sub_report(self, bare_repository):
        raw = repository_raw_scores(parse_static_analysis(bare_repository))
        assert raw[Category.FILE_SIZE_OPTIMIZATION] == 10.0

    def test_file_size_from_agent_compatibility(self, complete_repository):
        raw = repository_raw_scores(parse_static_analysis(complete_repository))
        assert raw[Category.FILE_SIZE_OPTIMIZATION] == pytest.approx(18.0)

    def test_complete_repository_maxes_point_tables(self, complete_repository):
        raw = repository_raw_scores(parse_static_analysis(complete_repository))
        for category in ALL_CATEGORIES[:5]:
            assert raw[category] == 20.0

    def test_empty_repository_is_all_zero_except_file_size(self):
        scores = static_category_scores(RepositoryAnalysis())
        assert set(scores) == set(ALL_CATEGORIES)
        assert scores[Category.FILE_SIZE_OPTIMIZATION] == 10.0
        assert all(scores[c] == 0.0 for c in ALL_CATEGORIES if c != Category.FILE_SIZE_OPTIMIZATION)


class TestWebsiteScores:
    def test_sample_website_points(self, sample_website):
        raw = website_raw_scores(parse_static_analysis(sample_website))
        assert raw[Category.DOCUMENTATION] == 15.0
        assert raw[Category.INSTRUCTION_CLARITY] == 17.0
        assert raw[Category.WORKFLOW_AUTOMATION] == 18.0
        assert raw[Category.RISK_COMPLIANCE] == 18.0
        assert raw[Category.INTEGRATION_STRUCTURE] == 12.0
        assert raw[Category.FILE_SIZE_OPTIMIZATION] == 20.0

    def test_slow_page_earns_no_speed_points(self, sample_website):
        sample_website["pageLoadSpeed"] = 4500
        raw = website_raw_scores(parse_static_analysis(sample_website))
        assert raw[Category.WORKFLOW_AUTOMATION] == 12.0

    def test_missing_measurements_earn_nothing(self):
        analysis = parse_static_analysis({"websiteUrl": "https://bare.example"})
        raw = website_raw_scores(analysis)
        assert all(value == 0.0 for value in raw.values())


# ===========================================================================
# AI category scores
# ===========================================================================


class TestAICategoryScores:
    def test_no_assessment_means_all_absent(self):
        scores = ai_category_scores(None)
        assert set(scores) == set(ALL_CATEGORIES)
        assert all(value is None for value in scores.values())

    def test_partial_categories(self):
        assessment = AIAssessment.model_validate({"categories": {"documentation": 12}})
        scores = ai_category_scores(assessment)
        assert scores[Category.DOCUMENTATION] == 12.0
        assert scores[Category.RISK_COMPLIANCE] is None

    def test_zero_is_a_real_score(self):
        assessment = AIAssessment.model_validate({"categories": {"documentation": 0}})
        assert ai_category_scores(assessment)[Category.DOCUMENTATION] == 0.0

    def test_out_of_range_ai_score_clamped(self):
        assessment = AIAssessment.model_validate({"categories": {"documentation": 35}})
        assert ai_category_scores(assessment)[Category.DOCUMENTATION] == 20.0
