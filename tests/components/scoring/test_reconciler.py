"""Tests for blending a static value with an optional AI value."""

import math

import pytest

from agent_readiness.components.scoring.reconciler import create_unified_metric
from agent_readiness.components.scoring.schemas import MetricSource
from agent_readiness.platform.config import DEFAULT_METRICS_CONFIG
from agent_readiness.shared.utils import round_half_up


class TestStaticOnly:
    def test_absent_ai_value_is_static(self):
        metric = create_unified_metric(15)
        assert metric.source == MetricSource.STATIC
        assert metric.value == 15
        assert metric.confidence == 80
        assert metric.variance == 0
        assert metric.is_validated is True
        assert metric.ai_value is None
        assert metric.static_value == 15

    def test_nan_ai_value_is_static(self):
        metric = create_unified_metric(12, float("nan"))
        assert metric.source == MetricSource.STATIC
        assert metric.value == 12

    def test_static_value_is_rounded(self):
        assert create_unified_metric(12.4).value == 12
        assert create_unified_metric(12.6).value == 13


class TestHybrid:
    def test_weighted_blend(self):
        metric = create_unified_metric(15, 18, 80, 90)
        assert metric.source == MetricSource.HYBRID
        assert metric.value == 17
        assert metric.confidence == 87
        assert metric.variance == pytest.approx(3.0)
        assert metric.is_validated is True
        assert metric.static_value == 15
        assert metric.ai_value == 18

    def test_hybrid_classification(self):
        metric = create_unified_metric(15, 18, 80, 85)
        assert metric.source == MetricSource.HYBRID
        assert metric.variance == 3

    def test_zero_ai_score_is_not_absent(self):
        metric = create_unified_metric(15, 0, 80, 70)
        assert metric.source == MetricSource.HYBRID
        assert metric.value == 5
        assert metric.confidence == 73

    def test_zero_ai_value_still_counts(self):
        metric = create_unified_metric(10, 0)
        assert metric.source == MetricSource.HYBRID
        assert metric.value == 3
        assert metric.variance == pytest.approx(10.0)

    def test_variance_above_threshold_not_validated(self):
        metric = create_unified_metric(0, 20)
        assert metric.variance == pytest.approx(20.0)
        assert metric.is_validated is False

    def test_variance_at_threshold_is_validated(self):
        metric = create_unified_metric(0, 15)
        assert metric.is_validated is True

    def test_malformed_static_read_as_zero(self):
        metric = create_unified_metric("junk", 10)
        assert metric.static_value == 0
        assert metric.value == 7
        assert metric.variance == pytest.approx(10.0)

    def test_confidence_clamped_to_scale(self):
        metric = create_unified_metric(10, 10, 250, 250)
        assert metric.confidence == 100

    def test_custom_weights(self):
        config = DEFAULT_METRICS_CONFIG.with_overrides(static_weight=0.5, ai_weight=0.5)
        metric = create_unified_metric(10, 20, config=config)
        assert metric.value == 15


# ===========================================================================
# round_half_up
# ===========================================================================


@pytest.mark.parametrize(
    "value,expected",
    [(4.5, 5), (4.4, 4), (0.5, 1), (-4.5, -4), (17.0, 17)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_metric_fields_are_finite():
    metric = create_unified_metric(float("inf"), 12)
    assert not math.isinf(metric.value)
    assert metric.value == round_half_up(12 * 0.7)


@pytest.mark.parametrize("static_value,expected", [(25, 20), (-5, 0), (20, 20)])
def test_static_value_kept_within_category_scale(static_value, expected):
    metric = create_unified_metric(static_value)
    assert metric.value == expected
    assert metric.static_value == static_value


def test_hybrid_value_kept_within_category_scale():
    metric = create_unified_metric(40, 40)
    assert metric.value == 20
    assert metric.variance == 0
    assert create_unified_metric(-10, -10).value == 0
