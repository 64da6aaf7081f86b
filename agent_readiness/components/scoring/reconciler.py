from __future__ import annotations

from typing import Any

from ...platform.config import DEFAULT_METRICS_CONFIG, MetricsConfig
from ...shared.utils import clamp, is_missing_number, round_half_up, safe_number
from .schemas import MetricSource, UnifiedMetric


def create_unified_metric(
    static_value: Any,
    ai_value: Any = None,
    static_confidence: Any = 80,
    ai_confidence: Any = 70,
    config: MetricsConfig = DEFAULT_METRICS_CONFIG,
) -> UnifiedMetric:
    """Blend a static value with an optional AI value.

    An absent AI value (None or NaN) yields a static-source metric; any other
    AI value, including 0, yields a hybrid weighted by the configured
    static/AI weights. Malformed numbers are read as 0 and the blended value
    is kept within the category scale. Never raises.
    """
    static = safe_number(static_value)
    static_conf = clamp(safe_number(static_confidence), 0.0, config.confidence_scale)

    if is_missing_number(ai_value):
        return UnifiedMetric(
            value=round_half_up(clamp(static, 0.0, config.category_scale)),
            confidence=round_half_up(static_conf),
            source=MetricSource.STATIC,
            static_value=static,
            variance=0.0,
            is_validated=True,
        )

    ai = safe_number(ai_value)
    ai_conf = clamp(safe_number(ai_confidence), 0.0, config.confidence_scale)
    variance = abs(static - ai)
    blended = static * config.static_weight + ai * config.ai_weight
    return UnifiedMetric(
        value=round_half_up(clamp(blended, 0.0, config.category_scale)),
        confidence=round_half_up(static_conf * config.static_weight + ai_conf * config.ai_weight),
        source=MetricSource.HYBRID,
        static_value=static,
        ai_value=ai,
        variance=variance,
        is_validated=variance <= config.max_score_variance,
    )
