import json
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic_settings import BaseSettings

from ..shared.categories import ALL_CATEGORIES, Category, parse_category
from ..shared.errors import ConfigurationError

DEFAULT_CLAUDE_MODEL = "claude-3-5-haiku-latest"

# Category weights (must sum to 1.0)
DEFAULT_CATEGORY_WEIGHTS: Dict[Category, float] = {
    Category.DOCUMENTATION: 0.20,
    Category.INSTRUCTION_CLARITY: 0.20,
    Category.WORKFLOW_AUTOMATION: 0.20,
    Category.RISK_COMPLIANCE: 0.20,
    Category.INTEGRATION_STRUCTURE: 0.10,
    Category.FILE_SIZE_OPTIMIZATION: 0.10,
}

_WEIGHT_TOLERANCE = 1e-3


def _coerce_category_weights(raw: Mapping[Any, Any]) -> Dict[Category, float]:
    weights: Dict[Category, float] = {}
    for key, value in (raw or {}).items():
        category = parse_category(key)
        if category is None:
            raise ConfigurationError(f"Unknown category in category weights: {key!r}")
        try:
            weight = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Weight for {category} must be numeric, got {value!r}") from None
        if weight < 0:
            raise ConfigurationError(f"Weight for {category} must not be negative")
        weights[category] = weight
    return weights


@dataclass(frozen=True)
class MetricsConfig:
    """Immutable scoring configuration captured by an engine at construction."""

    category_scale: float = 20.0
    overall_scale: float = 100.0
    confidence_scale: float = 100.0
    static_weight: float = 0.3
    ai_weight: float = 0.7
    category_weights: Mapping[Category, float] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS)
    )
    min_confidence_threshold: float = 60.0
    max_score_variance: float = 15.0
    static_confidence: float = 80.0
    default_ai_confidence: float = 70.0
    # Heuristic point totals and AI category scores are both reported out of 20.
    raw_category_max: float = 20.0

    def __post_init__(self) -> None:
        weights = _coerce_category_weights(self.category_weights)
        missing = [category.value for category in ALL_CATEGORIES if category not in weights]
        if missing:
            raise ConfigurationError(f"Category weights missing for: {', '.join(missing)}")
        total = sum(weights.values())
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise ConfigurationError(f"Category weights must sum to 1.0, got {total:.4f}")
        for name in ("category_scale", "overall_scale", "confidence_scale", "raw_category_max"):
            if float(getattr(self, name)) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.static_weight < 0 or self.ai_weight < 0:
            raise ConfigurationError("static_weight and ai_weight must not be negative")
        if abs((self.static_weight + self.ai_weight) - 1.0) > _WEIGHT_TOLERANCE:
            raise ConfigurationError(
                f"static_weight + ai_weight must sum to 1.0, got {self.static_weight + self.ai_weight:.4f}"
            )
        if self.max_score_variance < 0:
            raise ConfigurationError("max_score_variance must not be negative")
        object.__setattr__(
            self,
            "category_weights",
            MappingProxyType({category: weights[category] for category in ALL_CATEGORIES}),
        )

    def with_overrides(self, **overrides: Any) -> "MetricsConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown metrics config field(s): {', '.join(unknown)}")
        if "category_weights" in overrides:
            overrides["category_weights"] = dict(overrides["category_weights"])
        else:
            overrides["category_weights"] = dict(self.category_weights)
        return replace(self, **overrides)


DEFAULT_METRICS_CONFIG = MetricsConfig()


class Settings(BaseSettings):
    # Scoring scales and weights
    READINESS_CATEGORY_SCALE: float = 20.0
    READINESS_OVERALL_SCALE: float = 100.0
    READINESS_STATIC_WEIGHT: float = 0.3
    READINESS_AI_WEIGHT: float = 0.7
    # JSON object keyed by category wire name; must cover every category and sum to 1.0
    READINESS_CATEGORY_WEIGHTS: str = (
        '{"documentation":0.20,"instructionClarity":0.20,"workflowAutomation":0.20,'
        '"riskCompliance":0.20,"integrationStructure":0.10,"fileSizeOptimization":0.10}'
    )

    # Validation thresholds
    READINESS_MIN_CONFIDENCE_THRESHOLD: float = 60.0
    READINESS_MAX_SCORE_VARIANCE: float = 15.0
    READINESS_STATIC_CONFIDENCE: float = 80.0
    READINESS_DEFAULT_AI_CONFIDENCE: float = 70.0

    # Claude / Anthropic
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = DEFAULT_CLAUDE_MODEL
    MAX_TOKENS_PER_RESPONSE: int = 2048
    CLAUDE_TIMEOUT_SECONDS: float = 30.0

    # AI assessment orchestration
    AI_ASSESSMENT_MAX_RETRIES: int = 2
    AI_ASSESSMENT_FALLBACK_ENABLED: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @property
    def resolved_claude_model(self) -> str:
        """Claude model for assessments. Defaults to claude-3-5-haiku-latest."""
        model = (self.CLAUDE_MODEL or "").strip()
        return model or DEFAULT_CLAUDE_MODEL

    @property
    def category_weights(self) -> Dict[Category, float]:
        try:
            raw = json.loads(self.READINESS_CATEGORY_WEIGHTS or "{}")
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"READINESS_CATEGORY_WEIGHTS is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigurationError("READINESS_CATEGORY_WEIGHTS must be a JSON object")
        return _coerce_category_weights(raw)

    @property
    def metrics_config(self) -> MetricsConfig:
        return MetricsConfig(
            category_scale=self.READINESS_CATEGORY_SCALE,
            overall_scale=self.READINESS_OVERALL_SCALE,
            static_weight=self.READINESS_STATIC_WEIGHT,
            ai_weight=self.READINESS_AI_WEIGHT,
            category_weights=self.category_weights,
            min_confidence_threshold=self.READINESS_MIN_CONFIDENCE_THRESHOLD,
            max_score_variance=self.READINESS_MAX_SCORE_VARIANCE,
            static_confidence=self.READINESS_STATIC_CONFIDENCE,
            default_ai_confidence=self.READINESS_DEFAULT_AI_CONFIDENCE,
        )

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()


def get_metrics_config(overrides: Optional[Dict[str, Any]] = None) -> MetricsConfig:
    """Process-wide metrics configuration, optionally with per-instance overrides."""
    base = settings.metrics_config
    if overrides:
        return base.with_overrides(**overrides)
    return base
