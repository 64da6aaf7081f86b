"""Pydantic models describing the reconciliation result payload."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...shared.categories import Category


class MetricSource(str, Enum):
    STATIC = "static"
    AI = "ai"
    HYBRID = "hybrid"


class IssueType(str, Enum):
    VARIANCE = "variance"
    CONFIDENCE = "confidence"
    MISSING_DATA = "missing_data"
    INCONSISTENCY = "inconsistency"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class OverallHealth(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ResultModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class UnifiedMetric(ResultModel):
    value: float
    confidence: float
    source: MetricSource
    static_value: Optional[float] = None
    ai_value: Optional[float] = None
    variance: float = 0.0
    is_validated: bool = True


class CategoryScore(ResultModel):
    score: UnifiedMetric
    sub_metrics: Dict[str, UnifiedMetric] = {}
    findings: List[str] = []
    recommendations: List[str] = []


class ValidationIssue(ResultModel):
    type: IssueType
    category: str
    severity: Severity
    message: str
    static_value: Optional[float] = None
    ai_value: Optional[float] = None
    expected_value: Optional[float] = None
    variance: Optional[float] = None


class ConsistencyCheck(ResultModel):
    is_valid: bool
    variances: Dict[Category, float]
    recommendations: List[str] = []
    issues: List[ValidationIssue] = []


class ValidationReport(ResultModel):
    is_valid: bool
    alignment_score: float
    issues: List[ValidationIssue] = []
    recommendations: List[str] = []

    @property
    def passed(self) -> bool:
        return self.is_valid

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)


class AlignmentReport(ResultModel):
    overall_alignment: int
    category_alignments: Dict[Category, float]
    critical_issues: List[ValidationIssue] = []
    improvement_suggestions: List[str] = []
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW


class MetricConsistency(ResultModel):
    is_consistent: bool
    variance: float
    severity: Severity
    recommendation: str


class ValidationSummary(ResultModel):
    total_issues: int
    critical_issues: int
    recommendations: List[str] = []
    overall_health: OverallHealth


class FullValidationReport(ResultModel):
    overall: ValidationReport
    file_size: ValidationReport
    alignment: AlignmentReport
    summary: ValidationSummary


class AssessmentValidation(ResultModel):
    is_valid: bool
    variances: Dict[Category, float]
    recommendations: List[str] = []
    alignment_score: float = 100.0
    issues: List[ValidationIssue] = []


class Insights(ResultModel):
    findings: List[str] = []
    recommendations: List[str] = []


class AssessmentStatus(ResultModel):
    static_analysis_enabled: bool = True
    ai_analysis_enabled: bool
    hybrid_mode: bool
    validation_passed: bool
    last_validation: datetime


class AssessmentMetadata(ResultModel):
    subject_kind: str
    total_files: int = 0
    analysis_duration_ms: float = 0.0
    version: str
    retry_count: int = 0
    fallback_used: bool = False
    ai_source: Optional[str] = None


class AssessmentResult(ResultModel):
    overall_score: UnifiedMetric
    categories: Dict[Category, CategoryScore]
    validation: AssessmentValidation
    insights: Insights
    assessment_status: AssessmentStatus
    metadata: AssessmentMetadata

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys, for result consumers."""
        return self.model_dump(mode="json", by_alias=True)
