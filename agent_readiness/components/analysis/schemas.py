"""Pydantic models for the two analysis inputs the engine reconciles.

Static analyses arrive from an external provider as loosely-typed mappings
with camelCase keys. ``parse_static_analysis`` is the one place where such a
mapping becomes a tagged ``RepositoryAnalysis`` or ``WebsiteAnalysis``;
everything downstream matches on ``kind``.

Every numeric, flag and list field tolerates malformed provider output:
bad numbers become 0, bad lists become empty and flags are coerced to bool.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from ...shared.categories import Category, parse_category
from ...shared.utils import is_missing_number, safe_number
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

REPOSITORY_KIND = "repository"
WEBSITE_KIND = "website"

_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return safe_number(value) != 0
    return bool(value)


def _coerce_number(value: Any) -> float:
    return safe_number(value)


def _coerce_count(value: Any) -> int:
    return int(safe_number(value))


def _coerce_optional_number(value: Any) -> Optional[float]:
    if is_missing_number(value):
        return None
    return safe_number(value)


def _coerce_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _coerce_string_list(value: Any) -> List[str]:
    return [str(item) for item in _coerce_list(value) if item is not None and str(item).strip()]


def _coerce_record_list(value: Any) -> List[dict]:
    return [item for item in _coerce_list(value) if isinstance(item, Mapping)]


def _coerce_mapping(value: Any) -> dict:
    return dict(value) if isinstance(value, Mapping) else {}


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _coerce_optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


Flag = Annotated[bool, BeforeValidator(_coerce_flag)]
Number = Annotated[float, BeforeValidator(_coerce_number)]
Count = Annotated[int, BeforeValidator(_coerce_count)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(_coerce_optional_number)]
StringList = Annotated[List[str], BeforeValidator(_coerce_string_list)]
AnyList = Annotated[List[Any], BeforeValidator(_coerce_list)]
Text = Annotated[str, BeforeValidator(_coerce_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_coerce_optional_text)]


class AnalysisModel(BaseModel):
    """Base for provider-facing models: camelCase or snake_case keys, extras ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ---------------------------------------------------------------------------
# File-size sub-report
# ---------------------------------------------------------------------------

class FilesBySize(AnalysisModel):
    under_100kb: Count = Field(0, alias="under100KB")
    under_500kb: Count = Field(0, alias="under500KB")
    under_1mb: Count = Field(0, alias="under1MB")
    under_5mb: Count = Field(0, alias="under5MB")
    over_5mb: Count = Field(0, alias="over5MB")


class LargeFile(AnalysisModel):
    path: Text = ""
    size: Number = 0.0
    size_formatted: Text = ""
    type: Text = ""
    agent_impact: Dict[str, str] = {}
    recommendation: Text = ""

    @field_validator("agent_impact", mode="before")
    @classmethod
    def coerce_agent_impact(cls, value: Any) -> Dict[str, str]:
        return {str(k): str(v) for k, v in _coerce_mapping(value).items()}


class CriticalFile(LargeFile):
    is_optimal: Flag = True


class AgentCompatibility(AnalysisModel):
    cursor: Number = 0.0
    github_copilot: Number = 0.0
    claude_web: Number = 0.0
    claude_api: Number = 0.0
    overall: Number = 0.0

    def per_agent(self) -> Dict[str, float]:
        return {
            "cursor": self.cursor,
            "githubCopilot": self.github_copilot,
            "claudeWeb": self.claude_web,
            "claudeApi": self.claude_api,
        }


class ContextConsumption(AnalysisModel):
    instruction_files: Dict[str, Any] = {}
    total_context_files: Count = 0
    average_context_file_size: Number = 0.0
    context_efficiency: Text = ""
    recommendations: StringList = []

    @field_validator("instruction_files", mode="before")
    @classmethod
    def coerce_instruction_files(cls, value: Any) -> Dict[str, Any]:
        return _coerce_mapping(value)


class FileSizeAnalysis(AnalysisModel):
    total_files: Count = 0
    files_by_size: FilesBySize = FilesBySize()
    large_files: List[LargeFile] = []
    critical_files: List[CriticalFile] = []
    context_consumption: ContextConsumption = ContextConsumption()
    agent_compatibility: AgentCompatibility = AgentCompatibility()
    recommendations: StringList = []

    @field_validator("large_files", "critical_files", mode="before")
    @classmethod
    def coerce_file_records(cls, value: Any) -> List[dict]:
        return _coerce_record_list(value)

    @field_validator("files_by_size", "context_consumption", "agent_compatibility", mode="before")
    @classmethod
    def coerce_nested_reports(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value
        return _coerce_mapping(value)

    @property
    def suboptimal_critical_files(self) -> List[CriticalFile]:
        return [item for item in self.critical_files if not item.is_optimal]


def _coerce_file_size_analysis(value: Any) -> Any:
    if value is None or isinstance(value, BaseModel):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    return None


# ---------------------------------------------------------------------------
# Static analysis variants
# ---------------------------------------------------------------------------

class RepositoryAnalysis(AnalysisModel):
    kind: Literal["repository"] = REPOSITORY_KIND
    has_readme: Flag = False
    has_agents: Flag = False
    has_contributing: Flag = False
    has_license: Flag = False
    has_workflows: Flag = False
    has_tests: Flag = False
    error_handling: Flag = False
    languages: StringList = []
    file_count: Count = 0
    lines_of_code: Count = 0
    repository_size_mb: Number = Field(0.0, alias="repositorySizeMB")
    readme_content: OptionalText = None
    contributing_content: OptionalText = None
    agents_content: OptionalText = None
    workflow_files: StringList = []
    test_files: StringList = []
    file_size_analysis: Annotated[
        Optional[FileSizeAnalysis], BeforeValidator(_coerce_file_size_analysis)
    ] = None


class WebsiteAnalysis(AnalysisModel):
    kind: Literal["website"] = WEBSITE_KIND
    website_url: Text = ""
    page_title: Text = ""
    meta_description: Text = ""
    has_structured_data: Flag = False
    has_open_graph: Flag = False
    has_twitter_cards: Flag = False
    has_sitemap: Flag = False
    has_robots_txt: Flag = False
    has_favicon: Flag = False
    has_manifest: Flag = False
    has_service_worker: Flag = False
    page_load_speed: OptionalNumber = None
    mobile_friendly: Flag = False
    accessibility_score: OptionalNumber = None
    seo_score: OptionalNumber = None
    content_length: OptionalNumber = None
    image_count: OptionalNumber = None
    link_count: OptionalNumber = None
    heading_structure: Dict[str, float] = {}
    technologies: StringList = []
    security_headers: StringList = []
    social_media_links: AnyList = []
    contact_info: StringList = []
    navigation_structure: StringList = []
    file_count: Count = 0

    @field_validator("heading_structure", mode="before")
    @classmethod
    def coerce_heading_structure(cls, value: Any) -> Dict[str, float]:
        return {str(k): safe_number(v) for k, v in _coerce_mapping(value).items()}

    def heading_count(self, level: str) -> float:
        return self.heading_structure.get(level, 0.0)


StaticAnalysis = Annotated[Union[RepositoryAnalysis, WebsiteAnalysis], Field(discriminator="kind")]

_STATIC_ADAPTER: TypeAdapter = TypeAdapter(StaticAnalysis)

_WEBSITE_MARKERS = ("websiteUrl", "website_url", "pageTitle", "page_title")


def detect_subject_kind(payload: Mapping[str, Any]) -> str:
    """Classify an untyped analysis mapping. An explicit ``kind`` always wins."""
    explicit = str(payload.get("kind") or "").strip().lower()
    if explicit in (REPOSITORY_KIND, WEBSITE_KIND):
        return explicit
    if any(payload.get(marker) for marker in _WEBSITE_MARKERS):
        return WEBSITE_KIND
    return REPOSITORY_KIND


def parse_static_analysis(payload: Any) -> Union[RepositoryAnalysis, WebsiteAnalysis]:
    """Turn provider output into a tagged static analysis value."""
    if isinstance(payload, (RepositoryAnalysis, WebsiteAnalysis)):
        return payload
    if payload is None:
        return RepositoryAnalysis()
    if not isinstance(payload, Mapping):
        raise InvalidInputError(
            f"Static analysis must be a mapping, got {type(payload).__name__}"
        )
    data = dict(payload)
    data["kind"] = detect_subject_kind(data)
    return _STATIC_ADAPTER.validate_python(data)


# ---------------------------------------------------------------------------
# Generative-model assessment
# ---------------------------------------------------------------------------

def _coerce_category_scores(value: Any) -> Dict[Category, Optional[float]]:
    scores: Dict[Category, Optional[float]] = {}
    for key, raw in _coerce_mapping(value).items():
        category = parse_category(key)
        if category is None:
            continue
        scores[category] = None if is_missing_number(raw) else safe_number(raw)
    return scores


def _coerce_category_confidence(value: Any) -> Dict[Category, float]:
    confidence: Dict[Category, float] = {}
    for key, raw in _coerce_mapping(value).items():
        category = parse_category(key)
        if category is None or is_missing_number(raw):
            continue
        confidence[category] = safe_number(raw)
    return confidence


class AIAssessment(AnalysisModel):
    """Structured output of a generative-model assessment provider.

    ``categories`` may be partial; a category that is absent (or reported as
    null/NaN) is treated as not assessed. Scores are on the 0-20 raw scale.
    """

    readiness_score: OptionalNumber = None
    categories: Dict[Category, Optional[float]] = {}
    confidence: Dict[Category, float] = {}
    findings: StringList = []
    recommendations: StringList = []
    file_size_analysis: Annotated[
        Optional[FileSizeAnalysis], BeforeValidator(_coerce_file_size_analysis)
    ] = None
    source: Text = "ai"

    @field_validator("categories", mode="before")
    @classmethod
    def coerce_categories(cls, value: Any) -> Dict[Category, Optional[float]]:
        return _coerce_category_scores(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, value: Any) -> Dict[Category, float]:
        return _coerce_category_confidence(value)

    def score_for(self, category: Category) -> Optional[float]:
        return self.categories.get(category)

    def confidence_for(self, category: Category) -> Optional[float]:
        return self.confidence.get(category)


def parse_ai_assessment(payload: Any) -> Optional[AIAssessment]:
    """Accept provider output; anything unusable means "no AI assessment"."""
    if payload is None or isinstance(payload, AIAssessment):
        return payload
    if not isinstance(payload, Mapping):
        logger.warning(
            "Ignoring AI assessment of unexpected type %s; continuing static-only",
            type(payload).__name__,
        )
        return None
    return AIAssessment.model_validate(dict(payload))
