"""
Claude-backed readiness assessment provider.

Sends the static analysis summary to Claude, parses the JSON reply and
validates it into an ``AIAssessment``. The provider never raises: any
failure (no client, API error, malformed or out-of-range output) is logged
and reported as ``None`` so the engine runs in static-only mode.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from ....platform.config import settings
from ....shared.categories import ALL_CATEGORIES
from ...analysis.adapters import StaticAnalysisResult
from ...analysis.errors import AssessmentProviderError
from ...analysis.schemas import AIAssessment
from .model_fallback import candidate_models_for, is_model_not_found_error
from .prompts import build_prompt

logger = logging.getLogger("readiness.claude")

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the whole reply as JSON, else the outermost ``{...}`` block."""
    stripped = (text or "").strip()
    if not stripped:
        raise AssessmentProviderError("Empty response from Claude")
    try:
        payload = json.loads(stripped)
    except json.JSONDecodeError:
        match = _JSON_BLOCK.search(stripped)
        if not match:
            raise AssessmentProviderError("No valid JSON found in response") from None
        try:
            payload = json.loads(match.group())
        except json.JSONDecodeError as exc:
            raise AssessmentProviderError(f"Failed to parse JSON response: {exc}") from exc
    if not isinstance(payload, dict):
        raise AssessmentProviderError("Claude response was not a JSON object")
    return payload


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_assessment_payload(payload: Dict[str, Any]) -> AIAssessment:
    """Strict shape check for a model reply, then conversion to ``AIAssessment``."""
    score = payload.get("readinessScore")
    if not _is_number(score) or not 0 <= score <= 100:
        raise AssessmentProviderError("Invalid readinessScore: must be a number between 0 and 100")

    categories = payload.get("categories")
    if not isinstance(categories, dict):
        raise AssessmentProviderError("Invalid categories: must be an object")
    for category in ALL_CATEGORIES:
        value = categories.get(category.value)
        if not _is_number(value) or not 0 <= value <= 20:
            raise AssessmentProviderError(f"Invalid {category.value} score: must be a number between 0 and 20")

    for field in ("findings", "recommendations"):
        items = payload.get(field)
        if not isinstance(items, list):
            raise AssessmentProviderError(f"Invalid {field}: must be an array")
        if not all(isinstance(item, str) for item in items):
            raise AssessmentProviderError(f"Invalid {field}: items must be strings")

    confidence = payload.get("confidence")
    if confidence is not None and not isinstance(confidence, dict):
        confidence = None

    return AIAssessment.model_validate(
        {
            "readinessScore": score,
            "categories": categories,
            "confidence": confidence or {},
            "findings": payload["findings"],
            "recommendations": payload["recommendations"],
            "source": "claude",
        }
    )


class ClaudeAssessmentProvider:
    """Assessment provider backed by an injected Anthropic client."""

    def __init__(
        self,
        client: Any = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        """
        Args:
            client: An ``anthropic.Anthropic``-compatible client, or ``None``
                to disable the provider.
            model: Preferred model; falls back along the known snapshot chain.
            max_tokens: Response token cap.
        """
        self.client = client
        self.model = (model or settings.resolved_claude_model).strip()
        self.max_tokens = max_tokens or settings.MAX_TOKENS_PER_RESPONSE

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _create(self, system: str, prompt: str) -> Any:
        last_model_error: Exception | None = None
        for candidate in candidate_models_for(self.model):
            try:
                response = self.client.messages.create(
                    model=candidate,
                    max_tokens=self.max_tokens,
                    temperature=0,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                )
            except Exception as exc:
                if is_model_not_found_error(exc):
                    last_model_error = exc
                    logger.warning("Claude model unavailable (model=%s): %s", candidate, exc)
                    continue
                raise
            if candidate != self.model:
                logger.warning(
                    "Fell back to Claude model=%s after primary model=%s was unavailable",
                    candidate,
                    self.model,
                )
            return response
        if last_model_error is not None:
            raise last_model_error
        raise AssessmentProviderError("Claude call failed before receiving a response")

    def assess(self, static_analysis: StaticAnalysisResult) -> Optional[AIAssessment]:
        if not self.enabled:
            logger.info("Claude assessment skipped: no client configured")
            return None
        try:
            system, prompt = build_prompt(static_analysis)
            logger.info(
                "Requesting Claude assessment (kind=%s, prompt_chars=%d, model=%s)",
                static_analysis.kind,
                len(prompt),
                self.model,
            )
            response = self._create(system, prompt)
            text = "".join(
                getattr(block, "text", "") for block in (getattr(response, "content", None) or [])
            )
            if not text:
                raise AssessmentProviderError("No response content from Claude")
            logger.info("Claude assessment response received (chars=%d)", len(text))
            return validate_assessment_payload(extract_json_object(text))
        except AssessmentProviderError as exc:
            logger.warning("Claude assessment rejected: %s", exc)
            return None
        except Exception as exc:
            logger.error("Claude assessment request failed: %s", str(exc))
            return None


def build_claude_assessment_provider(
    api_key: Optional[str] = None,
    client: Any = None,
    model: Optional[str] = None,
) -> ClaudeAssessmentProvider:
    """Provider wired from settings; disabled when no API key is configured."""
    if client is None:
        key = (api_key if api_key is not None else settings.ANTHROPIC_API_KEY or "").strip()
        if key:
            from anthropic import Anthropic

            client = Anthropic(api_key=key, timeout=settings.CLAUDE_TIMEOUT_SECONDS)
        else:
            logger.warning("ANTHROPIC_API_KEY is not set; Claude assessments are disabled")
    return ClaudeAssessmentProvider(client=client, model=model)
