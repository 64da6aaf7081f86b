"""Assessment orchestration: static analysis, AI assessment with retries, reconciliation."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Optional, Tuple

from ...platform.config import settings
from ...platform.request_context import reset_assessment_id, set_assessment_id
from ..analysis.adapters import AssessmentAdapter, StaticAnalysisAdapter, StaticAnalysisResult
from ..analysis.schemas import AIAssessment, parse_ai_assessment, parse_static_analysis
from ..integrations.claude.service import build_claude_assessment_provider
from ..scoring.engine import ReconciliationEngine
from ..scoring.schemas import AssessmentResult
from .fallback import HeuristicAssessmentProvider

logger = logging.getLogger(__name__)


class AssessmentService:
    """Runs one assessment end to end.

    Static-analysis errors (``NotFoundError``, ``InvalidInputError``) propagate
    to the caller. The AI provider is retried while it returns nothing or
    raises; when it never succeeds the heuristic assessor is used if enabled,
    otherwise the engine runs static-only.
    """

    def __init__(
        self,
        static_provider: StaticAnalysisAdapter,
        ai_provider: Optional[AssessmentAdapter] = None,
        engine: Optional[ReconciliationEngine] = None,
        fallback_provider: Optional[AssessmentAdapter] = None,
        max_retries: Optional[int] = None,
        fallback_enabled: Optional[bool] = None,
    ):
        self.static_provider = static_provider
        self.ai_provider = ai_provider
        self.engine = engine or ReconciliationEngine()
        self.fallback_provider = fallback_provider or HeuristicAssessmentProvider()
        retries = settings.AI_ASSESSMENT_MAX_RETRIES if max_retries is None else max_retries
        self.max_retries = max(0, int(retries))
        self.fallback_enabled = (
            settings.AI_ASSESSMENT_FALLBACK_ENABLED if fallback_enabled is None else fallback_enabled
        )

    def _acquire_ai_assessment(self, analysis: StaticAnalysisResult) -> Tuple[Optional[AIAssessment], int]:
        """Return ``(assessment, retries_used)``."""
        if self.ai_provider is None:
            return None, 0
        for attempt in range(self.max_retries + 1):
            try:
                assessment = parse_ai_assessment(self.ai_provider.assess(analysis))
            except Exception:
                logger.exception("AI assessment attempt %d failed", attempt + 1)
                assessment = None
            if assessment is not None:
                return assessment, attempt
            logger.warning(
                "AI assessment attempt %d/%d returned no result",
                attempt + 1,
                self.max_retries + 1,
            )
        return None, self.max_retries

    def assess(self, identifier: str, assessment_id: Optional[str] = None) -> AssessmentResult:
        token = set_assessment_id(assessment_id or uuid.uuid4().hex)
        started = time.perf_counter()
        try:
            logger.info("Starting assessment for %s", identifier)
            analysis = parse_static_analysis(self.static_provider.analyze(identifier))

            ai_assessment, retry_count = self._acquire_ai_assessment(analysis)
            fallback_used = False
            if ai_assessment is None and self.fallback_enabled:
                ai_assessment = parse_ai_assessment(self.fallback_provider.assess(analysis))
                fallback_used = ai_assessment is not None
                if fallback_used:
                    logger.warning("Using heuristic assessment for %s", identifier)

            duration_ms = (time.perf_counter() - started) * 1000.0
            result = self.engine.assess(analysis, ai_assessment, analysis_duration_ms=duration_ms)
            metadata = result.metadata.model_copy(
                update={"retry_count": retry_count, "fallback_used": fallback_used}
            )
            logger.info(
                "Assessment finished for %s (duration_ms=%.1f, retries=%d, fallback=%s)",
                identifier,
                duration_ms,
                retry_count,
                fallback_used,
            )
            return result.model_copy(update={"metadata": metadata})
        finally:
            reset_assessment_id(token)


def build_assessment_service(
    static_provider: StaticAnalysisAdapter,
    *,
    client: Any = None,
    engine: Optional[ReconciliationEngine] = None,
) -> AssessmentService:
    """Service wired from settings with the Claude provider."""
    return AssessmentService(
        static_provider=static_provider,
        ai_provider=build_claude_assessment_provider(client=client),
        engine=engine,
    )
