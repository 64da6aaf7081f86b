from contextvars import ContextVar
from typing import Optional

_assessment_id_ctx: ContextVar[Optional[str]] = ContextVar("assessment_id", default=None)


def set_assessment_id(assessment_id: Optional[str]):
    return _assessment_id_ctx.set(assessment_id)


def reset_assessment_id(token) -> None:
    _assessment_id_ctx.reset(token)


def get_assessment_id() -> Optional[str]:
    return _assessment_id_ctx.get()
