from __future__ import annotations

HAIKU_ALIAS = "claude-3-5-haiku-latest"
HAIKU_SNAPSHOT = "claude-3-5-haiku-20241022"
HAIKU_LEGACY = "claude-3-haiku-20240307"
SONNET_ALIAS = "claude-3-5-sonnet-latest"
SONNET_SNAPSHOT = "claude-3-5-sonnet-20241022"

# Known aliases map to an ordered chain of interchangeable snapshots.
FALLBACK_CHAINS: dict[str, tuple[str, ...]] = {
    HAIKU_ALIAS: (HAIKU_ALIAS, HAIKU_SNAPSHOT, HAIKU_LEGACY),
    HAIKU_SNAPSHOT: (HAIKU_SNAPSHOT, HAIKU_ALIAS, HAIKU_LEGACY),
    HAIKU_LEGACY: (HAIKU_LEGACY, HAIKU_ALIAS, HAIKU_SNAPSHOT),
    SONNET_ALIAS: (SONNET_ALIAS, SONNET_SNAPSHOT, HAIKU_ALIAS),
    SONNET_SNAPSHOT: (SONNET_SNAPSHOT, SONNET_ALIAS, HAIKU_ALIAS),
}


def candidate_models_for(model: str | None, default: str = HAIKU_ALIAS) -> list[str]:
    """Ordered, de-duplicated models to try for an assessment request."""
    resolved = (model or "").strip() or default
    chain = FALLBACK_CHAINS.get(resolved.lower(), (resolved,))
    candidates: list[str] = []
    for name in (resolved, *chain):
        if name and name not in candidates:
            candidates.append(name)
    return candidates


def is_model_not_found_error(exc: BaseException | None) -> bool:
    text = str(exc or "").lower()
    if not text:
        return False
    if "not_found_error" in text:
        return True
    return "model" in text and ("not found" in text or "error code: 404" in text)
