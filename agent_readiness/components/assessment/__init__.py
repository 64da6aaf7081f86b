"""Assessment orchestration and the heuristic fallback assessor."""
