"""Decision policies: fixed thresholds or generative with heuristic fallback."""
