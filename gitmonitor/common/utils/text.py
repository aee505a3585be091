"""Text helpers for user-facing summaries."""


def truncate(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters for display."""
    text = (text or "").strip()
    return text[:limit]
