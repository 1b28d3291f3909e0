"""Bound transcript length to the model's context budget."""

from .config import MAX_TRANSCRIPT_CHARS, TRUNCATION_MARKER


def apply_budget(text: str, max_chars: int = MAX_TRANSCRIPT_CHARS) -> str:
    """Return ``text`` unchanged if it fits, else its prefix plus a marker.

    Re-applying the budget to an already truncated string returns it as is,
    since its first ``max_chars`` characters are the same prefix.

    Examples:
        >>> apply_budget("abcdef", max_chars=3)
        'abc... [transcript truncated]'
        >>> apply_budget("abc", max_chars=3)
        'abc'
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def is_truncated(text: str) -> bool:
    return text.endswith(TRUNCATION_MARKER)
