"""Whitespace normalization and title cleanup for scraped text."""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")

# Marketing copy that job boards glue onto the end of a title element
_TITLE_ARTIFACTS = [
    re.compile(r"\s*\.\s*Privacy Notice.*$", re.IGNORECASE),
    re.compile(r"\s*\.\s*Privacy.*$", re.IGNORECASE),
    re.compile(r"\s*Portfolio job opportunities\.?\s*", re.IGNORECASE),
    re.compile(r"\s*Your career\.?\s*", re.IGNORECASE),
    re.compile(r"\s*\d+[,.]?\d*\s+opportunities?\.?\s*", re.IGNORECASE),
    re.compile(r"\s*Build the future.*$", re.IGNORECASE),
    re.compile(r"\s*from here.*$", re.IGNORECASE),
]


def normalize_text(text: Optional[str]) -> str:
    """
    Trim text and collapse internal whitespace runs to a single space.

    Args:
        text: Raw text pulled from a page, or None.

    Returns:
        Normalized text ("" for None/empty input).

    Example:
        >>> normalize_text("  Senior\\n\\tEngineer  ")
        'Senior Engineer'
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", str(text)).strip()


def clean_title(title: Optional[str]) -> str:
    """Strip board chrome (privacy notices, opportunity counters) from a title."""
    cleaned = normalize_text(title)
    for pattern in _TITLE_ARTIFACTS:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


def truncate(text: Optional[str], max_length: int) -> str:
    """Shorten long text with an ellipsis."""
    text = normalize_text(text)
    if max_length <= 0 or len(text) <= max_length:
        return text
    if max_length <= 3:
        return text[:max_length]
    return text[: max_length - 3] + "..."
