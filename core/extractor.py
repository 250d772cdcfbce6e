"""Field extraction from the free-form analysis text.

The extraction prompt asks the model for numbered sections::

    1. Main idea: <one line>
    2. Key insights: <a few lines or bullets>
    3. ...

Both helpers are total: any string in, a usable title and summary out.
"""

from __future__ import annotations

import re

DEFAULT_TITLE = "Untitled"
DEFAULT_SUMMARY = "No summary available."
TITLE_MAX_CHARS = 60
SUMMARY_FALLBACK_CHARS = 300

_MAIN_IDEA_RE = re.compile(r"\d+\.\s*Main idea[ \t:]*\n?[ \t]*(.+?)(?:\n|$)", re.IGNORECASE)
_SECTION_HEADER_RE = re.compile(r"^\d+\.\s")
_KEY_INSIGHTS_RE = re.compile(
    r"\d+\.\s*Key insights[:\s]*\n?(.+?)(?=\n\s*\d+\.\s|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_MARKDOWN_LINK_RE = re.compile(r"\[.*?\]\(.*?\)")


def extract_title(text: str) -> str:
    """Return the "Main idea" line, cleaned and capped at 60 characters.

    Examples:
        >>> extract_title("1. Main idea: Scaling teams\\n2. Key insights: ...")
        'Scaling teams'
        >>> extract_title("no sections here")
        'Untitled'
    """
    match = _MAIN_IDEA_RE.search(text)
    if not match:
        return DEFAULT_TITLE

    # An empty section must not borrow the next section's header.
    if _SECTION_HEADER_RE.match(match.group(1).strip()):
        return DEFAULT_TITLE

    title = _MARKDOWN_LINK_RE.sub("", match.group(1).strip()).strip()
    title = title[:TITLE_MAX_CHARS].rstrip()
    return title or DEFAULT_TITLE


def extract_summary(text: str) -> str:
    """Return the "Key insights" section, or a truncated prefix of *text*.

    The section runs until the next numbered header line or the end of the
    text.  Without one, the first 300 characters of the text are used.
    """
    match = _KEY_INSIGHTS_RE.search(text)
    if match:
        summary = match.group(1).strip()
        if summary:
            return summary

    fallback = text.strip()[:SUMMARY_FALLBACK_CHARS].rstrip()
    return fallback or DEFAULT_SUMMARY


def extract_fields(text: str) -> tuple[str, str]:
    """Return ``(title, summary)`` for *text*."""
    return extract_title(text), extract_summary(text)
