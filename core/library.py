"""Browsing helpers for the saved link list.

Responsibilities:
- Collect the categories and tags present in the list (filter options)
- Filter by category and/or tag
- Sort newest-first or by title
- Free-text search over title, URL, content and category

All functions are pure and return new lists; the store's newest-first order is
the starting point and ``sort_links`` re-applies it after filtering.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from core.models import SavedLink

#: Filter value meaning "no filter".
ALL = "all"

SORT_KEYS = ("date", "title")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def categories_in(links: Iterable[SavedLink]) -> list[str]:
    """Distinct category values in first-seen order."""
    return list(dict.fromkeys(link.category.value for link in links))


def tags_in(links: Iterable[SavedLink]) -> list[str]:
    """Distinct tags in first-seen order."""
    return list(dict.fromkeys(tag for link in links for tag in link.tags))


def filter_links(
    links: Iterable[SavedLink],
    category: Optional[str] = None,
    tag: Optional[str] = None,
) -> list[SavedLink]:
    """Return the links matching *category* and *tag*.

    ``None``, ``""`` and ``"all"`` disable the corresponding filter.
    """
    category = None if category in (None, "", ALL) else category
    tag = None if tag in (None, "", ALL) else tag

    return [
        link
        for link in links
        if (category is None or link.category.value == category)
        and (tag is None or tag in link.tags)
    ]


def _created(link: SavedLink) -> datetime:
    created = link.created_at or _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def sort_links(links: Iterable[SavedLink], by: str = "date") -> list[SavedLink]:
    """Sort newest-first (``"date"``) or alphabetically (``"title"``).

    Raises:
        ValueError: For an unknown sort key.
    """
    if by == "date":
        return sorted(links, key=_created, reverse=True)
    if by == "title":
        return sorted(links, key=lambda link: (link.title or "").casefold())
    raise ValueError(f"Unknown sort key {by!r}; expected one of {SORT_KEYS}")


def search_links(links: Iterable[SavedLink], term: str) -> list[SavedLink]:
    """Case-insensitive substring search over title, URL, content and category."""
    needle = term.strip().lower()
    if not needle:
        return list(links)

    return [
        link
        for link in links
        if needle in link.title.lower()
        or needle in link.url.lower()
        or needle in link.content.lower()
        or needle in link.category.value.lower()
    ]
