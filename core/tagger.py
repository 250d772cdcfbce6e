"""Keyword tagging for saved links.

Tags come from a fixed topic vocabulary.  Matching is a plain lower-case
substring test, so the result is cheap and deterministic but not semantic:
``"ai"`` also matches inside ``"maintain"``.

The vocabulary is an ordered sequence of ``(tag, keywords)`` pairs.  Its order
is both the tie-break and the cut-off order: tags are collected in sequence
and collection stops at ``MAX_TAGS``.
"""

from __future__ import annotations

import logging

from core.models import Category

logger = logging.getLogger(__name__)

MAX_TAGS = 2

# ── Vocabulary ─────────────────────────────────────────────────────────────────

TAG_KEYWORDS: tuple[tuple[str, frozenset[str]], ...] = (
    ("AI", frozenset([
        "ai", "artificial intelligence", "machine learning", "gpt", "llm",
        "chatgpt", "openai", "neural", "agents", "automation with ai",
    ])),
    ("Product Management", frozenset([
        "product manager", "product management", "roadmap", "prioritization",
        "backlog", "mvp", "hypothesis", "validation", "discovery",
        "user research", "product thinking", "strategy", "feature", "pm",
        "launch", "iteration", "tradeoff",
    ])),
    ("Data", frozenset([
        "data", "analytics", "metrics", "kpi", "insights", "dashboards",
        "data-informed", "decision making", "experiments", "ab testing",
    ])),
    ("Automation & No-Code", frozenset([
        "nocode", "n8n", "zapier", "automation", "workflow", "automate",
        "make.com", "scripts", "bot", "process automation",
    ])),
    ("SEO & Growth", frozenset([
        "seo", "keywords", "search", "visibility", "content strategy",
        "growth", "organic", "ranking", "distribution",
    ])),
    ("Design & UX", frozenset([
        "design", "figma", "ui", "ux", "interface", "prototyping",
        "wireframe", "user flow", "experience", "design thinking",
    ])),
    ("Development", frozenset([
        "code", "developer", "software", "engineering", "frontend",
        "backend", "javascript", "api",
    ])),
    ("Philosophy & Mindset", frozenset([
        "mindset", "philosophy", "reflection", "meaning", "deep work",
        "thinking", "purpose", "values", "mental models",
    ])),
    ("Productivity", frozenset([
        "productivity", "efficiency", "workflow", "time management",
        "habits", "focus", "systems",
    ])),
    ("Teams & Leadership", frozenset([
        "team", "collaboration", "communication", "culture", "leadership",
        "alignment", "ownership", "accountability",
    ])),
    ("Customer & Users", frozenset([
        "customer", "users", "client", "feedback", "pain points",
        "user needs", "interviews",
    ])),
)

#: Every tag the keyword tagger can produce.
TAG_VOCABULARY: tuple[str, ...] = tuple(tag for tag, _ in TAG_KEYWORDS)


def assign_tags(text: str, category: Category, max_tags: int = MAX_TAGS) -> list[str]:
    """Return up to *max_tags* tags whose keywords occur in *text*.

    Args:
        text: Extracted text; lower-cased here before matching.
        category: The resolved category, used as the only tag when no
            keyword matches.
        max_tags: Cut-off for collected tags.

    Returns:
        A non-empty list of tag names in vocabulary order.

    Examples:
        >>> assign_tags("A roadmap for the data team", Category.PRODUCT)
        ['Product Management', 'Data']
        >>> assign_tags("nothing relevant", Category.SEO)
        ['SEO']
    """
    lower = text.lower()
    tags: list[str] = []

    for tag, keywords in TAG_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            tags.append(tag)
            if len(tags) >= max_tags:
                break

    if not tags:
        logger.debug("No tag keywords matched; falling back to category %s", category.value)
        tags.append(category.value)

    return tags
