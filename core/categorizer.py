"""Category classification for extracted link content.

Every saved link belongs to exactly one ``Category``.  Two policies exist and a
deployment picks one through ``Settings.classifier_policy``:

- ``"ai"``       one structured-output Claude call constrained to the enum
- ``"keyword"``  ordered keyword rules, no network call

Both always return a member of ``Category``.  The AI policy never raises: any
failure resolves to ``DEFAULT_CATEGORY`` and the pipeline carries on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.models import DEFAULT_CATEGORY, Category, CategoryChoice

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)


# ── Keyword rules ──────────────────────────────────────────────────────────────

#: Checked top to bottom; the first rule with any matching keyword wins.
CATEGORY_RULES: tuple[tuple[Category, frozenset[str]], ...] = (
    (Category.SEO, frozenset([
        "seo", "ranking", "serp", "backlink", "link building", "search engine",
        "organic traffic", "keyword research", "indexing",
    ])),
    (Category.PRODUCT, frozenset([
        "product manager", "product management", "roadmap", "backlog", "mvp",
        "user research", "product discovery", "feature", "prioritization",
    ])),
    (Category.ANALYSIS, frozenset([
        "analytics", "analysis", "metrics", "kpi", "dashboard", "cohort",
        "a/b test", "ab testing", "data-driven",
    ])),
    (Category.STRATEGY, frozenset([
        "strategy", "strategic", "competitive", "positioning", "go-to-market",
        "market share", "moat", "vision",
    ])),
    (Category.LEADERSHIP, frozenset([
        "leadership", "leader", "management", "manager", "culture", "hiring",
        "one-on-one", "feedback", "team",
    ])),
    (Category.FRAMEWORKS, frozenset([
        "framework", "mental model", "methodology", "okr", "jobs to be done",
        "canvas", "playbook",
    ])),
)

_CLASSIFIER_SYSTEM = (
    "You are a classifier. Given a piece of text, return JSON with a single "
    "field \"category\" whose value is exactly one of: "
    + ", ".join(c.value for c in Category)
    + ". Return only JSON, no commentary."
)


def classify_by_keywords(text: str) -> Category:
    """Classify *text* with the ordered keyword rules.

    Examples:
        >>> classify_by_keywords("Improve your ranking")
        <Category.SEO: 'SEO'>
        >>> classify_by_keywords("Quarterly earnings call")
        <Category.BUSINESS: 'Business'>
    """
    lower = text.lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in lower for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


# ── Classifier ─────────────────────────────────────────────────────────────────


class Classifier:
    """Resolves a single category for a piece of extracted text.

    The Anthropic client is lazy-initialised so that the keyword policy (and
    tests) never need a live API key.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._client: object = None  # Lazy-initialised anthropic.Anthropic

    @property
    def client(self) -> object:
        """Lazy-initialise and return the Anthropic SDK client."""
        if self._client is None:
            import anthropic
            # One attempt only; failures fall back to the default category.
            self._client = anthropic.Anthropic(
                api_key=self.settings.anthropic_api_key,
                max_retries=0,
            )
        return self._client

    def classify(self, text: str) -> Category:
        """Return the category for *text* under the configured policy."""
        if self.settings.classifier_policy == "keyword":
            return classify_by_keywords(text)
        return self.classify_with_ai(text)

    def classify_with_ai(self, text: str) -> Category:
        """Ask Claude for the category; ``DEFAULT_CATEGORY`` on any failure.

        Only the first ``settings.classify_chars`` characters are sent.
        """
        excerpt = text[: self.settings.classify_chars]
        if not excerpt.strip():
            return DEFAULT_CATEGORY

        try:
            response = self.client.messages.parse(
                model=self.settings.classifier_model,
                max_tokens=50,
                system=_CLASSIFIER_SYSTEM,
                messages=[{"role": "user", "content": excerpt}],
                output_format=CategoryChoice,
            )
            choice = response.parsed_output
            if not isinstance(choice, CategoryChoice):
                raise TypeError(f"unexpected classifier output: {choice!r}")
            return choice.category
        except Exception:
            logger.warning("AI categorization failed, using %s", DEFAULT_CATEGORY.value, exc_info=True)
            return DEFAULT_CATEGORY
