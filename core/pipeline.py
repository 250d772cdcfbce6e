"""
Extraction pipeline for Link Shelf.

Turns a URL into a normalised ``NewLink`` ready to be stored.

Flow
────
1. fetch_text(url)
     → one Claude call with the built-in web_search tool; the provider
       retrieves the page, we never fetch it ourselves
     → the response envelope is normalised to a string by core.responses
2. source_from_url(url)          hostname without "www."   ("Unknown" on failure)
3. extract_fields(text)          title + summary           (core.extractor)
4. Classifier.classify(text)     category                  (core.categorizer)
5. assign_tags(text, category)   1–2 tags                  (core.tagger)

Only step 1 can fail the call (``ExtractionError``).  Steps 2–5 always produce
a value.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse

from core.categorizer import Classifier
from core.extractor import extract_fields
from core.models import Category, NewLink
from core.responses import response_text
from core.tagger import assign_tags

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)

WEB_SEARCH_BETA = "web-search-2025-03-05"
WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 3}

# ── Versioned extraction prompts ───────────────────────────────────────────

EXTRACTION_PROMPTS: dict[str, str] = {
    "3": (
        "You are a reading assistant. Open the URL the user sends and write a "
        "short analysis in exactly these numbered sections:\n"
        "1. Main idea: one line\n"
        "2. Key insights: 3-5 short bullet points\n"
        "3. Why it matters: two sentences"
    ),
    "4": (
        "You are a reading assistant building a personal knowledge base. Use web "
        "search to open the URL the user sends and read the page. Then write an "
        "analysis in plain text using exactly these numbered sections:\n"
        "1. Main idea: a single line of at most 60 characters, no links\n"
        "2. Key insights: 3-5 concise bullet points starting with '-'\n"
        "3. Practical takeaways: 2-3 bullet points\n"
        "4. Keywords: a comma-separated list of topics\n"
        "Base everything on the page content. If the page cannot be read, say so "
        "in the Main idea."
    ),
}


ALLOWED_SCHEMES = ("http", "https")


class ExtractionError(RuntimeError):
    """The content service could not produce text for a URL."""


# ── URL helpers ────────────────────────────────────────────────────────────


def validate_url(url: str) -> str:
    """Return *url* stripped, or raise if it is not an absolute URL.

    Raises:
        ValueError: If *url* is not a string, is blank, or is not an
            http(s) URL with a host.
    """
    if url is None:
        url = ""
    if not isinstance(url, str):
        raise ValueError("Please enter a valid URL")
    url = url.strip()
    if not url:
        raise ValueError("Please enter a URL")

    try:
        parsed = urlparse(url)
    except ValueError:
        raise ValueError("Please enter a valid URL") from None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        raise ValueError("Please enter a valid URL")
    return url


def source_from_url(url: str) -> str:
    """Return the hostname of *url* without a leading ``www.``.

    Examples:
        >>> source_from_url("https://www.example.com/article")
        'example.com'
        >>> source_from_url("not a url")
        'Unknown'
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        logger.warning("Could not parse URL for source: %r", url)
        return "Unknown"

    if not hostname:
        return "Unknown"
    return hostname.removeprefix("www.")


# ── Extractor ──────────────────────────────────────────────────────────────


class LinkExtractor:
    """Runs the extraction pipeline for one URL at a time."""

    def __init__(self, settings: Settings, classifier: Optional[Classifier] = None) -> None:
        """Initialise the extractor.

        Args:
            settings: Application configuration.
            classifier: Category classifier; built from *settings* if omitted.
        """
        self.settings = settings
        self.classifier = classifier or Classifier(settings)
        self._client: object = None  # Lazy-initialised anthropic.Anthropic

    @property
    def client(self) -> object:
        """Lazy-initialise and return the Anthropic SDK client."""
        if self._client is None:
            import anthropic
            self._client = anthropic.Anthropic(
                api_key=self.settings.anthropic_api_key,
                max_retries=0,
            )
        return self._client

    @property
    def prompt(self) -> str:
        """The system prompt for the configured prompt version."""
        version = self.settings.extraction_prompt_version
        if version not in EXTRACTION_PROMPTS:
            raise ExtractionError(f"Unknown extraction prompt version {version!r}")
        return EXTRACTION_PROMPTS[version]

    def fetch_text(self, url: str) -> str:
        """Ask the content service to read *url* and return its analysis text.

        Raises:
            ExtractionError: On any network, auth, quota or SDK error.
        """
        logger.info("Extracting content for %s (prompt v%s)", url, self.settings.extraction_prompt_version)
        try:
            response = self.client.beta.messages.create(
                model=self.settings.extraction_model,
                max_tokens=1500,
                betas=[WEB_SEARCH_BETA],
                tools=[WEB_SEARCH_TOOL],
                system=self.prompt,
                messages=[{"role": "user", "content": f"URL:\n{url}"}],
            )
        except ExtractionError:
            raise
        except Exception as exc:
            logger.exception("Content extraction failed for %s", url)
            raise ExtractionError(f"Could not process the URL: {exc}") from exc

        return response_text(response)

    def extract(
        self,
        url: str,
        category: Optional[Category] = None,
        tags: Optional[list[str]] = None,
    ) -> NewLink:
        """Run the full pipeline for a validated *url*.

        Args:
            url: An absolute URL (see ``validate_url``).
            category: Manual category; skips the classification step.
            tags: Manual tags; replace keyword tags when non-empty.

        Returns:
            A ``NewLink`` without ``id`` / ``created_at``.

        Raises:
            ExtractionError: If the content service call fails.
        """
        text = self.fetch_text(url)
        source = source_from_url(url)
        title, summary = extract_fields(text)

        if category is None:
            category = self.classifier.classify(text)

        manual_tags = [t.strip() for t in tags or [] if t and t.strip()]
        resolved_tags = list(dict.fromkeys(manual_tags)) or assign_tags(text, category)

        link = NewLink(
            url=url,
            title=title,
            summary=summary,
            content=text,
            category=category,
            tags=resolved_tags,
            source=source,
        )
        logger.info(
            "Extracted %s: title=%r category=%s tags=%s",
            source, link.title, link.category.value, link.tags,
        )
        return link
