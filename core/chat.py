"""Grounded chat over the saved links.

Each question is answered from a context block rebuilt from the full link list
at the time of asking.  Prior turns are never sent back to the model; the
transcript only lives in ``ChatSession`` (or the browser) for display.

The model must reply with ``{"answer": str, "sources": [int, ...]}`` where the
integers index into the link list used to build the context.  Indices are
checked against that list before display: anything out of range is dropped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from core.models import ChatMessage, ChatReply, SavedLink

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)

NOT_FOUND_ANSWER = "Sorry, I can't find anything about that in your saved links."
ERROR_ANSWER = "Error: Could not get a reply from the assistant. Check your API key and try again."

_SYSTEM_TEMPLATE = """\
You are a helpful assistant that answers the user's questions using ONLY the \
content of the links they have saved.
{context}
Strict instructions:
1. Answer ONLY with information from the saved links above.
2. Interpret the user's intent and connect related concepts. For example, if \
the user asks about "link building" and there is content about "internal \
linking", use that content.
3. If the answer is not in the saved links, not even by association of \
concepts, answer "{not_found}"
4. Do not add facts from general knowledge that are not in the text.
5. Always reply as JSON with this structure:
{{"answer": "your answer (markdown allowed)", "sources": [0, 2]}}
where "sources" lists the indices of the links you used. If you used no link, \
"sources" must be an empty list."""


# ── Prompt construction ────────────────────────────────────────────────────


def build_context(links: Sequence[SavedLink], max_chars: int = 5000) -> str:
    """Return the indexed context block for *links*, or ``""`` when empty.

    Each entry carries its index, title (or URL), category and the first
    *max_chars* characters of its content.
    """
    if not links:
        return ""

    parts = ["\n\nSaved links:\n"]
    for i, link in enumerate(links):
        parts.append(
            f"[{i}] {link.title or link.url}\n"
            f"Category: {link.category.value}\n"
            f"Content: {link.content[:max_chars]}...\n"
        )
    return "\n".join(parts)


def build_system_prompt(links: Sequence[SavedLink], max_chars: int = 5000) -> str:
    """Return the grounding system prompt for *links*."""
    return _SYSTEM_TEMPLATE.format(
        context=build_context(links, max_chars),
        not_found=NOT_FOUND_ANSWER,
    )


def resolve_sources(indices: Sequence[object], count: int) -> list[int]:
    """Keep the indices that address one of *count* links.

    Order is preserved; duplicates, negatives, non-integers and anything
    ``>= count`` are dropped silently.

    Examples:
        >>> resolve_sources([2, 0, 7, -1, 2], 3)
        [2, 0]
    """
    valid: list[int] = []
    for index in indices or []:
        if isinstance(index, bool) or not isinstance(index, int):
            continue
        if 0 <= index < count and index not in valid:
            valid.append(index)
    return valid


# ── Assistant ──────────────────────────────────────────────────────────────


class ChatAssistant:
    """Answers one question at a time against the current link list."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
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

    def ask(self, question: str, links: Sequence[SavedLink]) -> ChatMessage:
        """Answer *question* from *links*.

        Never raises: a failed request or unparsable reply becomes an
        assistant message explaining the failure, with no sources.
        """
        system = build_system_prompt(links, self.settings.context_chars)

        try:
            response = self.client.messages.parse(
                model=self.settings.chat_model,
                max_tokens=1500,
                system=system,
                messages=[{"role": "user", "content": question}],
                output_format=ChatReply,
            )
            reply = response.parsed_output
            if not isinstance(reply, ChatReply):
                raise TypeError(f"unexpected chat output: {reply!r}")
        except Exception:
            logger.exception("Chat request failed for question=%r", question)
            return ChatMessage(role="assistant", content=ERROR_ANSWER, sources=[])

        sources = resolve_sources(reply.sources, len(links))
        if len(sources) != len(reply.sources):
            logger.info("Dropped invalid source indices %s (links=%d)", reply.sources, len(links))
        return ChatMessage(role="assistant", content=reply.answer, sources=sources)


class ChatSession:
    """In-memory transcript of one chat session. Not persisted."""

    def __init__(self, assistant: ChatAssistant) -> None:
        self.assistant = assistant
        self.messages: list[ChatMessage] = []

    def send(self, question: str, links: Sequence[SavedLink]) -> ChatMessage:
        """Append the user turn and the assistant's reply; return the reply.

        Raises:
            ValueError: If *question* is blank.
        """
        question = question.strip()
        if not question:
            raise ValueError("Question must not be empty.")

        self.messages.append(ChatMessage(role="user", content=question))
        reply = self.assistant.ask(question, links)
        self.messages.append(reply)
        return reply
