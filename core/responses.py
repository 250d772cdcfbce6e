"""Normalisation of AI service responses into plain text.

Providers and SDK versions return text in different envelopes.  Rather than
sniffing shapes inline wherever text is needed, each response is tagged with a
``ResponseShape`` once and converted by ``response_text``:

==================  ==========================================================
``OUTPUT_TEXT``     ``response.output_text`` (Responses-style convenience)
``OUTPUT_STRING``   ``response.output`` is already a string
``OUTPUT_CONTENT``  ``response.output.content``
``CHOICES``         ``response.choices[0].message.content`` (chat completions)
``CONTENT_BLOCKS``  ``response.content`` list of blocks (Anthropic messages)
``RAW``             anything else; the whole object is serialised as JSON
==================  ==========================================================

Both SDK objects and plain dicts are accepted.  The result is never ``None``.
"""

from __future__ import annotations

import json
import logging
from enum import Enum

logger = logging.getLogger(__name__)

_TOOL_BLOCK_TYPES = frozenset(["server_tool_use", "web_search_tool_result", "tool_use", "tool_result"])


class ResponseShape(str, Enum):
    """The envelope a piece of response text was found in."""

    OUTPUT_TEXT = "output_text"
    OUTPUT_STRING = "output_string"
    OUTPUT_CONTENT = "output_content"
    CHOICES = "choices"
    CONTENT_BLOCKS = "content_blocks"
    RAW = "raw"


def _get(obj: object, name: str) -> object:
    """Attribute or key lookup; ``None`` when absent."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _first_choice_content(response: object) -> object:
    choices = _get(response, "choices")
    if not isinstance(choices, (list, tuple)) or not choices:
        return None
    message = _get(choices[0], "message")
    return _get(message, "content") if message is not None else None


def _block_texts(response: object) -> list[str]:
    """Text blocks written after the last tool block.

    Anything before a tool call is preamble ("I'll open the page."), not
    the answer.
    """
    blocks = _get(response, "content")
    if not isinstance(blocks, (list, tuple)):
        return []
    texts: list[str] = []
    for block in blocks:
        block_type = _get(block, "type")
        text = _get(block, "text")
        if block_type in _TOOL_BLOCK_TYPES:
            texts = []
        elif block_type == "text" and isinstance(text, str):
            texts.append(text)
    return texts


def detect_shape(response: object) -> ResponseShape:
    """Tag *response* with the envelope its text lives in."""
    if isinstance(_get(response, "output_text"), str) and _get(response, "output_text"):
        return ResponseShape.OUTPUT_TEXT

    output = _get(response, "output")
    if isinstance(output, str) and output:
        return ResponseShape.OUTPUT_STRING
    if output is not None and _get(output, "content"):
        return ResponseShape.OUTPUT_CONTENT

    if _first_choice_content(response):
        return ResponseShape.CHOICES
    if _block_texts(response):
        return ResponseShape.CONTENT_BLOCKS

    return ResponseShape.RAW


def _serialise(response: object) -> str:
    dump = getattr(response, "model_dump_json", None)
    if callable(dump):
        return dump()
    try:
        return json.dumps(response, default=str)
    except (TypeError, ValueError):
        return str(response)


def response_text(response: object) -> str:
    """Return the text carried by *response*, whatever its envelope.

    Examples:
        >>> response_text({"output_text": "hello"})
        'hello'
        >>> response_text({"choices": [{"message": {"content": "hi"}}]})
        'hi'
        >>> response_text({"unexpected": 1})
        '{"unexpected": 1}'
    """
    shape = detect_shape(response)

    if shape is ResponseShape.OUTPUT_TEXT:
        text = _get(response, "output_text")
    elif shape is ResponseShape.OUTPUT_STRING:
        text = _get(response, "output")
    elif shape is ResponseShape.OUTPUT_CONTENT:
        text = _get(_get(response, "output"), "content")
    elif shape is ResponseShape.CHOICES:
        text = _first_choice_content(response)
    elif shape is ResponseShape.CONTENT_BLOCKS:
        # Cited answers arrive as several adjacent text blocks.
        text = "".join(_block_texts(response))
    else:
        logger.warning("Unknown response structure; serialising the whole response")
        text = _serialise(response)

    return str(text if text is not None else "")
