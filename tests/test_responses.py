"""Tests for core/responses.py — response envelope normalisation."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from pydantic import BaseModel

from core.responses import ResponseShape, detect_shape, response_text


def text_block(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


class FakeEnvelope(BaseModel):
    id: str
    status: str


@pytest.mark.parametrize(
    "response, shape, text",
    [
        ({"output_text": "hello"}, ResponseShape.OUTPUT_TEXT, "hello"),
        ({"output": "plain"}, ResponseShape.OUTPUT_STRING, "plain"),
        ({"output": {"content": "nested"}}, ResponseShape.OUTPUT_CONTENT, "nested"),
        (
            {"choices": [{"message": {"content": "chat"}}]},
            ResponseShape.CHOICES,
            "chat",
        ),
        (
            SimpleNamespace(content=[text_block("1. Main idea: "), text_block("Teams")]),
            ResponseShape.CONTENT_BLOCKS,
            "1. Main idea: Teams",
        ),
    ],
)
def test_known_shapes(response, shape, text):
    assert detect_shape(response) == shape
    assert response_text(response) == text


class TestContentBlocks:
    def test_skips_non_text_blocks(self):
        response = SimpleNamespace(
            content=[
                SimpleNamespace(type="server_tool_use", name="web_search"),
                SimpleNamespace(type="web_search_tool_result", content=[]),
                text_block("Answer"),
            ]
        )
        assert response_text(response) == "Answer"

    def test_preamble_before_tool_call_dropped(self):
        response = SimpleNamespace(
            content=[
                text_block("I'll open the page."),
                SimpleNamespace(type="server_tool_use", name="web_search"),
                SimpleNamespace(type="web_search_tool_result", content=[]),
                text_block("1. Main idea: X\n"),
                text_block("2. Key insights: Y"),
            ]
        )
        assert response_text(response) == "1. Main idea: X\n2. Key insights: Y"

    def test_text_between_searches_dropped(self):
        response = SimpleNamespace(
            content=[
                SimpleNamespace(type="server_tool_use", name="web_search"),
                text_block("Let me search again."),
                SimpleNamespace(type="server_tool_use", name="web_search"),
                text_block("Final"),
            ]
        )
        assert response_text(response) == "Final"

    def test_output_text_preferred_over_blocks(self):
        response = SimpleNamespace(output_text="first", content=[text_block("second")])
        assert response_text(response) == "first"


class TestRawFallback:
    def test_unknown_dict_serialised_as_json(self):
        response = {"unexpected": 1}
        assert detect_shape(response) == ResponseShape.RAW
        assert json.loads(response_text(response)) == {"unexpected": 1}

    def test_pydantic_object_uses_model_dump_json(self):
        response = FakeEnvelope(id="resp_1", status="completed")
        assert json.loads(response_text(response)) == {"id": "resp_1", "status": "completed"}

    def test_empty_choices_is_raw(self):
        assert detect_shape({"choices": []}) == ResponseShape.RAW

    def test_none_never_returns_none(self):
        assert response_text(None) == "null"

    def test_empty_output_text_falls_through(self):
        response = {"output_text": "", "choices": [{"message": {"content": "chat"}}]}
        assert response_text(response) == "chat"
