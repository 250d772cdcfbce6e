"""Tests for core/extractor.py — title and summary extraction."""

from __future__ import annotations

from core.extractor import (
    DEFAULT_SUMMARY,
    DEFAULT_TITLE,
    extract_fields,
    extract_summary,
    extract_title,
)

SAMPLE = (
    "1. Main idea: Scaling teams\n"
    "2. Key insights: Focus on communication.\n"
)

STRUCTURED = """\
Here is the analysis.

1. Main idea: Why [roadmaps](https://example.com/r) fail
2. Key insights:
- Roadmaps are promises
- Outcomes beat outputs
3. Practical takeaways:
- Review quarterly
"""


class TestExtractTitle:
    def test_main_idea_line(self):
        assert extract_title(SAMPLE) == "Scaling teams"

    def test_strips_markdown_links(self):
        assert extract_title(STRUCTURED) == "Why  fail"

    def test_truncated_to_60_chars(self):
        text = "1. Main idea: " + "x" * 100
        assert extract_title(text) == "x" * 60

    def test_case_insensitive_and_any_number(self):
        assert extract_title("3. MAIN IDEA - Growth loops") == "- Growth loops"

    def test_value_on_next_line(self):
        assert extract_title("1. Main idea:\nDeep work matters\n2. Key insights: x") == "Deep work matters"

    def test_missing_section_is_untitled(self):
        assert extract_title("A page with no sections at all") == DEFAULT_TITLE

    def test_empty_text_is_untitled(self):
        assert extract_title("") == DEFAULT_TITLE

    def test_link_only_title_is_untitled(self):
        assert extract_title("1. Main idea: [link](https://x.com)") == DEFAULT_TITLE

    def test_empty_section_does_not_take_next_header(self):
        assert extract_title("1. Main idea:\n\n2. Key insights: Focus") == DEFAULT_TITLE

    def test_empty_section_followed_directly_by_next_header(self):
        assert extract_title("1. Main idea:\n2. Key insights: Focus") == DEFAULT_TITLE


class TestExtractSummary:
    def test_single_line_insights(self):
        assert extract_summary(SAMPLE) == "Focus on communication."

    def test_stops_at_next_numbered_section(self):
        assert extract_summary(STRUCTURED) == "- Roadmaps are promises\n- Outcomes beat outputs"

    def test_runs_to_end_of_text(self):
        assert extract_summary("2. Key insights: one\ntwo") == "one\ntwo"

    def test_fallback_is_first_300_chars(self):
        text = "y" * 500
        summary = extract_summary(text)
        assert summary == "y" * 300

    def test_short_fallback_returned_whole(self):
        assert extract_summary("Just a sentence.") == "Just a sentence."

    def test_empty_text_is_never_empty(self):
        assert extract_summary("   ") == DEFAULT_SUMMARY


class TestExtractFields:
    def test_returns_title_and_summary(self):
        assert extract_fields(SAMPLE) == ("Scaling teams", "Focus on communication.")
