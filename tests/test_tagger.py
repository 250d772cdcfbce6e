"""Tests for core/tagger.py — ordered keyword tagging."""

from __future__ import annotations

from core.models import Category
from core.tagger import TAG_KEYWORDS, TAG_VOCABULARY, assign_tags


class TestAssignTags:
    def test_single_match(self):
        assert assign_tags("Notes on figma", Category.PRODUCT) == ["Design & UX"]

    def test_stops_after_two_in_vocabulary_order(self):
        # Matches Data, SEO & Growth and Teams & Leadership
        text = "metrics for seo across the team"
        assert assign_tags(text, Category.SEO) == ["Data", "SEO & Growth"]

    def test_order_is_vocabulary_not_text_order(self):
        text = "customer interviews then figma"
        assert assign_tags(text, Category.PRODUCT) == ["Design & UX", "Customer & Users"]

    def test_case_insensitive(self):
        assert assign_tags("FIGMA", Category.PRODUCT) == ["Design & UX"]

    def test_no_match_falls_back_to_category(self):
        assert assign_tags("zzz", Category.LEADERSHIP) == ["Leadership"]

    def test_empty_text_falls_back_to_category(self):
        assert assign_tags("", Category.BUSINESS) == ["Business"]

    def test_custom_cutoff(self):
        text = "metrics for seo across the team"
        assert len(assign_tags(text, Category.SEO, max_tags=3)) == 3


class TestVocabulary:
    def test_vocabulary_matches_keyword_table(self):
        assert TAG_VOCABULARY == tuple(tag for tag, _ in TAG_KEYWORDS)

    def test_tags_are_unique(self):
        assert len(set(TAG_VOCABULARY)) == len(TAG_VOCABULARY)
