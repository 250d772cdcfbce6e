"""Tests for core/library.py — filter, sort and search helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.library import (
    categories_in,
    filter_links,
    search_links,
    sort_links,
    tags_in,
)
from core.models import Category, SavedLink


def make_link(link_id: str, day: int, title: str, category: Category, tags: list[str], **extra) -> SavedLink:
    return SavedLink(
        id=link_id,
        url=f"https://example.com/{link_id}",
        title=title,
        summary="",
        content=extra.pop("content", ""),
        category=category,
        tags=tags,
        source="example.com",
        created_at=datetime(2025, 3, day, tzinfo=timezone.utc),
    )


@pytest.fixture
def links() -> list[SavedLink]:
    return [
        make_link("c", 3, "beta", Category.SEO, ["SEO & Growth"]),
        make_link("a", 1, "Alpha", Category.PRODUCT, ["Product Management", "Data"]),
        make_link("b", 2, "gamma", Category.SEO, ["Data"], content="Ranking factors explained"),
    ]


class TestFacets:
    def test_categories_first_seen_order(self, links):
        assert categories_in(links) == ["SEO", "Product"]

    def test_tags_first_seen_order(self, links):
        assert tags_in(links) == ["SEO & Growth", "Product Management", "Data"]

    def test_empty(self):
        assert categories_in([]) == []
        assert tags_in([]) == []


class TestFilterLinks:
    def test_no_filters(self, links):
        assert filter_links(links) == links

    def test_all_means_no_filter(self, links):
        assert filter_links(links, category="all", tag="all") == links

    def test_by_category(self, links):
        assert [l.id for l in filter_links(links, category="SEO")] == ["c", "b"]

    def test_by_tag(self, links):
        assert [l.id for l in filter_links(links, tag="Data")] == ["a", "b"]

    def test_category_and_tag(self, links):
        assert [l.id for l in filter_links(links, category="SEO", tag="Data")] == ["b"]


class TestSortLinks:
    def test_date_is_newest_first(self, links):
        assert [l.id for l in sort_links(links)] == ["c", "b", "a"]

    def test_title_is_case_insensitive(self, links):
        assert [l.title for l in sort_links(links, by="title")] == ["Alpha", "beta", "gamma"]

    def test_unknown_key_raises(self, links):
        with pytest.raises(ValueError, match="sort key"):
            sort_links(links, by="size")

    def test_does_not_mutate_input(self, links):
        before = list(links)
        sort_links(links, by="title")
        assert links == before


class TestSearchLinks:
    def test_matches_content(self, links):
        assert [l.id for l in search_links(links, "RANKING")] == ["b"]

    def test_matches_category(self, links):
        assert [l.id for l in search_links(links, "product")] == ["a"]

    def test_matches_url(self, links):
        assert [l.id for l in search_links(links, "example.com/c")] == ["c"]

    def test_blank_term_returns_all(self, links):
        assert search_links(links, "  ") == links
