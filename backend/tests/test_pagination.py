"""
test_pagination.py — Unit tests for the page grouping pass.

Tests cover:
  - Fixed-size chunking for individual visa tables
  - Dependent table layouts (cancellation, child counts, spouse placement)
  - Family visa layout: spouse alone, then two children per page
  - Explanation placement: inline vs trailing page, threshold override
  - Every table lands in exactly one group, in order
  - Empty inputs
"""

import pytest

from offer_engine.config import EXPLANATIONS_INLINE_MAX_ITEMS
from offer_engine.models.line_items import Explanation
from offer_engine.services.pagination import (
    chunk,
    dependent_chunks,
    paginate_dependent_tables,
    paginate_family_visa_tables,
    paginate_tables,
    route_explanations,
)

_NOTES = [Explanation(id="note", title="Note", explanation="A note.")]


def _keys(groups):
    return [[t.key for t in group] for group in groups]


def _page_keys(pages):
    return [[t.key for t in page.tables] for page in pages if page.tables]


class TestChunk:

    def test_chunk_sizes(self, make_table):
        tables = [make_table(f"t{i}") for i in range(5)]
        assert [len(c) for c in chunk(tables, 2)] == [2, 2, 1]

    def test_non_positive_size_treated_as_one(self, make_table):
        assert len(chunk([make_table("a"), make_table("b")], 0)) == 2


class TestDependentChunks:

    def test_spouse_and_three_children_with_cancellation(self, make_table):
        tables = [make_table("spouse"), make_table("c1"), make_table("c2"), make_table("c3")]
        groups = dependent_chunks(tables, has_spouse=True, number_of_children=3, has_visa_cancellation=True)
        assert _keys(groups) == [["spouse"], ["c1", "c2", "c3"]]

    def test_four_children_with_cancellation_no_spouse(self, make_table):
        tables = [make_table(f"c{i}") for i in range(1, 5)]
        groups = dependent_chunks(tables, has_spouse=False, number_of_children=4, has_visa_cancellation=True)
        assert _keys(groups) == [["c1", "c2", "c3"], ["c4"]]

    def test_short_content_stays_together(self, make_table):
        tables = [make_table("spouse"), make_table("c1"), make_table("c2")]
        groups = dependent_chunks(tables, has_spouse=True, number_of_children=2, has_visa_cancellation=False)
        assert _keys(groups) == [["spouse", "c1", "c2"]]

    def test_cancellation_with_one_child(self, make_table):
        tables = [make_table("spouse"), make_table("c1")]
        groups = dependent_chunks(tables, has_spouse=True, number_of_children=1, has_visa_cancellation=True)
        assert _keys(groups) == [["spouse", "c1"]]

    def test_many_children_without_cancellation(self, make_table):
        tables = [make_table("spouse"), make_table("c1"), make_table("c2"), make_table("c3")]
        groups = dependent_chunks(tables, has_spouse=True, number_of_children=3, has_visa_cancellation=False)
        assert _keys(groups) == [["spouse", "c1"], ["c2", "c3"]]

    def test_single_and_empty(self, make_table):
        assert _keys(dependent_chunks([make_table("spouse")], True, 0, True)) == [["spouse"]]
        assert dependent_chunks([], False, 0, False) == []

    @pytest.mark.parametrize("has_spouse, children, cancellation", [
        (True, 0, False),
        (True, 1, True),
        (True, 4, True),
        (False, 5, True),
        (True, 5, False),
        (False, 6, False),
    ])
    def test_every_table_placed_once_in_order(self, make_table, has_spouse, children, cancellation):
        keys = (["spouse"] if has_spouse else []) + [f"c{i}" for i in range(1, children + 1)]
        tables = [make_table(k) for k in keys]
        groups = dependent_chunks(tables, has_spouse, children, cancellation)
        assert [key for group in _keys(groups) for key in group] == keys
        assert all(groups)


class TestExplanationRouting:

    def test_inline_on_last_table_page(self, make_table):
        pages = paginate_tables([make_table("v1"), make_table("v2"), make_table("v3")], 2, _NOTES)
        assert len(pages) == 2
        assert pages[0].explanations == []
        assert pages[1].explanations == _NOTES
        assert not any(p.is_explanation_page for p in pages)

    def test_trailing_page_above_threshold(self, make_table):
        tables = [make_table(f"v{i}", rows=3) for i in range(3)]  # 9 items
        pages = paginate_tables(tables, 2, _NOTES)
        assert len(pages) == 3
        assert pages[-1].is_explanation_page
        assert pages[-1].tables == []
        assert all(p.explanations == [] for p in pages[:-1])

    def test_threshold_is_inclusive(self, make_table):
        tables = [make_table(f"v{i}", rows=4) for i in range(2)]
        assert EXPLANATIONS_INLINE_MAX_ITEMS == 8
        pages = paginate_tables(tables, 2, _NOTES)
        assert len(pages) == 1
        assert pages[0].explanations == _NOTES

    def test_threshold_override(self, make_table):
        pages = paginate_tables([make_table("v1", rows=3)], 2, _NOTES, inline_max_items=2)
        assert [p.is_explanation_page for p in pages] == [False, True]

    def test_page_indexes_sequential(self, make_table):
        tables = [make_table(f"v{i}", rows=3) for i in range(5)]
        pages = paginate_tables(tables, 2, _NOTES)
        assert [p.index for p in pages] == list(range(len(pages)))

    def test_no_tables(self):
        assert route_explanations([], []) == []
        pages = route_explanations([], _NOTES)
        assert len(pages) == 1
        assert pages[0].is_explanation_page
        assert pages[0].explanations == _NOTES


class TestDependentAndFamilyPages:

    def test_paginate_dependent_tables(self, make_table):
        tables = [make_table("spouse"), make_table("c1"), make_table("c2"), make_table("c3")]
        pages = paginate_dependent_tables(tables, True, 3, True, _NOTES)
        assert _page_keys(pages) == [["spouse"], ["c1", "c2", "c3"]]
        assert pages[-1].explanations == _NOTES

    def test_family_spouse_alone_then_two_children(self, make_table):
        pages = paginate_family_visa_tables(
            make_table("spouse"), [make_table("c1"), make_table("c2"), make_table("c3")], _NOTES
        )
        assert _page_keys(pages) == [["spouse"], ["c1", "c2"], ["c3"]]

    def test_family_children_only(self, make_table):
        pages = paginate_family_visa_tables(None, [make_table("c1")])
        assert _page_keys(pages) == [["c1"]]
