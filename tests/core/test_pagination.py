"""Tests for pagination primitives."""

import math

import pytest
from hypothesis import given
from hypothesis import settings as hypothesis_settings
from hypothesis import strategies as st
from pydantic import ValidationError

from userbase.core.pagination import (
    MAX_PAGE_LIMIT,
    PaginationOptions,
    SortOrder,
    build_pagination_meta,
)


def test_defaults():
    options = PaginationOptions()

    assert options.page == 1
    assert options.limit == 10
    assert options.sort_by == "created_at"
    assert options.sort_order == SortOrder.desc
    assert options.offset == 0


def test_offset():
    assert PaginationOptions(page=3, limit=25).offset == 50


@pytest.mark.parametrize(
    "kwargs", [{"page": 0}, {"limit": 0}, {"limit": MAX_PAGE_LIMIT + 1}]
)
def test_out_of_range_options_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        PaginationOptions(**kwargs)


def test_second_of_two_pages():
    meta = build_pagination_meta(page=2, limit=10, total_items=15)

    assert meta.total_pages == 2
    assert meta.has_next_page is False
    assert meta.has_prev_page is True


def test_empty_result():
    meta = build_pagination_meta(page=1, limit=10, total_items=0)

    assert meta.total_pages == 0
    assert meta.has_next_page is False
    assert meta.has_prev_page is False


@given(
    page=st.integers(min_value=1, max_value=1000),
    limit=st.integers(min_value=1, max_value=MAX_PAGE_LIMIT),
    total_items=st.integers(min_value=0, max_value=100_000),
)
@hypothesis_settings(max_examples=200)
def test_meta_invariants(page: int, limit: int, total_items: int):
    meta = build_pagination_meta(page, limit, total_items)

    assert meta.total_pages == math.ceil(total_items / limit)
    assert meta.has_next_page == (page < meta.total_pages)
    assert meta.has_prev_page == (page > 1)
    # Pages cover every item with less than one page of slack.
    assert meta.total_pages * limit >= total_items
    assert meta.total_pages * limit - total_items < limit
