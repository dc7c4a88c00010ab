"""Tests for contentstore.core.repositories.pagination — Pager and Page."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from contentstore.core.errors import CriteriaError, ValidationError
from contentstore.core.orm import LangTable
from contentstore.core.repositories.pagination import Page, Pager, offset_for


class TestOffsetFor:
    @pytest.mark.parametrize(
        "page,size,expected",
        [(1, 10, 0), (2, 10, 10), (3, 25, 50), (5, 0, 0)],
    )
    def test_offset(self, page, size, expected):
        assert offset_for(page, size) == expected

    def test_page_zero(self):
        with pytest.raises(CriteriaError):
            offset_for(0, 10)

    def test_negative_size(self):
        with pytest.raises(ValidationError):
            offset_for(1, -1)


class TestPage:
    def test_has_more(self):
        assert Page(items=[1, 2], total=5, page=1, page_size=2).has_more is True
        assert Page(items=[5], total=5, page=3, page_size=2).has_more is False

    def test_unrestricted(self):
        page = Page(items=[1, 2, 3], total=3)
        assert page.is_unrestricted
        assert page.has_more is False

    def test_iteration_and_len(self):
        page = Page(items=["a", "b"], total=2, page=1, page_size=10)
        assert list(page) == ["a", "b"]
        assert len(page) == 2

    def test_to_dict(self):
        page = Page(items=[1], total=4, page=2, page_size=1)
        assert page.to_dict() == {"total": 4, "page": 2, "page_size": 1, "has_more": True}


class TestPager:
    @pytest.fixture
    def stmt(self):
        return select(LangTable).order_by(LangTable.code)

    def test_page(self, store, stmt):
        page = Pager(store).paginate(stmt, 1, 2)
        assert [lang.code for lang in page] == ["de", "en"]
        assert page.total == 3
        assert page.has_more

    def test_second_page(self, store, stmt):
        page = Pager(store).paginate(stmt, 2, 2)
        assert [lang.code for lang in page] == ["pl"]
        assert not page.has_more

    def test_unrestricted_when_page_missing(self, store, stmt):
        page = Pager(store).paginate(stmt, None, 2)
        assert len(page) == 3
        assert page.page is None

    def test_unrestricted_when_size_missing(self, store, stmt):
        page = Pager(store).paginate(stmt, 1, None)
        assert len(page) == 3

    def test_zero_size(self, store, stmt):
        page = Pager(store).paginate(stmt, 1, 0)
        assert page.items == []
        assert page.total == 3

    def test_invalid_page(self, store, stmt):
        with pytest.raises(CriteriaError):
            Pager(store).paginate(stmt, 0, 10)

    def test_bound(self, store, stmt):
        rows = store.scalars(Pager.bound(stmt, limit=1, offset=1))
        assert [lang.code for lang in rows] == ["en"]

    def test_bound_negative(self, stmt):
        with pytest.raises(CriteriaError):
            Pager.bound(stmt, limit=-1)


class TestRepositoryListing:
    def test_items_per_page_default(self, block_repo, block_payload):
        for _ in range(3):
            block_repo.create(block_payload())
        block_repo.items_per_page = 2
        page = block_repo.get_blocks(page=2)
        assert page.page_size == 2
        assert len(page) == 1
        assert page.total == 3

    def test_unrestricted_listing(self, block_repo, block_payload):
        for _ in range(3):
            block_repo.create(block_payload())
        page = block_repo.get_blocks(page=None)
        assert len(page) == 3
        assert page.is_unrestricted
