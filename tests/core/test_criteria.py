"""Tests for contentstore.core.repositories.criteria — CriteriaTranslator."""

from __future__ import annotations

import pytest

from contentstore.core.errors import CriteriaError, ValidationError
from contentstore.core.orm import BlockTable, BlockTranslationTable, LangTable
from contentstore.core.repositories.criteria import (
    CriteriaTranslator,
    Filter,
    OrderBy,
    order_by_translation,
    split_key,
)


@pytest.fixture
def translator():
    return CriteriaTranslator(BlockTable, BlockTranslationTable, BlockTranslationTable.block_id)


class TestSplitKey:
    def test_plain(self):
        assert split_key("weight") == (None, "weight")

    def test_relation(self):
        assert split_key("translations.title") == ("translations", "title")


class TestOrderByTranslation:
    def test_no_relation(self):
        assert order_by_translation([{"field": "weight", "relation": None}]) is False

    def test_relation(self):
        entries = [
            {"field": "weight", "relation": None},
            {"field": "title", "relation": "translations"},
        ]
        assert order_by_translation(entries) is True

    def test_missing_relation_declaration(self):
        with pytest.raises(ValidationError, match="OrderBy should always have relation property"):
            order_by_translation([{"field": "weight", "direction": "ASC"}])

    def test_typed_entries(self):
        assert order_by_translation([OrderBy("title", relation="translations")]) is True


class TestParseFilters:
    def test_equality(self, translator):
        parsed = translator.parse({"type": "basic"})
        assert parsed.filters == [Filter("type", "=", "basic")]

    def test_operator_tuple(self, translator):
        parsed = translator.parse({"weight": (">=", 10)})
        assert parsed.filters == [Filter("weight", ">=", 10)]

    def test_membership_list(self, translator):
        parsed = translator.parse({"id": [1, 2]})
        assert parsed.filters == [Filter("id", "in", [1, 2])]

    def test_mapping(self, translator):
        parsed = translator.parse({"region": {"operator": "!=", "value": "footer"}})
        assert parsed.filters == [Filter("region", "!=", "footer")]

    def test_lang_extracted(self, translator):
        parsed = translator.parse({"lang": "en", "type": "basic"})
        assert parsed.lang == "en"
        assert [f.field for f in parsed.filters] == ["type"]

    def test_relation_filter_kept_with_lang(self, translator):
        parsed = translator.parse({"lang": "en", "translations.title": ("like", "News%")})
        assert parsed.relation_filters == [
            Filter("title", "like", "News%", relation="translations")
        ]

    def test_relation_filter_dropped_without_lang(self, translator):
        parsed = translator.parse({"translations.title": "News"})
        assert parsed.relation_filters == []
        assert parsed.filters == []

    def test_unknown_field(self, translator):
        with pytest.raises(CriteriaError, match="Unknown field"):
            translator.parse({"colour": "red"})

    def test_unknown_relation(self, translator):
        with pytest.raises(CriteriaError, match="Unknown relation"):
            translator.parse({"lang": "en", "author.name": "x"})

    def test_unknown_translation_field(self, translator):
        with pytest.raises(CriteriaError):
            translator.parse({"lang": "en", "translations.colour": "x"})

    def test_unsupported_operator(self, translator):
        with pytest.raises(CriteriaError, match="Unsupported filter operator"):
            translator.parse({"weight": {"operator": "~", "value": 1}})


class TestParseOrder:
    def test_mapping_form(self, translator):
        parsed = translator.parse(None, {"weight": "desc"})
        assert parsed.order_by == [OrderBy("weight", "DESC", None)]

    def test_explicit_entries(self, translator):
        parsed = translator.parse(
            {"lang": "en"},
            [{"field": "title", "direction": "ASC", "relation": "translations"}],
        )
        assert parsed.order_by == [OrderBy("title", "ASC", "translations")]

    def test_relation_sort_without_lang(self, translator):
        with pytest.raises(ValidationError, match="'lang' criteria is required"):
            translator.parse(None, {"translations.title": "ASC"})

    def test_entry_without_relation(self, translator):
        with pytest.raises(ValidationError, match="relation property"):
            translator.parse(None, [{"field": "weight", "direction": "ASC"}])

    def test_entry_without_field(self, translator):
        with pytest.raises(CriteriaError):
            translator.parse(None, [{"direction": "ASC", "relation": None}])

    def test_bad_direction(self, translator):
        with pytest.raises(CriteriaError, match="Unsupported sort direction"):
            translator.parse(None, {"weight": "sideways"})


class TestListing:
    @pytest.fixture
    def blocks(self, block_repo, block_payload):
        made = []
        for title, weight, region in [("Beta", 2, "header"), ("Alpha", 1, "footer"), ("Gamma", 3, "header")]:
            made.append(
                block_repo.create(
                    block_payload(
                        weight=weight,
                        region=region,
                        translations={"lang_code": "en", "title": title},
                    )
                )
            )
        return made

    def test_default_order_weight(self, block_repo, blocks):
        beta, alpha, gamma = blocks
        assert block_repo.get_blocks().items == [alpha, beta, gamma]

    def test_filter(self, block_repo, blocks):
        beta, _, gamma = blocks
        assert block_repo.get_blocks({"region": "header"}).items == [beta, gamma]

    def test_translation_filter(self, block_repo, blocks):
        _, alpha, _ = blocks
        page = block_repo.get_blocks({"lang": "en", "translations.title": ("like", "Al%")})
        assert page.items == [alpha]
        assert page.total == 1

    def test_translation_sort(self, block_repo, blocks):
        beta, alpha, gamma = blocks
        page = block_repo.get_blocks({"lang": "en"}, {"translations.title": "DESC"})
        assert page.items == [gamma, beta, alpha]

    def test_translation_sort_requires_lang(self, block_repo, blocks):
        with pytest.raises(ValidationError):
            block_repo.get_blocks(order_by={"translations.title": "ASC"})

    def test_missing_translation_still_listed(self, block_repo, blocks):
        page = block_repo.get_blocks({"lang": "pl"})
        assert page.total == 3


class TestLangCriteria:
    def test_none_is_absent(self, translator):
        parsed = translator.parse({"lang": None, "translations.title": "News"})
        assert parsed.lang is None
        assert parsed.relation_filters == []

    def test_none_with_translation_sort(self, translator):
        with pytest.raises(ValidationError, match="'lang' criteria is required"):
            translator.parse({"lang": None}, {"translations.title": "ASC"})

    def test_lang_row(self, translator, store):
        lang = store.get(LangTable, "pl")
        assert translator.parse({"lang": lang}).lang == "pl"

    @pytest.mark.parametrize(
        "value", [["en", "pl"], ("!=", "en"), {"operator": "in", "value": ["en"]}, 1]
    )
    def test_non_scalar_rejected(self, translator, value):
        with pytest.raises(CriteriaError, match="single language"):
            translator.parse({"lang": value})
