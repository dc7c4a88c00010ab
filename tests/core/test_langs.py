"""Tests for contentstore.core.repositories.langs -- LanguageLookup."""

from __future__ import annotations

import pytest

from contentstore.core.orm import LangTable
from contentstore.core.repositories.langs import LanguageLookup, lang_code


@pytest.fixture
def langs(store):
    return LanguageLookup(store)


class TestLangCode:
    def test_row(self):
        assert lang_code(LangTable(code="pl", i18n="pl_PL")) == "pl"

    def test_code(self):
        assert lang_code("en") == "en"


class TestLanguageLookup:
    def test_get_by_code(self, langs):
        assert langs.get_by_code("pl").i18n == "pl_PL"
        assert langs.get_by_code("xx") is None

    def test_get_enabled_default_first(self, langs):
        assert [lang.code for lang in langs.get_enabled()] == ["en", "pl"]

    def test_get_default(self, langs):
        assert langs.get_default().code == "en"

    def test_get_default_none(self, langs, store):
        with store.transaction():
            store.get(LangTable, "en").is_default = False
        assert langs.get_default() is None

    def test_resolve(self, langs, store):
        assert langs.resolve(store.get(LangTable, "de")) == "de"
        assert langs.resolve("pl") == "pl"
