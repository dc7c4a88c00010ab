"""Tests for contentstore.core.repositories.translations — single active translation."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from contentstore.core.errors import ActiveTranslationError, ValidationError
from contentstore.core.orm import BlockTranslationTable


@pytest.fixture
def block(block_repo, block_payload):
    return block_repo.create(block_payload())


class TestCreate:
    def test_first_translation_is_active(self, block_repo, block):
        rows = block_repo.translations.list_for(block)
        assert len(rows) == 1
        assert rows[0].is_active is True
        assert rows[0].title == "Example block title"

    def test_swap_keeps_one_active(self, block_repo, block):
        first = block_repo.translations.get_active(block.id, "en")
        second = block_repo.create_translation(
            block, {"lang_code": "en", "title": "New example title"}
        )

        rows = block_repo.translations.list_for(block, "en")
        assert [r.id for r in rows] == [first.id, second.id]
        assert [r.is_active for r in rows] == [False, True]
        assert block_repo.translations.get_active(block.id, "en").id == second.id

    def test_repeated_swaps(self, block_repo, block):
        for i in range(3):
            block_repo.create_translation(block, {"lang_code": "en", "title": f"v{i}"})
        rows = block_repo.translations.list_for(block, "en")
        assert len(rows) == 4
        assert sum(r.is_active for r in rows) == 1
        assert rows[-1].title == "v2"

    def test_languages_are_independent(self, block_repo, block):
        block_repo.create_translation(block, {"lang_code": "pl", "title": "Przykład"})
        assert block_repo.translations.get_active(block.id, "en").title == "Example block title"
        assert block_repo.translations.get_active(block.id, "pl").title == "Przykład"

    def test_other_entities_untouched(self, block_repo, block, block_payload):
        other = block_repo.create(block_payload())
        block_repo.create_translation(block, {"lang_code": "en", "title": "changed"})
        assert block_repo.translations.get_active(other.id, "en").is_active is True

    def test_active_translations_reloaded(self, block_repo, block):
        block_repo.create_translation(block, {"lang_code": "en", "title": "Fresh"})
        reloaded = block_repo.get_by_id(block.id)
        assert [t.title for t in reloaded.active_translations] == ["Fresh"]

    @pytest.mark.parametrize(
        "data,field",
        [
            ({"title": "No language"}, "lang_code"),
            ({"lang_code": "en"}, "title"),
            ({"lang_code": "en", "title": ""}, "title"),
        ],
    )
    def test_required_fields(self, block_repo, block, data, field):
        with pytest.raises(ValidationError) as exc_info:
            block_repo.create_translation(block, data)
        assert exc_info.value.field == field
        assert "Language code and title of translation is required" in str(exc_info.value)

    def test_no_change_on_validation_failure(self, block_repo, block):
        with pytest.raises(ValidationError):
            block_repo.create_translation(block, {"lang_code": "en"})
        assert len(block_repo.translations.list_for(block)) == 1

    def test_events(self, block_repo, block, recorded_events):
        block_repo.create_translation(block, {"lang_code": "en", "title": "Evented"})
        names = [e.event_type for e in recorded_events]
        assert names == ["block.translation.creating", "block.translation.created"]
        payload = recorded_events[-1].payload
        assert payload["entity"] is block
        assert payload["translation"].title == "Evented"

    def test_failing_handler_rolls_back_swap(self, block_repo, block, events):
        def boom(event):
            raise RuntimeError("indexer down")

        events.listen("block.translation.created", boom)
        with pytest.raises(Exception):
            block_repo.create_translation(block, {"lang_code": "en", "title": "Lost"})

        rows = block_repo.translations.list_for(block, "en")
        assert len(rows) == 1
        assert rows[0].is_active is True

    def test_invalidates_listing_cache(self, block_repo, block, cache):
        cache.set("blocks:filter:public", [1])
        cache.set("blocks:filter:admin", [1])
        block_repo.create_translation(block, {"lang_code": "en", "title": "Cache"})
        assert not cache.exists("blocks:filter:public")
        assert not cache.exists("blocks:filter:admin")


class TestDelete:
    def test_active_is_rejected(self, block_repo, block):
        active = block_repo.translations.get_active(block.id, "en")
        with pytest.raises(ActiveTranslationError, match="Cannot delete active translation"):
            block_repo.delete_translation(active)
        assert block_repo.get_block_translation_by_id(block, active.id) is not None

    def test_active_rejection_is_validation_error(self, block_repo, block):
        active = block_repo.translations.get_active(block.id, "en")
        with pytest.raises(ValidationError):
            block_repo.delete_translation(active)

    def test_inactive_is_removed(self, block_repo, block, store):
        old = block_repo.translations.get_active(block.id, "en")
        block_repo.create_translation(block, {"lang_code": "en", "title": "Replacement"})
        old = block_repo.get_block_translation_by_id(block, old.id)
        assert old.is_active is False

        assert block_repo.delete_translation(old) is True
        remaining = store.scalars(
            select(BlockTranslationTable).where(BlockTranslationTable.block_id == block.id)
        )
        assert [t.title for t in remaining] == ["Replacement"]


class TestLookups:
    def test_get_block_translation_by_id(self, block_repo, block):
        active = block_repo.translations.get_active(block.id, "en")
        assert block_repo.get_block_translation_by_id(block, active.id) is active

    def test_translation_of_other_block(self, block_repo, block, block_payload):
        other = block_repo.create(block_payload())
        foreign = block_repo.translations.get_active(other.id, "en")
        assert block_repo.get_block_translation_by_id(block, foreign.id) is None

    def test_missing(self, block_repo, block):
        assert block_repo.get_block_translation_by_id(block, 999) is None
        assert block_repo.translations.get_active(block.id, "de") is None
