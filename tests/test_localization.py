# 📄 File: tests/test_localization.py
# 🧭 Purpose (Layman Explanation):
# Checks that plants show the right everyday names for each language and country, and
# that a whole page of plants gets its names in a fixed, small number of lookups.
# 🧪 Purpose (Technical Summary):
# Tests for order_names, the tiered LocalizationResolver and the NameBatchLoader query
# budget against the seeded SQLite store.
# 🔗 Dependencies:
# pytest, pytest-asyncio
# 🔄 Connected Modules / Calls From:
# pytest

import pytest

from app.modules.plant_catalog.domain.models import LocalizedName
from app.modules.plant_catalog.domain.services import LocalizationResolver, NameBatchLoader, order_names
from app.modules.plant_catalog.infrastructure.cache import LookupTableCache
from app.modules.plant_catalog.infrastructure.database import LookupRepositoryImpl
from catalog_fixtures import (
    ALL_PLANTS,
    BASIL,
    COUNTRY_MX,
    HOLLY,
    LANG_EN,
    LANG_ES,
    MISSING_PLANT,
    OAK,
    SUNFLOWER,
    TOMATO,
)


def _name(common_name, country_id=None, is_primary=False):
    return LocalizedName(
        plant_id=TOMATO,
        language_id="es",
        country_id=country_id,
        common_name=common_name,
        is_primary=is_primary,
    )


class TestOrderNames:
    def test_country_specific_before_global(self):
        names = order_names([
            _name("Tomate", is_primary=True),
            _name("Jitomate", country_id=COUNTRY_MX),
        ])
        assert names == ["Jitomate", "Tomate"]

    def test_primary_then_lexicographic(self):
        names = order_names([
            _name("Zanahoria"),
            _name("Apio"),
            _name("Tomate", is_primary=True),
        ])
        assert names == ["Tomate", "Apio", "Zanahoria"]

    def test_duplicate_text_keeps_first_position(self):
        names = order_names([
            _name("English oak", is_primary=True),
            _name("English oak", country_id=COUNTRY_MX),
            _name("Pedunculate oak"),
        ])
        assert names == ["English oak", "Pedunculate oak"]

    def test_empty(self):
        assert order_names([]) == []


class TestLocalizationResolver:
    @pytest.mark.asyncio
    async def test_country_names_come_first(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(TOMATO, "es", "MX") == ["Jitomate", "Tomate"]

    @pytest.mark.asyncio
    async def test_codes_and_ids_are_interchangeable(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        by_code = await resolver.resolve_names(TOMATO, "es", "MX")
        by_id = await resolver.resolve_names(TOMATO, LANG_ES, COUNTRY_MX)
        assert by_code == by_id

    @pytest.mark.asyncio
    async def test_language_global_names_without_country(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(TOMATO, "es") == ["Tomate"]

    @pytest.mark.asyncio
    async def test_primary_name_leads(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(TOMATO, "en") == ["Tomato", "Garden tomato"]

    @pytest.mark.asyncio
    async def test_falls_back_to_default_language(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(OAK, "fr") == ["English oak", "Pedunculate oak"]

    @pytest.mark.asyncio
    async def test_country_only_names_hidden_from_global_requests(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(HOLLY, "es", "MX") == ["Acebo"]
        assert await resolver.resolve_names(HOLLY, "es") == ["Holly"]

    @pytest.mark.asyncio
    async def test_unnamed_plant_resolves_to_empty_list(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(SUNFLOWER, "es", "MX") == []

    @pytest.mark.asyncio
    async def test_default_language_request_skips_fallback_query(self, batch_loader, statements):
        resolver = LocalizationResolver(batch_loader)
        assert await resolver.resolve_names(SUNFLOWER, "en") == []
        assert statements.count == 1


class TestNameBatchLoader:
    @pytest.mark.asyncio
    async def test_whole_page_in_two_queries(self, batch_loader, statements):
        names = await batch_loader.load_names_for(ALL_PLANTS, "es", "MX")

        assert statements.count == 2
        assert names[TOMATO] == ["Jitomate", "Tomate"]
        assert names[BASIL] == ["Albahaca"]
        assert names[HOLLY] == ["Acebo"]
        assert names[OAK] == ["English oak", "Pedunculate oak"]
        assert SUNFLOWER not in names

    @pytest.mark.asyncio
    async def test_single_query_when_every_plant_is_named(self, batch_loader, statements):
        names = await batch_loader.load_names_for([TOMATO, BASIL], "es")
        assert statements.count == 1
        assert names == {TOMATO: ["Tomate"], BASIL: ["Albahaca"]}

    @pytest.mark.asyncio
    async def test_unknown_and_duplicate_ids(self, batch_loader, statements):
        names = await batch_loader.load_names_for([TOMATO, MISSING_PLANT, TOMATO], "en")
        assert names == {TOMATO: ["Tomato", "Garden tomato"]}
        assert statements.count == 1

    @pytest.mark.asyncio
    async def test_empty_input_touches_nothing(self, batch_loader, statements):
        assert await batch_loader.load_names_for([], "en") == {}
        assert statements.count == 0

    @pytest.mark.asyncio
    async def test_batch_matches_single_resolution(self, batch_loader):
        resolver = LocalizationResolver(batch_loader)
        batch = await batch_loader.load_names_for(ALL_PLANTS, "fr")
        for plant_id in ALL_PLANTS:
            assert batch.get(plant_id, []) == await resolver.resolve_names(plant_id, "fr")

    @pytest.mark.asyncio
    async def test_find_by_ids_keeps_order_and_skips_unknown(self, store, statements):
        plants = await store.find_by_ids([OAK, MISSING_PLANT, TOMATO, OAK], "en")

        assert [p.plant_id for p in plants] == [OAK, TOMATO]
        assert plants[0].common_names == ["English oak", "Pedunculate oak"]
        # one plant select plus one name select
        assert statements.count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("default_language, requested", [("en", LANG_EN), (LANG_EN, "en")])
    async def test_default_language_matches_by_code_or_id(
        self, name_repository, session_manager, statements, default_language, requested
    ):
        lookups = LookupTableCache(LookupRepositoryImpl(session_manager), ttl_seconds=3600)
        await lookups.refresh()
        loader = NameBatchLoader(name_repository, default_language, lambda: lookups.snapshot)
        statements.reset()

        assert await loader.load_names_for([SUNFLOWER], requested) == {}
        assert statements.count == 1

    @pytest.mark.asyncio
    async def test_unresolved_default_language_still_falls_back(self, name_repository, statements):
        loader = NameBatchLoader(name_repository, "en")
        assert await loader.load_names_for([SUNFLOWER], LANG_EN) == {}
        assert statements.count == 2
