# 📄 File: tests/test_engine.py
# 🧭 Purpose (Layman Explanation):
# Uses the catalog the way a host application would: looking plants up, adding and
# changing them, pairing companions, and getting clear errors for bad requests.
# 🧪 Purpose (Technical Summary):
# CatalogEngine facade tests: input validation with zero store statements, localized
# point/batch reads, detail reads, write commands with their error mapping, companion
# relationships and the lookup-backed language listing.
# 🔗 Dependencies:
# pytest, pytest-asyncio
# 🔄 Connected Modules / Calls From:
# pytest

import pytest

from app.shared.core.exceptions import (
    CompanionNotFoundError,
    DuplicateResourceError,
    PlantNotFoundError,
    ValidationError,
)
from catalog_fixtures import BASIL, COUNTRY_MX, HOLLY, MISSING_PLANT, OAK, SUNFLOWER, TOMATO


class TestValidationBeforeStore:
    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.find_by_id("not-a-uuid", "en"),
            lambda c: c.find_by_id(TOMATO, "English"),
            lambda c: c.find_by_id(TOMATO, "en", country_id="mexico"),
            lambda c: c.find_by_id(TOMATO, "en", timeout=0),
            lambda c: c.find_by_ids([TOMATO, "bad"], "en"),
            lambda c: c.search("x" * 201, language_id="en"),
            lambda c: c.search(search_filter={"limit": 0}, language_id="en"),
            lambda c: c.search(search_filter={"limit": 101}, language_id="en"),
            lambda c: c.search(search_filter={"min_height": 5, "max_height": 1}, language_id="en"),
            lambda c: c.search(search_filter={"hardiness_zone": "5,6"}, language_id="en"),
            lambda c: c.search(search_filter={"colour": "red"}, language_id="en"),
            lambda c: c.search(search_filter={"sun_requirements": ["moonlight"]}, language_id="en"),
            lambda c: c.count(search_filter={"min_height": -1}),
            lambda c: c.find_by_growing_conditions({"flowering_month": 13}, language_id="en"),
            lambda c: c.get_companions("bad"),
            lambda c: c.check_compatibility(TOMATO, TOMATO),
            lambda c: c.get_growing_conditions(TOMATO, country_id=""),
        ],
    )
    @pytest.mark.asyncio
    async def test_rejected_without_touching_the_store(self, catalog, statements, call):
        with pytest.raises(ValidationError) as exc_info:
            await call(catalog)
        assert exc_info.value.status_code == 422
        assert statements.count == 0

    @pytest.mark.asyncio
    async def test_validation_error_names_the_field(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            await catalog.search(search_filter={"limit": 0}, language_id="en")
        assert exc_info.value.details["field"] == "search_filter.limit"


class TestReads:
    @pytest.mark.asyncio
    async def test_find_by_id(self, catalog):
        plant = await catalog.find_by_id(TOMATO, "es", "MX", timeout=5)
        assert plant.full_botanical_name == "Solanum lycopersicum"
        assert plant.common_names == ["Jitomate", "Tomate"]
        assert plant.display_name == "Jitomate"
        assert plant.growing_conditions is None

    @pytest.mark.asyncio
    async def test_uppercase_uuid_is_accepted(self, catalog):
        plant = await catalog.find_by_id(TOMATO.upper(), "en")
        assert plant.plant_id == TOMATO

    @pytest.mark.asyncio
    async def test_unknown_plant(self, catalog):
        with pytest.raises(PlantNotFoundError) as exc_info:
            await catalog.find_by_id(MISSING_PLANT, "en")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_unnamed_plant_shows_botanical_name(self, catalog):
        plant = await catalog.find_by_id(SUNFLOWER, "fr")
        assert plant.common_names == []
        assert plant.display_name == "Helianthus annuus"

    @pytest.mark.asyncio
    async def test_find_by_botanical_name_ignores_case_and_spacing(self, catalog):
        plant = await catalog.find_by_botanical_name("  solanum   LYCOPERSICUM ", "es", "MX")
        assert plant.plant_id == TOMATO
        assert plant.common_names == ["Jitomate", "Tomate"]

    @pytest.mark.asyncio
    async def test_find_by_botanical_name_errors(self, catalog, statements):
        with pytest.raises(PlantNotFoundError):
            await catalog.find_by_botanical_name("Solanum tuberosum", "en")
        statements.reset()
        with pytest.raises(ValidationError) as exc_info:
            await catalog.find_by_botanical_name("   ", "en")
        assert exc_info.value.details["field"] == "botanical_name"
        assert statements.count == 0

    @pytest.mark.asyncio
    async def test_find_by_species_includes_cultivars(self, catalog):
        cultivar = await catalog.create_plant(
            family_name="Solanaceae", genus_name="Solanum", species_name="lycopersicum", cultivar_name="San Marzano"
        )
        result = await catalog.find_by_species("solanum", "Lycopersicum", language_id="en")
        assert [p.plant_id for p in result.items] == [TOMATO, cultivar.plant_id]
        assert (await catalog.find_by_species("Solanum", "tuberosum", language_id="en")).items == []

    @pytest.mark.asyncio
    async def test_find_by_ids(self, catalog):
        plants = await catalog.find_by_ids([HOLLY, MISSING_PLANT, TOMATO], "es", "MX")
        assert [p.plant_id for p in plants] == [HOLLY, TOMATO]
        assert [p.common_names for p in plants] == [["Acebo"], ["Jitomate", "Tomate"]]
        assert await catalog.find_by_ids([], "en") == []

    @pytest.mark.asyncio
    async def test_resolve_names_accepts_row_ids(self, catalog):
        assert await catalog.resolve_names(TOMATO, "es", COUNTRY_MX) == ["Jitomate", "Tomate"]

    @pytest.mark.asyncio
    async def test_include_details_with_country(self, catalog):
        plant = await catalog.find_by_id(TOMATO, "es", "MX", include_details=True)
        assert plant.growing_conditions.confidence == "confirmed"
        assert plant.growing_conditions.hardiness_zones == ["10", "11", "12"]
        assert plant.physical_characteristics.mature_height.typical_m == 1.5
        assert plant.physical_characteristics.trait_flag("fruit_edible") is True

    @pytest.mark.asyncio
    async def test_include_details_without_country(self, catalog):
        plant = await catalog.find_by_id(OAK, "en", include_details=True)
        assert plant.growing_conditions is None
        assert plant.physical_characteristics.growth_rate == "slow"

    @pytest.mark.asyncio
    async def test_growing_conditions_best_assertion(self, catalog):
        tomato = await catalog.get_growing_conditions(TOMATO)
        basil = await catalog.get_growing_conditions(BASIL)
        mexico = await catalog.get_growing_conditions(TOMATO, country_id=COUNTRY_MX)

        assert tomato.confidence == "very_high"
        assert tomato.country_id is None
        assert tomato.ph_preference.min_ph == 6.0
        assert tomato.flowering_months == [6, 7, 8]
        # the "probable" assertion outranks the newer "low" one
        assert basil.confidence == "probable"
        assert mexico.confidence == "confirmed"
        assert mexico.country_id == COUNTRY_MX

    @pytest.mark.asyncio
    async def test_growing_conditions_missing(self, catalog):
        assert await catalog.get_growing_conditions(OAK, country_id="MX") is None
        assert await catalog.get_growing_conditions(SUNFLOWER) is None

    @pytest.mark.asyncio
    async def test_physical_characteristics(self, catalog):
        holly = await catalog.get_physical_characteristics(HOLLY)
        assert holly.trait_flag("toxic") is True
        assert holly.trait_flag("deciduous") is None
        assert await catalog.get_physical_characteristics(MISSING_PLANT) is None

    @pytest.mark.asyncio
    async def test_list_languages(self, catalog):
        languages = await catalog.list_languages()
        assert [lang.language_code for lang in languages] == ["en", "es", "fr"]

    @pytest.mark.asyncio
    async def test_refresh_lookups(self, catalog):
        await catalog.refresh_lookups()
        assert catalog.lookup_cache.snapshot.family("solanaceae").family_name == "Solanaceae"
        assert catalog.lookup_cache.snapshot.genus("Solanum") is not None


class TestPlantWrites:
    @pytest.mark.asyncio
    async def test_create_plant_with_details(self, catalog):
        plant = await catalog.create_plant(
            family_name=" Rosaceae ",
            genus_name="Rosa",
            species_name="canina",
            plant_type="shrub",
            growing_conditions={"hardiness_zones": ["3", "4", "5"], "sun_requirements": ["full_sun"],
                                "confidence": "confirmed"},
            physical_characteristics={"mature_height": {"typical_m": 2.0, "max_m": 3.0},
                                      "traits": {"evergreen": False}},
        )

        assert plant.full_botanical_name == "Rosa canina"
        assert plant.family_name == "Rosaceae"

        found = await catalog.find_by_id(plant.plant_id, "en", include_details=True)
        assert found.physical_characteristics.mature_height.max_m == 3.0
        zone_three = await catalog.search(search_filter={"hardiness_zone": "3"}, language_id="en")
        assert [p.plant_id for p in zone_three.items] == [plant.plant_id]

    @pytest.mark.asyncio
    async def test_cultivar_botanical_name(self, catalog):
        plant = await catalog.create_plant(
            family_name="Solanaceae", genus_name="Solanum", species_name="lycopersicum", cultivar_name="San Marzano"
        )
        assert plant.full_botanical_name == "Solanum lycopersicum 'San Marzano'"
        assert plant.is_cultivar

    @pytest.mark.asyncio
    async def test_duplicate_botanical_name(self, catalog):
        with pytest.raises(DuplicateResourceError) as exc_info:
            await catalog.create_plant(family_name="Solanaceae", genus_name="Solanum", species_name="lycopersicum")
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_plant(self, catalog, statements):
        with pytest.raises(ValidationError):
            await catalog.create_plant(family_name="Rosaceae", genus_name="  ", species_name="canina")
        with pytest.raises(ValidationError):
            await catalog.create_plant(family_name="Rosaceae", genus_name="Rosa", species_name="canina",
                                       plant_type="mushroom")
        assert statements.count == 0

    @pytest.mark.asyncio
    async def test_bulk_create_is_all_or_nothing(self, catalog):
        rows = [
            {"family_name": "Rosaceae", "genus_name": "Rosa", "species_name": "gallica"},
            {"family_name": "Rosaceae", "genus_name": "Rosa", "species_name": "gallica"},
        ]
        with pytest.raises(DuplicateResourceError):
            await catalog.bulk_create_plants(rows)
        assert await catalog.count() == 5

        created = await catalog.bulk_create_plants([
            rows[0],
            {"family_name": "Rosaceae", "genus_name": "Malus", "species_name": "domestica"},
        ])
        assert [p.full_botanical_name for p in created] == ["Rosa gallica", "Malus domestica"]
        assert await catalog.count(search_filter={"family_name": "rosaceae"}) == 2
        assert await catalog.bulk_create_plants([]) == []

    @pytest.mark.asyncio
    async def test_update_is_partial(self, catalog):
        await catalog.update_plant(BASIL, cultivar_name="Genovese")
        updated = await catalog.update_plant(BASIL, plant_type="perennial")
        assert updated.full_botanical_name == "Ocimum basilicum 'Genovese'"
        assert updated.plant_type == "perennial"

        cleared = await catalog.update_plant(BASIL, cultivar_name=None)
        assert cleared.full_botanical_name == "Ocimum basilicum"

    @pytest.mark.asyncio
    async def test_update_errors(self, catalog):
        with pytest.raises(PlantNotFoundError):
            await catalog.update_plant(MISSING_PLANT, species_name="x")
        with pytest.raises(ValidationError):
            await catalog.update_plant(TOMATO, genus_name="")
        with pytest.raises(DuplicateResourceError):
            await catalog.update_plant(BASIL, genus_name="Solanum", species_name="lycopersicum")

    @pytest.mark.asyncio
    async def test_delete_plant(self, catalog):
        await catalog.delete_plant(HOLLY)
        with pytest.raises(PlantNotFoundError):
            await catalog.find_by_id(HOLLY, "en")
        assert await catalog.get_growing_conditions(HOLLY) is None
        with pytest.raises(PlantNotFoundError):
            await catalog.delete_plant(HOLLY)


class TestLocalizedNameWrites:
    @pytest.mark.asyncio
    async def test_country_name_takes_precedence(self, catalog):
        await catalog.add_localized_name(BASIL, "es", "Albahacar", country_id="MX", is_primary=True)
        assert await catalog.resolve_names(BASIL, "es", "MX") == ["Albahacar", "Albahaca"]
        assert await catalog.resolve_names(BASIL, "es") == ["Albahaca"]

    @pytest.mark.asyncio
    async def test_first_name_in_a_language_replaces_fallback(self, catalog):
        assert await catalog.resolve_names(OAK, "fr") == ["English oak", "Pedunculate oak"]
        await catalog.add_localized_name(OAK, "fr", "Chêne pédonculé", is_primary=True)
        assert await catalog.resolve_names(OAK, "fr") == ["Chêne pédonculé"]

    @pytest.mark.asyncio
    async def test_name_errors(self, catalog):
        with pytest.raises(DuplicateResourceError):
            await catalog.add_localized_name(TOMATO, "en", "Tomato")
        with pytest.raises(ValidationError):
            await catalog.add_localized_name(TOMATO, "de", "Tomate")
        with pytest.raises(ValidationError):
            await catalog.add_localized_name(TOMATO, "es", "Tomate", country_id="AR")
        with pytest.raises(PlantNotFoundError):
            await catalog.add_localized_name(MISSING_PLANT, "en", "Ghost")
        with pytest.raises(ValidationError):
            await catalog.add_localized_name(TOMATO, "en", "   ")


class TestCompanions:
    @pytest.mark.asyncio
    async def test_relationship_is_visible_from_both_plants(self, catalog):
        created = await catalog.create_companion_relationship(
            TOMATO, BASIL, "beneficial",
            benefits=["pest_control", "pest_control", "pollinator_attraction"],
            optimal_distance_m=0.3, max_distance_m=0.5,
        )
        assert created.benefits == ["pest_control", "pollinator_attraction"]

        from_basil = await catalog.get_companions(BASIL)
        assert [r.relationship_id for r in from_basil] == [created.relationship_id]
        assert from_basil[0].other_plant_id(BASIL) == TOMATO
        assert from_basil[0].recommended_distance_m == 0.3

    @pytest.mark.asyncio
    async def test_companion_filters(self, catalog):
        good = await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")
        bad = await catalog.create_companion_relationship(OAK, TOMATO, "antagonistic")
        await catalog.create_companion_relationship(TOMATO, HOLLY, "neutral")

        assert len(await catalog.get_companions(TOMATO)) == 3
        beneficial = await catalog.get_companions(TOMATO, {"beneficial_only": True})
        antagonistic = await catalog.get_companions(TOMATO, {"relationship_type": "antagonistic"})
        non_neutral = await catalog.get_companions(TOMATO, {"exclude_neutral": True})
        with_oak = await catalog.get_companions(TOMATO, {"plant_id": OAK})

        assert [r.relationship_id for r in beneficial] == [good.relationship_id]
        assert [r.relationship_id for r in antagonistic] == [bad.relationship_id]
        assert {r.relationship_id for r in non_neutral} == {good.relationship_id, bad.relationship_id}
        assert [r.relationship_id for r in with_oak] == [bad.relationship_id]

    @pytest.mark.asyncio
    async def test_check_compatibility_either_orientation(self, catalog):
        created = await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")
        found = await catalog.check_compatibility(BASIL, TOMATO)
        assert found.relationship_id == created.relationship_id
        assert found.relationship_type == "beneficial"
        assert await catalog.check_compatibility(BASIL, OAK) is None

    @pytest.mark.asyncio
    async def test_companion_errors(self, catalog):
        await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")

        with pytest.raises(DuplicateResourceError):
            await catalog.create_companion_relationship(BASIL, TOMATO, "neutral")
        with pytest.raises(ValidationError):
            await catalog.create_companion_relationship(TOMATO, TOMATO, "neutral")
        with pytest.raises(ValidationError):
            await catalog.create_companion_relationship(TOMATO, OAK, "friendly")
        with pytest.raises(ValidationError):
            await catalog.create_companion_relationship(
                TOMATO, OAK, "neutral", optimal_distance_m=3.0, max_distance_m=1.0
            )
        with pytest.raises(PlantNotFoundError):
            await catalog.create_companion_relationship(TOMATO, MISSING_PLANT, "neutral")

    @pytest.mark.asyncio
    async def test_delete_companion(self, catalog):
        created = await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")
        await catalog.delete_companion_relationship(created.relationship_id)
        assert await catalog.check_compatibility(TOMATO, BASIL) is None
        with pytest.raises(CompanionNotFoundError):
            await catalog.delete_companion_relationship(created.relationship_id)

    @pytest.mark.asyncio
    async def test_deleting_a_plant_removes_its_relationships(self, catalog):
        await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")
        await catalog.delete_plant(BASIL)
        assert await catalog.get_companions(TOMATO) == []


class TestErrorKinds:
    def test_kinds_and_status_codes(self):
        duplicate = DuplicateResourceError("Plant already exists", resource_type="plant", field="full_botanical_name")
        missing = PlantNotFoundError(TOMATO)

        assert isinstance(duplicate, ValidationError)
        assert (duplicate.kind, duplicate.status_code) == ("validation", 409)
        assert (missing.kind, missing.status_code) == ("not_found", 404)
        assert missing.details == {"resource_type": "plant", "resource_id": TOMATO, "plant_id": TOMATO}

    def test_http_exception_carries_the_error_body(self):
        http_error = ValidationError("Bad zone", field="hardiness_zone", value="5,6").to_http_exception()
        assert http_error.status_code == 422
        assert http_error.detail["code"] == "VALIDATION_ERROR"
        assert http_error.detail["details"] == {"field": "hardiness_zone", "value": "5,6"}
