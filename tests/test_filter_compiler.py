# 📄 File: tests/test_filter_compiler.py
# 🧭 Purpose (Layman Explanation):
# Checks the rules behind every search box: zone "6" is not zone "16", an unknown trait
# matches nothing, and a form asking for impossible heights is refused.
# 🧪 Purpose (Technical Summary):
# In-process tests for the predicate variants and FilterCompiler validation/compilation,
# evaluated against plain dict records.
# 🔗 Dependencies:
# pytest
# 🔄 Connected Modules / Calls From:
# pytest

import pytest

from app.modules.plant_catalog.domain.models import (
    CompanionFilter,
    CompanionRelationship,
    GrowingConditionsFilter,
    SearchFilter,
)
from app.modules.plant_catalog.domain.models.types import CONFIDENCE_RANKS
from app.modules.plant_catalog.domain.predicates import (
    IntervalOverlap,
    OrdinalAtLeast,
    Related,
    SetOverlap,
    TextMatch,
    TokenMatch,
    TraitEquals,
)
from app.modules.plant_catalog.domain.services import FilterCompiler
from app.shared.core.exceptions import ValidationError
from catalog_fixtures import BASIL, OAK, TOMATO

RANKS = tuple(CONFIDENCE_RANKS.items())


def _plant_record(**overrides):
    record = {
        "plant_id": OAK,
        "family_name": "Fagaceae",
        "genus_name": "Quercus",
        "species_name": "robur",
        "plant_type": "tree",
        "full_botanical_name": "Quercus robur",
        "height_typical_m": 25.0,
        "height_max_m": 40.0,
        "growth_rate": "slow",
        "traits": {"deciduous": True, "evergreen": False},
        "common_names": [{"common_name": "English oak"}, {"common_name": "Roble"}],
        "growing_conditions": [
            {"hardiness_zones": "4,5,6,7,8", "sun_requirements": "full_sun,partial_shade", "water_needs": "moderate"},
            {"hardiness_zones": "12", "sun_requirements": "full_sun", "water_needs": "moist"},
        ],
    }
    record.update(overrides)
    return record


class TestPredicates:
    def test_token_match_is_whole_token(self):
        assert TokenMatch("zones", "6").evaluate({"zones": "5,6,7"})
        assert not TokenMatch("zones", "6").evaluate({"zones": "16"})
        assert not TokenMatch("zones", "6").evaluate({"zones": None})

    def test_token_match_accepts_sequences(self):
        assert TokenMatch("zones", "10").evaluate({"zones": ["9", "10"]})

    def test_set_overlap(self):
        predicate = SetOverlap("sun", ("partial_shade", "full_shade"))
        assert predicate.evaluate({"sun": "full_sun,partial_shade"})
        assert not predicate.evaluate({"sun": "full_sun"})

    def test_missing_trait_matches_neither_value(self):
        record = {"traits": {"toxic": True}}
        assert not TraitEquals("traits", "evergreen", True).evaluate(record)
        assert not TraitEquals("traits", "evergreen", False).evaluate(record)
        assert TraitEquals("traits", "toxic", True).evaluate(record)

    def test_trait_must_be_a_real_boolean(self):
        assert not TraitEquals("traits", "evergreen", True).evaluate({"traits": {"evergreen": "true"}})

    def test_interval_overlap(self):
        record = {"ph_min": 6.0, "ph_max": 6.8}
        assert IntervalOverlap("ph_min", "ph_max", 6.5, 7.5).evaluate(record)
        assert IntervalOverlap("ph_min", "ph_max", None, 6.0).evaluate(record)
        assert not IntervalOverlap("ph_min", "ph_max", 7.0, None).evaluate(record)
        assert not IntervalOverlap("ph_min", "ph_max", 5.0, 6.0).evaluate({"ph_min": None, "ph_max": 6.0})

    def test_ordinal_at_least(self):
        predicate = OrdinalAtLeast("confidence", "probable", RANKS)
        assert predicate.evaluate({"confidence": "very_high"})
        assert predicate.evaluate({"confidence": "probable"})
        assert not predicate.evaluate({"confidence": "moderate"})
        assert not predicate.evaluate({"confidence": "unheard_of"})

    def test_text_match_needs_every_term_in_one_entry(self):
        predicate = TextMatch(("names",), "english oak")
        assert predicate.evaluate({"names": ["Pedunculate oak", "English Oak"]})
        assert not predicate.evaluate({"names": ["English elm", "Holm oak"]})

    def test_related_finds_any_matching_record(self):
        predicate = Related("rows", TokenMatch("zones", "12"))
        assert predicate.evaluate({"rows": [{"zones": "4"}, {"zones": "11,12"}]})
        assert not predicate.evaluate({"rows": []})


class TestFilterCompiler:
    def setup_method(self):
        self.compiler = FilterCompiler()

    def test_empty_filter_matches_everything(self):
        predicate = self.compiler.compile_search(SearchFilter())
        assert predicate.predicates == ()
        assert predicate.evaluate(_plant_record())

    def test_taxonomy_is_case_insensitive(self):
        predicate = self.compiler.compile_search(SearchFilter(family_name="fagaceae", plant_type="tree"))
        assert predicate.evaluate(_plant_record())
        assert not predicate.evaluate(_plant_record(family_name="Rosaceae"))

    def test_height_bounds_use_max_and_typical(self):
        tall = self.compiler.compile_search(SearchFilter(min_height=30))
        short = self.compiler.compile_search(SearchFilter(max_height=20))
        assert tall.evaluate(_plant_record())
        assert not short.evaluate(_plant_record())
        assert not tall.evaluate(_plant_record(height_max_m=None))

    def test_growing_conditions_must_hold_in_one_assertion(self):
        same_row = self.compiler.compile_search(SearchFilter(hardiness_zone="6", water_needs="moderate"))
        split_rows = self.compiler.compile_search(SearchFilter(hardiness_zone="12", water_needs="moderate"))
        assert same_row.evaluate(_plant_record())
        assert not split_rows.evaluate(_plant_record())

    def test_text_searches_botanical_and_common_names(self):
        assert self.compiler.compile_search(SearchFilter(), "roble").evaluate(_plant_record())
        assert self.compiler.compile_search(SearchFilter(), "quercus").evaluate(_plant_record())
        assert not self.compiler.compile_search(SearchFilter(), "maple").evaluate(_plant_record())

    def test_min_height_above_max_height_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.compiler.compile_search(SearchFilter(min_height=5, max_height=2))
        assert exc_info.value.status_code == 422

    def test_equal_height_bounds_are_allowed(self):
        self.compiler.validate_search(SearchFilter(min_height=2, max_height=2))

    def test_zone_with_delimiter_is_rejected(self):
        with pytest.raises(ValidationError):
            self.compiler.validate_search(SearchFilter(hardiness_zone="5,6"))

    def test_ph_range_must_be_ordered(self):
        with pytest.raises(ValidationError):
            self.compiler.compile_growing_conditions(GrowingConditionsFilter(min_ph=7.5, max_ph=6.0))

    def test_growing_conditions_default_confidence_floor(self):
        predicate = self.compiler.compile_growing_conditions(GrowingConditionsFilter(hardiness_zone="9"))
        assert predicate.evaluate({"hardiness_zones": "9", "confidence": "probable"})
        assert not predicate.evaluate({"hardiness_zones": "9", "confidence": "low"})

    def test_growing_conditions_months_and_flags(self):
        predicate = self.compiler.compile_growing_conditions(
            GrowingConditionsFilter(flowering_month=7, drought_tolerant=False, min_confidence="very_low")
        )
        assert predicate.evaluate({"flowering_months": "6,7,8", "drought_tolerant": False, "confidence": "low"})
        assert not predicate.evaluate({"flowering_months": "6,7,8", "drought_tolerant": None, "confidence": "low"})
        assert not predicate.evaluate({"flowering_months": "17", "drought_tolerant": False, "confidence": "low"})


class TestCompanionFilter:
    def _relationship(self, relationship_type):
        return CompanionRelationship(plant_a_id=TOMATO, plant_b_id=BASIL, relationship_type=relationship_type)

    def test_matches_either_side_of_the_pair(self):
        relationship = self._relationship("beneficial")
        assert CompanionFilter(plant_id=BASIL).matches(relationship)
        assert CompanionFilter(plant_id=TOMATO).matches(relationship)
        assert not CompanionFilter(plant_id=OAK).matches(relationship)

    def test_beneficial_only(self):
        assert CompanionFilter(beneficial_only=True).matches(self._relationship("beneficial"))
        assert not CompanionFilter(beneficial_only=True).matches(self._relationship("antagonistic"))

    def test_exclude_neutral_and_type_combine(self):
        both = CompanionFilter(relationship_type="neutral", exclude_neutral=True)
        assert not both.matches(self._relationship("neutral"))
        assert CompanionFilter(exclude_neutral=True).matches(self._relationship("antagonistic"))

    def test_empty_filter_matches_all(self):
        assert CompanionFilter().matches(self._relationship("neutral"))
