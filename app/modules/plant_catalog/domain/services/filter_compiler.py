# 📄 File: app/modules/plant_catalog/domain/services/filter_compiler.py
# 🧭 Purpose (Layman Explanation):
# Turns a filled-in search form into one precise question for the database, refusing
# forms that contradict themselves (like "at least 5 m tall but at most 2 m").
# 🧪 Purpose (Technical Summary):
# Compiles SearchFilter, GrowingConditionsFilter, CompanionFilter and free text into a
# Conjunction of typed predicates with fixed per-field operator semantics. Validation
# runs first and raises ValidationError; a filter is never silently weakened.
# 🔗 Dependencies:
# predicates.py, domain models (filters, types), app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# plant_search.py, plant_repository_impl.py, query_handlers.py (pre-validation)

from typing import List, Optional

from app.shared.core.exceptions import ValidationError

from ..models.filters import CompanionFilter, GrowingConditionsFilter, SearchFilter
from ..models.types import CONFIDENCE_RANKS
from ..predicates import (
    AnyOf,
    AtLeast,
    AtMost,
    Conjunction,
    Equals,
    IntervalOverlap,
    OrdinalAtLeast,
    Predicate,
    Related,
    SetOverlap,
    TextMatch,
    TokenMatch,
    TraitEquals,
    TOKEN_DELIMITER,
    all_of,
)

# Logical relations of a plant record
GROWING_CONDITIONS = "growing_conditions"
COMMON_NAMES = "common_names"


def _check_token(field: str, value: Optional[str]) -> None:
    if value is not None and (TOKEN_DELIMITER in value or not value.strip()):
        raise ValidationError(
            message=f"{field} must be a single code",
            field=field,
            value=value,
            constraint="no delimiter characters",
        )


def _check_range(field: str, low: Optional[float], high: Optional[float]) -> None:
    if low is not None and high is not None and low > high:
        raise ValidationError(
            message=f"min_{field} cannot exceed max_{field}",
            field=field,
            value=f"{low} > {high}",
            constraint="min <= max",
        )


class FilterCompiler:
    """
    Filter-to-predicate compiler.

    Field semantics:
    - taxonomy names and plant type: case-insensitive equality
    - min/max height: max height >= min, typical height <= max
    - zones: whole-token match in the stored code list
    - sun requirements: any requested category present
    - pH: recorded interval overlaps the requested one
    - boolean traits and tolerances: recorded value equals; unknown never matches
    - confidence: rank(recorded) >= rank(minimum)
    """

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate_search(self, search_filter: SearchFilter) -> None:
        _check_range("height", search_filter.min_height, search_filter.max_height)
        _check_token("hardiness_zone", search_filter.hardiness_zone)

    def validate_growing_conditions(self, conditions_filter: GrowingConditionsFilter) -> None:
        _check_range("ph", conditions_filter.min_ph, conditions_filter.max_ph)
        _check_token("hardiness_zone", conditions_filter.hardiness_zone)
        _check_token("heat_zone", conditions_filter.heat_zone)

    # =========================================================================
    # COMPILATION
    # =========================================================================

    def compile_text(self, query_text: str) -> Predicate:
        """Free text over the botanical name OR any common name in any language."""
        return AnyOf((
            TextMatch(("full_botanical_name",), query_text),
            Related(COMMON_NAMES, TextMatch(("common_name",), query_text)),
        ))

    def compile_search(self, search_filter: SearchFilter, query_text: Optional[str] = None) -> Conjunction:
        """
        Compile a plant search into one predicate over plant records.

        Raises:
            ValidationError: If the filter contradicts itself
        """
        self.validate_search(search_filter)
        f = search_filter
        parts: List[Optional[Predicate]] = []

        if query_text:
            parts.append(self.compile_text(query_text))

        for name in ("family_name", "genus_name", "species_name", "plant_type"):
            value = getattr(f, name)
            if value is not None:
                parts.append(Equals(name, value, case_insensitive=True))

        # One assertion must satisfy every growing-condition field together
        conditions: List[Optional[Predicate]] = []
        if f.hardiness_zone:
            conditions.append(TokenMatch("hardiness_zones", f.hardiness_zone))
        if f.sun_requirements:
            conditions.append(SetOverlap("sun_requirements", tuple(f.sun_requirements)))
        if f.water_needs:
            conditions.append(Equals("water_needs", f.water_needs))
        if conditions:
            parts.append(Related(GROWING_CONDITIONS, all_of(conditions)))

        if f.min_height is not None:
            parts.append(AtLeast("height_max_m", f.min_height))
        if f.max_height is not None:
            parts.append(AtMost("height_typical_m", f.max_height))
        if f.growth_rate:
            parts.append(Equals("growth_rate", f.growth_rate))

        for trait in ("evergreen", "deciduous", "toxic"):
            expected = getattr(f, trait)
            if expected is not None:
                parts.append(TraitEquals("traits", trait, expected))

        return all_of(parts)

    def compile_growing_conditions(self, conditions_filter: GrowingConditionsFilter) -> Conjunction:
        """
        Compile a filter over growing-condition assertion records.

        Raises:
            ValidationError: If the filter contradicts itself
        """
        self.validate_growing_conditions(conditions_filter)
        f = conditions_filter
        parts: List[Optional[Predicate]] = []

        if f.hardiness_zone:
            parts.append(TokenMatch("hardiness_zones", f.hardiness_zone))
        if f.heat_zone:
            parts.append(TokenMatch("heat_zones", f.heat_zone))
        if f.sun_requirements:
            parts.append(SetOverlap("sun_requirements", tuple(f.sun_requirements)))
        if f.water_needs:
            parts.append(Equals("water_needs", f.water_needs))
        if f.soil_drainage:
            parts.append(Equals("soil_drainage", f.soil_drainage))

        for flag in ("drought_tolerant", "salt_tolerant", "wind_tolerant"):
            expected = getattr(f, flag)
            if expected is not None:
                parts.append(Equals(flag, expected))

        if f.min_ph is not None or f.max_ph is not None:
            parts.append(IntervalOverlap("ph_min", "ph_max", f.min_ph, f.max_ph))

        if f.flowering_month is not None:
            parts.append(TokenMatch("flowering_months", str(f.flowering_month)))
        if f.fruiting_month is not None:
            parts.append(TokenMatch("fruiting_months", str(f.fruiting_month)))

        parts.append(OrdinalAtLeast("confidence", f.min_confidence, tuple(CONFIDENCE_RANKS.items())))

        if f.country_id:
            parts.append(Equals("country_id", f.country_id))

        return all_of(parts)

    def compile_companions(self, companion_filter: Optional[CompanionFilter]) -> Conjunction:
        if companion_filter is None:
            return Conjunction()
        return companion_filter.to_predicate()
