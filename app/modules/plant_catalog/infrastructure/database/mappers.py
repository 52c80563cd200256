# 📄 File: app/modules/plant_catalog/infrastructure/database/mappers.py
# 🧭 Purpose (Layman Explanation):
# Translates between how plants are stored in database rows and how the rest of the
# catalog works with them.
#
# 🧪 Purpose (Technical Summary):
# Row <-> domain mapping for plants, names, growing conditions, physical characteristics
# and companion relationships. Code lists are joined with the predicate token delimiter
# so stored lists stay whole-token matchable.
#
# 🔗 Dependencies:
# - infrastructure.database.models (SQLAlchemy rows)
# - domain.models (pydantic entities), domain.predicates (token delimiter)
#
# 🔄 Connected Modules / Calls From:
# - plant_repository_impl.py, localized_name_repository_impl.py, plant_search.py

from typing import Any, Dict, Iterable, List, Optional

from ...domain.models import (
    CompanionRelationship,
    GrowingConditions,
    LocalizedName,
    PHRange,
    PhysicalCharacteristics,
    Plant,
    SizeRange,
)
from ...domain.predicates import TOKEN_DELIMITER, split_tokens
from .models import (
    CompanionRelationshipModel,
    PlantCommonNameModel,
    PlantGrowingConditionsModel,
    PlantModel,
    PlantPhysicalCharacteristicsModel,
)


def join_tokens(values: Optional[Iterable[Any]]) -> Optional[str]:
    tokens = [str(getattr(v, "value", v)) for v in values or []]
    return TOKEN_DELIMITER.join(tokens) if tokens else None


# =============================================================================
# PLANTS
# =============================================================================

def plant_to_row(plant: Plant) -> Dict[str, Any]:
    return {
        "plant_id": plant.plant_id,
        "species_id": plant.species_id,
        "cultivar_id": plant.cultivar_id,
        "family_name": plant.family_name,
        "genus_name": plant.genus_name,
        "species_name": plant.species_name,
        "cultivar_name": plant.cultivar_name,
        "plant_type": plant.plant_type,
        "full_botanical_name": plant.full_botanical_name,
        "created_at": plant.created_at,
        "updated_at": plant.updated_at,
    }


def plant_to_domain(
    row: PlantModel,
    common_names: Optional[List[str]] = None,
    growing_conditions: Optional[GrowingConditions] = None,
    physical_characteristics: Optional[PhysicalCharacteristics] = None,
) -> Plant:
    return Plant(
        plant_id=row.plant_id,
        species_id=row.species_id,
        cultivar_id=row.cultivar_id,
        family_name=row.family_name,
        genus_name=row.genus_name,
        species_name=row.species_name,
        cultivar_name=row.cultivar_name,
        plant_type=row.plant_type,
        full_botanical_name=row.full_botanical_name,
        common_names=common_names or [],
        growing_conditions=growing_conditions,
        physical_characteristics=physical_characteristics,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# =============================================================================
# NAMES
# =============================================================================

def name_to_domain(row: PlantCommonNameModel) -> LocalizedName:
    return LocalizedName(
        plant_id=row.plant_id,
        language_id=row.language_id,
        country_id=row.country_id,
        common_name=row.common_name,
        is_primary=bool(row.is_primary),
    )


# =============================================================================
# GROWING CONDITIONS
# =============================================================================

def growing_conditions_to_row(conditions: GrowingConditions) -> Dict[str, Any]:
    ph = conditions.ph_preference
    return {
        "plant_id": conditions.plant_id,
        "country_id": conditions.country_id,
        "confidence": conditions.confidence,
        "hardiness_zones": join_tokens(conditions.hardiness_zones),
        "heat_zones": join_tokens(conditions.heat_zones),
        "sun_requirements": join_tokens(conditions.sun_requirements),
        "water_needs": conditions.water_needs,
        "soil_drainage": conditions.soil_drainage,
        "soil_types": join_tokens(conditions.soil_types),
        "ph_min": ph.min_ph if ph else None,
        "ph_max": ph.max_ph if ph else None,
        "ph_optimal": ph.optimal_ph if ph else None,
        "humidity_preference": conditions.humidity_preference,
        "drought_tolerant": conditions.drought_tolerant,
        "salt_tolerant": conditions.salt_tolerant,
        "wind_tolerant": conditions.wind_tolerant,
        "flowering_months": join_tokens(conditions.flowering_months),
        "fruiting_months": join_tokens(conditions.fruiting_months),
        "created_at": conditions.created_at,
    }


def growing_conditions_to_domain(row: PlantGrowingConditionsModel) -> GrowingConditions:
    ph = None
    if row.ph_min is not None and row.ph_max is not None:
        ph = PHRange(min_ph=row.ph_min, max_ph=row.ph_max, optimal_ph=row.ph_optimal)

    return GrowingConditions(
        plant_id=row.plant_id,
        country_id=row.country_id,
        confidence=row.confidence,
        hardiness_zones=split_tokens(row.hardiness_zones),
        heat_zones=split_tokens(row.heat_zones),
        sun_requirements=split_tokens(row.sun_requirements),
        water_needs=row.water_needs,
        soil_drainage=row.soil_drainage,
        soil_types=split_tokens(row.soil_types),
        ph_preference=ph,
        humidity_preference=row.humidity_preference,
        drought_tolerant=row.drought_tolerant,
        salt_tolerant=row.salt_tolerant,
        wind_tolerant=row.wind_tolerant,
        flowering_months=[int(m) for m in split_tokens(row.flowering_months)],
        fruiting_months=[int(m) for m in split_tokens(row.fruiting_months)],
        created_at=row.created_at,
    )


# =============================================================================
# PHYSICAL CHARACTERISTICS
# =============================================================================

def _size(low: Optional[float], typical: Optional[float], high: Optional[float]) -> Optional[SizeRange]:
    if low is None and typical is None and high is None:
        return None
    return SizeRange(min_m=low, typical_m=typical, max_m=high)


def physical_to_row(characteristics: PhysicalCharacteristics) -> Dict[str, Any]:
    height = characteristics.mature_height or SizeRange()
    spread = characteristics.mature_spread or SizeRange()
    return {
        "plant_id": characteristics.plant_id,
        "height_min_m": height.min_m,
        "height_typical_m": height.typical_m,
        "height_max_m": height.max_m,
        "spread_min_m": spread.min_m,
        "spread_typical_m": spread.typical_m,
        "spread_max_m": spread.max_m,
        "growth_rate": characteristics.growth_rate,
        "traits": dict(characteristics.traits),
        "created_at": characteristics.created_at,
    }


def physical_to_domain(row: PlantPhysicalCharacteristicsModel) -> PhysicalCharacteristics:
    return PhysicalCharacteristics(
        plant_id=row.plant_id,
        mature_height=_size(row.height_min_m, row.height_typical_m, row.height_max_m),
        mature_spread=_size(row.spread_min_m, row.spread_typical_m, row.spread_max_m),
        growth_rate=row.growth_rate,
        traits=row.traits or {},
        created_at=row.created_at,
    )


# =============================================================================
# COMPANIONS
# =============================================================================

def companion_to_row(relationship: CompanionRelationship) -> Dict[str, Any]:
    return {
        "relationship_id": relationship.relationship_id,
        "plant_a_id": relationship.plant_a_id,
        "plant_b_id": relationship.plant_b_id,
        "relationship_type": relationship.relationship_type,
        "benefits": list(relationship.benefits),
        "optimal_distance_m": relationship.optimal_distance_m,
        "max_distance_m": relationship.max_distance_m,
        "notes": relationship.notes,
        "created_at": relationship.created_at,
    }


def companion_to_domain(row: CompanionRelationshipModel) -> CompanionRelationship:
    return CompanionRelationship(
        relationship_id=row.relationship_id,
        plant_a_id=row.plant_a_id,
        plant_b_id=row.plant_b_id,
        relationship_type=row.relationship_type,
        benefits=row.benefits or [],
        optimal_distance_m=row.optimal_distance_m,
        max_distance_m=row.max_distance_m,
        notes=row.notes,
        created_at=row.created_at,
    )
