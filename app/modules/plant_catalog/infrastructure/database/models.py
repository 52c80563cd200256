# 📄 File: app/modules/plant_catalog/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes how the plant catalog is laid out in the database: plants, their everyday
# names in each language, where and how they grow, how big they get, and which plants
# like (or dislike) growing next to each other.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for the catalog schema. Taxonomy names are denormalized onto the
# plants row for filtering and sorting; code lists (zones, sun categories, months) are
# stored as delimited text so whole-token matching works on every dialect; the trait map
# is JSON (JSONB on PostgreSQL).
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - app.shared.infrastructure.database.connection (Base)
#
# 🔄 Connected Modules / Calls From:
# - plant_repository_impl.py, localized_name_repository_impl.py, lookup_repository_impl.py
# - plant_search.py (column maps for predicate translation)
# - tests/conftest.py (schema creation)

"""
SQLAlchemy Models for the Plant Catalog

Models:
- LanguageModel, CountryModel: locale lookups (id or code addressable)
- PlantFamilyModel, PlantGenusModel: taxonomy lookups
- PlantModel: one row per species or cultivar
- PlantCommonNameModel: localized display names
- PlantGrowingConditionsModel: growing-condition assertions, optionally per country
- PlantPhysicalCharacteristicsModel: mature size, growth rate and traits
- CompanionRelationshipModel: unordered plant pairs with type and benefits
"""

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.shared.infrastructure.database.connection import Base

# Delimited-text columns hold code lists such as "5a,5b,6a"
CODE_LIST = Text

# Trait map: JSON everywhere, JSONB on PostgreSQL for containment queries
TRAIT_MAP = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# LOOKUP TABLES
# =============================================================================

class LanguageModel(Base):
    __tablename__ = "languages"

    language_id = Column(String(36), primary_key=True, comment="Language UUID")
    language_code = Column(String(3), unique=True, nullable=False, index=True, comment="ISO 639 code")
    language_name = Column(String(100), nullable=False)


class CountryModel(Base):
    __tablename__ = "countries"

    country_id = Column(String(36), primary_key=True, comment="Country UUID")
    country_code = Column(String(2), unique=True, nullable=False, index=True, comment="ISO 3166 alpha-2 code")
    country_name = Column(String(100), nullable=False)


class PlantFamilyModel(Base):
    __tablename__ = "plant_families"

    family_id = Column(String(36), primary_key=True)
    family_name = Column(String(100), unique=True, nullable=False, index=True)


class PlantGenusModel(Base):
    __tablename__ = "plant_genera"

    genus_id = Column(String(36), primary_key=True)
    family_id = Column(String(36), ForeignKey("plant_families.family_id"), nullable=False)
    genus_name = Column(String(100), unique=True, nullable=False, index=True)


# =============================================================================
# PLANTS
# =============================================================================

class PlantModel(Base):
    """
    One species or cultivar.

    Family, genus, species and cultivar names are stored on the row so that
    taxonomy filters and sorts need no joins.
    """
    __tablename__ = "plants"

    plant_id = Column(String(36), primary_key=True, comment="Lowercase UUID")
    species_id = Column(String(36), nullable=True)
    cultivar_id = Column(String(36), nullable=True)

    family_name = Column(String(100), nullable=False, index=True)
    genus_name = Column(String(100), nullable=False, index=True)
    species_name = Column(String(100), nullable=False)
    cultivar_name = Column(String(100), nullable=True)
    plant_type = Column(String(30), nullable=True, index=True)
    full_botanical_name = Column(String(320), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now())

    common_names = relationship(
        "PlantCommonNameModel",
        back_populates="plant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    growing_conditions = relationship(
        "PlantGrowingConditionsModel",
        back_populates="plant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    physical_characteristics = relationship(
        "PlantPhysicalCharacteristicsModel",
        back_populates="plant",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PlantCommonNameModel(Base):
    """A display name for one plant in one language, optionally scoped to a country."""
    __tablename__ = "plant_common_names"
    __table_args__ = (
        UniqueConstraint("plant_id", "language_id", "country_id", "common_name"),
        Index("ix_plant_common_names_lookup", "plant_id", "language_id", "country_id"),
    )

    id = Column(String(36), primary_key=True)
    plant_id = Column(String(36), ForeignKey("plants.plant_id", ondelete="CASCADE"), nullable=False)
    language_id = Column(String(36), ForeignKey("languages.language_id"), nullable=False)
    country_id = Column(
        String(36),
        ForeignKey("countries.country_id"),
        nullable=True,
        comment="NULL means the name is used everywhere the language is spoken",
    )
    common_name = Column(String(200), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    plant = relationship("PlantModel", back_populates="common_names")


class PlantGrowingConditionsModel(Base):
    """A growing-condition assertion; several may exist per plant (per country, per source)."""
    __tablename__ = "plant_growing_conditions"

    id = Column(String(36), primary_key=True)
    plant_id = Column(
        String(36), ForeignKey("plants.plant_id", ondelete="CASCADE"), nullable=False, index=True
    )
    country_id = Column(String(36), ForeignKey("countries.country_id"), nullable=True, index=True)
    confidence = Column(String(20), nullable=False, default="probable")

    hardiness_zones = Column(CODE_LIST, nullable=True)
    heat_zones = Column(CODE_LIST, nullable=True)
    sun_requirements = Column(CODE_LIST, nullable=True)
    water_needs = Column(String(30), nullable=True)
    soil_drainage = Column(String(30), nullable=True)
    soil_types = Column(CODE_LIST, nullable=True)

    ph_min = Column(Float, nullable=True)
    ph_max = Column(Float, nullable=True)
    ph_optimal = Column(Float, nullable=True)
    humidity_preference = Column(Float, nullable=True)

    # Tri-state: NULL means not recorded
    drought_tolerant = Column(Boolean, nullable=True)
    salt_tolerant = Column(Boolean, nullable=True)
    wind_tolerant = Column(Boolean, nullable=True)

    flowering_months = Column(CODE_LIST, nullable=True)
    fruiting_months = Column(CODE_LIST, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    plant = relationship("PlantModel", back_populates="growing_conditions")


class PlantPhysicalCharacteristicsModel(Base):
    __tablename__ = "plant_physical_characteristics"

    plant_id = Column(String(36), ForeignKey("plants.plant_id", ondelete="CASCADE"), primary_key=True)

    height_min_m = Column(Float, nullable=True)
    height_typical_m = Column(Float, nullable=True)
    height_max_m = Column(Float, nullable=True)
    spread_min_m = Column(Float, nullable=True)
    spread_typical_m = Column(Float, nullable=True)
    spread_max_m = Column(Float, nullable=True)

    growth_rate = Column(String(20), nullable=True)
    traits = Column(TRAIT_MAP, nullable=True, comment="Boolean and descriptive traits, e.g. evergreen")
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    plant = relationship("PlantModel", back_populates="physical_characteristics")


# =============================================================================
# COMPANION RELATIONSHIPS
# =============================================================================

class CompanionRelationshipModel(Base):
    """Unordered plant pair; queries match either side."""
    __tablename__ = "companion_relationships"
    __table_args__ = (
        CheckConstraint("plant_a_id <> plant_b_id", name="distinct_plants"),
    )

    relationship_id = Column(String(36), primary_key=True)
    plant_a_id = Column(
        String(36), ForeignKey("plants.plant_id", ondelete="CASCADE"), nullable=False, index=True
    )
    plant_b_id = Column(
        String(36), ForeignKey("plants.plant_id", ondelete="CASCADE"), nullable=False, index=True
    )
    relationship_type = Column(String(20), nullable=False)
    benefits = Column(JSON, nullable=True)
    optimal_distance_m = Column(Float, nullable=True)
    max_distance_m = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
