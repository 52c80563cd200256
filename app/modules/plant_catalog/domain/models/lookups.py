# 📄 File: app/modules/plant_catalog/domain/models/lookups.py
# 🧭 Purpose (Layman Explanation):
# Small reference lists (languages, plant families, plant genera) that rarely change
# and are kept in memory for quick checks.
# 🧪 Purpose (Technical Summary):
# Lookup row models and LookupSnapshot, an immutable point-in-time view of the lookup
# tables with read-only mappings and a load timestamp.
# 🔗 Dependencies:
# pydantic, types.MappingProxyType, datetime
# 🔄 Connected Modules / Calls From:
# lookup_repository.py, lookup_repository_impl.py, lookup_cache.py, query_handlers.py

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class Language(BaseModel):
    model_config = ConfigDict(frozen=True)

    language_id: str
    language_code: str
    language_name: str


class PlantFamily(BaseModel):
    model_config = ConfigDict(frozen=True)

    family_id: str
    family_name: str


class PlantGenus(BaseModel):
    model_config = ConfigDict(frozen=True)

    genus_id: str
    family_id: str
    genus_name: str


def _freeze(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class LookupSnapshot:
    """Immutable lookup tables as of `loaded_at`."""

    languages_by_id: Mapping[str, Language] = field(default_factory=lambda: _freeze({}))
    languages_by_code: Mapping[str, Language] = field(default_factory=lambda: _freeze({}))
    families_by_id: Mapping[str, PlantFamily] = field(default_factory=lambda: _freeze({}))
    families_by_name: Mapping[str, PlantFamily] = field(default_factory=lambda: _freeze({}))
    genera_by_id: Mapping[str, PlantGenus] = field(default_factory=lambda: _freeze({}))
    genera_by_name: Mapping[str, PlantGenus] = field(default_factory=lambda: _freeze({}))
    loaded_at: Optional[datetime] = None

    @classmethod
    def build(
        cls,
        languages: Iterable[Language],
        families: Iterable[PlantFamily],
        genera: Iterable[PlantGenus],
    ) -> "LookupSnapshot":
        languages = list(languages)
        families = list(families)
        genera = list(genera)
        return cls(
            languages_by_id=_freeze({lang.language_id: lang for lang in languages}),
            languages_by_code=_freeze({lang.language_code: lang for lang in languages}),
            families_by_id=_freeze({f.family_id: f for f in families}),
            families_by_name=_freeze({f.family_name.lower(): f for f in families}),
            genera_by_id=_freeze({g.genus_id: g for g in genera}),
            genera_by_name=_freeze({g.genus_name.lower(): g for g in genera}),
            loaded_at=datetime.now(timezone.utc),
        )

    @property
    def is_loaded(self) -> bool:
        return self.loaded_at is not None

    def language(self, language_id: str) -> Optional[Language]:
        """Resolve a language by row id or ISO code."""
        return self.languages_by_id.get(language_id) or self.languages_by_code.get(language_id)

    def family(self, name_or_id: str) -> Optional[PlantFamily]:
        return self.families_by_id.get(name_or_id) or self.families_by_name.get(name_or_id.lower())

    def genus(self, name_or_id: str) -> Optional[PlantGenus]:
        return self.genera_by_id.get(name_or_id) or self.genera_by_name.get(name_or_id.lower())

    def stats(self) -> dict:
        return {
            "languages": len(self.languages_by_id),
            "families": len(self.families_by_id),
            "genera": len(self.genera_by_id),
            "loaded_at": self.loaded_at.isoformat() if self.loaded_at else None,
        }
