# 📄 File: app/modules/plant_catalog/infrastructure/cache/cache_keys.py
# 🧭 Purpose (Layman Explanation):
# Gives every cached answer a label, so the same question always finds the same stored
# answer and a changed plant knows exactly which labels to throw away.
#
# 🧪 Purpose (Technical Summary):
# Namespaced cache key patterns per operation class. Parameterized operations (search,
# count, batch, companions, growing-condition search) hash a canonical JSON encoding
# (sorted keys, absent fields dropped), so logically identical filters share one key.
#
# 🔗 Dependencies:
# hashlib, json, domain filter models
#
# 🔄 Connected Modules / Calls From:
# cached_plant_repository.py, tests

import hashlib
import json
from typing import Any, Optional, Sequence

from ...domain.models import CompanionFilter, GrowingConditionsFilter, SearchFilter
from ...domain.models.filters import PAGE_FIELDS

GLOBAL_SCOPE = "global"


def create_hash_key(payload: Any) -> str:
    """MD5 of the canonical JSON encoding of `payload`."""
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()


class CacheKeys:
    """Cache key builder for one namespace."""

    KEY_PATTERNS = {
        "plant": "plant:{plant_id}:{language_id}:{country}",
        "batch": "plants:{params_hash}",
        "names": "names:{plant_id}:{language_id}:{country}",
        "search": "search:{params_hash}",
        "count": "count:{params_hash}",
        "gcsearch": "gcsearch:{params_hash}",
        "growing_conditions": "gc:{plant_id}:{country}",
        "physical_characteristics": "pc:{plant_id}",
        "companion": "companion:{plant_id}:{params_hash}",
    }

    def __init__(self, namespace: str = "catalog"):
        self.namespace = namespace

    def get_cache_key(self, pattern_name: str, **kwargs) -> str:
        """
        Generate a namespaced key from a pattern.

        Raises:
            ValueError: If the pattern is unknown or a parameter is missing
        """
        if pattern_name not in self.KEY_PATTERNS:
            raise ValueError(f"Unknown cache key pattern: {pattern_name}")
        try:
            return f"{self.namespace}:{self.KEY_PATTERNS[pattern_name].format(**kwargs)}"
        except KeyError as e:
            raise ValueError(f"Missing parameter {e} for pattern {pattern_name}") from e

    def pattern(self, prefix: str) -> str:
        """Glob matching every key under an operation prefix (e.g. "search")."""
        return f"{self.namespace}:{prefix}:*"

    # =========================================================================
    # KEYS
    # =========================================================================

    def plant(self, plant_id: str, language_id: str, country_id: Optional[str] = None) -> str:
        return self.get_cache_key(
            "plant", plant_id=plant_id, language_id=language_id, country=country_id or GLOBAL_SCOPE
        )

    def batch(self, plant_ids: Sequence[str], language_id: str, country_id: Optional[str] = None) -> str:
        # Order-sensitive: results come back in input order
        params = {"ids": list(plant_ids), "lang": language_id, "country": country_id}
        return self.get_cache_key("batch", params_hash=create_hash_key(params))

    def names(self, plant_id: str, language_id: str, country_id: Optional[str] = None) -> str:
        return self.get_cache_key(
            "names", plant_id=plant_id, language_id=language_id, country=country_id or GLOBAL_SCOPE
        )

    def search(
        self,
        query_text: Optional[str],
        search_filter: SearchFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> str:
        params = {
            "q": query_text or "",
            "filter": search_filter.canonical_dict(),
            "lang": language_id,
            "country": country_id,
        }
        return self.get_cache_key("search", params_hash=create_hash_key(params))

    def count(self, query_text: Optional[str], search_filter: SearchFilter) -> str:
        params = {"q": query_text or "", "filter": search_filter.canonical_dict(exclude=set(PAGE_FIELDS))}
        return self.get_cache_key("count", params_hash=create_hash_key(params))

    def growing_conditions_search(
        self,
        conditions_filter: GrowingConditionsFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> str:
        params = {"filter": conditions_filter.canonical_dict(), "lang": language_id, "country": country_id}
        return self.get_cache_key("gcsearch", params_hash=create_hash_key(params))

    def growing_conditions(self, plant_id: str, country_id: Optional[str] = None) -> str:
        return self.get_cache_key("growing_conditions", plant_id=plant_id, country=country_id or GLOBAL_SCOPE)

    def physical_characteristics(self, plant_id: str) -> str:
        return self.get_cache_key("physical_characteristics", plant_id=plant_id)

    def companions(self, plant_id: str, companion_filter: Optional[CompanionFilter] = None) -> str:
        params = companion_filter.canonical_dict() if companion_filter is not None else {}
        return self.get_cache_key("companion", plant_id=plant_id, params_hash=create_hash_key(params))

    # =========================================================================
    # INVALIDATION PATTERNS
    # =========================================================================

    def plant_pattern(self, plant_id: str) -> str:
        return f"{self.namespace}:plant:{plant_id}:*"

    def names_pattern(self, plant_id: str) -> str:
        return f"{self.namespace}:names:{plant_id}:*"

    def growing_conditions_pattern(self, plant_id: str) -> str:
        return f"{self.namespace}:gc:{plant_id}:*"

    def companion_pattern(self, plant_id: Optional[str] = None) -> str:
        if plant_id is None:
            return self.pattern("companion")
        return f"{self.namespace}:companion:{plant_id}:*"
