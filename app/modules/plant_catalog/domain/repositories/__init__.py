"""
Plant catalog repository interfaces.
"""

from .localized_name_repository import LocalizedNameRepository
from .lookup_repository import LookupRepository
from .plant_repository import PlantRepository

__all__ = [
    "LocalizedNameRepository",
    "LookupRepository",
    "PlantRepository",
]
