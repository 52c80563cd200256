"""
Plant catalog domain services: localization, batched name loading and filter compilation.
"""

from .filter_compiler import FilterCompiler
from .localization_resolver import LocalizationResolver, order_names
from .name_batch_loader import NameBatchLoader

__all__ = [
    "FilterCompiler",
    "LocalizationResolver",
    "NameBatchLoader",
    "order_names",
]
