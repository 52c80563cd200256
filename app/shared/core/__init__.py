# 📄 File: app/shared/core/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The catalog's shared rulebook for what can go wrong and how long anything may take.
#
# 🧪 Purpose (Technical Summary):
# Core package exports: the catalog exception hierarchy and deadline propagation.
#
# 🔗 Dependencies:
# - exceptions.py, deadline.py
#
# 🔄 Connected Modules / Calls From:
# - Every catalog layer

"""
Core utilities package for the Plant Catalog Engine.
Provides the exception hierarchy and per-operation deadlines.
"""

from .deadline import deadline_scope, remaining_time, within_deadline
from .exceptions import (
    CacheError,
    CatalogException,
    CompanionNotFoundError,
    DatabaseError,
    DeadlineExceededError,
    DuplicateResourceError,
    NotFoundError,
    PlantNotFoundError,
    RepositoryError,
    TransactionError,
    ValidationError,
)

__all__ = [
    "CacheError",
    "CatalogException",
    "CompanionNotFoundError",
    "DatabaseError",
    "DeadlineExceededError",
    "DuplicateResourceError",
    "NotFoundError",
    "PlantNotFoundError",
    "RepositoryError",
    "TransactionError",
    "ValidationError",
    "deadline_scope",
    "remaining_time",
    "within_deadline",
]
