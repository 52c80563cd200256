# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# The list of things that can go wrong when someone asks the plant catalog a question,
# each with a clear name so callers know whether they asked wrongly, asked for something
# missing, or hit a broken database.
# 🧪 Purpose (Technical Summary):
# Catalog exception hierarchy split into three error kinds (validation, not_found,
# dependency). Each exception carries an HTTP status code and structured details so an
# API layer can turn it into an HTTPException without a lookup table.
# 🔗 Dependencies:
# FastAPI HTTPException and status constants, typing
# 🔄 Connected Modules / Calls From:
# Domain services (validation), repositories (store failures), cache layer (masked
# cache failures), deadline scope, application handlers

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

VALIDATION = "validation"
NOT_FOUND = "not_found"
DEPENDENCY = "dependency"


def _with_context(details: Optional[Dict[str, Any]], **context: Any) -> Dict[str, Any]:
    """Merge the non-empty context fields into a copy of `details`."""
    merged = dict(details or {})
    for name, value in context.items():
        if value is not None and value != "":
            merged[name] = value
    return merged


class CatalogException(Exception):
    """
    Base exception class for the plant catalog engine.

    `kind` tells a caller how to react: fix the input (validation), accept
    the absence (not_found), or retry / alert (dependency).
    """

    kind = DEPENDENCY
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "CATALOG_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code or self.default_status
        self.details = details or {}
        self.error_code = error_code or self.default_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationError(CatalogException):
    """
    Malformed or self-contradictory input.
    Raised before any store access is attempted.
    """

    kind = VALIDATION
    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Invalid catalog request",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            details=_with_context(
                details,
                field=field,
                value=None if value is None else str(value),
                constraint=constraint,
            ),
        )


class DuplicateResourceError(ValidationError):
    """A write that would violate a uniqueness rule (duplicate plant, name or pair)."""

    default_status = status.HTTP_409_CONFLICT
    default_code = "DUPLICATE_RESOURCE"

    def __init__(
        self,
        message: str = "Catalog entry already exists",
        resource_type: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            field=field,
            value=value,
            details=_with_context(details, resource_type=resource_type),
        )


# =============================================================================
# NOT FOUND
# =============================================================================

class NotFoundError(CatalogException):
    kind = NOT_FOUND
    default_status = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(
        self,
        message: str = "Catalog entry not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            details=_with_context(details, resource_type=resource_type, resource_id=resource_id),
        )


class PlantNotFoundError(NotFoundError):
    def __init__(self, plant_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"Plant not found: {plant_id}",
            resource_type="plant",
            resource_id=plant_id,
            details={"plant_id": plant_id},
        )


class CompanionNotFoundError(NotFoundError):
    def __init__(self, relationship_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"Companion relationship not found: {relationship_id}",
            resource_type="companion_relationship",
            resource_id=relationship_id,
            details={"relationship_id": relationship_id},
        )


# =============================================================================
# DEPENDENCY FAILURES
# =============================================================================

class DatabaseError(CatalogException):
    """
    The catalog store failed.
    Fatal to the operation and surfaced to the caller.
    """

    default_code = "DATABASE_ERROR"

    def __init__(
        self,
        message: str = "Catalog store failure",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=_with_context(details, operation=operation, table=table))


class RepositoryError(DatabaseError):
    """A repository read or write failed inside the store session."""

    default_code = "REPOSITORY_ERROR"

    def __init__(
        self,
        message: str = "Repository operation failed",
        operation: Optional[str] = None,
        entity: Optional[str] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            operation=operation,
            details=_with_context(details, entity=entity, constraint=constraint),
        )


class TransactionError(DatabaseError):
    """Commit or rollback failed; nothing from the unit of work was persisted."""

    default_code = "TRANSACTION_ERROR"

    def __init__(
        self,
        message: str = "Catalog transaction failed",
        operation: Optional[str] = None,
        entity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, operation=operation, details=_with_context(details, entity=entity))


class DeadlineExceededError(CatalogException):
    """A store call outlived the caller's deadline."""

    default_status = status.HTTP_504_GATEWAY_TIMEOUT
    default_code = "DEADLINE_EXCEEDED"

    def __init__(
        self,
        message: str = "Operation deadline exceeded",
        operation: Optional[str] = None,
        timeout: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            details=_with_context(details, operation=operation, timeout_seconds=timeout),
        )


class CacheError(CatalogException):
    """
    A cache backend call failed.
    The cache layer logs and masks these; they never reach a reader.
    """

    default_code = "CACHE_ERROR"

    def __init__(
        self,
        message: str = "Cache backend failure",
        operation: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=_with_context(details, operation=operation, key=key))
