# 📄 File: app/shared/utils/validators.py
# 🧭 Purpose (Layman Explanation):
# Checks that plant, language and country identifiers look right before the catalog
# goes anywhere near the database.
# 🧪 Purpose (Technical Summary):
# Identifier and free-text validation returning ValidationResult objects, plus
# require_* helpers that normalize the value or raise the catalog ValidationError.
# 🔗 Dependencies:
# re, uuid, pydantic, app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Domain models and filters, application handlers, localization resolver

import re
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.exceptions import ValidationError

LANGUAGE_CODE_PATTERN = re.compile(r'^[a-z]{2,3}$')
COUNTRY_CODE_PATTERN = re.compile(r'^[A-Z]{2}$')


class ValidationResult:
    """Result object for validation operations"""
    def __init__(self, is_valid: bool, errors: List[str] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str):
        """Add validation error"""
        self.errors.append(error)
        self.is_valid = False


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def validate_uuid(uuid_string: str) -> ValidationResult:
    """
    Validate UUID format

    Args:
        uuid_string: UUID string to validate

    Returns:
        ValidationResult with validation status and errors
    """
    result = ValidationResult(True)

    if not uuid_string or not isinstance(uuid_string, str):
        result.add_error("UUID is required")
        return result

    if not _is_uuid(uuid_string):
        result.add_error("Invalid UUID format")

    return result


def validate_language_id(language_id: str) -> ValidationResult:
    """A language is a UUID row id or an ISO 639-1/639-2 code."""
    result = ValidationResult(True)

    if not language_id or not isinstance(language_id, str):
        result.add_error("Language ID is required")
        return result

    if not _is_uuid(language_id) and not LANGUAGE_CODE_PATTERN.match(language_id):
        result.add_error("Language ID must be a UUID or a 2-3 letter lowercase code")

    return result


def validate_country_id(country_id: str) -> ValidationResult:
    """A country is a UUID row id or an ISO 3166-1 alpha-2 code."""
    result = ValidationResult(True)

    if not country_id or not isinstance(country_id, str):
        result.add_error("Country ID cannot be empty")
        return result

    if not _is_uuid(country_id) and not COUNTRY_CODE_PATTERN.match(country_id):
        result.add_error("Country ID must be a UUID or a 2 letter uppercase code")

    return result


def validate_search_text(text: str, max_length: int) -> ValidationResult:
    result = ValidationResult(True)
    if len(text) > max_length:
        result.add_error(f"Search query too long (max {max_length} characters)")
    return result


# ==============================================================================
# RAISING HELPERS
# ==============================================================================

def _raise_if_invalid(result: ValidationResult, field: str, value) -> None:
    if not result.is_valid:
        raise ValidationError(message=result.errors[0], field=field, value=value)


def require_plant_id(plant_id: str, field: str = "plant_id") -> str:
    """Return the canonical (lowercase) form of a plant UUID or raise."""
    _raise_if_invalid(validate_uuid(plant_id), field, plant_id)
    return str(uuid.UUID(plant_id))


def require_language_id(language_id: str) -> str:
    _raise_if_invalid(validate_language_id(language_id), "language_id", language_id)
    return str(uuid.UUID(language_id)) if _is_uuid(language_id) else language_id


def require_country_id(country_id: Optional[str]) -> Optional[str]:
    """None means no country; an empty string is malformed."""
    if country_id is None:
        return None
    _raise_if_invalid(validate_country_id(country_id), "country_id", country_id)
    return str(uuid.UUID(country_id)) if _is_uuid(country_id) else country_id


def require_search_text(text: Optional[str], max_length: int) -> Optional[str]:
    """Strip free text; blank text means no text search."""
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    _raise_if_invalid(validate_search_text(text, max_length), "query", text[:50])
    return text


@contextmanager
def model_validation(model_name: str) -> Iterator[None]:
    """Re-raise pydantic model validation failures as the catalog ValidationError."""
    try:
        yield
    except PydanticValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            message=f"Invalid {model_name}: {first.get('msg', str(e))}",
            field=field,
            details={"errors": [
                {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg")} for err in errors
            ]},
        ) from e
