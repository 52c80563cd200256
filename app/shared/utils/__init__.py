# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# Helpful tools the rest of the catalog uses for logging and for checking input.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package with structured logging and input validators.

# 🔗 Dependencies:
# - logging: Structured logging utilities
# - validators: Identifier and text validation

# 🔄 Connected Modules / Calls From:
# Used by: catalog repositories, handlers and the engine

"""
Shared Utilities Package

- Structured logging with JSON formatting
- Identifier, search text and model validation
"""

from .logging import get_logger, log_context, setup_logging
from .validators import (
    model_validation,
    require_country_id,
    require_language_id,
    require_plant_id,
    require_search_text,
)

__all__ = [
    "get_logger",
    "log_context",
    "model_validation",
    "require_country_id",
    "require_language_id",
    "require_plant_id",
    "require_search_text",
    "setup_logging",
]
