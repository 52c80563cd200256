# 📄 File: app/modules/plant_catalog/domain/models/pagination.py
# 🧭 Purpose (Layman Explanation):
# A page of search results plus a bookmark that says exactly where the next page starts,
# so new plants added meanwhile never make you see the same plant twice.
# 🧪 Purpose (Technical Summary):
# SearchResult page model and the opaque keyset PageCursor (urlsafe base64 JSON of the
# last row's sort-key values, its plant id and a sort signature).
# 🔗 Dependencies:
# pydantic, base64, json, datetime, app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# plant_search.py, cached_plant_repository.py, query_handlers.py

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field

from app.shared.core.exceptions import ValidationError

from .plant import Plant

_DATETIME_TAG = "$dt"


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_DATETIME_TAG: value.isoformat()}
    return value


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict) and _DATETIME_TAG in value:
        return datetime.fromisoformat(value[_DATETIME_TAG])
    return value


@dataclass(frozen=True)
class PageCursor:
    """
    Keyset position: the sort-key values and plant id of the last row served.

    `signature` names the ordering the cursor was issued for; a cursor is only
    valid for the same ordering.
    """
    signature: str
    values: Tuple[Any, ...]
    plant_id: str

    def encode(self) -> str:
        payload = {
            "s": self.signature,
            "v": [_encode_value(v) for v in self.values],
            "id": self.plant_id,
        }
        raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    @classmethod
    def decode(cls, token: str, expected_signature: str) -> "PageCursor":
        """
        Raises:
            ValidationError: If the token is malformed or was issued for another ordering
        """
        try:
            padded = token + "=" * (-len(token) % 4)
            payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
            cursor = cls(
                signature=payload["s"],
                values=tuple(_decode_value(v) for v in payload["v"]),
                plant_id=payload["id"],
            )
        except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
            raise ValidationError(
                message="Malformed pagination cursor",
                field="cursor",
                value=token[:64],
            ) from e

        if cursor.signature != expected_signature:
            raise ValidationError(
                message="Cursor was issued for a different sort order",
                field="cursor",
                constraint=f"expected sort {expected_signature}",
            )
        return cursor


class SearchResult(BaseModel):
    """One page of plants."""

    items: List[Plant] = Field(default_factory=list)
    total: int = 0
    limit: int
    next_cursor: Optional[str] = None
    has_more: bool = False
    query: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.items)
