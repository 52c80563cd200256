# 📄 File: app/modules/plant_catalog/domain/predicates.py
# 🧭 Purpose (Layman Explanation):
# Small building blocks for questions like "is the family Rosaceae?" or "does it grow in
# zone 6a?", which can be checked in memory or turned into a database query.
# 🧪 Purpose (Technical Summary):
# Typed predicate variants over logical record fields. Each variant evaluates in-process
# against a mapping or attribute object; the infrastructure PredicateTranslator turns the
# same tree into SQLAlchemy expressions, so operator semantics live in one place.
# 🔗 Dependencies:
# dataclasses, typing
# 🔄 Connected Modules / Calls From:
# filters.py (companion predicate), filter_compiler.py, predicate_translator.py,
# plant_search.py (keyset bound)

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

TOKEN_DELIMITER = ","


def field_value(record: Any, name: str) -> Any:
    """Read a logical field from a mapping or an attribute object."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _plain(value: Any) -> Any:
    # Enum members compare by their value
    return getattr(value, "value", value)


def split_tokens(value: Any) -> List[str]:
    """Stored code lists arrive either as a delimited string or as a sequence."""
    if value is None:
        return []
    if isinstance(value, str):
        return [token.strip() for token in value.split(TOKEN_DELIMITER) if token.strip()]
    return [str(_plain(token)) for token in value]


class Predicate(ABC):
    """A boolean condition over one record."""

    @abstractmethod
    def evaluate(self, record: Any) -> bool:
        pass

    def __and__(self, other: "Predicate") -> "Conjunction":
        return Conjunction((self, other))


@dataclass(frozen=True)
class Equals(Predicate):
    field: str
    value: Any
    case_insensitive: bool = False

    def evaluate(self, record: Any) -> bool:
        stored = _plain(field_value(record, self.field))
        if stored is None:
            return False
        expected = _plain(self.value)
        if self.case_insensitive and isinstance(stored, str):
            return stored.lower() == str(expected).lower()
        return stored == expected


@dataclass(frozen=True)
class NotEquals(Predicate):
    field: str
    value: Any

    def evaluate(self, record: Any) -> bool:
        stored = _plain(field_value(record, self.field))
        return stored is not None and stored != _plain(self.value)


@dataclass(frozen=True)
class AnyFieldEquals(Predicate):
    """Value equals at least one of several fields (e.g. either side of a pair)."""
    fields: Tuple[str, ...]
    value: Any

    def evaluate(self, record: Any) -> bool:
        expected = _plain(self.value)
        return any(_plain(field_value(record, f)) == expected for f in self.fields)


@dataclass(frozen=True)
class AtLeast(Predicate):
    """stored >= value; an unrecorded value never matches."""
    field: str
    value: float

    def evaluate(self, record: Any) -> bool:
        stored = field_value(record, self.field)
        return stored is not None and stored >= self.value


@dataclass(frozen=True)
class AtMost(Predicate):
    """stored <= value; an unrecorded value never matches."""
    field: str
    value: float

    def evaluate(self, record: Any) -> bool:
        stored = field_value(record, self.field)
        return stored is not None and stored <= self.value


@dataclass(frozen=True)
class TokenMatch(Predicate):
    """Whole-token membership in a delimited code list; "6" never matches "16"."""
    field: str
    token: str

    def evaluate(self, record: Any) -> bool:
        return str(self.token) in split_tokens(field_value(record, self.field))


@dataclass(frozen=True)
class SetOverlap(Predicate):
    """At least one requested category is present in the stored list."""
    field: str
    values: Tuple[str, ...]

    def evaluate(self, record: Any) -> bool:
        stored = set(split_tokens(field_value(record, self.field)))
        return any(str(_plain(v)) in stored for v in self.values)


@dataclass(frozen=True)
class TraitEquals(Predicate):
    """
    A boolean entry of a trait map equals `expected`.

    Only an explicitly recorded boolean can match; a missing trait matches
    neither True nor False.
    """
    field: str
    trait: str
    expected: bool

    def evaluate(self, record: Any) -> bool:
        traits = field_value(record, self.field) or {}
        value = traits.get(self.trait)
        return isinstance(value, bool) and value is self.expected


@dataclass(frozen=True)
class IntervalOverlap(Predicate):
    """Stored [min, max] overlaps requested [low, high]; either bound may be open."""
    min_field: str
    max_field: str
    low: Optional[float] = None
    high: Optional[float] = None

    def evaluate(self, record: Any) -> bool:
        stored_min = field_value(record, self.min_field)
        stored_max = field_value(record, self.max_field)
        if stored_min is None or stored_max is None:
            return False
        if self.low is not None and stored_max < self.low:
            return False
        if self.high is not None and stored_min > self.high:
            return False
        return True


@dataclass(frozen=True)
class OrdinalAtLeast(Predicate):
    """Ordinal comparison through a rank table: rank(stored) >= rank(minimum)."""
    field: str
    minimum: str
    ranks: Tuple[Tuple[str, int], ...]

    @property
    def rank_table(self) -> Dict[str, int]:
        return dict(self.ranks)

    def evaluate(self, record: Any) -> bool:
        table = self.rank_table
        stored = _plain(field_value(record, self.field))
        return table.get(stored, 0) >= table[_plain(self.minimum)]


@dataclass(frozen=True)
class TextMatch(Predicate):
    """
    Free text matches if every word appears in at least one corpus entry.

    Fields may hold a string or a list of strings (e.g. all common names in
    every language).
    """
    fields: Tuple[str, ...]
    text: str

    @property
    def terms(self) -> List[str]:
        return [t for t in self.text.lower().split() if t]

    def _entry_matches(self, entry: Any) -> bool:
        haystack = str(entry).lower()
        return all(term in haystack for term in self.terms)

    def evaluate(self, record: Any) -> bool:
        for name in self.fields:
            value = field_value(record, name)
            if value is None:
                continue
            entries: Iterable[Any] = [value] if isinstance(value, str) else value
            if any(self._entry_matches(entry) for entry in entries):
                return True
        return False


@dataclass(frozen=True)
class Related(Predicate):
    """
    Some record of a one-to-many relation satisfies `predicate`
    (e.g. a growing-condition assertion, a common name in any language).
    """
    relation: str
    predicate: Predicate

    def evaluate(self, record: Any) -> bool:
        related = field_value(record, self.relation) or []
        return any(self.predicate.evaluate(r) for r in related)


@dataclass(frozen=True)
class AnyOf(Predicate):
    """Logical OR."""
    predicates: Tuple[Predicate, ...]

    def evaluate(self, record: Any) -> bool:
        return any(p.evaluate(record) for p in self.predicates)


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class KeysetAfter(Predicate):
    """
    Exclusive keyset bound: the record sorts strictly after the cursor row
    under `keys` followed by `tiebreak_field` ascending.
    """
    keys: Tuple[SortKey, ...]
    values: Tuple[Any, ...]
    tiebreak_field: str
    tiebreak_value: str

    def evaluate(self, record: Any) -> bool:
        for key, cursor_value in zip(self.keys, self.values):
            stored = field_value(record, key.field)
            if stored == cursor_value:
                continue
            return stored < cursor_value if key.descending else stored > cursor_value
        return field_value(record, self.tiebreak_field) > self.tiebreak_value


@dataclass(frozen=True)
class Conjunction(Predicate):
    """Logical AND of the present predicates; empty means no constraint."""
    predicates: Tuple[Predicate, ...] = ()

    def evaluate(self, record: Any) -> bool:
        return all(p.evaluate(record) for p in self.predicates)

    def __and__(self, other: Predicate) -> "Conjunction":
        return Conjunction(self.predicates + (other,))


def all_of(predicates: Iterable[Optional[Predicate]]) -> Conjunction:
    """Build a Conjunction, flattening nested ones and skipping None."""
    flat: List[Predicate] = []
    for p in predicates:
        if p is None:
            continue
        if isinstance(p, Conjunction):
            flat.extend(p.predicates)
        else:
            flat.append(p)
    return Conjunction(tuple(flat))
