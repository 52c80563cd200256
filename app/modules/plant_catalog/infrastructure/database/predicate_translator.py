# 📄 File: app/modules/plant_catalog/infrastructure/database/predicate_translator.py
# 🧭 Purpose (Layman Explanation):
# Takes a search question written in the catalog's own terms and rewrites it as a
# database query, so the filtering happens inside the database instead of in memory.
#
# 🧪 Purpose (Technical Summary):
# Translates the domain predicate tree into SQLAlchemy boolean expressions. Logical fields
# resolve through a column map; Related predicates become correlated EXISTS subqueries.
# Dialect-specific pieces (JSON trait lookups) are chosen from the session's dialect name.
# Predicates it cannot express raise ValidationError; it never drops a condition.
#
# 🔗 Dependencies:
# - SQLAlchemy core expressions
# - app.modules.plant_catalog.domain.predicates
#
# 🔄 Connected Modules / Calls From:
# - plant_search.py (plant search, growing-condition search)
# - plant_repository_impl.py (companion queries)

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy import and_, false, func, literal, or_, select, true, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql.elements import ColumnElement

from app.shared.core.exceptions import ValidationError

from ...domain.predicates import (
    AnyFieldEquals,
    AnyOf,
    AtLeast,
    AtMost,
    Conjunction,
    Equals,
    IntervalOverlap,
    KeysetAfter,
    NotEquals,
    OrdinalAtLeast,
    Predicate,
    Related,
    SetOverlap,
    TextMatch,
    TokenMatch,
    TraitEquals,
    TOKEN_DELIMITER,
)


@dataclass(frozen=True)
class CustomField:
    """A logical field whose equality test needs more than one column (e.g. id-or-code)."""
    build: Callable[[Any], ColumnElement]


@dataclass(frozen=True)
class RelationJoin:
    """
    A one-to-many relation reachable from the outer row.

    `correlate` is the join condition back to the outer query; `columns` maps
    the relation's logical fields.
    """
    entity: Any
    correlate: ColumnElement
    columns: Mapping[str, Any] = field(default_factory=dict)


class PredicateTranslator:
    """
    Predicate tree to SQLAlchemy expression.
    """

    def __init__(
        self,
        columns: Mapping[str, Any],
        relations: Optional[Mapping[str, RelationJoin]] = None,
        dialect: str = "postgresql",
    ):
        self.columns = columns
        self.relations = relations or {}
        self.dialect = dialect
        self._handlers: Dict[type, Callable[[Any], ColumnElement]] = {
            Equals: self._equals,
            NotEquals: self._not_equals,
            AnyFieldEquals: self._any_field_equals,
            AtLeast: self._at_least,
            AtMost: self._at_most,
            TokenMatch: self._token_match,
            SetOverlap: self._set_overlap,
            TraitEquals: self._trait_equals,
            IntervalOverlap: self._interval_overlap,
            OrdinalAtLeast: self._ordinal_at_least,
            TextMatch: self._text_match,
            Related: self._related,
            AnyOf: self._any_of,
            KeysetAfter: self._keyset_after,
            Conjunction: self._conjunction,
        }

    def translate(self, predicate: Predicate) -> ColumnElement:
        handler = self._handlers.get(type(predicate))
        if handler is None:
            raise ValidationError(
                message=f"Unsupported predicate: {type(predicate).__name__}",
                constraint="predicate must be expressible as a store query",
            )
        return handler(predicate)

    # =========================================================================
    # FIELD RESOLUTION
    # =========================================================================

    def _column(self, name: str) -> Any:
        try:
            return self.columns[name]
        except KeyError:
            raise ValidationError(
                message=f"Field '{name}' cannot be filtered on",
                field=name,
                constraint="unknown field",
            ) from None

    def _plain_column(self, name: str) -> Any:
        column = self._column(name)
        if isinstance(column, CustomField):
            raise ValidationError(
                message=f"Field '{name}' only supports equality",
                field=name,
            )
        return column

    @staticmethod
    def _value(value: Any) -> Any:
        return getattr(value, "value", value)

    # =========================================================================
    # COMPARISONS
    # =========================================================================

    def _equals(self, p: Equals) -> ColumnElement:
        column = self._column(p.field)
        value = self._value(p.value)
        if isinstance(column, CustomField):
            return column.build(value)
        if p.case_insensitive:
            return func.lower(column) == str(value).lower()
        return column == value

    def _not_equals(self, p: NotEquals) -> ColumnElement:
        column = self._plain_column(p.field)
        return and_(column.isnot(None), column != self._value(p.value))

    def _any_field_equals(self, p: AnyFieldEquals) -> ColumnElement:
        value = self._value(p.value)
        return or_(*(self._plain_column(name) == value for name in p.fields))

    def _at_least(self, p: AtLeast) -> ColumnElement:
        return self._plain_column(p.field) >= p.value

    def _at_most(self, p: AtMost) -> ColumnElement:
        return self._plain_column(p.field) <= p.value

    def _token_match(self, p: TokenMatch) -> ColumnElement:
        # Pad both sides with the delimiter so "6" cannot match inside "16"
        column = self._plain_column(p.field)
        padded = literal(TOKEN_DELIMITER) + column + literal(TOKEN_DELIMITER)
        return padded.contains(f"{TOKEN_DELIMITER}{p.token}{TOKEN_DELIMITER}", autoescape=True)

    def _set_overlap(self, p: SetOverlap) -> ColumnElement:
        if not p.values:
            return false()
        return or_(*(self._token_match(TokenMatch(p.field, str(self._value(v)))) for v in p.values))

    def _trait_equals(self, p: TraitEquals) -> ColumnElement:
        column = self._plain_column(p.field)
        if self.dialect == "postgresql":
            return type_coerce(column, JSONB).contains({p.trait: p.expected})
        if self.dialect == "sqlite":
            # json_type distinguishes real booleans from strings like "true"
            return func.json_type(column, f'$."{p.trait}"') == ("true" if p.expected else "false")
        return column[p.trait].as_boolean() == p.expected

    def _interval_overlap(self, p: IntervalOverlap) -> ColumnElement:
        low_column = self._plain_column(p.min_field)
        high_column = self._plain_column(p.max_field)
        clauses = [low_column.isnot(None), high_column.isnot(None)]
        if p.low is not None:
            clauses.append(high_column >= p.low)
        if p.high is not None:
            clauses.append(low_column <= p.high)
        return and_(*clauses)

    def _ordinal_at_least(self, p: OrdinalAtLeast) -> ColumnElement:
        table = p.rank_table
        threshold = table[self._value(p.minimum)]
        accepted = [level for level, rank in table.items() if rank >= threshold]
        return self._plain_column(p.field).in_(accepted)

    def _text_match(self, p: TextMatch) -> ColumnElement:
        terms = p.terms
        if not terms:
            return true()
        per_field = [
            and_(*(self._plain_column(name).icontains(term, autoescape=True) for term in terms))
            for name in p.fields
        ]
        return or_(*per_field)

    # =========================================================================
    # COMPOSITES
    # =========================================================================

    def _related(self, p: Related) -> ColumnElement:
        join = self.relations.get(p.relation)
        if join is None:
            raise ValidationError(
                message=f"Unknown relation '{p.relation}'",
                field=p.relation,
            )
        inner = PredicateTranslator(join.columns, dialect=self.dialect)
        return select(literal(1)).select_from(join.entity).where(
            join.correlate, inner.translate(p.predicate)
        ).exists()

    def _any_of(self, p: AnyOf) -> ColumnElement:
        if not p.predicates:
            return false()
        return or_(*(self.translate(child) for child in p.predicates))

    def _conjunction(self, p: Conjunction) -> ColumnElement:
        if not p.predicates:
            return true()
        return and_(*(self.translate(child) for child in p.predicates))

    def _keyset_after(self, p: KeysetAfter) -> ColumnElement:
        """
        Expand (k1, k2, ..., id) > (v1, v2, ..., vid) honoring per-key direction.
        """
        branches = []
        prefix = []
        for key, value in zip(p.keys, p.values):
            column = self._plain_column(key.field)
            step = column < value if key.descending else column > value
            branches.append(and_(*prefix, step))
            prefix.append(column == value)
        branches.append(and_(*prefix, self._plain_column(p.tiebreak_field) > p.tiebreak_value))
        return or_(*branches)
