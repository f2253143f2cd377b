"""Typed column builders that produce filter predicates.

Every field type exposes the same operations in two flavours: the field
itself, and its negated twin reachable through ``field.not_``. The twin is
built together with the field and differs only in prefixing operators with
``not.``::

    age = NumericField("age")
    age.greater_than(30).to_url_argument()      # age=gt.30
    age.not_.greater_than(30).to_url_argument() # age=not.gt.30
    age.not_.not_ is age                        # True
"""

from __future__ import annotations

from typing import Any, Iterable

from CollectionSync.core.predicate import Predicate

NOT_PREFIX = "not."


def serialize_value(value: Any) -> str:
    """Serialize an operand the way the API expects it in a URL."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _build_pair(positive: Field, *, name: str | None, primary: bool) -> None:
    """Initialize ``positive`` and attach its negated twin.

    Both sides are wired here, once: each keeps a reference to the other and
    neither constructs further twins.
    """
    negated = object.__new__(type(positive))
    for side, is_negated in ((positive, False), (negated, True)):
        side._name = name
        side._primary = primary
        side._negated = is_negated
    positive._twin = negated
    negated._twin = positive


class Field:
    """Column builder supporting ``in``, ``is`` and ``eq`` filters.

    Args:
        name: Column name. May be left empty and bound later by a ``Model``.
        primary: Whether the column is part of the model's composite key.
    """

    __slots__ = ("_name", "_primary", "_negated", "_twin")

    in_operator = "in"
    is_operator = "is"
    eq_operator = "eq"

    def __init__(self, name: str | None = None, *, primary: bool = False) -> None:
        _build_pair(self, name=name, primary=primary)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def primary(self) -> bool:
        return self._primary

    @property
    def negated(self) -> bool:
        return self._negated

    @property
    def not_(self) -> Field:
        """The same column with every operator negated."""
        return self._twin

    def named(self, name: str) -> Field:
        """Return a new field of the same type bound to ``name``.

        The returned builder keeps this builder's polarity.
        """
        bound = type(self)(name, primary=self._primary)
        return bound.not_ if self._negated else bound

    def _require_name(self) -> str:
        if not self._name:
            raise ValueError(f"{type(self).__name__} has no name; bind it to a model or pass a name")
        return self._name

    def _predicate(self, operator: str, value: Any) -> Predicate:
        if self._negated:
            operator = NOT_PREFIX + operator
        return Predicate(field=self._require_name(), operator=operator, value=serialize_value(value))

    def in_(self, values: Iterable[Any]) -> Predicate:
        """Match any of ``values``.

        Values are comma-joined without escaping, so they must not contain
        commas themselves.
        """
        return self._predicate(self.in_operator, ",".join(serialize_value(value) for value in values))

    def is_(self, value: bool | None) -> Predicate:
        """Match ``null``, ``true`` or ``false`` exactly."""
        return self._predicate(self.is_operator, value)

    def equals(self, value: Any) -> Predicate:
        return self._predicate(self.eq_operator, value)

    def order_ascending(self) -> str:
        return f"{self._require_name()}.asc"

    def order_descending(self) -> str:
        return f"{self._require_name()}.desc"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, primary={self._primary!r}, "
            f"negated={self._negated!r})"
        )


class TextField(Field):
    """Column builder adding pattern and full-text search filters."""

    __slots__ = ()

    like_operator = "like"
    ilike_operator = "ilike"
    full_text_search_operator = "@@"

    def like(self, value: str) -> Predicate:
        """Case-sensitive pattern match; ``*`` is the wildcard."""
        return self._predicate(self.like_operator, value)

    def ilike(self, value: str) -> Predicate:
        """Case-insensitive pattern match."""
        return self._predicate(self.ilike_operator, value)

    def full_text_search(self, value: str) -> Predicate:
        return self._predicate(self.full_text_search_operator, value)


class NumericField(Field):
    """Column builder adding range comparisons."""

    __slots__ = ()

    greater_than_operator = "gt"
    less_than_operator = "lt"
    greater_than_or_equal_to_operator = "gte"
    less_than_or_equal_to_operator = "lte"

    def greater_than(self, value: float) -> Predicate:
        return self._predicate(self.greater_than_operator, value)

    def less_than(self, value: float) -> Predicate:
        return self._predicate(self.less_than_operator, value)

    def greater_than_or_equal_to(self, value: float) -> Predicate:
        return self._predicate(self.greater_than_or_equal_to_operator, value)

    def less_than_or_equal_to(self, value: float) -> Predicate:
        return self._predicate(self.less_than_or_equal_to_operator, value)


FIELD_TYPES: dict[str, type[Field]] = {
    "field": Field,
    "text": TextField,
    "numeric": NumericField,
}
