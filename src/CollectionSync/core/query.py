"""Query container compiled into URL arguments and request headers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from CollectionSync.core.predicate import Predicate, RequestArgument

ORDER_ARGUMENT = "order"

_QUERY_KEYS = {
    "predicates": "predicates",
    "limit": "limit",
    "offset": "offset",
    "order_by": "order_by",
    "orderBy": "order_by",
}


@dataclass(slots=True)
class Query:
    """Filters plus pagination and ordering for one request.

    Attributes:
        predicates: Filters in builder order. They are ANDed by the API.
        limit: Maximum number of rows, or None for no limit.
        offset: Number of rows to skip, or None.
        order_by: Ordering tokens such as ``name.asc``.
    """

    predicates: list[Predicate] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    order_by: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.predicates = list(self.predicates)
        self.order_by = list(self.order_by)
        _check_count(self.limit, "limit")
        _check_count(self.offset, "offset")

    @classmethod
    def coerce(cls, value: Query | Mapping[str, Any] | None) -> Query:
        """Return ``value`` as a Query.

        Args:
            value: An existing Query (returned as is), None (empty query), or a
                mapping with keys ``predicates``, ``limit``, ``offset`` and
                ``order_by`` (``orderBy`` is accepted too).

        Returns:
            Query instance.

        Raises:
            TypeError: If value is of another type.
            ValueError: If the mapping contains unknown keys.
        """
        if isinstance(value, Query):
            return value
        if value is None:
            return cls()
        if not isinstance(value, Mapping):
            raise TypeError(f"query must be a Query or a mapping, got {type(value).__name__}")
        unknown = sorted(str(key) for key in value if key not in _QUERY_KEYS)
        if unknown:
            raise ValueError(f"Unknown query key(s): {unknown}")
        return cls(**{_QUERY_KEYS[key]: item for key, item in value.items()})

    def where(self, *predicates: Predicate) -> Query:
        self.predicates.extend(predicates)
        return self

    def order(self, *tokens: str) -> Query:
        self.order_by.extend(tokens)
        return self

    def paginate(self, *, limit: int | None = None, offset: int | None = None) -> Query:
        """Set limit and/or offset; arguments left as None keep their value."""
        if limit is not None:
            _check_count(limit, "limit")
            self.limit = limit
        if offset is not None:
            _check_count(offset, "offset")
            self.offset = offset
        return self

    def url_arguments(self) -> list[RequestArgument]:
        """Return the ordering argument (if any) followed by every predicate."""
        args: list[RequestArgument] = []
        if self.order_by:
            args.append(RequestArgument(ORDER_ARGUMENT, ",".join(self.order_by)))
        args.extend(predicate.to_url_argument() for predicate in self.predicates)
        return args

    def request_headers(self) -> list[str]:
        """Return the Range header for limit/offset, or an empty list.

        Zero is treated the same as unset for both values.
        """
        if not self.offset and not self.limit:
            return []
        start = self.offset or 0
        end = str(start + self.limit) if self.limit else ""
        return [f"Range: {start}-{end}"]


def _check_count(value: Any, name: str) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
