"""Wire-level filter primitives."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RequestArgument:
    """One URL query argument as sent to the API.

    Attributes:
        argument: Query parameter name (a column name, or ``order``).
        value: Raw parameter value, e.g. ``eq.5`` or ``name.asc,age.desc``.
    """

    argument: str
    value: str

    def as_pair(self) -> tuple[str, str]:
        """Return the ``(argument, value)`` tuple used for request params."""
        return (self.argument, self.value)


@dataclass(frozen=True, slots=True)
class Predicate:
    """A single filter condition bound to a column.

    Predicates are ANDed by the API, so their order only affects the order of
    the emitted URL arguments.

    Attributes:
        field: Column name.
        operator: Filter verb, optionally prefixed with ``not.``.
        value: Serialized operand.
    """

    field: str
    operator: str
    value: str

    def to_url_argument(self) -> RequestArgument:
        """Convert the predicate to its ``column=operator.value`` argument."""
        return RequestArgument(self.field, f"{self.operator}.{self.value}")
