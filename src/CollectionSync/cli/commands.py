"""Command implementations for CollectionSync CLI.

Turns CLI filter triples into queries and runs them through a
CollectionDataService, separated from click parameter handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from CollectionSync.core.fields import NOT_PREFIX, Field
from CollectionSync.core.model import Model, Record
from CollectionSync.core.predicate import Predicate
from CollectionSync.core.query import Query
from CollectionSync.service import CollectionDataService
from CollectionSync.utils.log import log

OPERATOR_METHODS: dict[str, str] = {
    "eq": "equals",
    "in": "in_",
    "is": "is_",
    "like": "like",
    "ilike": "ilike",
    "fts": "full_text_search",
    "gt": "greater_than",
    "lt": "less_than",
    "gte": "greater_than_or_equal_to",
    "lte": "less_than_or_equal_to",
}

_IS_VALUES: dict[str, bool | None] = {"null": None, "true": True, "false": False}


def build_predicate(model: Model, key: str, operator: str, value: str) -> Predicate:
    """Build a predicate from a CLI ``KEY OP VALUE`` triple.

    Args:
        model: Model owning the field.
        key: Field key in the model.
        operator: Operator verb, optionally prefixed with ``not.``.
        value: Raw operand. ``in`` splits it on commas; ``is`` accepts
            ``null``, ``true`` or ``false``.

    Returns:
        The predicate built by the matching field method.

    Raises:
        ValueError: If the field, operator or operand is not valid.
    """
    if key not in model.fields:
        raise ValueError(f"Model {model.model_name} has no field: {key}")
    field: Field = model.fields[key]
    verb = operator
    if verb.startswith(NOT_PREFIX):
        field = field.not_
        verb = verb[len(NOT_PREFIX):]

    method_name = OPERATOR_METHODS.get(verb)
    method = getattr(field, method_name, None) if method_name else None
    if method is None:
        raise ValueError(f"Operator {operator!r} is not supported by {type(field).__name__} {key}")

    if verb == "in":
        return method([item.strip() for item in value.split(",")])
    if verb == "is":
        if value.lower() not in _IS_VALUES:
            raise ValueError(f"is operator expects null, true or false, got {value!r}")
        return method(_IS_VALUES[value.lower()])
    return method(value)


def build_query(
    model: Model,
    *,
    where: Sequence[tuple[str, str, str]] = (),
    order: Sequence[str] = (),
    limit: int | None = None,
    offset: int | None = None,
) -> Query:
    """Build a Query from CLI options."""
    predicates = [build_predicate(model, key, operator, value) for key, operator, value in where]
    return Query(predicates=predicates, order_by=list(order), limit=limit, offset=offset)


@dataclass(slots=True)
class SyncCommand:
    """Run one CRUD operation and report the resulting collection."""

    service: CollectionDataService

    def read(self, query: Query) -> Mapping[str, Record]:
        self.service.read_instances(query)
        instances = self.service.instances()
        log.info("Read %d %s", len(instances), self.service.model.model_name)
        return instances

    def create(self, objects: Sequence[Mapping[str, Any]]) -> Mapping[str, Record]:
        self.service.create_instances(objects)
        instances = self.service.instances()
        log.info("Created %d %s", len(instances), self.service.model.model_name)
        return instances

    def update(self, data: Any, query: Query) -> Mapping[str, Record]:
        self.service.update_instances(data, query)
        instances = self.service.instances()
        log.info("Updated %d %s", len(instances), self.service.model.model_name)
        return instances

    def delete(self, query: Query) -> list[str]:
        """Delete matching records and return the removed collection keys.

        The matching records are read first so the local collection holds
        them when the delete result arrives.
        """
        self.service.read_instances(query)
        before = set(self.service.instances())
        self.service.delete_instances(query)
        removed = sorted(before - set(self.service.instances()))
        log.info("Deleted %d %s", len(removed), self.service.model.model_name)
        return removed
