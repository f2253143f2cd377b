"""Record schemas and composite key derivation."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Sequence

from CollectionSync.core.fields import Field
from CollectionSync.errors import ModelConfigurationError

Record = Mapping[str, Any]
IndexFunction = Callable[[Record], str]
FactoryFunction = Callable[[Record], Record]

INDEX_SEPARATOR = ":"
MISSING_PRIMARY_MESSAGE = "All models must have at least one primary field, or specify an index function"


@dataclass(frozen=True, slots=True)
class PrimaryField:
    """A primary key component: the record key it is read from and its field."""

    name: str
    field: Field


def default_factory(record: Record) -> Record:
    """Store records exactly as the API returned them."""
    return record


def composite_index(record: Record, primary: Sequence[PrimaryField]) -> str:
    """Join the primary field values of ``record`` with ``:``.

    Args:
        record: Record mapping.
        primary: Primary key components in declaration order.

    Returns:
        Composite key, e.g. ``"1:2"`` for primaries ``a``, ``b``.

    Raises:
        ModelConfigurationError: If ``primary`` is empty.
        KeyError: If the record lacks a primary value.
    """
    if not primary:
        raise ModelConfigurationError(MISSING_PRIMARY_MESSAGE)
    return INDEX_SEPARATOR.join(str(record[component.name]) for component in primary)


class Model:
    """Named record schema.

    Fields are declared explicitly, either as a mapping from record key to
    field or as a sequence of named fields. Fields declared without a name
    are bound to their key::

        users = Model("users", {
            "id": NumericField(primary=True),
            "email": TextField(),
        })
        users.email.ilike("*@example.com")

    Args:
        model_name: Resource name, also the last URL segment of its endpoint.
        fields: Field declarations.
        index: Optional function deriving the collection key of a record.
            Defaults to joining the primary field values.
        factory: Optional function turning a returned record into its stored
            form. Defaults to identity.

    Raises:
        TypeError: If a declaration is not a Field.
        ValueError: If two declarations share a key, or a sequence entry has no name.
    """

    def __init__(
        self,
        model_name: str,
        fields: Mapping[str, Field] | Sequence[Field] | None = None,
        *,
        index: IndexFunction | None = None,
        factory: FactoryFunction | None = None,
    ) -> None:
        if not isinstance(model_name, str) or not model_name.strip():
            raise ValueError("model_name must be a non-empty string")
        self.model_name = model_name
        self.fields: Mapping[str, Field] = MappingProxyType(_bind_fields(fields or {}))
        self.primary: tuple[PrimaryField, ...] = tuple(
            PrimaryField(name=key, field=field) for key, field in self.fields.items() if field.primary
        )
        self._index = index
        self._factory = factory or default_factory

    @classmethod
    def create(
        cls,
        model_name: str,
        fields: Mapping[str, Field] | Sequence[Field] | None = None,
        *,
        index: IndexFunction | None = None,
        factory: FactoryFunction | None = None,
    ) -> Model:
        return cls(model_name, fields, index=index, factory=factory)

    def index(self, record: Record) -> str:
        """Return the collection key of ``record``.

        Raises:
            ModelConfigurationError: If the model has neither primary fields nor
                a custom index function.
        """
        if self._index is not None:
            return self._index(record)
        return composite_index(record, self.primary)

    def factory(self, record: Record) -> Record:
        return self._factory(record)

    def __getitem__(self, key: str) -> Field:
        return self.fields[key]

    def __getattr__(self, key: str) -> Field:
        fields = self.__dict__.get("fields")
        if fields is not None and key in fields:
            return fields[key]
        raise AttributeError(f"{type(self).__name__} {self.__dict__.get('model_name')!r} has no field {key!r}")

    def __repr__(self) -> str:
        return f"Model(model_name={self.model_name!r}, fields={list(self.fields)!r})"


def _bind_fields(fields: Mapping[str, Field] | Iterable[Field]) -> dict[str, Field]:
    """Key every declared field and bind unnamed ones to their key."""
    if isinstance(fields, Mapping):
        items = list(fields.items())
    else:
        items = []
        for field in fields:
            if not isinstance(field, Field):
                raise TypeError(f"fields must contain Field instances, got {type(field).__name__}")
            if not field.name:
                raise ValueError("Fields declared as a sequence must have a name")
            items.append((field.name, field))

    bound: dict[str, Field] = {}
    for key, field in items:
        if not isinstance(field, Field):
            raise TypeError(f"Field {key!r} must be a Field instance, got {type(field).__name__}")
        if key in bound:
            raise ValueError(f"Duplicate field: {key}")
        bound[key] = field if field.name else field.named(key)
    return bound
