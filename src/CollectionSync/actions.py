"""CRUD actions: request initiators paired with collection reducers.

Each action issues one request through its endpoint and, when the request
succeeds, dispatches the returned records to the store under its own name.
The store then runs the action's reducer:

- ``Create``, ``Read`` and ``Update`` insert or replace records by index.
- ``Delete`` removes stored records whose index matches a returned record.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from CollectionSync.core.model import Model, Record
from CollectionSync.core.query import Query
from CollectionSync.errors import ActionConfigurationError
from CollectionSync.store import Action, CollectionState, Store
from CollectionSync.transport import JsonEndpoint
from CollectionSync.utils.log import log

RETURN_REPRESENTATION = "Prefer: return=representation"
RANGE_UNIT_ITEMS = "Range-Unit: items"

QueryLike = Query | Mapping[str, Any] | None


def upsert_instances(state: CollectionState, records: Sequence[Record], model: Model) -> CollectionState:
    """Insert or replace ``records`` in ``state`` keyed by ``model.index``.

    Records pass through ``model.factory`` first. Later records in the batch
    overwrite earlier ones with the same index.
    """
    instances = dict(state.instances)
    for record in map(model.factory, records):
        instances[model.index(record)] = record
    return CollectionState(instances)


def remove_instances(state: CollectionState, records: Sequence[Record], model: Model) -> CollectionState:
    """Drop every stored record whose index matches one of ``records``.

    Deleted records are indexed as returned, without ``model.factory``. A
    model whose index depends on fields produced by its factory will not
    match them against stored records.
    """
    deleted = {model.index(record) for record in records}
    kept = {key: record for key, record in state.instances.items() if model.index(record) not in deleted}
    removed = len(state.instances) - len(kept)
    if removed < len(deleted):
        log.debug(
            "Delete matched %d of %d returned records for model=%s",
            removed,
            len(deleted),
            model.model_name,
        )
    return CollectionState(kept)


class CrudAction:
    """Base class pairing an endpoint with a collection reducer.

    Args:
        name: Action name; the store routes results by this name.
        model: Model used to index records. Usually injected by a service.
        endpoint: Endpoint override. Defaults to one using the action's
            method and headers, without a URL.
        store: Store receiving result batches.
    """

    method = "GET"
    default_headers: tuple[str, ...] = ()

    def __init__(
        self,
        name: str,
        *,
        model: Model | None = None,
        endpoint: JsonEndpoint | None = None,
        store: Store | None = None,
    ) -> None:
        self.name = name
        self.model = model
        self.endpoint = endpoint or JsonEndpoint(method=self.method, headers=self.default_headers)
        self.store = store

    @classmethod
    def create(
        cls,
        name: str,
        *,
        model: Model | None = None,
        endpoint: JsonEndpoint | None = None,
        store: Store | None = None,
    ) -> CrudAction:
        return cls(name, model=model, endpoint=endpoint, store=store)

    def configure(
        self,
        *,
        name: str | None = None,
        model: Model | None = None,
        endpoint: JsonEndpoint | None = None,
        store: Store | None = None,
    ) -> CrudAction:
        """Override the given settings and return the action."""
        if name:
            self.name = name
        if model is not None:
            self.model = model
        if endpoint is not None:
            self.endpoint = endpoint
        if store is not None:
            self.store = store
        return self

    def initiate(self, *args: Any, **kwargs: Any) -> None:
        """Issue the action's request."""
        raise NotImplementedError

    def reducer(self, state: CollectionState, action: Action) -> CollectionState:
        return upsert_instances(state, action.instances, self._require_model())

    def _require_model(self) -> Model:
        if self.model is None:
            raise ActionConfigurationError(f"Action {self.name!r} has no model")
        return self.model

    def _require_store(self) -> Store:
        if self.store is None:
            raise ActionConfigurationError(f"Action {self.name!r} has no store")
        return self.store

    def _execute(self, *, data: Any = None, query: Query | None = None) -> None:
        store = self._require_store()

        def dispatch(response: Sequence[Record]) -> None:
            store.dispatch(Action(type=self.name, instances=tuple(response)))

        log.debug("Initiating action=%s url=%s", self.name, self.endpoint.url)
        if query is None:
            self.endpoint.execute(data=data, success=dispatch)
            return
        self.endpoint.execute(
            data=data,
            headers=query.request_headers(),
            arguments=query.url_arguments(),
            success=dispatch,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, endpoint={self.endpoint!r})"


class Create(CrudAction):
    method = "POST"
    default_headers = (RETURN_REPRESENTATION,)

    def initiate(self, objects: Sequence[Mapping[str, Any]]) -> None:
        """POST a batch of new records."""
        self._execute(data=list(objects))


class Read(CrudAction):
    """Fetch records matching a query; also used to refresh them."""

    method = "GET"
    default_headers = (RANGE_UNIT_ITEMS,)

    def initiate(self, query: QueryLike = None) -> None:
        self._execute(query=Query.coerce(query))


class Update(CrudAction):
    method = "PUT"
    default_headers = (RETURN_REPRESENTATION,)

    def initiate(self, data: Any, query: QueryLike = None) -> None:
        """Apply ``data`` to the records matching ``query``."""
        self._execute(data=data, query=Query.coerce(query))


class Delete(CrudAction):
    method = "DELETE"
    default_headers = (RETURN_REPRESENTATION,)

    def initiate(self, query: QueryLike = None) -> None:
        self._execute(query=Query.coerce(query))

    def reducer(self, state: CollectionState, action: Action) -> CollectionState:
        return remove_instances(state, action.instances, self._require_model())
