"""Collection data service wiring a model to its CRUD actions."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from CollectionSync.actions import Create, CrudAction, Delete, QueryLike, Read, Update
from CollectionSync.core.model import Model, Record
from CollectionSync.store import Store
from CollectionSync.utils.log import log


class CollectionDataService:
    """Synchronize one model's collection with its REST resource.

    Each action without a model of its own receives the service model. Action
    names become ``"<model_name>: <action_name>"`` and endpoints without an
    explicit URL point at ``<url><model_name>``.

    Args:
        model: Model describing the resource records.
        store: Store holding the collection; reducers are registered on it.
        url: Base API URL. A trailing ``/`` is added when missing.
        create: Create action override.
        read: Read action override.
        update: Update action override.
        delete: Delete action override.
    """

    def __init__(
        self,
        model: Model,
        *,
        store: Store,
        url: str = "/",
        create: CrudAction | None = None,
        read: CrudAction | None = None,
        update: CrudAction | None = None,
        delete: CrudAction | None = None,
    ) -> None:
        self.model = model
        self.store = store
        self.url = url if url.endswith("/") else url + "/"
        self.create = create or Create("create")
        self.read = read or Read("read")
        self.update = update or Update("update")
        self.delete = delete or Delete("delete")
        for action in self.actions():
            self._reconfigure_action(action)

    @property
    def namespace(self) -> str:
        """Store namespace holding this service's collection."""
        return self.model.model_name

    def actions(self) -> tuple[CrudAction, ...]:
        return (self.create, self.read, self.update, self.delete)

    def _reconfigure_action(self, action: CrudAction) -> None:
        model = action.model or self.model
        action.configure(
            model=model,
            name=f"{model.model_name}: {action.name}",
            endpoint=action.endpoint.with_url(action.endpoint.url or self.url + model.model_name),
            store=self.store,
        )
        self.store.register(self.namespace, action.name, action.reducer)
        log.debug("Configured action=%s url=%s", action.name, action.endpoint.url)

    def instances(self) -> Mapping[str, Record]:
        """Current collection, keyed by composite index. Read-only."""
        return self.store.get_state(self.namespace).instances

    def create_instances(self, objects: Sequence[Mapping[str, Any]]) -> None:
        self.create.initiate(objects)

    def read_instances(self, query: QueryLike = None) -> None:
        self.read.initiate(query)

    def update_instances(self, data: Any, query: QueryLike = None) -> None:
        self.update.initiate(data, query)

    def delete_instances(self, query: QueryLike = None) -> None:
        self.delete.initiate(query)

    def close(self) -> None:
        """Close the HTTP sessions owned by the action endpoints."""
        for action in self.actions():
            action.endpoint.close()
