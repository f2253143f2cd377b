"""In-process store holding one keyed collection per namespace.

The store is the single writer of collection state. Reducers never mutate the
state they receive; they return a new ``CollectionState`` which replaces the
old one, so references to earlier snapshots stay valid and unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from CollectionSync.utils.log import log

Record = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Action:
    """A batch of records returned by one request.

    Attributes:
        type: Name of the action that issued the request.
        instances: Records from the response, in response order.
    """

    type: str
    instances: tuple[Record, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "instances", tuple(self.instances))


@dataclass(frozen=True, slots=True)
class CollectionState:
    """Immutable snapshot of a collection keyed by composite index."""

    instances: Mapping[str, Record] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "instances", MappingProxyType(dict(self.instances)))


Reducer = Callable[[CollectionState, Action], CollectionState]


class Store:
    """Dispatch result batches to the reducers registered for them."""

    def __init__(self) -> None:
        self._states: dict[str, CollectionState] = {}
        self._reducers: dict[str, tuple[str, Reducer]] = {}

    def register(self, namespace: str, action_type: str, reducer: Reducer) -> None:
        """Route actions of ``action_type`` to ``reducer`` for ``namespace``.

        Raises:
            ValueError: If ``action_type`` is already registered.
        """
        if action_type in self._reducers:
            raise ValueError(f"Reducer already registered for action: {action_type}")
        self._reducers[action_type] = (namespace, reducer)
        self._states.setdefault(namespace, CollectionState())
        log.debug("Registered reducer: namespace=%s action=%s", namespace, action_type)

    def dispatch(self, action: Action) -> None:
        """Apply ``action`` to the state of the namespace it is registered for."""
        entry = self._reducers.get(action.type)
        if entry is None:
            log.warning("No reducer registered for action: %s", action.type)
            return
        namespace, reducer = entry
        previous = self.get_state(namespace)
        self._states[namespace] = reducer(previous, action)
        log.debug(
            "Dispatched action=%s records=%d size=%d->%d",
            action.type,
            len(action.instances),
            len(previous.instances),
            len(self._states[namespace].instances),
        )

    def get_state(self, namespace: str) -> CollectionState:
        return self._states.get(namespace, CollectionState())
