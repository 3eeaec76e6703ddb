"""Observable in-memory store.

A :class:`Store` holds one frozen pydantic state model.  Commits go through
:meth:`Store.set`, which shallow-merges a partial update and then notifies
every subscriber synchronously with the full new state.  The engine knows
nothing about persistence; see :mod:`unicart.state.persistence`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from unicart.exceptions import StoreError, StoreReentrancyError

_logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)

Listener = Callable[[S], None]
Update = Mapping[str, Any] | Callable[[S], Mapping[str, Any]]
Unsubscribe = Callable[[], None]


class Store(Generic[S]):
    """Single-value observable store.

    * ``get()`` returns the current (immutable) snapshot.
    * ``set()`` merges a partial update at the top level.  Nested values are
      replaced wholesale.  Every commit notifies, even when nothing changed.
    * ``subscribe()`` is idempotent per callback; the returned function
      removes exactly that callback.

    Subscribers must not commit to the store that is notifying them; such a
    commit raises :class:`StoreReentrancyError` inside the subscriber.  A
    subscriber that raises is logged and skipped; delivery continues.
    """

    def __init__(self, name: str, initial: S) -> None:
        self.name = name
        self._initial = initial
        self._state = initial
        self._listeners: list[Listener[S]] = []
        self._notifying = False
        self._commits = 0

    def get(self) -> S:
        return self._state

    @property
    def commits(self) -> int:
        """Number of commits applied since construction."""
        return self._commits

    def set(self, update: Update[S]) -> S:
        """Commit a partial update and notify subscribers.

        Raises
        ------
        StoreReentrancyError
            If called from inside one of this store's notifications.
        StoreError
            If the update names a field the state model does not have.
        """
        if self._notifying:
            raise StoreReentrancyError(self.name)

        partial = update(self._state) if callable(update) else update
        unknown = partial.keys() - type(self._state).model_fields.keys()
        if unknown:
            raise StoreError(f"store {self.name!r} has no field(s) {sorted(unknown)}")

        self._state = self._state.model_copy(update=dict(partial))
        self._commits += 1
        _logger.debug("Store %s commit #%d: %s", self.name, self._commits, sorted(partial))
        self._notify()
        return self._state

    def reset(self) -> S:
        """Commit the initial state again."""
        return self.set({name: getattr(self._initial, name) for name in type(self._initial).model_fields})

    def subscribe(self, listener: Listener[S]) -> Unsubscribe:
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def _notify(self) -> None:
        state = self._state
        self._notifying = True
        try:
            # Snapshot so listeners may unsubscribe while being notified.
            for listener in list(self._listeners):
                try:
                    listener(state)
                except Exception:
                    _logger.exception("Subscriber %r of store %s failed", listener, self.name)
        finally:
            self._notifying = False


class StoreHandle(Generic[S]):
    """A :class:`Store` plus the actions built by :func:`create_store`."""

    def __init__(self, store: Store[S], actions: Mapping[str, Callable[..., Any]]) -> None:
        self.store = store
        self.actions = MappingProxyType(dict(actions))

    def get(self) -> S:
        return self.store.get()

    def subscribe(self, listener: Listener[S]) -> Unsubscribe:
        return self.store.subscribe(listener)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        try:
            return self.actions[name]
        except KeyError:
            raise AttributeError(name) from None


def create_store(
    name: str,
    initial: S,
    initializer: Callable[[Callable[[Update[S]], S], Callable[[], S]], Mapping[str, Callable[..., Any]]],
) -> StoreHandle[S]:
    """Build a store whose actions close over its ``set`` and ``get``.

    Usage::

        counter = create_store(
            "counter",
            Counter(),
            lambda set_, get: {"bump": lambda: set_({"n": get().n + 1})},
        )
        counter.bump()
    """
    store = Store(name, initial)
    return StoreHandle(store, initializer(store.set, store.get))
