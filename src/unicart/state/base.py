"""Shared plumbing for the domain stores."""

from __future__ import annotations

from typing import ClassVar, Generic

from unicart.state.engine import Listener, S, Store, Unsubscribe
from unicart.state.persistence import PersistenceBinding, PersistencePort, bind_persistence


class DomainStore(Generic[S]):
    """Wraps a :class:`Store` with domain actions.

    Subclasses set ``persisted_fields`` to limit what a persistence port
    receives; ``None`` persists the whole state.
    """

    persisted_fields: ClassVar[frozenset[str] | None] = None

    def __init__(self, name: str, initial: S, *, persistence: PersistencePort | None = None) -> None:
        self._store: Store[S] = Store(name, initial)
        self._binding: PersistenceBinding[S] | None = None
        if persistence is not None:
            self._binding = bind_persistence(self._store, persistence, fields=self.persisted_fields)

    @property
    def name(self) -> str:
        return self._store.name

    @property
    def store(self) -> Store[S]:
        return self._store

    @property
    def state(self) -> S:
        return self._store.get()

    @property
    def persistence(self) -> PersistenceBinding[S] | None:
        return self._binding

    def subscribe(self, listener: Listener[S]) -> Unsubscribe:
        return self._store.subscribe(listener)

    def close(self) -> None:
        """Stop mirroring commits to the persistence port."""
        if self._binding is not None:
            self._binding.detach()
