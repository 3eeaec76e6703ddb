"""Durable mirrors for store state.

Three layers, each replaceable in tests:

* :class:`SlotStorage`: the key-value medium (``MemoryStorage``,
  ``FileStorage``), the equivalent of browser local storage.
* :class:`PersistencePort`: ``load()`` / ``save()`` / ``clear()`` for one
  store.  :class:`JsonSlotPersistence` writes a versioned JSON envelope
  ``{"state": {...}, "version": N}`` into one slot.
* :func:`bind_persistence`: hydrates a store from a port and mirrors every
  later commit back to it.

Reading never raises: absence, corruption, or an unknown version all
degrade to "nothing stored".  A failed write is logged and counted; the
in-memory state stays authoritative.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from collections.abc import Collection, Mapping
from pathlib import Path
from typing import Any, Generic, Protocol

from pydantic import ValidationError

from unicart._constants import STORAGE_VERSION
from unicart.exceptions import PersistenceError
from unicart.state.engine import S, Store, Unsubscribe

_logger = logging.getLogger(__name__)

_SLOT_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class SlotStorage(Protocol):
    """String key-value medium."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed :class:`SlotStorage`."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage:
    """One file per slot under *directory*.

    Writes go to a temporary file in the same directory and are moved into
    place with :func:`os.replace`, so a crash mid-write leaves the previous
    value intact.
    """

    suffix = ".json"

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SLOT_NAME_RE.match(key):
            raise ValueError(f"invalid slot name {key!r}")
        return self.directory / f"{key}{self.suffix}"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            _logger.warning("Slot %s is not valid UTF-8; ignoring it.", key)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(path.stem for path in self.directory.glob(f"*{self.suffix}"))


class PersistencePort(Protocol):
    """Durable mirror of one store's state."""

    def load(self) -> dict[str, Any] | None: ...

    def save(self, state: Mapping[str, Any]) -> None: ...

    def clear(self) -> None: ...


class JsonSlotPersistence:
    """:class:`PersistencePort` writing a versioned JSON envelope to a slot.

    Legacy payloads without an envelope (``{"items": [...]}``) are read as
    version 0.  Envelopes newer than *version* are ignored.
    """

    def __init__(self, storage: SlotStorage, slot: str, *, version: int = STORAGE_VERSION) -> None:
        self.storage = storage
        self.slot = slot
        self.version = version

    def load(self) -> dict[str, Any] | None:
        try:
            text = self.storage.get_item(self.slot)
        except (OSError, ValueError) as exc:
            _logger.warning("Could not read slot %s: %s", self.slot, exc)
            return None
        if text is None:
            return None

        try:
            payload = json.loads(text)
        except ValueError:
            _logger.warning("Slot %s does not hold valid JSON; ignoring it.", self.slot)
            return None
        if not isinstance(payload, dict):
            _logger.warning("Slot %s does not hold a JSON object; ignoring it.", self.slot)
            return None

        if "state" not in payload or "version" not in payload:
            return payload

        version = payload["version"]
        state = payload["state"]
        if not isinstance(version, int) or isinstance(version, bool) or version > self.version:
            _logger.warning("Slot %s has unsupported version %r; ignoring it.", self.slot, version)
            return None
        if not isinstance(state, dict):
            _logger.warning("Slot %s has a malformed state; ignoring it.", self.slot)
            return None
        return state

    def save(self, state: Mapping[str, Any]) -> None:
        text = json.dumps({"state": dict(state), "version": self.version}, separators=(",", ":"))
        try:
            self.storage.set_item(self.slot, text)
        except OSError as exc:
            raise PersistenceError(f"could not write slot {self.slot}: {exc}", slot=self.slot) from exc

    def clear(self) -> None:
        try:
            self.storage.remove_item(self.slot)
        except OSError as exc:
            raise PersistenceError(f"could not clear slot {self.slot}: {exc}", slot=self.slot) from exc


class PersistenceBinding(Generic[S]):
    """Live link between a store and its port, created by :func:`bind_persistence`."""

    def __init__(self, store: Store[S], port: PersistencePort, fields: Collection[str] | None) -> None:
        self.store = store
        self.port = port
        self.fields = frozenset(fields) if fields is not None else None
        self.hydrated = False
        self.failed_writes = 0
        self._unsubscribe: Unsubscribe | None = None

    def dump(self, state: S) -> dict[str, Any]:
        """Serialize the persisted part of *state* with camelCase keys."""
        include = set(self.fields) if self.fields is not None else None
        return state.model_dump(mode="json", by_alias=True, include=include)

    def hydrate(self) -> bool:
        """Load stored state into the store.  Returns whether anything was applied."""
        try:
            stored = self.port.load()
        except PersistenceError as exc:
            _logger.warning("Hydration of store %s failed: %s", self.store.name, exc)
            return False
        if not stored:
            return False

        current = self.store.get()
        state_cls = type(current)
        merged = {**current.model_dump(by_alias=True), **stored}
        try:
            restored = state_cls.model_validate(merged)
        except ValidationError as exc:
            _logger.warning(
                "Stored state for %s is invalid (%d error(s)); starting empty.",
                self.store.name,
                exc.error_count(),
            )
            return False

        names = self.fields if self.fields is not None else state_cls.model_fields.keys()
        self.store.set({name: getattr(restored, name) for name in names})
        self.hydrated = True
        return True

    def write(self, state: S) -> bool:
        """Mirror *state* to the port.  Returns ``False`` when the write failed."""
        try:
            self.port.save(self.dump(state))
        except (PersistenceError, OSError) as exc:
            self.failed_writes += 1
            _logger.warning(
                "Could not persist store %s (%d failed write(s)); keeping in-memory state: %s",
                self.store.name,
                self.failed_writes,
                exc,
            )
            return False
        return True

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.write)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None


def bind_persistence(
    store: Store[S],
    port: PersistencePort,
    *,
    fields: Collection[str] | None = None,
) -> PersistenceBinding[S]:
    """Hydrate *store* from *port*, then mirror every commit back to it.

    ``fields`` limits both what is written and what is restored; the other
    fields keep their in-memory defaults.
    """
    binding = PersistenceBinding(store, port, fields)
    binding.hydrate()
    binding.attach()
    return binding
