from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, ClassVar

from pokeinventory.changes import Subscription
from pokeinventory.config import LOGGER
from pokeinventory.errors import StoreOperationError
from pokeinventory.store import Row, Store

Listener = Callable[["EntityReadModel"], None]


class EntityReadModel:
    """
    Locally cached snapshot of one store table.

    The snapshot is only ever replaced wholesale by `refresh()`. Any change
    notification for the table triggers a full reload, whoever made the
    change and whatever it was.
    """

    table: ClassVar[str]
    order_by: ClassVar[str | None] = None
    descending: ClassVar[bool] = True
    search_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, store: Store) -> None:
        self.store = store
        self._rows: tuple[Row, ...] = ()
        self._lock = threading.RLock()
        self._reloaded = threading.Condition(self._lock)
        self._listeners: list[Listener] = []
        self._subscription: Subscription | None = None
        self._refreshing = False
        self._refresh_thread: int | None = None
        self._pending = False
        self._closed = False
        # Bumped on close; reloads started under an older generation are dropped
        self._generation = 0
        # Reload cycles: started, finished, and the last one that replaced rows
        self._started = 0
        self._finished = 0
        self._replaced_in = 0
        self.loading = False
        self.last_error: StoreOperationError | None = None
        self.version = 0

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    def __len__(self) -> int:
        return len(self._rows)

    def __enter__(self) -> "EntityReadModel":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def open(self) -> None:
        """Load the initial snapshot and start following changes."""
        with self._lock:
            if self._subscription is not None:
                return
            self._closed = False
            self._subscription = self.store.subscribe(
                self.table, self.on_remote_change
            )
        self.refresh()

    def close(self) -> None:
        """
        Stop following changes. Refreshes still in flight are discarded, even
        if the model is opened again before they finish. Listeners stay
        registered; whoever added one removes it.
        """
        with self._lock:
            self._closed = True
            self._generation += 1
            subscription, self._subscription = self._subscription, None
            self._reloaded.notify_all()
        if subscription is not None:
            self.store.unsubscribe(subscription)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(model)` after every snapshot replacement."""
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def on_remote_change(self, table: str) -> None:
        self.refresh()

    def refresh(self) -> bool:
        """
        Reload the whole table. Returns True if the snapshot was replaced.

        A refresh requested while another one is running is folded into a
        single follow-up reload. Callers on other threads wait for that
        reload, so a write made before calling refresh() is visible when it
        returns. On store errors the previous snapshot is kept and
        `last_error` is set.
        """
        with self._lock:
            if self._closed:
                return False
            if self._refreshing:
                self._pending = True
                if self._refresh_thread == threading.get_ident():
                    return False
                return self._wait_for_reload(self._started + 1)
            self._refreshing = True
            self._refresh_thread = threading.get_ident()
            self.loading = True

        replaced = False
        try:
            while True:
                with self._lock:
                    self._started += 1
                    cycle = self._started
                    generation = self._generation
                try:
                    rows = self.store.select(
                        self.table, order_by=self.order_by, descending=self.descending
                    )
                except StoreOperationError as e:
                    LOGGER.warning(f"Keeping stale '{self.table}' data: {e}")
                    with self._lock:
                        self.last_error = e
                else:
                    with self._lock:
                        if not self._closed and generation == self._generation:
                            self._rows = tuple(rows)
                            self.version += 1
                            self.last_error = None
                            self._replaced_in = cycle
                            replaced = True

                with self._lock:
                    self._finished = cycle
                    self._reloaded.notify_all()
                    if self._pending and not self._closed:
                        self._pending = False
                        continue
                    self._pending = False
                    self._end_refresh()
                    break
        finally:
            with self._lock:
                if self._refreshing and self._refresh_thread == threading.get_ident():
                    self._end_refresh()

        if replaced:
            self._notify()
        return replaced

    def _wait_for_reload(self, cycle: int) -> bool:
        """Block until reload `cycle` has finished. Call with the lock held."""
        while self._finished < cycle and self._refreshing and not self._closed:
            self._reloaded.wait()
        return self._replaced_in >= cycle

    def _end_refresh(self) -> None:
        self._refreshing = False
        self._refresh_thread = None
        self.loading = False
        self._reloaded.notify_all()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self)

    def find(self, row_id: str) -> Row | None:
        """Look up a row in the current snapshot."""
        return next((row for row in self._rows if row.get("id") == row_id), None)

    def search(self, text: str | None) -> list[Row]:
        """Case-insensitive substring match over the model's search fields."""
        needle = (text or "").strip().lower()
        if not needle:
            return list(self._rows)

        matches = []
        for row in self._rows:
            haystack = " ".join(
                str(row[field]) for field in self.search_fields if row.get(field)
            ).lower()
            if needle in haystack:
                matches.append(row)
        return matches
