"""
Change notifications for the store tables.

A notification only says "this table changed"; it carries no row or
operation detail. Writers in this process publish through `track_changes`,
writers in other processes are picked up by `TablePoller`.
"""

from __future__ import annotations

import itertools
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy import event, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pokeinventory.config import LOGGER, POLL_INTERVAL_SECONDS
from pokeinventory.models import Base

ChangeCallback = Callable[[str], None]

_CHANGED_TABLES_KEY = "pokeinventory_changed_tables"


@dataclass(frozen=True)
class Subscription:
    """Handle returned by `ChangeFeed.subscribe`, used to unsubscribe."""

    id: int
    table: str
    callback: ChangeCallback = field(compare=False, repr=False)


class ChangeFeed:
    """
    Queues table-changed notifications and delivers them to subscribers
    from a background thread.

    Notifications that pile up while the dispatcher is busy are delivered
    once per table, so N notifications never cause more than N callbacks.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[str | None] = queue.Queue()
        self._subscribers: dict[int, Subscription] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._thread: threading.Thread | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        """Register a callback for changes to `table`."""
        subscription = Subscription(next(self._ids), table, callback)
        with self._lock:
            self._subscribers[subscription.id] = subscription
        LOGGER.debug(f"Subscribed #{subscription.id} to '{table}'")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            removed = self._subscribers.pop(subscription.id, None)
        if removed:
            LOGGER.debug(f"Unsubscribed #{subscription.id} from '{subscription.table}'")

    def subscriber_count(self, table: str | None = None) -> int:
        with self._lock:
            return sum(
                1
                for sub in self._subscribers.values()
                if table is None or sub.table == table
            )

    def publish(self, table: str) -> None:
        """Put a notification on the queue. Returns immediately."""
        self._queue.put(table)

    def start(self) -> None:
        """Start the background dispatcher thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._process, name="pokeinventory-changes", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the dispatcher to stop and wait for it to finish."""
        if not self._running:
            return
        self._running = False
        self._queue.put(None)
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def flush(self) -> None:
        """
        Block until every queued notification has been delivered.
        When the dispatcher is not running they are delivered on the calling thread.
        """
        if self._running:
            self._queue.join()
            return

        while True:
            batch = self._drain()
            if not batch:
                return
            self._deliver(batch)

    def _drain(self, first: str | None = None, has_first: bool = False) -> list:
        batch = [first] if has_first else []
        while True:
            try:
                batch.append(self._queue.get_nowait())
            except queue.Empty:
                return batch

    def _deliver(self, batch: list) -> None:
        tables = list(dict.fromkeys(t for t in batch if t is not None))
        try:
            for table in tables:
                self._dispatch(table)
        finally:
            for _ in batch:
                self._queue.task_done()

    def _process(self) -> None:
        while True:
            first = self._queue.get(block=True)
            batch = self._drain(first, has_first=True)
            self._deliver(batch)
            if None in batch:
                break

    def _dispatch(self, table: str) -> None:
        with self._lock:
            targets = [s for s in self._subscribers.values() if s.table == table]

        for subscription in targets:
            try:
                subscription.callback(table)
            except Exception as e:
                LOGGER.error(
                    f"Change handler #{subscription.id} for '{table}' failed: {e}"
                )


def track_changes(
    sessionmaker_: sessionmaker[Session], feed: ChangeFeed
) -> Callable[[], None]:
    """
    Publish a notification for every table touched by a committed session
    created from `sessionmaker_`. Returns a function that removes the hooks.
    """

    def after_flush(session: Session, flush_context) -> None:
        changed = session.info.setdefault(_CHANGED_TABLES_KEY, set())
        for obj in itertools.chain(session.new, session.dirty, session.deleted):
            table = getattr(obj, "__tablename__", None)
            if table:
                changed.add(table)

    def after_commit(session: Session) -> None:
        for table in sorted(session.info.pop(_CHANGED_TABLES_KEY, set())):
            feed.publish(table)

    def after_rollback(session: Session) -> None:
        session.info.pop(_CHANGED_TABLES_KEY, None)

    hooks = [
        ("after_flush", after_flush),
        ("after_commit", after_commit),
        ("after_rollback", after_rollback),
    ]
    for name, fn in hooks:
        event.listen(sessionmaker_, name, fn)

    def untrack() -> None:
        for name, fn in hooks:
            if event.contains(sessionmaker_, name, fn):
                event.remove(sessionmaker_, name, fn)

    return untrack


class TablePoller:
    """
    Detects writes made by other processes sharing the database.

    Each poll reads a (row count, latest timestamp) fingerprint per table and
    publishes a notification for every table whose fingerprint moved.
    """

    def __init__(
        self,
        sessionmaker_: sessionmaker[Session],
        feed: ChangeFeed,
        models: dict[str, type[Base]],
        interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        self.Session: sessionmaker[Session] = sessionmaker_
        self.feed = feed
        self.models = models
        self.interval = interval
        self._fingerprints: dict[str, tuple] = {}
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def fingerprint(self, model: type[Base]) -> tuple:
        columns = model.__table__.c
        stamp = columns.updated_at if "updated_at" in columns else columns.created_at
        with self.Session() as session:
            row = session.execute(select(func.count(), func.max(stamp))).one()
        return tuple(row)

    def poll_once(self) -> list[str]:
        """Poll every table once. Returns the tables published as changed."""
        changed = []
        for table, model in self.models.items():
            try:
                current = self.fingerprint(model)
            except SQLAlchemyError as e:
                LOGGER.warning(f"Polling '{table}' failed: {e}")
                continue

            previous = self._fingerprints.get(table)
            self._fingerprints[table] = current
            # First sighting only records the baseline
            if previous is not None and previous != current:
                changed.append(table)
                self.feed.publish(table)
        return changed

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self.poll_once()
        self._thread = threading.Thread(
            target=self._run, name="pokeinventory-poller", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once()
