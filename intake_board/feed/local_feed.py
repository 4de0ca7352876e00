"""
Local push feed backed by the SQLite document store.
Subscribers receive the current snapshot immediately and a fresh full
snapshot after every write, delivered synchronously on the writer's thread.
Writes made through other connections are picked up by refresh().
"""
import itertools
import logging
import sqlite3
from typing import Any, Callable, Dict, List, Optional, Tuple

from intake_board.config import FeedSettings
from intake_board.feed.base import ErrorCallback, FeedDocument, SnapshotCallback, Unsubscribe
from intake_board.storage.database import Database

logger = logging.getLogger(__name__)

Listener = Tuple[SnapshotCallback, ErrorCallback]


class LocalFeed:
    """Feed implementation over a Database; also the write API for the playground"""

    def __init__(self, database: Database):
        self.db = database
        self._order_listeners: Dict[int, Listener] = {}
        self._technician_listeners: Dict[int, Listener] = {}
        self._tokens = itertools.count()
        self._seen_version: Optional[int] = None

    def subscribe_orders(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        return self._subscribe(self._order_listeners, self._read_orders, on_snapshot, on_error)

    def subscribe_technicians(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        return self._subscribe(self._technician_listeners, self._read_technicians, on_snapshot, on_error)

    @property
    def listener_count(self) -> int:
        return len(self._order_listeners) + len(self._technician_listeners)

    # Writes. Errors propagate to the caller; only reads are reported via on_error.

    def put_order(self, doc_id: str, data: Dict[str, Any]):
        self.db.upsert_order(doc_id, data)
        self.publish_orders()

    def put_user(self, doc_id: str, data: Dict[str, Any]):
        self.db.upsert_user(doc_id, data)
        self.publish_technicians()

    def delete_order(self, doc_id: str):
        self.db.delete_order(doc_id)
        self.publish_orders()

    def clear(self):
        self.db.clear()
        self.publish_orders()
        self.publish_technicians()

    def refresh(self) -> bool:
        """
        Re-publish both snapshots if another connection (another session or
        process) committed since the last check. Returns True when it published.
        """
        try:
            version = self.db.data_version()
        except sqlite3.Error as e:
            logger.error("Change check failed on %s: %s", self.db.db_path, e)
            for listeners in (self._order_listeners, self._technician_listeners):
                for _, on_error in list(listeners.values()):
                    on_error(e)
            return False

        if version == self._seen_version:
            return False
        self._seen_version = version
        self.publish_orders()
        self.publish_technicians()
        return True

    def publish_orders(self):
        self._publish(self._order_listeners, self._read_orders)

    def publish_technicians(self):
        self._publish(self._technician_listeners, self._read_technicians)

    def _read_orders(self) -> List[FeedDocument]:
        return [FeedDocument(**doc) for doc in self.db.get_order_documents()]

    def _read_technicians(self) -> List[FeedDocument]:
        return [FeedDocument(**doc) for doc in self.db.get_technician_documents()]

    def _subscribe(
        self,
        listeners: Dict[int, Listener],
        reader: Callable[[], List[FeedDocument]],
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        token = next(self._tokens)
        listeners[token] = (on_snapshot, on_error)
        self._publish({token: listeners[token]}, reader)

        def unsubscribe():
            listeners.pop(token, None)

        return unsubscribe

    def _publish(self, listeners: Dict[int, Listener], reader: Callable[[], List[FeedDocument]]):
        if not listeners:
            return
        try:
            documents = reader()
        except sqlite3.Error as e:
            logger.error("Snapshot read failed on %s: %s", self.db.db_path, e)
            for _, on_error in list(listeners.values()):
                on_error(e)
            return

        for on_snapshot, _ in list(listeners.values()):
            on_snapshot(list(documents))


def create_local_feed(settings: FeedSettings) -> Optional[LocalFeed]:
    """Open the configured document store, or return None when unconfigured"""
    if not settings.is_configured:
        return None
    db = Database(settings.database_path, project_id=settings.project_id)
    db.connect()
    db.initialize_schema()
    return LocalFeed(db)
