"""
A named document collection backed by SQLite.

Exposes the small surface the rest of the app relies on: add, delete,
atomic batch delete, and a subscription that pushes the full current
snapshot after every change.
"""
from __future__ import annotations

import json
import logging
import secrets
import sqlite3
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List

from .errors import RemoteWriteFailed, SubscriptionFailed
from .models import Bowler

logger = logging.getLogger(__name__)

SnapshotHandler = Callable[[List[Bowler]], None]
ErrorHandler = Callable[[SubscriptionFailed], None]


# -----------------------
# Batch writes
# -----------------------
class WriteBatch:
    """Queued deletions that apply as one transaction."""

    def __init__(self, collection: "Collection"):
        self._collection = collection
        self._deletes: List[str] = []
        self._committed = False

    def delete(self, doc_id: str) -> "WriteBatch":
        if self._committed:
            raise RemoteWriteFailed("Batch already committed.")
        self._deletes.append(str(doc_id))
        return self

    @property
    def pending(self) -> List[str]:
        return list(self._deletes)

    def commit(self) -> None:
        if self._committed:
            raise RemoteWriteFailed("Batch already committed.")
        self._committed = True
        if not self._deletes:
            return
        self._collection._delete_many(self._deletes)


# -----------------------
# Collection handle
# -----------------------
class Collection:
    def __init__(self, db_path: str, name: str):
        self.db_path = db_path
        self.name = name
        self._subscribers: Dict[int, tuple] = {}
        self._next_token = 0

    @contextmanager
    def db(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def init(self) -> None:
        with self.db() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT '',
                    PRIMARY KEY (collection, id)
                );
                """
            )

    # -- reads --

    def snapshot(self) -> List[Bowler]:
        with self.db() as conn:
            rows = conn.execute(
                "SELECT id, data FROM documents WHERE collection=? ORDER BY created_at, id",
                (self.name,),
            ).fetchall()
        return [Bowler.from_document(r["id"], json.loads(r["data"])) for r in rows]

    # -- writes --

    def add(self, data: Dict) -> str:
        doc_id = secrets.token_urlsafe(15)
        try:
            with self.db() as conn:
                conn.execute(
                    "INSERT INTO documents(collection, id, data, created_at) VALUES(?,?,?,?)",
                    (self.name, doc_id, json.dumps(data), str(data.get("created_at", ""))),
                )
        except sqlite3.Error as e:
            raise RemoteWriteFailed(f"Could not add document to '{self.name}': {e}") from e
        self._notify()
        return doc_id

    def delete(self, doc_id: str) -> None:
        try:
            with self.db() as conn:
                conn.execute(
                    "DELETE FROM documents WHERE collection=? AND id=?", (self.name, str(doc_id))
                )
        except sqlite3.Error as e:
            raise RemoteWriteFailed(f"Could not delete document '{doc_id}': {e}") from e
        self._notify()

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def _delete_many(self, doc_ids: List[str]) -> None:
        # one transaction: commits on success, rolls back on error
        try:
            with self.db() as conn:
                conn.executemany(
                    "DELETE FROM documents WHERE collection=? AND id=?",
                    [(self.name, d) for d in doc_ids],
                )
        except sqlite3.Error as e:
            raise RemoteWriteFailed(f"Batch delete of {len(doc_ids)} documents failed: {e}") from e
        self._notify()

    # -- subscriptions --

    def subscribe(self, on_next: SnapshotHandler, on_error: ErrorHandler) -> Callable[[], None]:
        """Push the current snapshot now and after every write. Returns an unsubscribe callable."""
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = (on_next, on_error)

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        self._push({token: (on_next, on_error)})
        return unsubscribe

    def _notify(self) -> None:
        if self._subscribers:
            self._push(dict(self._subscribers))

    def _push(self, targets: Dict[int, tuple]) -> None:
        try:
            records = self.snapshot()
        except (sqlite3.Error, ValueError) as e:
            error = SubscriptionFailed(f"Snapshot of '{self.name}' failed: {e}")
            logger.error("Subscription feed for %s failed: %s", self.name, e)
            for token, (_on_next, on_error) in targets.items():
                self._subscribers.pop(token, None)
                on_error(error)
            return

        for _token, (on_next, _on_error) in targets.items():
            on_next(list(records))
