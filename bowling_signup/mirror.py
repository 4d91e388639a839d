"""
In-memory copy of the bowler collection.

Every push from the subscription carries the full current set and replaces
the mirror wholesale. There is no merge: whatever the mirror held before is
dropped. Only the subscription callbacks write here; everyone else reads.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Tuple

from .errors import SubscriptionFailed
from .models import Bowler

logger = logging.getLogger(__name__)


class LocalMirror:
    def __init__(self):
        self._records: Tuple[Bowler, ...] = ()
        self._loading = True
        self._error: Optional[SubscriptionFailed] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def records(self) -> Tuple[Bowler, ...]:
        return self._records

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[SubscriptionFailed]:
        return self._error

    def __len__(self) -> int:
        return len(self._records)

    def apply(self, snapshot: Iterable[Bowler]) -> None:
        self._records = tuple(snapshot)
        self._loading = False
        logger.debug("Mirror replaced with %d records", len(self._records))

    def fail(self, error: SubscriptionFailed) -> None:
        self._error = error
        self._loading = False
        self._unsubscribe = None
        logger.error("Bowler feed stopped, mirror is frozen at %d records: %s", len(self._records), error)

    def attach(self, collection) -> None:
        self.detach()
        self._unsubscribe = collection.subscribe(self.apply, self.fail)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
