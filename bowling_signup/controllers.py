from __future__ import annotations

import enum
import logging
from datetime import datetime, timezone

from .errors import RemoteWriteFailed
from .guard import find_duplicate, normalize_email
from .mirror import LocalMirror
from .models import Candidate

logger = logging.getLogger(__name__)


class SubmitOutcome(enum.Enum):
    ACCEPTED = "accepted"
    DUPLICATE_REJECTED = "duplicate"
    REMOTE_WRITE_FAILED = "failed"


class SignupController:
    """
    Writes go to the collection; reads come from the mirror.

    None of these methods touch the mirror directly. Their effect shows up
    with the next snapshot push.
    """

    def __init__(self, collection, mirror: LocalMirror):
        self.collection = collection
        self.mirror = mirror

    def submit(self, candidate: Candidate) -> SubmitOutcome:
        clash = find_duplicate(candidate.email, candidate.phone, self.mirror.records)
        if clash is not None:
            logger.warning("Duplicate sign-up rejected (matches bowler %s); not adding.", clash.id)
            return SubmitOutcome.DUPLICATE_REJECTED

        doc = candidate.to_document()
        doc["email"] = normalize_email(candidate.email)
        doc["created_at"] = datetime.now(timezone.utc).isoformat(timespec="seconds")
        try:
            doc_id = self.collection.add(doc)
        except RemoteWriteFailed:
            logger.exception("Error adding bowler")
            return SubmitOutcome.REMOTE_WRITE_FAILED

        logger.info("Bowler %s signed up", doc_id)
        return SubmitOutcome.ACCEPTED

    def delete(self, bowler_id: str) -> bool:
        try:
            self.collection.delete(bowler_id)
        except RemoteWriteFailed:
            logger.exception("Error deleting bowler %s", bowler_id)
            return False
        logger.info("Bowler %s deleted", bowler_id)
        return True

    def clear_all(self) -> bool:
        """Delete every bowler currently in the mirror in one atomic batch."""
        batch = self.collection.batch()
        for bowler in self.mirror.records:
            batch.delete(bowler.id)
        try:
            batch.commit()
        except RemoteWriteFailed:
            logger.exception("Error clearing bowlers")
            return False
        logger.info("Cleared %d bowlers", len(batch.pending))
        return True
