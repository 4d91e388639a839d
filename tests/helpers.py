"""Test doubles and record builders."""

from __future__ import annotations

from typing import List

from bowling_signup.errors import RemoteWriteFailed
from bowling_signup.models import Bowler


def bowler(id: str, email: str, phone: str, name: str = "Bowler", opted_in: bool = False) -> Bowler:
    return Bowler(id=id, name=name, email=email, phone=phone, opted_in=opted_in)


class FakeBatch:
    def __init__(self, owner: "FakeCollection"):
        self.owner = owner
        self.deletes: List[str] = []
        self.commits = 0

    def delete(self, doc_id: str) -> "FakeBatch":
        self.deletes.append(doc_id)
        return self

    @property
    def pending(self) -> List[str]:
        return list(self.deletes)

    def commit(self) -> None:
        self.commits += 1
        if self.owner.fail_writes:
            raise RemoteWriteFailed("batch rejected")


class FakeCollection:
    """Records every call; never pushes snapshots on its own."""

    def __init__(self, fail_writes: bool = False):
        self.fail_writes = fail_writes
        self.added: List[dict] = []
        self.deleted: List[str] = []
        self.batches: List[FakeBatch] = []

    def add(self, data: dict) -> str:
        if self.fail_writes:
            raise RemoteWriteFailed("add rejected")
        self.added.append(data)
        return f"doc-{len(self.added)}"

    def delete(self, doc_id: str) -> None:
        if self.fail_writes:
            raise RemoteWriteFailed("delete rejected")
        self.deleted.append(doc_id)

    def batch(self) -> FakeBatch:
        b = FakeBatch(self)
        self.batches.append(b)
        return b
