"""Shared fixtures: a throwaway SQLite collection and a mirror attached to it."""

from __future__ import annotations

from typing import Generator

import pytest

from bowling_signup.collection import Collection
from bowling_signup.mirror import LocalMirror


@pytest.fixture
def collection(tmp_path) -> Collection:
    coll = Collection(str(tmp_path / "signup.sqlite"), "bowlers")
    coll.init()
    return coll


@pytest.fixture
def mirror(collection: Collection) -> Generator[LocalMirror, None, None]:
    m = LocalMirror()
    m.attach(collection)
    yield m
    m.detach()
