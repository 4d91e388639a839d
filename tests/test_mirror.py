from __future__ import annotations

from bowling_signup.errors import SubscriptionFailed
from bowling_signup.mirror import LocalMirror
from tests.helpers import bowler


def test_loading_until_first_snapshot():
    m = LocalMirror()
    assert m.loading
    assert m.records == ()
    m.apply([])
    assert not m.loading


def test_push_replaces_contents_wholesale():
    m = LocalMirror()
    m.apply([bowler("a", "a@x.com", "1"), bowler("b", "b@x.com", "2")])
    snapshot = [bowler("c", "c@x.com", "3")]

    m.apply(snapshot)

    assert [r.id for r in m.records] == ["c"]


def test_same_snapshot_twice_is_idempotent():
    m = LocalMirror()
    snapshot = [bowler("a", "a@x.com", "1")]
    m.apply(snapshot)
    m.apply(snapshot)
    assert len(m) == 1


def test_attach_receives_initial_snapshot(collection):
    collection.add({"name": "Jane", "email": "jane@x.com", "phone": "5551234567", "opted_in": True})
    m = LocalMirror()
    m.attach(collection)

    assert not m.loading
    assert [r.email for r in m.records] == ["jane@x.com"]
    assert m.records[0].opted_in is True


def test_writes_show_up_after_push(collection, mirror):
    doc_id = collection.add({"name": "Bob", "email": "bob@x.com", "phone": "5550001111", "opted_in": False})
    assert [r.id for r in mirror.records] == [doc_id]

    collection.delete(doc_id)
    assert mirror.records == ()


def test_detach_stops_updates(collection, mirror):
    mirror.detach()
    collection.add({"name": "Bob", "email": "bob@x.com", "phone": "5550001111", "opted_in": False})
    assert mirror.records == ()


def test_fail_freezes_mirror():
    m = LocalMirror()
    m.apply([bowler("a", "a@x.com", "1")])
    m.fail(SubscriptionFailed("feed down"))

    assert isinstance(m.error, SubscriptionFailed)
    assert not m.loading
    assert [r.id for r in m.records] == ["a"]
