from __future__ import annotations


class SignupError(Exception):
    """Base class for failures talking to the bowler collection."""


class RemoteWriteFailed(SignupError):
    """A create, delete or batch commit was rejected by the collection."""


class SubscriptionFailed(SignupError):
    """The snapshot feed errored. The mirror stops updating until restart."""
