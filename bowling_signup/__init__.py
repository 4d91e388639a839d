"""Bowling contest sign-up sheet with an admin review panel."""

__version__ = "0.1.0"
