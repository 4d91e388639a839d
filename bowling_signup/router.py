from __future__ import annotations

import enum
import secrets
from dataclasses import dataclass
from typing import Dict, Optional

from .config import ADMIN_PREFIX


class View(enum.Enum):
    PUBLIC_FORM = "public_form"
    ADMIN_LOGIN = "admin_login"
    ADMIN_PANEL = "admin_panel"


@dataclass
class AdminSession:
    session_id: str
    authenticated: bool = False


class ViewRouter:
    """Maps a navigation token to a view, gated by the session's admin flag."""

    def __init__(self, session: AdminSession, admin_prefix: str = ADMIN_PREFIX):
        self.session = session
        self.admin_prefix = admin_prefix

    def resolve(self, token: str) -> View:
        if not (token or "").startswith(self.admin_prefix):
            return View.PUBLIC_FORM
        if self.session.authenticated:
            return View.ADMIN_PANEL
        return View.ADMIN_LOGIN

    def login_succeeded(self) -> str:
        """AdminLogin -> AdminPanel. Sets the flag and returns the token to navigate to."""
        self.session.authenticated = True
        return self.admin_prefix


def navigation_token(path: str) -> str:
    """Fragment-style token for a request path: "/admin" -> "#/admin"."""
    return "#" + (path if path.startswith("/") else "/" + path)


class SessionStore:
    """
    Admin flags for browser sessions, keyed by a cookie value.

    Only sessions that logged in are kept. Anonymous visitors and unknown
    cookie values get a throwaway unauthenticated session. Lives in process
    memory only; a restart logs everyone out.
    """

    def __init__(self):
        self._sessions: Dict[str, AdminSession] = {}

    def get(self, session_id: Optional[str]) -> AdminSession:
        if session_id and session_id in self._sessions:
            return self._sessions[session_id]
        return AdminSession(session_id="")

    def start(self) -> AdminSession:
        session = AdminSession(session_id=secrets.token_urlsafe(16))
        self._sessions[session.session_id] = session
        return session

    def __len__(self) -> int:
        return len(self._sessions)
