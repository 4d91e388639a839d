from __future__ import annotations

import hashlib
import html
import logging
import os
import secrets
from io import StringIO
from typing import List, Optional, Sequence

import pandas as pd
from fastapi import APIRouter, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from .collection import Collection
from .config import Settings
from .controllers import SignupController, SubmitOutcome
from .forms import validate_signup
from .logging_setup import configure_logging
from .mirror import LocalMirror
from .models import Bowler
from .router import AdminSession, SessionStore, View, ViewRouter, navigation_token

logger = logging.getLogger(__name__)

SESSION_COOKIE = "signup_session"

routes = APIRouter()


# -----------------------
# App wiring
# -----------------------
def sha256(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    collection = Collection(settings.db_path, settings.collection)
    collection.init()
    mirror = LocalMirror()
    mirror.attach(collection)

    app = FastAPI(title="Bowling Contest Sign-Up")
    app.state.settings = settings
    app.state.admin_pw_hash = sha256(settings.admin_password)
    app.state.collection = collection
    app.state.mirror = mirror
    app.state.controller = SignupController(collection, mirror)
    app.state.sessions = SessionStore()
    app.include_router(routes)
    logger.info("Sign-up app ready: collection=%s db=%s", settings.collection, settings.db_path)
    return app


def session_for(request: Request) -> AdminSession:
    return request.app.state.sessions.get(request.cookies.get(SESSION_COOKIE))


def router_for(request: Request) -> ViewRouter:
    return ViewRouter(session_for(request))


def with_session(response: Response, session: AdminSession) -> Response:
    response.set_cookie(SESSION_COOKIE, session.session_id, httponly=True, samesite="lax")
    return response


def check_admin_password(request: Request, password: str) -> bool:
    return secrets.compare_digest(sha256(password or ""), request.app.state.admin_pw_hash)


# -----------------------
# UI helpers
# -----------------------
def esc(value) -> str:
    return html.escape(str(value), quote=True)


def page(title: str, body: str, authenticated: bool = False) -> HTMLResponse:
    admin_label = "Admin Panel" if authenticated else "Admin"
    html_doc = f"""
    <html>
      <head>
        <title>{esc(title)}</title>
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <style>
          body {{ font-family: system-ui, Arial; max-width: 980px; margin: 0 auto; padding: 22px; }}
          input, button {{ font-size: 16px; padding: 10px; }}
          .card {{ border: 1px solid #ddd; border-radius: 12px; padding: 16px; margin: 16px 0; }}
          .row {{ display: flex; gap: 12px; flex-wrap: wrap; align-items: center; }}
          .row > * {{ flex: 1; min-width: 220px; }}
          table {{ border-collapse: collapse; width: 100%; }}
          th, td {{ border: 1px solid #ddd; padding: 8px; }}
          th {{ text-align: left; background: #f7f7f7; }}
          .muted {{ color: #666; }}
          .pill {{ display:inline-block; padding:4px 10px; border:1px solid #ddd; border-radius:999px; }}
          a {{ text-decoration: none; }}
          .danger {{ color: #b00020; }}
          .ok {{ color: #2e7d32; }}
        </style>
      </head>
      <body>
        <p><a href="/">Sign Up</a> | <a href="/admin">{admin_label}</a></p>
        <h1>{esc(title)}</h1>
        {body}
      </body>
    </html>
    """
    return HTMLResponse(html_doc)


def notice(message: str, kind: str = "danger") -> str:
    return f'<div class="card"><p class="{kind}">{esc(message)}</p></div>'


def signup_form_body(errors: Sequence[str] = (), name: str = "", email: str = "", phone: str = "") -> str:
    error_html = "".join(f'<p class="danger">{esc(e)}</p>' for e in errors)
    return f"""
    <div class="card">
      <h2>Enter the Contest</h2>
      {error_html}
      <form method="post" action="/signup">
        <div class="row">
          <input name="name" placeholder="Full name" value="{esc(name)}" required />
          <input name="email" type="email" placeholder="Email" value="{esc(email)}" required />
          <input name="phone" type="tel" placeholder="Phone" value="{esc(phone)}" required />
        </div>
        <p><label><input type="checkbox" name="opted_in" value="on" /> Keep me posted about future events</label></p>
        <button type="submit">Sign Up</button>
      </form>
      <p class="muted">One entry per person. Each email and phone number can only be used once.</p>
    </div>
    """


def login_body(error: str = "") -> str:
    error_html = f'<p class="danger">{esc(error)}</p>' if error else ""
    return f"""
    <div class="card">
      <h2>Admin Login</h2>
      {error_html}
      <form method="post" action="/admin/login">
        <div class="row">
          <input name="password" placeholder="Admin password" type="password" required />
        </div>
        <button type="submit">Log In</button>
      </form>
    </div>
    """


def admin_panel_body(mirror: LocalMirror, notices: Sequence[str] = ()) -> str:
    notice_html = "".join(notice(n) for n in notices)
    if mirror.error is not None:
        notice_html += notice(
            "Could not connect to the database. The list below may be out of date; restart the app to reconnect."
        )
    if mirror.loading:
        return notice_html + '<div class="card"><p class="muted">Loading bowlers...</p></div>'

    bowlers = mirror.records
    rows = ""
    for b in bowlers:
        rows += f"""
        <tr>
          <td>{esc(b.name)}</td>
          <td>{esc(b.email)}</td>
          <td>{esc(b.phone)}</td>
          <td>{'Yes' if b.opted_in else 'No'}</td>
          <td class="muted">{esc(b.created_at)}</td>
          <td>
            <form method="post" action="/admin/delete/{esc(b.id)}"
                  onsubmit="return confirm('Are you sure you want to delete this entry?');">
              <button type="submit">Delete</button>
            </form>
          </td>
        </tr>
        """
    opted_in = sum(1 for b in bowlers if b.opted_in)

    return notice_html + f"""
    <div class="card">
      <h2>Bowlers</h2>
      <p>Total: <span class="pill">{len(bowlers)}</span> Opted in: <span class="pill">{opted_in}</span></p>
      <p><a href="/admin/download">Download CSV</a></p>
      <table>
        <thead><tr><th>Name</th><th>Email</th><th>Phone</th><th>Opted In</th><th>Signed Up</th><th></th></tr></thead>
        <tbody>{rows or '<tr><td colspan="6" class="muted">No bowlers yet.</td></tr>'}</tbody>
      </table>
    </div>

    <div class="card">
      <h3>Clear All Entries</h3>
      <form method="post" action="/admin/clear"
            onsubmit="return confirm('Are you sure you want to delete all entries? This action cannot be undone.');">
        <p><label><input type="checkbox" name="confirm" value="yes" required /> I understand this deletes every entry</label></p>
        <button type="submit" class="danger">Clear All</button>
      </form>
    </div>
    """


def bowlers_dataframe(bowlers: Sequence[Bowler]) -> pd.DataFrame:
    columns = ["Name", "Email", "Phone", "OptedIn", "SignedUp"]
    data: List[dict] = [
        {
            "Name": b.name,
            "Email": b.email,
            "Phone": b.phone,
            "OptedIn": "Yes" if b.opted_in else "No",
            "SignedUp": b.created_at,
        }
        for b in bowlers
    ]
    return pd.DataFrame(data, columns=columns)


# -----------------------
# Routes: Public
# -----------------------
@routes.get("/", response_class=HTMLResponse)
async def home(request: Request):
    session = session_for(request)
    return page("Bowling Contest Sign-Up", signup_form_body(), session.authenticated)


@routes.post("/signup", response_class=HTMLResponse)
async def signup(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    opted_in: Optional[str] = Form(None),
):
    authenticated = session_for(request).authenticated
    candidate, errors = validate_signup(name, email, phone, opted_in)
    if candidate is None:
        return page("Bowling Contest Sign-Up", signup_form_body(errors, name, email, phone), authenticated)

    outcome = request.app.state.controller.submit(candidate)
    if outcome is SubmitOutcome.ACCEPTED:
        body = f"""
        <div class="card">
          <p class="ok">Thanks, {esc(candidate.name)}! You're signed up.</p>
          <p><a href="/">Sign up someone else</a></p>
        </div>
        """
        return page("You're In!", body, authenticated)
    if outcome is SubmitOutcome.DUPLICATE_REJECTED:
        errors = ["This email or phone number has already been used to sign up."]
    else:
        errors = ["We could not save your sign-up. Please try again."]
    return page("Bowling Contest Sign-Up", signup_form_body(errors, name, email, phone), authenticated)


# -----------------------
# Routes: Admin
# -----------------------
def admin_panel(request: Request, notices: Sequence[str] = ()) -> Response:
    body = admin_panel_body(request.app.state.mirror, notices)
    return page("Admin Panel", body, authenticated=True)


def require_admin(request: Request) -> Optional[AdminSession]:
    router = router_for(request)
    if router.resolve(navigation_token(request.url.path)) is View.ADMIN_PANEL:
        return router.session
    return None


@routes.get("/admin", response_class=HTMLResponse)
async def admin_home(request: Request):
    router = router_for(request)
    view = router.resolve(navigation_token(request.url.path))
    if view is View.ADMIN_PANEL:
        return admin_panel(request)
    return page("Admin Login", login_body())


@routes.post("/admin/login")
async def admin_login(request: Request, password: str = Form("")):
    if not check_admin_password(request, password):
        logger.warning("Failed admin login attempt")
        return page("Admin Login", login_body("Incorrect password."))

    # only sessions that pass the password check are stored
    session = session_for(request)
    if not session.session_id:
        session = request.app.state.sessions.start()
    token = ViewRouter(session).login_succeeded()
    logger.info("Admin logged in")
    return with_session(RedirectResponse(url=token.lstrip("#"), status_code=303), session)


@routes.post("/admin/delete/{bowler_id}")
async def admin_delete(request: Request, bowler_id: str):
    if require_admin(request) is None:
        return RedirectResponse(url="/admin", status_code=303)
    if not request.app.state.controller.delete(bowler_id):
        return admin_panel(request, ["Failed to delete entry. Please try again."])
    return RedirectResponse(url="/admin", status_code=303)


@routes.post("/admin/clear")
async def admin_clear(request: Request, confirm: str = Form("")):
    if require_admin(request) is None:
        return RedirectResponse(url="/admin", status_code=303)
    if confirm.strip().lower() != "yes":
        return admin_panel(request, ["Please confirm before clearing all entries."])
    if not request.app.state.controller.clear_all():
        return admin_panel(request, ["Failed to clear all entries. Please try again."])
    return RedirectResponse(url="/admin", status_code=303)


@routes.get("/admin/download")
async def admin_download(request: Request):
    if require_admin(request) is None:
        return RedirectResponse(url="/admin", status_code=303)

    buf = StringIO()
    bowlers_dataframe(request.app.state.mirror.records).to_csv(buf, index=False)
    return Response(
        content=buf.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="bowlers.csv"'},
    )


def build_app() -> FastAPI:
    settings = Settings()
    configure_logging(settings.log_level)
    return create_app(settings)


def run() -> None:
    import uvicorn

    uvicorn.run(
        "bowling_signup.main:build_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
