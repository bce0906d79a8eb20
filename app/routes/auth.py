import logging
from typing import Any

from fastapi import APIRouter, Body, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.auth_utils import clear_auth_cookie, get_current_user, set_auth_cookie
from app.errors import ApiError
from app.layout import esc, render_page
from app.security import (
    CSRF_COOKIE_NAME,
    allow_login_attempt,
    attach_csrf_cookie,
    issue_csrf_token,
    validate_csrf,
)
from core.auth import AuthConfigError, check_credentials, issue_token

log = logging.getLogger("auth")

router = APIRouter()


def _login_body(csrf_token: str, username: str = "", message: str = "", remaining: int | None = None) -> str:
    error_html = f'<p class="error">{esc(message)}</p>' if message else ""
    attempts_html = f"<p class='muted'>Attempts left: {remaining}</p>" if remaining is not None else ""
    return f"""
    <div class="card form-card">
      <p class="muted">Log in to manage your tea collection.</p>
      {error_html}
      {attempts_html}
      <form method="post" action="/login">
        <label>Username</label>
        <input type="text" name="username" required maxlength="100" value="{esc(username)}" />

        <label>Password</label>
        <input type="password" name="password" required maxlength="200" />

        <input type="hidden" name="csrf_token" value="{esc(csrf_token)}" />
        <button type="submit" style="margin-top:1rem;">Login</button>
      </form>
    </div>
    """


@router.post("/api/auth/login")
def api_login(request: Request, payload: Any = Body(None)):
    """Exchange the configured username and password for a bearer token."""
    allowed, _ = allow_login_attempt(request)
    if not allowed:
        raise ApiError(429, "Too many login attempts. Please try again later.")

    payload = payload if isinstance(payload, dict) else {}
    username = payload.get("username")
    password = payload.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ApiError(400, "Username and password are required")

    try:
        if not check_credentials(username, password):
            raise ApiError(401, "Invalid username or password")
        token = issue_token(username)
    except AuthConfigError as exc:
        log.error("Login error: %s", exc)
        raise ApiError(500, "Internal server error")

    log.info("Successful login for user: %s", username)
    return {"token": token}


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    user, _ = get_current_user(request)
    if user:
        return RedirectResponse(url="/", status_code=303)
    csrf_token = issue_csrf_token(request.cookies.get(CSRF_COOKIE_NAME))
    resp = render_page("Login - Tea Timer", _login_body(csrf_token))
    attach_csrf_cookie(resp, csrf_token)
    return resp


@router.post("/login", response_class=HTMLResponse)
def login(
    request: Request,
    username: str = Form(..., max_length=100),
    password: str = Form(..., max_length=200),
    csrf_token: str = Form(""),
):
    allowed, remaining = allow_login_attempt(request)
    if not allowed:
        return HTMLResponse("Too many login attempts. Please try again later.", status_code=429)

    if not validate_csrf(request, csrf_token):
        return HTMLResponse("Invalid or missing CSRF token.", status_code=403)

    csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME, "")
    try:
        ok = check_credentials(username, password)
    except AuthConfigError as exc:
        log.error("Login error: %s", exc)
        body = _login_body(csrf_cookie, username, "Login is not configured on this server.")
        return render_page("Login - Tea Timer", body, status_code=500)

    if not ok:
        body = _login_body(csrf_cookie, username, "Invalid username or password", remaining)
        return render_page("Login - Tea Timer", body, status_code=401)

    log.info("Successful login for user: %s", username)
    response = RedirectResponse(url="/", status_code=303)
    set_auth_cookie(response, issue_token(username))
    return response


@router.get("/logout")
def logout():
    response = RedirectResponse(url="/login", status_code=303)
    clear_auth_cookie(response)
    return response
