import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.auth_utils import get_current_user
from app.layout import esc, render_page
from app.security import CSRF_COOKIE_NAME, attach_csrf_cookie, issue_csrf_token, validate_csrf
from app.timer import steep_buttons_html, timer_overlay_html
from core.collection import (
    DEFAULT_SORT,
    SORT_OPTIONS,
    filter_teas,
    format_last_consumed_date,
    sort_teas,
    unique_types,
)
from core.database import StoreError, delete_tea, list_teas, record_consumption, update_tea
from core.store.schema import CAFFEINE_LEVELS

log = logging.getLogger("app")

router = APIRouter()


def _dashboard_url(**params) -> str:
    query = urlencode({k: v for k, v in params.items() if v})
    return f"/?{query}" if query else "/"


def _safe_next(value: str) -> str:
    """Only redirect back to local paths."""
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return "/"


def _chip(label: str, href: str, active: bool) -> str:
    cls = "chip active" if active else "chip"
    return f'<a class="{cls}" href="{esc(href)}">{esc(label)}</a>'


def _filter_bar(all_types, q: str, tea_type: str, caffeine: str, sort: str) -> str:
    sort_options = "".join(
        f'<option value="{key}"{" selected" if key == sort else ""}>{esc(label)}</option>'
        for key, label in SORT_OPTIONS.items()
    )
    type_chips = _chip("All types", _dashboard_url(q=q, caffeine=caffeine, sort=sort), not tea_type)
    type_chips += "".join(
        _chip(t, _dashboard_url(q=q, type=t, caffeine=caffeine, sort=sort), t == tea_type) for t in all_types
    )
    caffeine_chips = _chip("Any caffeine", _dashboard_url(q=q, type=tea_type, sort=sort), not caffeine)
    caffeine_chips += "".join(
        _chip(level, _dashboard_url(q=q, type=tea_type, caffeine=level, sort=sort), level == caffeine)
        for level in CAFFEINE_LEVELS
    )
    return f"""
    <form method="get" action="/" class="toolbar">
      <input type="search" name="q" placeholder="Search teas..." value="{esc(q)}" />
      <input type="hidden" name="type" value="{esc(tea_type)}" />
      <input type="hidden" name="caffeine" value="{esc(caffeine)}" />
      <select name="sort" onchange="this.form.submit()">{sort_options}</select>
      <button type="submit">Search</button>
    </form>
    <div class="toolbar">{type_chips}</div>
    <div class="toolbar">{caffeine_chips}</div>
    """


def _tea_card(tea, href: str, selected: bool, csrf_token: str, next_url: str) -> str:
    website = (
        f'<a href="{esc(tea.website)}" target="_blank" rel="noopener noreferrer" class="muted">Visit website ↗</a>'
        if tea.website
        else ""
    )
    temp = f'<span class="brewing-temp">{esc(tea.brewing_temperature)}</span>' if tea.brewing_temperature else ""
    weight = f'<span class="tea-weight">{esc(tea.tea_weight)}</span>' if tea.tea_weight else ""
    return f"""
    <div class="tea-card{' selected' if selected else ''}">
      <a href="{esc(href)}" style="color:inherit;text-decoration:none;">
        <img src="{esc(tea.image)}" alt="{esc(tea.name)}" loading="lazy" />
      </a>
      <div class="tea-content">
        <a href="{esc(href)}" style="color:inherit;text-decoration:none;"><h2>{esc(tea.name)}</h2></a>
        <div class="tea-meta">
          <span class="tea-type">{esc(tea.type)}</span>
          <span class="tea-caffeine {esc(tea.caffeine_level.lower())}">{esc(tea.caffeine_level)} Caffeine</span>
        </div>
        <div class="muted">
          Drunk {tea.times_consumed or 0} times | Last: {format_last_consumed_date(tea.last_consumed_date)}
        </div>
        <div class="tea-brewing-info">
          {temp}{weight}<span class="steep-count">{len(tea.steep_times)} steeps</span>
        </div>
        <div class="toolbar" style="margin-top:0.5rem;margin-bottom:0;">
          {website}
          <form method="post" action="/teas/{esc(tea.id)}/delete" onsubmit="return confirm('Delete this tea?');">
            <input type="hidden" name="csrf_token" value="{esc(csrf_token)}" />
            <input type="hidden" name="next" value="{esc(next_url)}" />
            <button type="submit" class="danger" title="Delete Tea">Delete</button>
          </form>
        </div>
      </div>
    </div>
    """


def _side_panel(tea, close_href: str, csrf_token: str, next_url: str) -> str:
    rating = tea.rating or 0
    star_buttons = "".join(
        f'<button type="submit" name="rating" value="{n}" class="{"filled" if n <= rating else ""}" '
        f'title="Rate {n}/10">{n}</button>'
        for n in range(1, 11)
    )
    rating_text = f'<span class="muted">{esc(tea.rating)}/10</span>' if tea.rating else ""
    clear_rating = (
        '<button type="submit" name="rating" value="" class="secondary">Clear Rating</button>'
        if tea.rating
        else ""
    )
    rows = [("Type", esc(tea.type)), ("Caffeine", esc(tea.caffeine_level))]
    if tea.caffeine:
        rows.append(("Caffeine notes", esc(tea.caffeine)))
    if tea.brewing_temperature:
        rows.append(("Brewing Temp", esc(tea.brewing_temperature)))
    if tea.tea_weight:
        rows.append(("Tea Weight", esc(tea.tea_weight)))
    rows.append(("Times consumed", str(tea.times_consumed or 0)))
    rows.append(("Last consumed", format_last_consumed_date(tea.last_consumed_date)))
    info_html = "".join(f'<div class="info-row"><span class="muted">{label}:</span><span>{value}</span></div>' for label, value in rows)
    website = (
        f'<p><a href="{esc(tea.website)}" target="_blank" rel="noopener noreferrer">Visit Website ↗</a></p>'
        if tea.website
        else ""
    )
    hidden = (
        f'<input type="hidden" name="csrf_token" value="{esc(csrf_token)}" />'
        f'<input type="hidden" name="next" value="{esc(next_url)}" />'
    )
    return f"""
    <aside class="side-panel card">
      <div style="display:flex;justify-content:space-between;align-items:center;">
        <h2 style="margin:0;font-size:1.1rem;">{esc(tea.name)}</h2>
        <a href="{esc(close_href)}" class="chip" title="Close">✕</a>
      </div>
      <img src="{esc(tea.image)}" alt="{esc(tea.name)}" style="margin-top:0.75rem;" />
      {info_html}
      {website}
      <h3>Rating {rating_text}</h3>
      <form method="post" action="/teas/{esc(tea.id)}/rating">
        {hidden}
        <div class="stars">{star_buttons}</div>
        <div style="margin-top:0.5rem;">{clear_rating}</div>
      </form>
      <h3>Steep Times</h3>
      {steep_buttons_html(tea.id, tea.name, tea.steep_times)}
      <form method="post" action="/teas/{esc(tea.id)}/consume" style="margin-top:1rem;">
        {hidden}
        <button type="submit">☕ Mark consumed</button>
      </form>
    </aside>
    """


@router.get("/", response_class=HTMLResponse)
def dashboard(
    request: Request,
    q: str = "",
    type: str = "",
    caffeine: str = "",
    sort: str = DEFAULT_SORT,
    selected: str = "",
):
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/login", status_code=303)

    try:
        teas = list_teas()
    except StoreError as exc:
        log.error("Dashboard could not read teas.yaml - %s", exc)
        body = '<div class="card"><p class="error">Failed to read tea collection. Check the server logs.</p></div>'
        return render_page("Tea Timer", body, user=user, status_code=500)

    if sort not in SORT_OPTIONS:
        sort = DEFAULT_SORT
    csrf_token = issue_csrf_token(request.cookies.get(CSRF_COOKIE_NAME))
    visible = sort_teas(filter_teas(teas, q, type or None, caffeine or None), sort)
    current_url = _dashboard_url(q=q, type=type, caffeine=caffeine, sort=sort, selected=selected)
    selected_tea = next((t for t in visible if t.id == selected), None)

    if not teas:
        main_html = """
        <div class="empty-state card">
          <p>No teas in your collection yet.</p>
          <a class="btn" href="/teas/new">＋ Add Tea</a>
        </div>
        """
    elif not visible:
        main_html = f"""
        <div class="empty-state card">
          <p>No teas match your filters.</p>
          <a href="{esc(_dashboard_url(sort=sort))}">Clear filters</a>
        </div>
        """
    else:
        cards = "".join(
            _tea_card(
                t,
                _dashboard_url(q=q, type=type, caffeine=caffeine, sort=sort, selected=t.id),
                selected_tea is not None and t.id == selected_tea.id,
                csrf_token,
                current_url,
            )
            for t in visible
        )
        panel = ""
        if selected_tea is not None:
            close_href = _dashboard_url(q=q, type=type, caffeine=caffeine, sort=sort)
            panel = _side_panel(selected_tea, close_href, csrf_token, current_url)
        main_html = f'<div class="main-layout"><div class="tea-grid">{cards}</div>{panel}</div>'

    body = f"""
    <div class="toolbar" style="justify-content:space-between;">
      <span class="muted">{len(visible)} of {len(teas)} teas</span>
      <span>
        <a class="btn" href="/teas/new">＋ Add Tea</a>
        <a class="chip" href="/api/teas/export">⬇ Export YAML</a>
      </span>
    </div>
    {_filter_bar(unique_types(teas), q, type, caffeine, sort)}
    {main_html}
    {timer_overlay_html()}
    """
    resp = render_page("Tea Timer", body, user=user)
    attach_csrf_cookie(resp, csrf_token)
    return resp


def _guard_form(request: Request, csrf_token: str):
    """Shared checks for the dashboard's POST forms; returns an error response or None."""
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/login", status_code=303)
    if not validate_csrf(request, csrf_token):
        return HTMLResponse("Invalid or missing CSRF token.", status_code=403)
    return None


@router.post("/teas/{tea_id}/rating")
def rate_tea(
    request: Request,
    tea_id: str,
    rating: str = Form(""),
    csrf_token: str = Form(""),
    next: str = Form("/"),
):
    blocked = _guard_form(request, csrf_token)
    if blocked:
        return blocked

    value = None
    if rating.strip():
        try:
            value = int(rating)
        except ValueError:
            return HTMLResponse("Rating must be a number between 1 and 10.", status_code=400)
        if value < 1 or value > 10:
            return HTMLResponse("Rating must be a number between 1 and 10.", status_code=400)

    try:
        updated = update_tea(tea_id, {"rating": value})
    except StoreError as exc:
        log.error("Rating update failed - id: %s - %s", tea_id, exc)
        return HTMLResponse("Failed to save tea.", status_code=500)
    if updated is None:
        return HTMLResponse("Tea not found.", status_code=404)
    return RedirectResponse(url=_safe_next(next), status_code=303)


@router.post("/teas/{tea_id}/delete")
def remove_tea(request: Request, tea_id: str, csrf_token: str = Form(""), next: str = Form("/")):
    blocked = _guard_form(request, csrf_token)
    if blocked:
        return blocked
    try:
        deleted = delete_tea(tea_id)
    except StoreError as exc:
        log.error("Delete failed - id: %s - %s", tea_id, exc)
        return HTMLResponse("Failed to delete tea.", status_code=500)
    if not deleted:
        return HTMLResponse("Tea not found.", status_code=404)
    return RedirectResponse(url=_safe_next(next), status_code=303)


@router.post("/teas/{tea_id}/consume")
def consume_tea(request: Request, tea_id: str, csrf_token: str = Form(""), next: str = Form("/")):
    blocked = _guard_form(request, csrf_token)
    if blocked:
        return blocked
    try:
        updated = record_consumption(tea_id)
    except StoreError as exc:
        log.error("Consumption failed - id: %s - %s", tea_id, exc)
        return HTMLResponse("Failed to save tea.", status_code=500)
    if updated is None:
        return HTMLResponse("Tea not found.", status_code=404)
    return RedirectResponse(url=_safe_next(next), status_code=303)
