"""
Add-tea form, with optional pre-fill from a vendor product page.
"""
import logging
import re
from typing import Dict, List

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from app.auth_utils import get_current_user
from app.layout import esc, render_page
from app.security import CSRF_COOKIE_NAME, attach_csrf_cookie, issue_csrf_token, validate_csrf
from core.database import StoreError, create_tea
from core.scraper import ExtractionError, ScrapeError, UnsafeURLError, import_tea_from_url
from core.store.schema import CAFFEINE_LEVELS, TEA_TYPES

log = logging.getLogger("app")

router = APIRouter()

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

EMPTY_FORM = {
    "name": "",
    "type": "Green",
    "image": "",
    "steepTimes": "",
    "caffeine": "",
    "caffeineLevel": "Low",
    "website": "",
    "brewingTemperature": "",
    "teaWeight": "",
}


def parse_steep_times(raw: str) -> List[int]:
    """
    "60, 90s, abc, 120" -> [60, 90, 120]. Each comma piece keeps its leading
    integer; pieces without one are dropped.
    """
    times = []
    for piece in (raw or "").split(","):
        match = _LEADING_INT.match(piece)
        if match:
            times.append(int(match.group(1)))
    return times


def _options(values, current: str) -> str:
    return "".join(
        f'<option value="{esc(v)}"{" selected" if v == current else ""}>{esc(v)}</option>' for v in values
    )


def _form_body(values: Dict[str, str], csrf_token: str, errors: List[str] = (), notice: str = "", import_url: str = "") -> str:
    errors_html = "".join(f'<p class="error">{esc(e)}</p>' for e in errors)
    notice_html = f'<p class="muted">{esc(notice)}</p>' if notice else ""
    return f"""
    <div class="card form-card">
      <h2 style="margin-top:0;">Add New Tea</h2>
      <form method="get" action="/teas/new">
        <label>Import from URL</label>
        <div class="toolbar">
          <input type="url" name="import_url" placeholder="https://www.teavivre.com/..." value="{esc(import_url)}" style="flex:1;" />
          <button type="submit">Auto-fill</button>
        </div>
      </form>
      {notice_html}
      {errors_html}
      <form method="post" action="/teas/new">
        <label>Name</label>
        <input name="name" required placeholder="e.g. Dragon Well" value="{esc(values['name'])}" />

        <label>Type</label>
        <select name="type" required>{_options(TEA_TYPES, values['type'])}</select>

        <label>Image URL</label>
        <input name="image" required placeholder="https://..." value="{esc(values['image'])}" />

        <label>Steep Times (seconds)</label>
        <input name="steep_times" required placeholder="60, 120, 180" value="{esc(values['steepTimes'])}" />

        <label>Caffeine Content</label>
        <input name="caffeine" placeholder="e.g. 25mg or Low caffeine" value="{esc(values['caffeine'])}" />

        <label>Caffeine Level</label>
        <select name="caffeine_level" required>{_options(CAFFEINE_LEVELS, values['caffeineLevel'])}</select>

        <label>Website</label>
        <input name="website" placeholder="https://example.com" value="{esc(values['website'])}" />

        <label>Brewing Temperature (Gongfu Method)</label>
        <input name="brewing_temperature" placeholder="e.g. 185℉ / 85℃" value="{esc(values['brewingTemperature'])}" />

        <label>Tea Weight (Gongfu Method)</label>
        <input name="tea_weight" placeholder="e.g. 5g Tea" value="{esc(values['teaWeight'])}" />

        <input type="hidden" name="csrf_token" value="{esc(csrf_token)}" />
        <button type="submit" style="margin-top:1rem;width:100%;">Save Tea</button>
      </form>
    </div>
    """


@router.get("/teas/new", response_class=HTMLResponse)
async def new_tea_form(request: Request, import_url: str = ""):
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/login", status_code=303)

    values = dict(EMPTY_FORM)
    errors: List[str] = []
    notice = ""
    if import_url.strip():
        try:
            scraped = await import_tea_from_url(import_url)
        except UnsafeURLError as exc:
            errors.append(f"Import failed: {exc}")
        except ExtractionError:
            errors.append("Could not extract tea information. Please try entering it manually.")
        except ScrapeError as exc:
            log.error("Scraping failed - %s: %s", import_url, exc)
            errors.append("Failed to import tea data from URL. Please check the URL and try again.")
        else:
            values.update({k: v for k, v in scraped.items() if k in values and k != "steepTimes"})
            values["steepTimes"] = ", ".join(str(t) for t in scraped.get("steepTimes") or [])
            notice = "Tea information imported"

    csrf_token = issue_csrf_token(request.cookies.get(CSRF_COOKIE_NAME))
    resp = render_page(
        "Add Tea - Tea Timer",
        _form_body(values, csrf_token, errors, notice, import_url),
        user=user,
        status_code=400 if errors else 200,
    )
    attach_csrf_cookie(resp, csrf_token)
    return resp


@router.post("/teas/new", response_class=HTMLResponse)
def create_tea_from_form(
    request: Request,
    name: str = Form(""),
    type: str = Form("Green"),
    image: str = Form(""),
    steep_times: str = Form(""),
    caffeine: str = Form(""),
    caffeine_level: str = Form("Low"),
    website: str = Form(""),
    brewing_temperature: str = Form(""),
    tea_weight: str = Form(""),
    csrf_token: str = Form(""),
):
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/login", status_code=303)
    if not validate_csrf(request, csrf_token):
        return HTMLResponse("Invalid or missing CSRF token.", status_code=403)

    values = {
        "name": name.strip(),
        "type": type,
        "image": image.strip(),
        "steepTimes": steep_times,
        "caffeine": caffeine.strip(),
        "caffeineLevel": caffeine_level,
        "website": website.strip(),
        "brewingTemperature": brewing_temperature.strip(),
        "teaWeight": tea_weight.strip(),
    }

    def _redisplay(errors: List[str], status_code: int):
        return render_page(
            "Add Tea - Tea Timer",
            _form_body(values, request.cookies.get(CSRF_COOKIE_NAME, ""), errors),
            user=user,
            status_code=status_code,
        )

    times = parse_steep_times(steep_times)
    if not times:
        return _redisplay(["Please enter at least one steep time."], 400)

    try:
        tea = create_tea({**values, "steepTimes": times})
    except ValidationError as exc:
        messages = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
        ]
        return _redisplay([f"Failed to save tea: {m}" for m in messages], 400)
    except StoreError as exc:
        log.error("Failed to write teas.yaml - %s", exc)
        return _redisplay([f"Failed to save tea: {exc}"], 500)

    log.info("Tea added from form - id: %s", tea.id)
    return RedirectResponse(url=f"/?selected={tea.id}", status_code=303)
