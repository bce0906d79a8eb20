"""
JSON API over the tea collection. Every route here sits behind the token gate.
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import FileResponse, Response
from pydantic import ValidationError

from app.auth_utils import require_api_user
from app.errors import ApiError
from core.database import (
    StoreError,
    StoreReadError,
    create_tea,
    data_file_exists,
    delete_tea,
    get_tea,
    list_teas,
    record_consumption,
    resolve_data_file,
    update_tea,
)
from core.scraper import ExtractionError, ScrapeError, UnsafeURLError, import_tea_from_url
from core.store.schema import validation_issues

log = logging.getLogger("app")

router = APIRouter(prefix="/api/teas", dependencies=[Depends(require_api_user)])


def _store_failure(exc: StoreError, action: str) -> ApiError:
    if isinstance(exc, StoreReadError):
        log.error("Failed to read teas.yaml - %s", exc)
        return ApiError(500, "Failed to read tea collection", str(exc))
    log.error("Failed to write teas.yaml - %s", exc)
    return ApiError(500, f"Failed to {action}", str(exc))


def _invalid(exc: ValidationError, tea_id: str | None = None) -> ApiError:
    issues = validation_issues(exc)
    if tea_id:
        log.warning("Tea validation failed - id: %s - %s", tea_id, issues)
    else:
        log.warning("Tea validation failed - Tea data validation failed: %s", issues)
    return ApiError(400, "Invalid tea data", issues)


def _require_tea(tea_id: str, action: str):
    try:
        tea = get_tea(tea_id)
    except StoreError as exc:
        raise _store_failure(exc, action)
    if tea is None:
        log.warning("%s failed - tea not found: id %s", action.capitalize(), tea_id)
        raise ApiError(404, "Tea not found")
    return tea


@router.get("")
def list_collection():
    try:
        teas = list_teas()
    except StoreError as exc:
        raise _store_failure(exc, "read tea collection")
    log.info("Retrieved %d teas from collection", len(teas))
    return [t.to_record() for t in teas]


@router.post("", status_code=201)
def add_tea(payload: Any = Body(None)):
    if not payload:
        raise ApiError(400, "Request body is required")
    try:
        tea = create_tea(payload)
    except ValidationError as exc:
        raise _invalid(exc)
    except StoreError as exc:
        raise _store_failure(exc, "save tea")
    return tea.to_record()


# Declared before /{tea_id} so "export" and "import" are not taken for ids.
@router.get("/export")
def export_collection():
    if not data_file_exists():
        log.warning("Export failed - Data file not found")
        raise ApiError(404, "Tea data file not found")
    log.info("Exported teas.yaml")
    return FileResponse(resolve_data_file(), media_type="text/yaml", filename="teas.yaml")


@router.post("/import")
async def import_from_url(payload: Any = Body(None)):
    """Scrape a product page and return the tea without saving it."""
    url = payload.get("url") if isinstance(payload, dict) else None
    try:
        return await import_tea_from_url(url)
    except UnsafeURLError as exc:
        raise ApiError(400, str(exc))
    except ExtractionError as exc:
        log.warning("Scraping failed - %s: %s", url, exc)
        raise ApiError(400, "Could not extract tea information. Please try entering it manually.")
    except ScrapeError as exc:
        log.error("Scraping failed - %s: %s", url, exc)
        raise ApiError(500, "Failed to scrape URL", str(exc))


@router.get("/{tea_id}")
def read_tea(tea_id: str):
    return _require_tea(tea_id, "lookup").to_record()


@router.patch("/{tea_id}")
def patch_tea(tea_id: str, payload: Any = Body(None)):
    if not isinstance(payload, dict) or not payload:
        raise ApiError(400, "Request body is required with at least one field to update")

    _require_tea(tea_id, "update")

    rating = payload.get("rating")
    if rating is not None:
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            raise ApiError(400, "Invalid rating value", "Rating must be a number or null")
        if rating < 1 or rating > 10:
            raise ApiError(400, "Invalid rating value", "Rating must be between 1 and 10")

    try:
        updated = update_tea(tea_id, payload)
    except ValidationError as exc:
        raise _invalid(exc, tea_id)
    except StoreError as exc:
        raise _store_failure(exc, "save tea")
    if updated is None:
        raise ApiError(404, "Tea not found")
    return updated.to_record()


@router.delete("/{tea_id}", status_code=204)
def remove_tea(tea_id: str):
    try:
        deleted = delete_tea(tea_id)
    except StoreError as exc:
        raise _store_failure(exc, "delete tea")
    if not deleted:
        log.warning("Delete failed - tea not found: id %s", tea_id)
        raise ApiError(404, "Tea not found")
    return Response(status_code=204)


@router.put("/{tea_id}/lastConsumed")
def mark_consumed(tea_id: str):
    try:
        updated = record_consumption(tea_id)
    except ValidationError as exc:
        raise _invalid(exc, tea_id)
    except StoreError as exc:
        raise _store_failure(exc, "save tea")
    if updated is None:
        log.warning("Consumption failed - tea not found: id %s", tea_id)
        raise ApiError(404, "Tea not found")
    return updated.to_record()
