import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Ensure .env values are loaded even if uvicorn is launched without `dotenv run`.
# override=True so edits to `.env` take effect on restart.
load_dotenv(override=True)

from app.errors import ApiError, error_response  # noqa: E402
from app.logging_config import configure_logging  # noqa: E402
from app.routes import add_tea, auth, dashboard, teas  # noqa: E402
from app.security import apply_security_headers  # noqa: E402
from core.auth import validate_auth_config  # noqa: E402
from core.database import StoreError, init_store, resolve_data_file  # noqa: E402

configure_logging()
log = logging.getLogger("app")

SLOW_REQUEST_MS = int(os.getenv("SLOW_REQUEST_MS", "1000"))
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Tea Timer server starting (DATA_FILE: %s)", resolve_data_file())
    # Missing credentials abort startup.
    validate_auth_config()
    try:
        log.info("Loaded %d teas from teas.yaml", init_store())
    except StoreError as exc:
        log.error("Failed to load teas at startup: %s", exc)
    yield


app = FastAPI(title="Tea Timer", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "PATCH", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(auth.router)
app.include_router(teas.router)
app.include_router(dashboard.router)
app.include_router(add_tea.router)


@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError):
    return error_response(exc.status_code, exc.error, exc.details)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return error_response(400, "Invalid request", details)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.monotonic()
    response = await call_next(request)
    duration_ms = int((time.monotonic() - started) * 1000)
    message = f"{request.method} {request.url.path} {response.status_code} {duration_ms}ms"
    if duration_ms > SLOW_REQUEST_MS:
        log.warning("%s (slow request)", message)
    else:
        log.info(message)
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    apply_security_headers(response)
    return response


@app.get("/health")
def health():
    return {"ok": True}
