from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from marketplace.errors import MarketplaceError
from ops.structured_logger import setup_logging
from utils.request_context import REQUEST_ID_HEADER, bind_request_id, clear_request_id

from app.routers.ads import router as ads_router
from app.routers.applications import router as applications_router
from app.routers.auth import router as auth_router
from app.routers.dashboard import router as dashboard_router
from app.routers.health import router as health_router
from app.routers.profile import router as profile_router

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="Patikai Helyettes API", version="1.0.0")
log = logging.getLogger("patika.api")


def _get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id") or ""


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = bind_request_id(request.headers.get(REQUEST_ID_HEADER))
    request.state.request_id = rid
    try:
        response = await call_next(request)
    finally:
        clear_request_id()
    response.headers[REQUEST_ID_HEADER] = rid
    return response


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    rid = _get_request_id(request)
    log.info(
        "marketplace_error",
        extra={
            "extra": {
                "event": "marketplace_error",
                "status_code": exc.status_code,
                "detail": exc.detail,
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    content = {"detail": exc.detail, "message": exc.message, "request_id": rid}
    if exc.fields:
        content["fields"] = exc.fields
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    rid = _get_request_id(request)
    log.warning(
        "http_exception",
        extra={
            "extra": {
                "event": "http_exception",
                "status_code": exc.status_code,
                "detail": exc.detail,
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = _get_request_id(request)
    log.warning(
        "validation_error",
        extra={
            "extra": {
                "event": "validation_error",
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc), "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")} for e in exc.errors()]


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _get_request_id(request)
    log.error(
        "internal_unhandled_exception",
        extra={
            "extra": {
                "event": "internal_unhandled_exception",
                "error_type": type(exc).__name__,
                "message": str(exc),
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_unhandled_exception",
            "message": "Hiba történt. Kérjük, próbálja újra.",
            "request_id": rid,
            "revision": os.getenv("K_REVISION") or "",
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ALLOW_ORIGINS.split(",") if o.strip()],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["health"])
app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(ads_router, prefix="/api", tags=["ads"])
app.include_router(applications_router, prefix="/api", tags=["applications"])
app.include_router(dashboard_router, prefix="/api", tags=["dashboard"])
app.include_router(profile_router, prefix="/api", tags=["profile"])
