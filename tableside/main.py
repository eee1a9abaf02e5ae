import logging
import threading
import time
from collections import defaultdict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware

from tableside.core.config import settings
from tableside.core.errors import AppError
from tableside.db import session as db_session
from tableside.routes import admin as admin_routes
from tableside.routes import analytics as analytics_routes
from tableside.routes import cart as cart_routes
from tableside.routes import health
from tableside.routes import menu as menu_routes
from tableside.routes import orders as orders_routes

app = FastAPI(
    title="Tableside Ordering API",
    version="1.0.0",
    description="Table-side menu, ordering and admin backend",
    # Avoid automatic 307 redirects between /path and /path/
    redirect_slashes=False,
)

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
# Dedicated app logger to avoid uvicorn.access formatter expectations
_req_logger = logging.getLogger("tableside.request")
_err_logger = logging.getLogger("tableside.errors")

# In-memory request counters per route (method + path), guarded by a lock
_request_counts = defaultdict(int)
_req_lock = threading.Lock()
_global_request_count = 0


@app.middleware("http")
async def request_count_middleware(request: Request, call_next):
    global _global_request_count
    route = request.scope.get("route")
    key_path = getattr(route, "path", None) or request.url.path
    key = f"{request.method} {key_path}"

    with _req_lock:
        _request_counts[key] += 1
        count_val = _request_counts[key]
        _global_request_count += 1
        global_count_val = _global_request_count

    # Log every N hits to avoid spam
    if count_val % settings.REQUEST_LOG_EVERY_N == 0:
        _req_logger.info("Request count threshold reached: %s -> %s (global=%s)", key, count_val, global_count_val)

    db_count_token = db_session.request_db_query_count.set([0])
    start = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        per_req_db_count = db_session.request_db_query_count.get()[0]
        db_session.request_db_query_count.reset(db_count_token)
    duration_ms = int((time.perf_counter() - start) * 1000)

    if settings.REQUEST_LOG_VERBOSE:
        prefixes = [p.strip() for p in settings.REQUEST_LOG_INCLUDE_PREFIXES.split(",") if p.strip()]
        path_full = request.url.path
        if any(path_full.startswith(pref) for pref in prefixes):
            qs = request.url.query
            path_qs = f"{path_full}?{qs}" if qs else path_full
            _req_logger.info(
                "%s %s -> %s in %sms | route_count=%s global_count=%s db_queries=%s db_total=%s",
                request.method, path_qs, response.status_code, duration_ms,
                count_val, global_count_val, per_req_db_count, db_session.get_global_db_queries_total(),
            )
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        _err_logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    _err_logger.exception("database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Database error"})


# Cookie-backed session; it only carries the id of a server-side admin session
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    same_site="lax",
    https_only=settings.APP_ENV == "production",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(health.router)
app.include_router(menu_routes.router)
app.include_router(cart_routes.router)
app.include_router(orders_routes.router)
app.include_router(analytics_routes.router)
app.include_router(admin_routes.router)


@app.on_event("startup")
def on_startup():
    # create database tables if they don't exist
    db_session.create_db()


@app.get("/")
def root():
    return {"status": "Tableside API running"}
