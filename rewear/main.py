import time
import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from rewear.core.config import get_settings
from rewear.core.exceptions import (
    AppError,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from rewear.core.logging import bind_request_id, configure_logging, get_logger
from rewear.db.init import init_db
from rewear.routers import admin, auth, items, swaps, uploads, user
from rewear.services.users import ensure_platform_admin

settings = get_settings()
configure_logging(debug=settings.debug, env=settings.env)
log = get_logger(__name__)

app = FastAPI(
    title="ReWear API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    bind_request_id(request_id)
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    log.info(
        "request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration_ms, 2),
    )
    response.headers["X-Request-ID"] = request_id
    return response


app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Routers
app.include_router(auth.router, prefix="/v1/auth", tags=["auth"])
app.include_router(user.router, prefix="/v1/user", tags=["user"])
app.include_router(items.router, prefix="/v1/items", tags=["items"])
app.include_router(swaps.router, prefix="/v1/swaps", tags=["swaps"])
app.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
app.include_router(uploads.router, prefix="/v1/uploads", tags=["uploads"])


@app.on_event("startup")
async def startup():
    if settings.sentry_dsn:
        import sentry_sdk
        sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.env, traces_sample_rate=0.1)
        log.info("startup", msg="Sentry enabled")
    await init_db()
    log.info("startup", msg="DB connected")
    admin_user, created = await ensure_platform_admin()
    log.info("startup", msg="Platform admin ready", admin_id=str(admin_user.id), created=created)


@app.get("/health")
async def health():
    """Health check for load balancers and monitoring."""
    return {"status": "ok"}
