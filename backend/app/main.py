import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.admin import router as admin_router
from app.api.v1.auth import router as auth_router
from app.api.v1.chat import router as chat_router
from app.api.v1.conversation import router as conversation_router
from app.core.config import get_settings
from app.core.dependencies import engine
from app.models.conversation import Base
from app.utils.rate_limit import check_chat_rate, get_client_ip, ip_in_allowlist

settings = get_settings()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mindful Support API",
    version="0.3.0",
    docs_url="/docs" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.openapi_enabled else None,
)


@app.on_event("startup")
async def _startup():
    logging.getLogger("app").setLevel(settings.log_level.upper())

    errors = get_settings().validate_required_config()
    if errors:
        if get_settings().is_production:
            raise RuntimeError("Configuration validation failed in production environment: " + "; ".join(errors))
        for error in errors:
            logger.warning("Config: %s", error)

    if engine is not None:
        Base.metadata.create_all(engine)


if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

app.include_router(chat_router, prefix="/api/v1", tags=["chat"])
app.include_router(conversation_router, prefix="/api/v1", tags=["chat"])
app.include_router(auth_router, prefix="/api/v1", tags=["auth"])
app.include_router(admin_router, prefix="/api/v1", tags=["admin"])


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Hide internal details for 5xx in production unless explicitly enabled.
    if exc.status_code >= 500 and not settings.expose_error_details:
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    if settings.expose_error_details:
        return JSONResponse(status_code=500, content={"detail": str(exc)})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.middleware("http")
async def chat_rate_limit_middleware(request: Request, call_next):
    if request.method != "POST" or request.url.path != "/api/v1/chat":
        return await call_next(request)

    allowed, _ = check_chat_rate(request)
    if not allowed:
        return JSONResponse(status_code=429, content={"detail": "Too Many Requests"})

    return await call_next(request)


@app.middleware("http")
async def admin_ip_allowlist_middleware(request: Request, call_next):
    allowlist = get_settings().admin_ip_allowlist
    if not allowlist:
        return await call_next(request)

    if request.url.path.startswith("/api/v1/admin/"):
        ip = get_client_ip(request) or ""
        if not ip_in_allowlist(ip, allowlist):
            return JSONResponse(status_code=403, content={"detail": "Admin IP not allowed"})
    return await call_next(request)


_DOCS_PATHS = {"/docs", "/docs/oauth2-redirect"} if settings.docs_enabled else set()


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    if not settings.security_headers_enabled:
        return response

    headers = response.headers
    if "X-Content-Type-Options" not in headers:
        headers["X-Content-Type-Options"] = "nosniff"
    if "X-Frame-Options" not in headers:
        headers["X-Frame-Options"] = "DENY"
    if "Referrer-Policy" not in headers:
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if "Permissions-Policy" not in headers:
        headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
    # Swagger UI loads its own scripts and styles from a CDN.
    if "Content-Security-Policy" not in headers and request.url.path not in _DOCS_PATHS:
        headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"

    return response


@app.get("/health")
async def health_check():
    return {"status": "ok"}
