"""EduConnect - Question and Answer Education Platform API."""

import logging
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from educonnect import __version__
from educonnect.config import get_settings
from educonnect.rate_limit import limiter
from educonnect.routers import (
    auth_router,
    categories_router,
    questions_router,
    timeline_router,
    users_router,
)

settings = get_settings()

# Logging
logger = logging.getLogger("educonnect")
logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

for warning in settings.validate():
    logger.warning("Config: %s", warning)

app = FastAPI(title="EduConnect", version=__version__)
app.state.limiter = limiter


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PATHS = (
        "/register",
        "/login",
        "/auth",
        "/logout",
        "/forgot-password",
        "/reset-password",
        "/update-password",
        "/update-role",
        "/update-info",
        "/create-question",
        "/update-question",
        "/delete-question",
    )

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        # Log sensitive operations
        path = request.url.path
        method = request.method
        if method in ("POST", "PUT", "DELETE") and path.startswith(self.AUDIT_PATHS):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                method,
                path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(AuditLogMiddleware)
if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# API routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(questions_router)
app.include_router(categories_router)
app.include_router(timeline_router)


# --- Rate limit error handler ---
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Handle rate limit exceeded."""
    return JSONResponse(status_code=429, content={"detail": "Rate limit exceeded. Try again later."})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return HTTP errors as JSON ``{"detail": ...}``."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing input is a 400 like every other validation failure."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    first = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"detail": first, "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the client."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# --- Health check ---
@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "educonnect", "version": __version__}
