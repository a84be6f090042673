from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from festival_push import __version__
from festival_push.api.routes import accounts, notifications
from festival_push.config import get_settings
from festival_push.core.exceptions import global_exception_handler, http_exception_handler, notification_exception_handler
from festival_push.core.lifespan import lifespan
from festival_push.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from festival_push.notifications.contracts import NotificationError

settings = get_settings()

app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

# Browser clients call from arbitrary origins unless an allowlist is configured; the request origin is echoed back.
cors_origins = {"allow_origins": settings.allowed_origins} if settings.allowed_origins else {"allow_origin_regex": ".*"}
app.add_middleware(CORSMiddleware, **cors_origins, allow_credentials=True, allow_methods=["POST", "OPTIONS"], allow_headers=["content-type", "authorization"], expose_headers=["content-length"])

# Add exception handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(NotificationError, notification_exception_handler)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": __version__}


app.include_router(notifications.router, tags=["notifications"])
app.include_router(accounts.router, tags=["accounts"])
