import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from festival_push.notifications.contracts import NotificationError

logger = logging.getLogger("uvicorn.error")


def error_payload(error: str, *, request_id: str | None = None) -> dict[str, Any]:
  """Build the `{success: false, error}` envelope every failure response uses."""
  payload: dict[str, Any] = {"success": False, "error": error}
  # Attach a request id so support can correlate client reports to server logs.
  if request_id:
    payload["requestId"] = request_id
  return payload


def _sanitize_http_detail(detail: Any) -> Any:
  """Return an HTTPException detail payload safe for logs."""
  if isinstance(detail, dict):
    return {key: _sanitize_http_detail(value) for key, value in detail.items() if key not in {"input", "body", "payload", "content", "message"}}

  if isinstance(detail, list):
    return [_sanitize_http_detail(item) for item in detail]

  return detail


async def notification_exception_handler(request: Request, exc: NotificationError) -> JSONResponse:
  """Render dispatch errors with their public message and status."""
  request_id = getattr(request.state, "request_id", None)
  if exc.status_code >= 500:
    logger.error("Notification failure request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=exc)
  else:
    logger.info("Notification request rejected request_id=%s path=%s status_code=%s error=%s", request_id, request.url.path, exc.status_code, exc.message)
  return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message, request_id=request_id))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
  """Handle HTTP exceptions (including router 404/405) in the shared error envelope."""
  from festival_push.config import get_settings

  settings = get_settings()
  request_id = getattr(request.state, "request_id", None)
  headers = getattr(exc, "headers", None)
  # Do not expose 5xx details to callers; 503 details are fixed availability messages.
  if exc.status_code >= 500 and exc.status_code != status.HTTP_503_SERVICE_UNAVAILABLE:
    logger.error("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=error_payload("Internal Server Error", request_id=request_id), headers=headers)

  # Log 4xx HTTPExceptions when explicitly enabled for debugging.
  if settings.log_http_4xx:
    logger.warning("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, _sanitize_http_detail(exc.detail))

  detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
  return JSONResponse(status_code=exc.status_code, content=error_payload(detail, request_id=request_id), headers=headers)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Global exception handler to catch unhandled errors."""
  request_id = getattr(request.state, "request_id", None)
  logger.error("Global exception request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=exc)
  return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_payload("Internal Server Error", request_id=request_id))
