"""Shared FastAPI dependencies for process-wide service handles."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from festival_push.config import Settings, get_settings
from festival_push.core.firebase import FirebaseAccountAdmin
from festival_push.notifications.service import NotificationDispatchService


def get_app_settings() -> Settings:
  """Dependency returning the cached process settings."""
  return get_settings()


def get_dispatch_service(request: Request) -> NotificationDispatchService:
  """Return the dispatch service built at startup."""
  service = getattr(request.app.state, "dispatch_service", None)
  if service is None:
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Notification service unavailable")
  return service


def get_account_admin(request: Request) -> FirebaseAccountAdmin:
  """Return the Firebase account admin built at startup."""
  admin = getattr(request.app.state, "account_admin", None)
  if admin is None:
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Account service unavailable")
  return admin
