"""Route for fanning chat events out as push notifications."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from festival_push.api.deps import get_app_settings, get_dispatch_service
from festival_push.config import Settings
from festival_push.notifications.contracts import NotificationRequest
from festival_push.notifications.service import NotificationDispatchService, to_response_body
from festival_push.notifications.validation import validate_notification_request


router = APIRouter()

# Non-POST methods are routed here so they get the endpoint's own 405 body.
_ACCEPTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def _read_json_body(request: Request) -> Any:
  """Return the decoded JSON body, or None when the body is empty or not JSON."""
  try:
    return await request.json()
  except ValueError:
    return None


async def validated_notification_request(request: Request, settings: Settings = Depends(get_app_settings)) -> NotificationRequest:  # noqa: B008
  """Validate method and body once at the boundary."""
  raw_body = await _read_json_body(request) if request.method == "POST" else None
  return validate_notification_request(request.method, raw_body, max_recipients=settings.max_recipients)


@router.api_route("/sendNotification", methods=_ACCEPTED_METHODS)
async def send_notification(notification: NotificationRequest = Depends(validated_notification_request), service: NotificationDispatchService = Depends(get_dispatch_service)) -> dict[str, Any]:  # noqa: B008
  """Resolve recipients to devices and send one multicast push."""
  result = await service.dispatch(notification)
  return to_response_body(result)
