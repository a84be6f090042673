"""Boundary validation for inbound notification requests."""

from __future__ import annotations

import logging
from typing import Any

from festival_push.notifications.contracts import InvalidMethodError, MissingBodyError, MissingRecipientsError, NotificationRequest, TooManyRecipientsError

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED_MESSAGE = "Method Not Allowed. Use POST."
MISSING_RECIPIENTS_MESSAGE = "userIds array is required"
MISSING_BODY_MESSAGE = "message is required"


def _optional_text(value: Any) -> str | None:
  """Return a string field value, or None when the field is absent or not textual."""
  if isinstance(value, str):
    return value

  # Room ids are sometimes sent as numbers by older clients.
  if isinstance(value, int) and not isinstance(value, bool):
    return str(value)

  return None


def _recipient_ids(raw: Any) -> tuple[str, ...]:
  """Extract the usable recipient ids from the raw `userIds` field."""
  if not isinstance(raw, list):
    raise MissingRecipientsError(MISSING_RECIPIENTS_MESSAGE)

  # Drop entries that can never match a profile document.
  ids = tuple(item.strip() for item in raw if isinstance(item, str) and item.strip())
  if not ids:
    raise MissingRecipientsError(MISSING_RECIPIENTS_MESSAGE)

  return ids


def validate_notification_request(method: str, raw_body: Any, *, max_recipients: int) -> NotificationRequest:
  """Validate the HTTP method and JSON body of a send request.

  Non-object bodies are treated as empty so they fail with the same
  field-level errors as a body that omits the fields.
  """
  if method.upper() != "POST":
    raise InvalidMethodError(METHOD_NOT_ALLOWED_MESSAGE)

  body = raw_body if isinstance(raw_body, dict) else {}

  recipient_ids = _recipient_ids(body.get("userIds"))
  # Duplicates collapse before lookup, so only distinct ids count toward the multicast ceiling.
  if len(dict.fromkeys(recipient_ids)) > max_recipients:
    raise TooManyRecipientsError(f"userIds may contain at most {max_recipients} distinct entries")

  message = body.get("message")
  if not isinstance(message, str) or not message.strip():
    raise MissingBodyError(MISSING_BODY_MESSAGE)

  request = NotificationRequest(recipient_ids=recipient_ids, body=message, title=_optional_text(body.get("title")), room_id=_optional_text(body.get("chatRoomId")), room_name=_optional_text(body.get("chatRoomName")))
  # Log shape only; message text and device tokens stay out of the logs.
  logger.info("Notification request accepted recipients=%s body_length=%s room_id_present=%s room_name_present=%s", len(request.recipient_ids), len(request.body), request.room_id is not None, bool(request.room_name and request.room_name.strip()))
  return request
