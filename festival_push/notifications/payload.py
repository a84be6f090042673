"""Push payload composition."""

from __future__ import annotations

import time

from festival_push.notifications.contracts import AndroidHints, ApnsHints, NotificationRequest, PushPayload

DEFAULT_TITLE = "New Message"
MESSAGE_TYPE = "custom_message"
ROOM_TITLE_SEPARATOR = " · "


def compose_title(title: str | None, room_name: str | None) -> str:
  """Prefix the sender title with the room name when one is given."""
  base_title = title or DEFAULT_TITLE
  trimmed_room = (room_name or "").strip()
  if trimmed_room:
    return f"{trimmed_room}{ROOM_TITLE_SEPARATOR}{base_title}"

  return base_title


def build_payload(request: NotificationRequest, *, android_channel_id: str, now_ms: int | None = None) -> PushPayload:
  """Build the payload shared by every recipient of a request."""
  timestamp_ms = now_ms if now_ms is not None else int(time.time() * 1000)
  # FCM data values must be strings.
  data = {"type": MESSAGE_TYPE, "timestamp": str(timestamp_ms)}
  if request.room_id is not None:
    data["chatRoomId"] = str(request.room_id)

  return PushPayload(title=compose_title(request.title, request.room_name), body=request.body, data=data, android=AndroidHints(channel_id=android_channel_id), apns=ApnsHints())
