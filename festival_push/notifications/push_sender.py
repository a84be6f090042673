"""Push notification delivery implementations."""

from __future__ import annotations

import logging

from firebase_admin import App, messaging

from festival_push.notifications.contracts import DispatchOutcome, ProviderTransportError, PushPayload, PushSender

logger = logging.getLogger(__name__)

PUSH_DISABLED_DETAIL = "push delivery disabled"


def build_multicast_message(tokens: list[str], payload: PushPayload) -> messaging.MulticastMessage:
  """Translate a provider-agnostic payload into an FCM multicast message."""
  android = messaging.AndroidConfig(priority=payload.android.priority, notification=messaging.AndroidNotification(channel_id=payload.android.channel_id, sound=payload.android.sound))
  apns = messaging.APNSConfig(payload=messaging.APNSPayload(aps=messaging.Aps(sound=payload.apns.sound, badge=payload.apns.badge)))
  return messaging.MulticastMessage(tokens=list(tokens), notification=messaging.Notification(title=payload.title, body=payload.body), data=dict(payload.data), android=android, apns=apns)


def _describe_exception(exc: BaseException | None) -> str:
  """Render a per-token provider error without assuming an error type."""
  if exc is None:
    return "unknown error"

  code = getattr(exc, "code", None)
  message = str(exc) or type(exc).__name__
  if code:
    return f"{code}: {message}"

  return message


class FcmPushSender(PushSender):
  """`firebase_admin.messaging` backed sender issuing one multicast call per batch."""

  def __init__(self, *, app: App | None = None) -> None:
    self._app = app

  def send_batch(self, tokens: list[str], payload: PushPayload) -> list[DispatchOutcome]:
    """Send one multicast request and map the provider's responses back onto tokens.

    There is no retry here: a token that fails is reported as failed so the
    caller sees transient delivery problems instead of having them masked.
    """
    if not tokens:
      return []

    message = build_multicast_message(tokens, payload)
    try:
      batch = messaging.send_each_for_multicast(message, app=self._app)
    except Exception as exc:
      # Nothing was delivered; the whole batch failed before per-token results existed.
      logger.error("FCM multicast send failed tokens=%s error_type=%s", len(tokens), type(exc).__name__, exc_info=True)
      raise ProviderTransportError(f"Failed to send notifications: {exc}") from exc

    # Responses are matched to tokens by index, so a short or long list cannot be attributed.
    if len(batch.responses) != len(tokens):
      logger.error("FCM multicast response count mismatch tokens=%s responses=%s", len(tokens), len(batch.responses))
      raise ProviderTransportError(f"Failed to send notifications: provider returned {len(batch.responses)} responses for {len(tokens)} tokens")

    outcomes: list[DispatchOutcome] = []
    for token, response in zip(tokens, batch.responses):
      if response.success:
        outcomes.append(DispatchOutcome(token=token, success=True))
      else:
        outcomes.append(DispatchOutcome(token=token, success=False, error_detail=_describe_exception(response.exception)))

    return outcomes


class NullPushSender(PushSender):
  """No-op sender used when push delivery is disabled; every token is reported undelivered."""

  def send_batch(self, tokens: list[str], payload: PushPayload) -> list[DispatchOutcome]:
    """Drop the batch while recording a debug log."""
    logger.debug("Push delivery disabled; dropping batch tokens=%s", len(tokens))
    return [DispatchOutcome(token=token, success=False, error_detail=PUSH_DISABLED_DETAIL) for token in tokens]
