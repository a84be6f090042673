"""Notification dispatch orchestration for chat events."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from starlette.concurrency import run_in_threadpool

from festival_push.notifications.contracts import DispatchOutcome, DispatchResult, NotificationRequest, PushSender, ResolvedToken
from festival_push.notifications.payload import build_payload
from festival_push.notifications.resolver import RecipientResolver
from festival_push.notifications.tokens import select_unique_tokens

logger = logging.getLogger(__name__)

NO_TOKENS_MESSAGE = "No valid FCM tokens found"
PROCESSED_MESSAGE = "Notifications processed"


def token_fingerprint(token: str) -> str:
  """Short stable digest used to correlate a token in logs without revealing it."""
  return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


def aggregate_outcomes(outcomes: Iterable[DispatchOutcome], user_by_token: Mapping[str, str] | None = None, *, token_count: int | None = None) -> DispatchResult:
  """Count outcomes and log every failed token individually.

  `token_count` is the size of the batch handed to the sender; it defaults to
  the number of outcomes.
  """
  user_by_token = user_by_token or {}
  collected = tuple(outcomes)
  sent_count = 0
  failed_count = 0
  for outcome in collected:
    if outcome.success:
      sent_count += 1
      continue

    failed_count += 1
    logger.warning("Push delivery failed token=%s user_id=%s error=%s", token_fingerprint(outcome.token), user_by_token.get(outcome.token, "unknown"), outcome.error_detail or "unknown error")

  return DispatchResult(sent_count=sent_count, failed_count=failed_count, token_count=len(collected) if token_count is None else token_count, outcomes=collected)


def to_response_body(result: DispatchResult) -> dict[str, Any]:
  """Render a completed dispatch as the caller-facing JSON body."""
  if result.token_count == 0:
    return {"success": True, "message": NO_TOKENS_MESSAGE, "sentCount": 0}

  return {"success": True, "message": PROCESSED_MESSAGE, "sentCount": result.sent_count, "failedCount": result.failed_count}


class NotificationDispatchService:
  """Runs resolve -> select -> build -> send -> aggregate for one request."""

  def __init__(self, *, resolver: RecipientResolver, push_sender: PushSender, android_channel_id: str) -> None:
    self._resolver = resolver
    self._push_sender = push_sender
    self._android_channel_id = android_channel_id

  async def dispatch(self, request: NotificationRequest) -> DispatchResult:
    """Deliver one chat event; per-token failures are counted, transport failures raise."""
    records = await self._resolver.resolve(request.recipient_ids)
    resolved: list[ResolvedToken] = select_unique_tokens(records)

    # No registered devices is a normal outcome, not an error.
    if not resolved:
      logger.info("No deliverable tokens qualifying_recipients=%s", len(records))
      return DispatchResult(sent_count=0, failed_count=0)

    payload = build_payload(request, android_channel_id=self._android_channel_id)
    tokens = [item.token for item in resolved]
    outcomes = await run_in_threadpool(self._push_sender.send_batch, tokens, payload)

    result = aggregate_outcomes(outcomes, {item.token: item.user_id for item in resolved}, token_count=len(tokens))
    logger.info("Push batch completed tokens=%s sent=%s failed=%s", len(tokens), result.sent_count, result.failed_count)
    return result
