"""Recipient resolution against the profile store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from starlette.concurrency import run_in_threadpool

from festival_push.notifications.contracts import ProfileStore, ProfileStoreError, UserRecord

logger = logging.getLogger(__name__)


def unique_recipient_ids(recipient_ids: Iterable[str]) -> list[str]:
  """Collapse duplicate ids while keeping first-seen order."""
  return list(dict.fromkeys(recipient_ids))


class RecipientResolver:
  """Fetches one profile per unique recipient and keeps those that belong to this app."""

  def __init__(self, *, store: ProfileStore, app_identifier: str, max_concurrency: int = 20) -> None:
    if max_concurrency <= 0:
      raise ValueError("max_concurrency must be a positive integer.")
    self._store = store
    self._app_identifier = app_identifier
    self._max_concurrency = max_concurrency

  async def resolve(self, recipient_ids: Iterable[str]) -> list[UserRecord]:
    """Return qualifying user records in first-seen order of the deduplicated ids."""
    unique_ids = unique_recipient_ids(recipient_ids)
    if not unique_ids:
      return []

    # Cap in-flight lookups; store reads dominate request latency for large rooms.
    semaphore = asyncio.Semaphore(self._max_concurrency)

    async def _fetch(user_id: str) -> UserRecord | None:
      async with semaphore:
        return await run_in_threadpool(self._store.get, user_id)

    try:
      records = await asyncio.gather(*(_fetch(user_id) for user_id in unique_ids))
    except ProfileStoreError:
      raise
    except Exception as exc:
      logger.error("Profile lookup failed unique_recipients=%s error=%s", len(unique_ids), exc, exc_info=True)
      raise ProfileStoreError("Failed to resolve recipients") from exc

    qualifying: list[UserRecord] = []
    for user_id, record in zip(unique_ids, records, strict=True):
      if record is None:
        logger.debug("Recipient skipped; no profile user_id=%s", user_id)
        continue

      # Users of other apps share the store; they are filtered out, not rejected.
      if record.app_identifier != self._app_identifier:
        logger.debug("Recipient skipped; app identifier mismatch user_id=%s", user_id)
        continue

      qualifying.append(record)

    logger.info("Recipients resolved requested_unique=%s qualifying=%s", len(unique_ids), len(qualifying))
    return qualifying
