"""Delivery token selection."""

from __future__ import annotations

from collections.abc import Iterable

from festival_push.notifications.contracts import ResolvedToken, UserRecord


def _non_blank(value: object) -> str | None:
  if isinstance(value, str) and value.strip():
    return value
  return None


def select_token(record: UserRecord) -> str | None:
  """Pick the single token a user is notified on: primary field first, then the head of the list."""
  primary = _non_blank(record.primary_token)
  if primary is not None:
    return primary

  if record.token_list:
    return _non_blank(record.token_list[0])

  return None


def select_unique_tokens(records: Iterable[UserRecord]) -> list[ResolvedToken]:
  """Select one token per user and drop tokens already claimed by an earlier user."""
  selected: dict[str, ResolvedToken] = {}
  for record in records:
    token = select_token(record)
    if token is None or token in selected:
      continue
    selected[token] = ResolvedToken(token=token, user_id=record.user_id)

  return list(selected.values())
