"""Shared fixtures for dispatch pipeline tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from festival_push.notifications.contracts import DispatchOutcome, PushPayload, UserRecord

APP_ID = "com.festival_rumour"


class FakeProfileStore:
  """In-memory profile store that records every lookup."""

  def __init__(self, records: Iterable[UserRecord] = ()) -> None:
    self.records = {record.user_id: record for record in records}
    self.lookups: list[str] = []

  def get(self, user_id: str) -> UserRecord | None:
    self.lookups.append(user_id)
    return self.records.get(user_id)


class RecordingPushSender:
  """Push sender that records batches and answers with scripted outcomes."""

  def __init__(self, failures: dict[str, str] | None = None) -> None:
    self.failures = failures or {}
    self.calls: list[tuple[list[str], PushPayload]] = []

  def send_batch(self, tokens: list[str], payload: PushPayload) -> list[DispatchOutcome]:
    self.calls.append((list(tokens), payload))
    return [DispatchOutcome(token=token, success=token not in self.failures, error_detail=self.failures.get(token)) for token in tokens]


@pytest.fixture
def make_user() -> Callable[..., UserRecord]:
  def _make_user(user_id: str, *, app_identifier: str = APP_ID, primary_token: str | None = None, token_list: tuple[str, ...] = ()) -> UserRecord:
    return UserRecord(user_id=user_id, app_identifier=app_identifier, primary_token=primary_token, token_list=token_list)

  return _make_user


@pytest.fixture
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture
def make_store() -> Callable[..., FakeProfileStore]:
  def _make_store(*records: UserRecord) -> FakeProfileStore:
    return FakeProfileStore(records)

  return _make_store


@pytest.fixture
def make_sender() -> Callable[..., RecordingPushSender]:
  def _make_sender(failures: dict[str, str] | None = None) -> RecordingPushSender:
    return RecordingPushSender(failures)

  return _make_sender
