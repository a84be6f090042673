from __future__ import annotations

import asyncio
import threading
import time

import pytest

from festival_push.notifications.contracts import ProfileStoreError
from festival_push.notifications.resolver import RecipientResolver, unique_recipient_ids

APP_ID = "com.festival_rumour"


def test_unique_recipient_ids_keeps_first_seen_order():
  assert unique_recipient_ids(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


@pytest.mark.anyio
async def test_fetches_each_unique_id_once(make_store, make_user):
  store = make_store(make_user("u1", primary_token="t1"), make_user("u2", primary_token="t2"))
  resolver = RecipientResolver(store=store, app_identifier=APP_ID)

  records = await resolver.resolve(["u1", "u2", "u1", "u2", "u1"])

  assert sorted(store.lookups) == ["u1", "u2"]
  assert [record.user_id for record in records] == ["u1", "u2"]


@pytest.mark.anyio
async def test_excludes_missing_and_foreign_app_records(make_store, make_user):
  store = make_store(make_user("u1", primary_token="t1"), make_user("u2", app_identifier="other_app", primary_token="t2"))
  resolver = RecipientResolver(store=store, app_identifier=APP_ID)

  records = await resolver.resolve(["u1", "u2", "ghost"])

  assert [record.user_id for record in records] == ["u1"]


@pytest.mark.anyio
async def test_zero_qualifying_records_is_not_an_error(make_store, make_user):
  resolver = RecipientResolver(store=make_store(make_user("u2", app_identifier="other_app")), app_identifier=APP_ID)

  assert await resolver.resolve(["u2", "missing"]) == []


@pytest.mark.anyio
async def test_store_failure_raises_profile_store_error():
  class _BrokenStore:
    def get(self, user_id):
      raise RuntimeError("firestore unavailable")

  resolver = RecipientResolver(store=_BrokenStore(), app_identifier=APP_ID)

  with pytest.raises(ProfileStoreError) as exc_info:
    await resolver.resolve(["u1"])

  assert exc_info.value.status_code == 500


@pytest.mark.anyio
async def test_concurrent_lookups_are_capped():
  lock = threading.Lock()
  state = {"active": 0, "peak": 0}

  class _SlowStore:
    def get(self, user_id):
      with lock:
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
      time.sleep(0.01)
      with lock:
        state["active"] -= 1
      return None

  resolver = RecipientResolver(store=_SlowStore(), app_identifier=APP_ID, max_concurrency=3)
  await resolver.resolve([f"u{i}" for i in range(12)])

  assert 1 <= state["peak"] <= 3


def test_rejects_non_positive_concurrency(make_store):
  with pytest.raises(ValueError):
    RecipientResolver(store=make_store(), app_identifier=APP_ID, max_concurrency=0)


@pytest.mark.anyio
async def test_resolution_is_order_independent(make_store, make_user):
  store = make_store(make_user("u1", primary_token="t1"), make_user("u2", primary_token="t2"), make_user("u3", primary_token="t3"))
  resolver = RecipientResolver(store=store, app_identifier=APP_ID)

  forward, backward = await asyncio.gather(resolver.resolve(["u1", "u2", "u3"]), resolver.resolve(["u3", "u2", "u1", "u3"]))

  assert {record.user_id for record in forward} == {record.user_id for record in backward}
