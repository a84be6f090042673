from __future__ import annotations

from dataclasses import replace
from unittest.mock import MagicMock

from festival_push.config import get_settings
from festival_push.notifications.factory import build_dispatch_service, build_push_sender
from festival_push.notifications.push_sender import FcmPushSender, NullPushSender


def test_fcm_sender_when_enabled_and_firebase_available():
  settings = replace(get_settings(), push_enabled=True)

  assert isinstance(build_push_sender(settings, firebase_app=MagicMock()), FcmPushSender)


def test_null_sender_when_disabled_or_firebase_missing():
  settings = get_settings()

  assert isinstance(build_push_sender(replace(settings, push_enabled=False), firebase_app=MagicMock()), NullPushSender)
  assert isinstance(build_push_sender(replace(settings, push_enabled=True), firebase_app=None), NullPushSender)


def test_build_dispatch_service_wires_store_collection():
  client = MagicMock()
  settings = replace(get_settings(), users_collection="profiles")

  service = build_dispatch_service(settings, firestore_client=client, firebase_app=None)

  assert service is not None
  service._resolver._store.get("u1")
  client.collection.assert_called_once_with("profiles")
