"""Factory helpers for notification services."""

from __future__ import annotations

from firebase_admin import App
from google.cloud.firestore import Client as FirestoreClient

from festival_push.config import Settings
from festival_push.notifications.contracts import PushSender
from festival_push.notifications.profile_store import FirestoreProfileStore
from festival_push.notifications.push_sender import FcmPushSender, NullPushSender
from festival_push.notifications.resolver import RecipientResolver
from festival_push.notifications.service import NotificationDispatchService


def build_push_sender(settings: Settings, *, firebase_app: App | None) -> PushSender:
  """Pick the FCM sender when delivery is enabled and Firebase is available."""
  # Delivery stays off when disabled explicitly or when Firebase never initialized.
  if settings.push_enabled and firebase_app is not None:
    return FcmPushSender(app=firebase_app)

  return NullPushSender()


def build_dispatch_service(settings: Settings, *, firestore_client: FirestoreClient, firebase_app: App | None) -> NotificationDispatchService:
  """Construct the dispatch pipeline from environment configuration."""
  store = FirestoreProfileStore(client=firestore_client, collection=settings.users_collection, primary_token_field=settings.primary_token_field, token_list_field=settings.token_list_field)
  resolver = RecipientResolver(store=store, app_identifier=settings.app_identifier, max_concurrency=settings.lookup_concurrency)
  return NotificationDispatchService(resolver=resolver, push_sender=build_push_sender(settings, firebase_app=firebase_app), android_channel_id=settings.android_channel_id)
