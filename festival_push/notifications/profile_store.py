"""Firestore-backed user profile reads."""

from __future__ import annotations

import logging
from typing import Any

from google.cloud.firestore import Client as FirestoreClient

from festival_push.notifications.contracts import UserRecord

logger = logging.getLogger(__name__)

# Firestore caps document ids at 1500 bytes.
_MAX_DOCUMENT_ID_BYTES = 1500


def is_valid_document_id(user_id: str) -> bool:
  """Return whether `user_id` names exactly one document directly under a collection."""
  if not user_id or "/" in user_id or user_id in {".", ".."}:
    return False

  # Ids of the form __name__ are reserved by Firestore.
  if user_id.startswith("__") and user_id.endswith("__"):
    return False

  return len(user_id.encode("utf-8")) <= _MAX_DOCUMENT_ID_BYTES


def _coerce_token_list(raw: Any) -> tuple[str, ...]:
  """Keep only string entries of a stored token array, in stored order."""
  if not isinstance(raw, list | tuple):
    return ()
  return tuple(item for item in raw if isinstance(item, str))


def user_record_from_document(user_id: str, data: dict[str, Any], *, primary_token_field: str = "fcmToken", token_list_field: str = "fcmTokens") -> UserRecord:
  """Map a raw profile document onto the fields push dispatch reads."""
  app_identifier = data.get("appIdentifier")
  primary_token = data.get(primary_token_field)
  return UserRecord(
    user_id=user_id,
    app_identifier=app_identifier if isinstance(app_identifier, str) else None,
    primary_token=primary_token if isinstance(primary_token, str) else None,
    token_list=_coerce_token_list(data.get(token_list_field)),
  )


class FirestoreProfileStore:
  """Reads user documents from a Firestore collection keyed by user id."""

  def __init__(self, *, client: FirestoreClient, collection: str = "users", primary_token_field: str = "fcmToken", token_list_field: str = "fcmTokens") -> None:
    self._client = client
    self._collection = collection
    self._primary_token_field = primary_token_field
    self._token_list_field = token_list_field

  def get(self, user_id: str) -> UserRecord | None:
    """Fetch a single profile document; missing documents yield None."""
    # Ids that cannot address a user document cannot have a profile.
    if not is_valid_document_id(user_id):
      logger.debug("Profile lookup skipped; invalid document id length=%s", len(user_id))
      return None

    snapshot = self._client.collection(self._collection).document(user_id).get()
    if not snapshot.exists:
      return None

    data = snapshot.to_dict() or {}
    return user_record_from_document(user_id, data, primary_token_field=self._primary_token_field, token_list_field=self._token_list_field)
