import logging
from typing import Any

import firebase_admin
from firebase_admin import App, auth, credentials, firestore
from google.cloud.firestore import Client as FirestoreClient

from festival_push.config import Settings

logger = logging.getLogger(__name__)


def initialize_firebase(settings: Settings) -> App | None:
  """Initializes the Firebase Admin SDK once per process and returns the default app."""
  if firebase_admin._apps:
    return firebase_admin.get_app()

  options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None

  try:
    if settings.firebase_service_account_json_path:
      cred = credentials.Certificate(settings.firebase_service_account_json_path)
      app = firebase_admin.initialize_app(cred, options)
    else:
      # Use default credentials (e.g. Google Application Default Credentials)
      app = firebase_admin.initialize_app(options=options)
    logger.info("Firebase Admin SDK initialized successfully project_id=%s", app.project_id)
    return app
  except Exception as e:
    logger.error(f"Failed to initialize Firebase Admin SDK: {e}")
    return None


def get_firestore_client(app: App) -> FirestoreClient | None:
  """Returns a Firestore client bound to the given Firebase app."""
  try:
    return firestore.client(app=app)
  except Exception as e:
    logger.error(f"Failed to get Firestore client: {e}")
    return None


class FirebaseAccountAdmin:
  """Thin wrapper over `firebase_admin.auth` for account self-deletion."""

  def __init__(self, *, app: App) -> None:
    self._app = app

  def verify_id_token(self, id_token: str) -> dict[str, Any]:
    """Verify a Firebase ID token and return its decoded claims; raises on invalid tokens."""
    return auth.verify_id_token(id_token, app=self._app)

  def delete_user(self, uid: str) -> None:
    """Delete a Firebase Auth user by uid."""
    auth.delete_user(uid, app=self._app)
