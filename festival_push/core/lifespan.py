import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from festival_push.config import get_settings
from festival_push.core.firebase import FirebaseAccountAdmin, get_firestore_client, initialize_firebase
from festival_push.core.logging import _initialize_logging
from festival_push.notifications.factory import build_dispatch_service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Initialize logging and the process-wide Firebase handles before serving requests."""
  settings = get_settings()
  logger = logging.getLogger("festival_push.core.lifespan")

  _initialize_logging(settings)
  logger.info("Startup environment=%s app_identifier=%s push_enabled=%s", settings.environment, settings.app_identifier, settings.push_enabled)

  # Handlers read these from app.state; they are never replaced after startup.
  app.state.dispatch_service = None
  app.state.account_admin = None

  firebase_app = initialize_firebase(settings)
  if firebase_app is None:
    logger.warning("Firebase unavailable; notification and account endpoints will return 503.")
  else:
    app.state.account_admin = FirebaseAccountAdmin(app=firebase_app)
    firestore_client = get_firestore_client(firebase_app)
    if firestore_client is None:
      logger.warning("Firestore client unavailable; notification endpoint will return 503.")
    else:
      app.state.dispatch_service = build_dispatch_service(settings, firestore_client=firestore_client, firebase_app=firebase_app)
      logger.info("Notification dispatch service ready.")

  yield
