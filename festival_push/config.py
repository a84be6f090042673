"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# FCM rejects multicast messages addressed to more than 500 tokens.
FCM_MULTICAST_MAX_TOKENS = 500

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
  """Typed settings for the push service."""

  environment: str
  allowed_origins: tuple[str, ...]
  app_identifier: str
  users_collection: str
  primary_token_field: str
  token_list_field: str
  android_channel_id: str
  max_recipients: int
  lookup_concurrency: int
  push_enabled: bool
  log_level: str
  log_dir: str | None
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  firebase_project_id: str | None
  firebase_service_account_json_path: str | None


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    return ()

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if "*" in origins:
    raise ValueError("FESTIVAL_PUSH_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None, *, default: bool = False) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None or raw.strip() == "":
    return default

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _parse_positive_int(name: str, default: str) -> int:
  value = int(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive integer.")
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("FESTIVAL_PUSH_ENV", "development").strip().lower()

  max_recipients = _parse_positive_int("FESTIVAL_PUSH_MAX_RECIPIENTS", str(FCM_MULTICAST_MAX_TOKENS))
  # A single multicast call must be able to carry every resolved token.
  if max_recipients > FCM_MULTICAST_MAX_TOKENS:
    raise ValueError(f"FESTIVAL_PUSH_MAX_RECIPIENTS must not exceed {FCM_MULTICAST_MAX_TOKENS}.")

  lookup_concurrency = _parse_positive_int("FESTIVAL_PUSH_LOOKUP_CONCURRENCY", "20")

  log_level = (os.getenv("FESTIVAL_PUSH_LOG_LEVEL") or "INFO").strip().upper()
  if log_level not in _LOG_LEVELS:
    raise ValueError(f"FESTIVAL_PUSH_LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}.")

  log_max_bytes = _parse_positive_int("FESTIVAL_PUSH_LOG_MAX_BYTES", "5242880")  # 5MB default

  log_backup_count = int(os.getenv("FESTIVAL_PUSH_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("FESTIVAL_PUSH_LOG_BACKUP_COUNT must be zero or a positive integer.")

  app_identifier = _optional_str(os.getenv("FESTIVAL_PUSH_APP_IDENTIFIER")) or "com.festival_rumour"

  return Settings(
    environment=environment,
    allowed_origins=_parse_origins(os.getenv("FESTIVAL_PUSH_ALLOWED_ORIGINS")),
    app_identifier=app_identifier,
    users_collection=_optional_str(os.getenv("FESTIVAL_PUSH_USERS_COLLECTION")) or "users",
    primary_token_field=_optional_str(os.getenv("FESTIVAL_PUSH_PRIMARY_TOKEN_FIELD")) or "fcmToken",
    token_list_field=_optional_str(os.getenv("FESTIVAL_PUSH_TOKEN_LIST_FIELD")) or "fcmTokens",
    android_channel_id=_optional_str(os.getenv("FESTIVAL_PUSH_ANDROID_CHANNEL_ID")) or "high_importance_channel",
    max_recipients=max_recipients,
    lookup_concurrency=lookup_concurrency,
    push_enabled=_parse_bool(os.getenv("FESTIVAL_PUSH_ENABLED"), default=True),
    log_level=log_level,
    log_dir=_optional_str(os.getenv("FESTIVAL_PUSH_LOG_DIR")),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=_parse_bool(os.getenv("FESTIVAL_PUSH_LOG_HTTP_4XX")),
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    firebase_service_account_json_path=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")),
  )


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value
