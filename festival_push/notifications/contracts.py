"""Contracts for chat push notification dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pydantic import BaseModel, ConfigDict


class NotificationRequest(BaseModel):
  """Validated chat event that should be fanned out to recipients' devices."""

  recipient_ids: tuple[str, ...]
  body: str
  title: str | None = None
  room_id: str | None = None
  room_name: str | None = None
  model_config = ConfigDict(frozen=True, extra="forbid")


@dataclass(frozen=True)
class UserRecord:
  """Subset of a user profile needed to address push notifications."""

  user_id: str
  app_identifier: str | None
  primary_token: str | None = None
  token_list: tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedToken:
  """A delivery token with the recipient it was selected for."""

  token: str
  user_id: str


@dataclass(frozen=True)
class AndroidHints:
  """Android delivery hints attached to every multicast message."""

  channel_id: str
  priority: str = "high"
  sound: str = "default"


@dataclass(frozen=True)
class ApnsHints:
  """APNs delivery hints attached to every multicast message."""

  sound: str = "default"
  badge: int = 1


@dataclass(frozen=True)
class PushPayload:
  """Provider-agnostic payload shared by every recipient of one request."""

  title: str
  body: str
  data: dict[str, str]
  android: AndroidHints
  apns: ApnsHints = field(default_factory=ApnsHints)


@dataclass(frozen=True)
class DispatchOutcome:
  """Per-token delivery outcome reported by the push provider."""

  token: str
  success: bool
  error_detail: str | None = None


@dataclass(frozen=True)
class DispatchResult:
  """Aggregated outcome of one batched send."""

  sent_count: int
  failed_count: int
  token_count: int = 0
  outcomes: tuple[DispatchOutcome, ...] = ()


class NotificationError(Exception):
  """Base class for errors that end a dispatch request with a caller-facing error."""

  status_code = 500

  def __init__(self, message: str) -> None:
    super().__init__(message)
    self.message = message


class RequestValidationFailure(NotificationError):
  """Raised when the inbound request is not acceptable; correctable by the caller."""

  status_code = 400


class InvalidMethodError(RequestValidationFailure):
  """Raised when the endpoint is called with anything other than POST."""

  status_code = 405


class MissingRecipientsError(RequestValidationFailure):
  """Raised when `userIds` is absent, not a list, or empty."""


class TooManyRecipientsError(RequestValidationFailure):
  """Raised when `userIds` exceeds what a single multicast call can address."""


class MissingBodyError(RequestValidationFailure):
  """Raised when `message` is absent or blank."""


class ProfileStoreError(NotificationError):
  """Raised when recipient profiles cannot be read from the store."""


class ProviderTransportError(NotificationError):
  """Raised when the batched send could not be issued to the push provider at all."""


class ProfileStore(Protocol):
  """Keyed read access to user profiles."""

  def get(self, user_id: str) -> UserRecord | None:
    """Return the profile for `user_id`, or None when no such user exists."""


class PushSender(Protocol):
  """Delivery contract for batched push sends."""

  def send_batch(self, tokens: list[str], payload: PushPayload) -> list[DispatchOutcome]:
    """Send one payload to every token and return outcomes in token order."""
