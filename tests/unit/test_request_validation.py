from __future__ import annotations

import logging

import pytest

from festival_push.notifications.contracts import InvalidMethodError, MissingBodyError, MissingRecipientsError, TooManyRecipientsError
from festival_push.notifications.validation import validate_notification_request


def _validate(body, *, method: str = "POST", max_recipients: int = 500):
  return validate_notification_request(method, body, max_recipients=max_recipients)


def test_rejects_non_post_method():
  with pytest.raises(InvalidMethodError) as exc_info:
    _validate({"userIds": ["u1"], "message": "hi"}, method="GET")

  assert exc_info.value.status_code == 405
  assert exc_info.value.message.startswith("Method Not Allowed")


@pytest.mark.parametrize("body", [{}, {"userIds": None}, {"userIds": "u1"}, {"userIds": []}, {"userIds": ["", "  ", 7]}, None, ["u1"]])
def test_rejects_missing_recipients(body):
  with pytest.raises(MissingRecipientsError) as exc_info:
    _validate(body)

  assert exc_info.value.status_code == 400
  assert exc_info.value.message == "userIds array is required"


@pytest.mark.parametrize("message", [None, "", "   ", 42])
def test_rejects_missing_message(message):
  body = {"userIds": ["u1"]}
  if message is not None:
    body["message"] = message

  with pytest.raises(MissingBodyError) as exc_info:
    _validate(body)

  assert exc_info.value.message == "message is required"


def test_recipients_checked_before_message():
  with pytest.raises(MissingRecipientsError):
    _validate({"userIds": []})


def test_rejects_more_recipients_than_one_multicast_can_carry():
  with pytest.raises(TooManyRecipientsError) as exc_info:
    _validate({"userIds": ["a", "b", "c"], "message": "hi"}, max_recipients=2)

  assert exc_info.value.status_code == 400
  assert "at most 2" in exc_info.value.message


def test_duplicate_ids_count_once_toward_recipient_cap():
  request = _validate({"userIds": ["u1"] * 600, "message": "hi"}, max_recipients=500)

  assert len(request.recipient_ids) == 600
  assert set(request.recipient_ids) == {"u1"}


def test_distinct_ids_over_cap_are_rejected_even_with_duplicates():
  with pytest.raises(TooManyRecipientsError):
    _validate({"userIds": ["a", "b", "a", "c", "b"], "message": "hi"}, max_recipients=2)


def test_builds_request_keeping_duplicates_and_optional_fields():
  request = _validate({"userIds": ["u1", "u1", " u2 "], "message": "Hello there", "title": "Alice", "chatRoomId": "room-9", "chatRoomName": "Jazz Fest"})

  assert request.recipient_ids == ("u1", "u1", "u2")
  assert request.body == "Hello there"
  assert request.title == "Alice"
  assert request.room_id == "room-9"
  assert request.room_name == "Jazz Fest"


def test_numeric_room_id_is_stringified_and_non_string_title_ignored():
  request = _validate({"userIds": ["u1"], "message": "hi", "chatRoomId": 12, "title": {"x": 1}})

  assert request.room_id == "12"
  assert request.title is None


def test_request_log_omits_message_text(caplog):
  with caplog.at_level(logging.INFO, logger="festival_push.notifications.validation"):
    _validate({"userIds": ["u1", "u2"], "message": "secret plans for tonight"})

  assert "recipients=2" in caplog.text
  assert "body_length=24" in caplog.text
  assert "secret plans" not in caplog.text
