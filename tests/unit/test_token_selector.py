from __future__ import annotations

from festival_push.notifications.tokens import select_token, select_unique_tokens


def test_primary_token_wins_over_list(make_user):
  assert select_token(make_user("u1", primary_token="primary", token_list=("listed", "other"))) == "primary"


def test_falls_back_to_first_list_entry(make_user):
  assert select_token(make_user("u1", token_list=("first", "second"))) == "first"


def test_blank_primary_token_falls_back_to_list(make_user):
  assert select_token(make_user("u1", primary_token="  ", token_list=("first",))) == "first"


def test_no_token_fields_selects_nothing(make_user):
  assert select_token(make_user("u1")) is None
  assert select_token(make_user("u2", token_list=("",))) is None


def test_shared_device_token_is_sent_once(make_user):
  records = [make_user("u1", primary_token="shared"), make_user("u2", token_list=("shared",)), make_user("u3", primary_token="own")]

  resolved = select_unique_tokens(records)

  assert [item.token for item in resolved] == ["shared", "own"]
  # The first recipient that claimed a token is the one attributed in logs.
  assert resolved[0].user_id == "u1"


def test_one_token_per_user_even_with_many_registered(make_user):
  resolved = select_unique_tokens([make_user("u1", primary_token="a", token_list=("b", "c"))])

  assert [item.token for item in resolved] == ["a"]


def test_empty_when_no_user_has_a_token(make_user):
  assert select_unique_tokens([make_user("u1"), make_user("u2")]) == []
