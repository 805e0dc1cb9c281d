from __future__ import annotations

import pytest

from teamsnotify.utils import (
    env_bool,
    env_list,
    excerpt_response,
    parse_env_bool,
    redact_url,
    trim,
)


class TestParseEnvBool:
    @pytest.mark.parametrize("value", ["true", "True", "TRUE", "1", "yes", "YES", "on", "ON"])
    def test_parses_truthy_values(self, value: str) -> None:
        assert parse_env_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "False", "0", "no", "off", " off "])
    def test_parses_falsy_values(self, value: str) -> None:
        assert parse_env_bool(value) is False

    @pytest.mark.parametrize("value", [None, "", "maybe"])
    def test_unrecognized_values(self, value) -> None:
        assert parse_env_bool(value) is None


def test_env_bool_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("TEAMSNOTIFY_TEST_FLAG", "on")

    assert env_bool("TEAMSNOTIFY_TEST_FLAG") is True


def test_env_list(monkeypatch) -> None:
    monkeypatch.delenv("TEAMSNOTIFY_TEST_LIST", raising=False)
    assert env_list("TEAMSNOTIFY_TEST_LIST") is None

    monkeypatch.setenv("TEAMSNOTIFY_TEST_LIST", " a, ,b ,")
    assert env_list("TEAMSNOTIFY_TEST_LIST") == ["a", "b"]


@pytest.mark.parametrize(
    ("value", "limit", "expected"),
    [("short", 10, "short"), ("  padded  ", 10, "padded"), ("abcdefghij", 6, "abc..."), ("abcdef", 2, "ab")],
)
def test_trim(value: str, limit: int, expected: str) -> None:
    assert trim(value, limit) == expected


class _Response:
    def __init__(self, text: str):
        self.text = text


def test_excerpt_response() -> None:
    assert excerpt_response(_Response("")) == "<empty>"
    assert excerpt_response(_Response("x" * 300), limit=20) == "x" * 17 + "..."


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://outlook.office.com/webhook/secret", "https://outlook.office.com/..."),
        ("not a url", "<malformed url>"),
        ("", "<malformed url>"),
    ],
)
def test_redact_url(url: str, expected: str) -> None:
    assert redact_url(url) == expected
