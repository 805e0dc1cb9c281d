from __future__ import annotations

import pytest

from teamsnotify.validation import (
    DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS,
    WebhookURLValidator,
    is_well_formed_url,
)


class TestDefaultPatterns:
    @pytest.mark.parametrize(
        "url",
        [
            "https://outlook.office.com/webhook/abc@def/IncomingWebhook/123/456",
            "https://outlook.office365.com/webhook/abc@def/IncomingWebhook/123/456",
        ],
    )
    def test_accepts_teams_hosts(self, url: str) -> None:
        assert WebhookURLValidator().validate(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.webhook.office.com/webhookb2/abc",
            "http://outlook.office.com/webhook/abc",
            "https://outlook.office.com.attacker.example/webhook/abc",
            "https://attacker.example/?next=https://outlook.office.com/webhook",
        ],
    )
    def test_rejects_other_urls(self, url: str) -> None:
        assert WebhookURLValidator().validate(url) is False

    def test_defaults_are_exposed_in_order(self) -> None:
        assert WebhookURLValidator().patterns == DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS


class TestCustomPatterns:
    def test_added_pattern_extends_defaults(self) -> None:
        validator = WebhookURLValidator()
        validator.add_patterns(r"^https://.*\.domain\.com/.*$")

        assert validator.validate("https://example.domain.com/webhook/1") is True
        assert validator.validate("https://outlook.office.com/webhook/1") is True
        assert len(validator) == len(DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS) + 1

    def test_pattern_must_match_whole_url(self) -> None:
        validator = WebhookURLValidator(patterns=[r"https://hooks\.example\.com/"])

        assert validator.validate("https://hooks.example.com/") is True
        assert validator.validate("https://hooks.example.com/extra") is False

    def test_duplicates_are_ignored(self) -> None:
        validator = WebhookURLValidator(patterns=[])
        validator.add_patterns(r"^https://a\.example/.*$", r"^https://a\.example/.*$")
        validator.add_patterns(r"^https://a\.example/.*$")

        assert validator.patterns == (r"^https://a\.example/.*$",)

    def test_clear_rejects_everything(self) -> None:
        validator = WebhookURLValidator()
        validator.clear()

        assert len(validator) == 0
        assert validator.validate("https://outlook.office.com/webhook/1") is False

    @pytest.mark.parametrize("pattern", ["", "([unclosed"])
    def test_invalid_pattern_raises(self, pattern: str) -> None:
        validator = WebhookURLValidator()

        with pytest.raises(ValueError):
            validator.add_patterns(pattern)
        assert validator.patterns == DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS


class TestMalformedUrls:
    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not a url",
            "outlook.office.com/webhook",
            "https://outlook.office.com/webhook/ abc",
            "https://outlook.office.com/webhook/\nabc",
        ],
    )
    def test_malformed_urls_are_rejected(self, url: str) -> None:
        assert is_well_formed_url(url) is False
        assert WebhookURLValidator(patterns=[r".*"]).validate(url) is False

    def test_well_formed_url(self) -> None:
        assert is_well_formed_url("https://example.com/path?q=1") is True
