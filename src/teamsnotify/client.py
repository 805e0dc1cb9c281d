from __future__ import annotations

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from .config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ClientSettings
from .errors import ValidationError, WebhookResponseUnexpected, WebhookTransportError, WebhookURLUnexpected
from .model import PreparedMessage
from .utils import excerpt_response, redact_url
from .validation import WebhookURLValidator

LOGGER = logging.getLogger(__name__)

# Literal body Teams returns when a webhook accepted the message.
EXPECTED_WEBHOOK_RESPONSE_TEXT = "1"

# Raw response text kept on WebhookResponseUnexpected.body.
RESPONSE_BODY_LIMIT = 200


class TeamsClient:
    """Delivers prepared messages to Teams incoming webhooks.

    One ``send`` is one HTTP POST: the URL is checked against the validation
    patterns (unless skipped), the message is prepared if needed, and the
    response is classified. Failures raise; nothing is retried here.

    The client holds no per-message state, so it may be shared between
    threads as long as each thread sends its own message objects.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
        validator: Optional[WebhookURLValidator] = None,
        skip_validation: bool = False,
        proxy_url: Optional[str] = None,
    ) -> None:
        self.set_timeout(timeout)
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.validator = validator or WebhookURLValidator()
        self.skip_validation = skip_validation
        if proxy_url:
            self.set_proxy(proxy_url)

    @classmethod
    def from_settings(cls, settings: ClientSettings, *, session: Optional[requests.Session] = None) -> "TeamsClient":
        validator = WebhookURLValidator(() if settings.replace_default_patterns else None)
        validator.add_patterns(*settings.validation_patterns)
        return cls(
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            session=session,
            validator=validator,
            skip_validation=settings.skip_validation,
            proxy_url=settings.proxy_url,
        )

    def set_user_agent(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def set_timeout(self, timeout: float) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.timeout = float(timeout)

    def set_proxy(self, proxy_url: Optional[str]) -> None:
        """Route requests through ``proxy_url``; ``None`` removes a previously set proxy."""
        if proxy_url is None:
            self.session.proxies.pop("http", None)
            self.session.proxies.pop("https", None)
            return
        self.session.proxies.update({"http": proxy_url, "https": proxy_url})

    def add_webhook_url_validation_patterns(self, *patterns: str) -> None:
        self.validator.add_patterns(*patterns)

    def clear_webhook_url_validation_patterns(self) -> None:
        self.validator.clear()

    def skip_webhook_url_validation_on_send(self, skip: bool) -> None:
        self.skip_validation = skip

    def validate_webhook(self, url: str) -> None:
        if self.validator.validate(url):
            return
        LOGGER.warning("Rejected webhook URL %s: no validation pattern matched", redact_url(url))
        raise WebhookURLUnexpected(
            f"webhook URL {redact_url(url)} does not match any of {len(self.validator)} validation pattern(s)",
            url=url,
        )

    def send(self, url: str, message: PreparedMessage) -> None:
        if not isinstance(message, PreparedMessage):
            raise ValidationError(f"cannot send {type(message).__name__}; expected a card message")

        if not self.skip_validation:
            self.validate_webhook(url)

        payload = message.prepare()

        headers = {"Content-Type": "application/json", "User-Agent": self.user_agent}
        LOGGER.debug("POST %s (%s, %d bytes)", redact_url(url), message.format.value, len(payload))
        try:
            response = self.session.post(url, data=payload, headers=headers, timeout=self.timeout)
        except RequestException as exc:
            LOGGER.warning("Failed to deliver message to %s: %s", redact_url(url), exc)
            raise WebhookTransportError(f"webhook request to {redact_url(url)} failed: {exc}") from exc

        body = (response.text or "")[:RESPONSE_BODY_LIMIT]
        if not 200 <= response.status_code < 300:
            excerpt = excerpt_response(response)
            LOGGER.warning("Webhook %s responded with %s: %s", redact_url(url), response.status_code, excerpt)
            raise WebhookResponseUnexpected(
                f"webhook responded with status {response.status_code}: {excerpt}",
                status_code=response.status_code,
                body=body,
            )
        if response.text != EXPECTED_WEBHOOK_RESPONSE_TEXT:
            excerpt = excerpt_response(response)
            LOGGER.warning("Webhook %s returned unexpected acknowledgement: %s", redact_url(url), excerpt)
            raise WebhookResponseUnexpected(
                f"webhook responded with status {response.status_code} but unexpected body {excerpt!r}; "
                f"expected {EXPECTED_WEBHOOK_RESPONSE_TEXT!r}",
                status_code=response.status_code,
                body=body,
            )
        LOGGER.debug("Webhook %s accepted the message", redact_url(url))
