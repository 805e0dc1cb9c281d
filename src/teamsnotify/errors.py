from __future__ import annotations

from typing import Optional


class TeamsNotifyError(Exception):
    """Base class for every error raised by teamsnotify."""


class ValidationError(TeamsNotifyError, ValueError):
    """Raised when a message or webhook URL fails local validation.

    Validation happens before any network I/O and never partially applies.
    """


class InvalidElementKind(ValidationError):
    """An element or action is missing a required field or is placed where its kind is not allowed."""


class ActionLimitExceeded(ValidationError):
    """Adding the action would exceed the format-specific action cap."""


class InvalidTableShape(ValidationError):
    """Table rows do not agree with the declared or inferred column count."""


class EmptyIdentity(ValidationError):
    """A mention was queued without an identity string."""


class EmptyDisplayName(ValidationError):
    """A mention was queued without a display name."""


class UnresolvedTargetID(ValidationError):
    """A toggle visibility target does not match any element in the card."""

    def __init__(self, message: str, element_id: str = "") -> None:
        super().__init__(message)
        self.element_id = element_id


class DuplicateElementID(UnresolvedTargetID):
    """A toggle visibility target matches more than one element in the card."""


class WebhookURLUnexpected(ValidationError):
    """Webhook URL is malformed or matches none of the validation patterns."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class DeliveryError(TeamsNotifyError):
    """Base class for failures that happen after the payload left the process."""


class WebhookTransportError(DeliveryError):
    """The HTTP exchange failed before a response was received."""


class WebhookResponseUnexpected(DeliveryError):
    """The webhook answered with a non-2xx status or an unexpected acknowledgement."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
