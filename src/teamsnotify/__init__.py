"""Microsoft Teams incoming webhook notifications.

The package is organized into focused modules:

- **adaptivecard**: Adaptive Card messages, elements, actions, mentions and tables
- **messagecard**: the legacy MessageCard format
- **client**: ``TeamsClient``, which validates webhook URLs and delivers messages
- **validation**: webhook URL pattern matching
- **config**: ``ClientSettings`` loaded from YAML and environment variables
- **cli**: the ``teamsnotify`` command line tool

Build a message, then hand it to a client::

    from teamsnotify import TeamsClient
    from teamsnotify.adaptivecard import new_simple_message

    TeamsClient().send(webhook_url, new_simple_message("Deploy finished", title="CI"))
"""

from . import adaptivecard, messagecard
from .client import TeamsClient
from .config import ClientSettings, load_settings
from .errors import (
    ActionLimitExceeded,
    DeliveryError,
    DuplicateElementID,
    EmptyDisplayName,
    EmptyIdentity,
    InvalidElementKind,
    InvalidTableShape,
    TeamsNotifyError,
    UnresolvedTargetID,
    ValidationError,
    WebhookResponseUnexpected,
    WebhookTransportError,
    WebhookURLUnexpected,
)
from .model import MessageFormat, PreparedMessage
from .validation import DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS, WebhookURLValidator
from .version import __version__

__all__ = [
    "__version__",
    "adaptivecard",
    "messagecard",
    "TeamsClient",
    "ClientSettings",
    "load_settings",
    "MessageFormat",
    "PreparedMessage",
    "DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS",
    "WebhookURLValidator",
    # Errors
    "TeamsNotifyError",
    "ValidationError",
    "InvalidElementKind",
    "ActionLimitExceeded",
    "InvalidTableShape",
    "EmptyIdentity",
    "EmptyDisplayName",
    "UnresolvedTargetID",
    "DuplicateElementID",
    "WebhookURLUnexpected",
    "DeliveryError",
    "WebhookTransportError",
    "WebhookResponseUnexpected",
]
