"""Legacy MessageCard message format."""

from __future__ import annotations

from .card import (
    MAX_POTENTIAL_ACTIONS,
    POTENTIAL_ACTION_HTTP_POST,
    POTENTIAL_ACTION_OPEN_URI,
    MessageCard,
    OpenUriTarget,
    PotentialAction,
    Section,
    SectionFact,
    SectionImage,
    new_message_card,
    new_potential_action,
    new_section,
)

__all__ = [
    "MAX_POTENTIAL_ACTIONS",
    "POTENTIAL_ACTION_HTTP_POST",
    "POTENTIAL_ACTION_OPEN_URI",
    "MessageCard",
    "OpenUriTarget",
    "PotentialAction",
    "Section",
    "SectionFact",
    "SectionImage",
    "new_message_card",
    "new_potential_action",
    "new_section",
]
