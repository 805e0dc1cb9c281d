"""User mentions.

Mentions are queued on a card and only turned into text when the message is
prepared. Each occurrence gets its own placeholder token; the token is
written into the card text and recorded in an entity that binds it to the
mentioned identity.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..errors import EmptyDisplayName, EmptyIdentity
from ..model import Tracked
from .elements import TextBlock

LOGGER = logging.getLogger(__name__)

MENTION_ENTITY_TYPE = "mention"
MENTION_PLACEHOLDER_TEMPLATE = '<at id="{index}">{name}</at>'

_REQUEST_SEQUENCE = itertools.count()


@dataclass(eq=False)
class Mention(Tracked):
    """A person to mention: display name shown in the card plus the identity Teams resolves."""

    display_name: str = ""
    identity: str = ""


@dataclass(eq=False)
class MentionRequest(Tracked):
    """One ``add_mention`` call waiting for resolution.

    Without a ``target`` the tokens (followed by ``text``) become a new
    TextBlock at the head or tail of the card body. With a ``target`` the
    tokens are prepended or appended to that TextBlock's text.
    """

    mentions: List[Mention] = field(default_factory=list)
    top_position: bool = False
    text: str = ""
    target: Optional[TextBlock] = None
    sequence: int = field(default_factory=lambda: next(_REQUEST_SEQUENCE))


@dataclass(frozen=True)
class ResolvedMention:
    token: str
    display_name: str
    identity: str

    def entity(self) -> Dict[str, Any]:
        return {
            "type": MENTION_ENTITY_TYPE,
            "text": self.token,
            "mentioned": {"id": self.identity, "name": self.display_name},
        }


def check_mention(mention: Mention) -> None:
    if not mention.display_name or not mention.display_name.strip():
        raise EmptyDisplayName("mention display name cannot be empty")
    if not mention.identity or not mention.identity.strip():
        raise EmptyIdentity(f"mention identity for {mention.display_name!r} cannot be empty")


class MentionResolver:
    """Hands out placeholder tokens that are unique within one message.

    A fresh resolver is used for every preparation, so indexes restart at 0
    and follow the order in which the mentions were queued.
    """

    def __init__(self, template: str = MENTION_PLACEHOLDER_TEMPLATE) -> None:
        self._template = template
        self._indexes: Iterator[int] = itertools.count()

    def resolve(self, request: MentionRequest) -> List[ResolvedMention]:
        for mention in request.mentions:
            check_mention(mention)

        resolved = [
            ResolvedMention(
                token=self._template.format(index=next(self._indexes), name=mention.display_name),
                display_name=mention.display_name,
                identity=mention.identity,
            )
            for mention in request.mentions
        ]
        LOGGER.debug("Resolved %d mention(s) for request %d", len(resolved), request.sequence)
        return resolved

    @staticmethod
    def insert_tokens(text: str, tokens: Sequence[str], top_position: bool) -> str:
        joined = " ".join(tokens)
        if not text:
            return joined
        if not joined:
            return text
        return f"{joined} {text}" if top_position else f"{text} {joined}"


def new_mention(display_name: str, identity: str) -> Mention:
    mention = Mention(display_name=display_name, identity=identity)
    check_mention(mention)
    return mention
