from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Any, List, Optional

from ..errors import ActionLimitExceeded, InvalidElementKind, ValidationError
from ..model import MessageFormat, PreparedMessage, Tracked
from .actions import MAX_CARD_ACTIONS, Action, check_action
from .elements import (
    Container,
    Element,
    TextBlock,
    attach_elements,
    insert_items,
    new_text_block,
    new_title_text_block,
)
from .mentions import Mention, MentionRequest

LOGGER = logging.getLogger(__name__)

MESSAGE_TYPE = "message"
ATTACHMENT_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
ADAPTIVE_CARD_TYPE = "AdaptiveCard"
ADAPTIVE_CARD_SCHEMA = "http://adaptivecards.io/schemas/adaptive-card.json"
ADAPTIVE_CARD_VERSION = "1.5"


@dataclass(eq=False)
class Card(Tracked):
    """A single Adaptive Card: a body of elements, card level actions and queued mentions."""

    body: List[Element] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    mentions: List[MentionRequest] = field(default_factory=list)
    version: str = ADAPTIVE_CARD_VERSION
    full_width: bool = False
    fallback_text: str = ""

    def add_element(self, top_position: bool, *elements: Element) -> None:
        attach_elements(self, self.body, top_position, elements)

    def add_container(self, top_position: bool, container: Container) -> None:
        if not isinstance(container, Container):
            raise InvalidElementKind(f"expected a Container, got {type(container).__name__}")
        self.add_element(top_position, container)

    def add_action(self, top_position: bool, *actions: Action) -> None:
        checked = [check_action(action) for action in actions]
        if len(self.actions) + len(checked) > MAX_CARD_ACTIONS:
            raise ActionLimitExceeded(
                f"card holds at most {MAX_CARD_ACTIONS} actions; "
                f"{len(self.actions)} present, {len(checked)} requested"
            )
        insert_items(self.actions, top_position, checked)

    def add_mention(
        self,
        top_position: bool,
        *mentions: Mention,
        text: str = "",
        target: Optional[TextBlock] = None,
    ) -> None:
        """Queue mentions; their tokens are written into the card when the message is prepared."""
        if not mentions:
            raise ValidationError("add_mention requires at least one mention")
        for mention in mentions:
            if not isinstance(mention, Mention):
                raise InvalidElementKind(f"expected a Mention, got {type(mention).__name__}")
        if target is not None and not isinstance(target, TextBlock):
            raise InvalidElementKind(f"mention target must be a TextBlock, got {type(target).__name__}")
        self.mentions.append(
            MentionRequest(mentions=list(mentions), top_position=top_position, text=text, target=target)
        )


@dataclass(eq=False)
class Message(PreparedMessage):
    """Rich format envelope holding one or more attached Adaptive Cards."""

    format: ClassVar[MessageFormat] = MessageFormat.ADAPTIVE_CARD

    cards: List[Card] = field(default_factory=list)

    def attach(self, *cards: Card) -> None:
        for card in cards:
            if not isinstance(card, Card):
                raise InvalidElementKind(f"only cards can be attached, got {type(card).__name__}")
        self.cards.extend(cards)

    def mention(self, top_position: bool, display_name: str, identity: str, text: str = "") -> None:
        """Queue a mention, followed by ``text``, on the first attached card."""
        if not self.cards:
            self.attach(Card())
        self.cards[0].add_mention(
            top_position,
            Mention(display_name=display_name, identity=identity),
            text=text,
        )

    def _build_document(self) -> Dict[str, Any]:
        from .prepare import Preparer

        return Preparer().build(self)


def new_card() -> Card:
    return Card()


def new_text_block_card(text: str, title: str = "", wrap: bool = True) -> Card:
    if not text:
        raise InvalidElementKind("card text cannot be empty")
    card = Card()
    if title:
        card.add_element(False, new_title_text_block(title, wrap))
    card.add_element(False, new_text_block(text, wrap))
    return card


def new_message() -> Message:
    return Message()


def new_message_from_card(card: Card) -> Message:
    message = Message()
    message.attach(card)
    return message


def new_simple_message(text: str, title: str = "", wrap: bool = True) -> Message:
    return new_message_from_card(new_text_block_card(text, title, wrap))


def new_mention_message(display_name: str, identity: str, text: str = "") -> Message:
    message = Message()
    message.mention(True, display_name, identity, text)
    return message
