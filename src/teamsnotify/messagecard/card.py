"""Legacy MessageCard ("connector card") format.

A MessageCard is a flat document: title, text, theme colour, a list of
sections and a list of potential actions. It is its own envelope, so the
card itself is the prepared message.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from ..errors import ActionLimitExceeded, InvalidElementKind, ValidationError
from ..model import MessageFormat, PreparedMessage, Tracked

LOGGER = logging.getLogger(__name__)

MESSAGE_CARD_TYPE = "MessageCard"
MESSAGE_CARD_CONTEXT = "https://schema.org/extensions"

# Teams renders at most four potential actions per card and per section.
MAX_POTENTIAL_ACTIONS = 4

POTENTIAL_ACTION_OPEN_URI = "OpenUri"
POTENTIAL_ACTION_HTTP_POST = "HttpPOST"
POTENTIAL_ACTION_TYPES = frozenset({POTENTIAL_ACTION_OPEN_URI, POTENTIAL_ACTION_HTTP_POST})

OPEN_URI_OPERATING_SYSTEMS = frozenset({"default", "iOS", "android", "windows"})

_THEME_COLOR_PATTERN = re.compile(r"#?[0-9A-Fa-f]{6}")


@dataclass(eq=False)
class OpenUriTarget(Tracked):
    uri: str = ""
    os: str = "default"


@dataclass(eq=False)
class PotentialAction(Tracked):
    type: str = POTENTIAL_ACTION_OPEN_URI
    name: str = ""
    targets: List[OpenUriTarget] = field(default_factory=list)
    target: str = ""
    body: str = ""
    body_content_type: str = "application/json"

    def add_target(self, uri: str, os: str = "default") -> None:
        self.targets.append(OpenUriTarget(uri=uri, os=os))

    def validate(self) -> None:
        if self.type not in POTENTIAL_ACTION_TYPES:
            raise InvalidElementKind(f"unsupported potential action type {self.type!r}")
        if not self.name.strip():
            raise InvalidElementKind(f"{self.type} action requires a name")
        if self.type == POTENTIAL_ACTION_OPEN_URI:
            if not self.targets:
                raise InvalidElementKind(f"OpenUri action {self.name!r} requires at least one target")
            for target in self.targets:
                if not target.uri.strip():
                    raise InvalidElementKind(f"OpenUri action {self.name!r} has a target without a uri")
                if target.os not in OPEN_URI_OPERATING_SYSTEMS:
                    raise InvalidElementKind(f"OpenUri target os {target.os!r} is not supported")
        elif not self.target.strip():
            raise InvalidElementKind(f"HttpPOST action {self.name!r} requires a target url")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"@type": self.type, "name": self.name}
        if self.type == POTENTIAL_ACTION_OPEN_URI:
            data["targets"] = [{"os": target.os, "uri": target.uri} for target in self.targets]
        else:
            data["target"] = self.target
            if self.body:
                data["body"] = self.body
                data["bodyContentType"] = self.body_content_type
        return data


def _add_potential_actions(existing: List[PotentialAction], actions: tuple, owner: str) -> None:
    for action in actions:
        if not isinstance(action, PotentialAction):
            raise InvalidElementKind(f"expected a PotentialAction, got {type(action).__name__}")
        action.validate()
    if len(existing) + len(actions) > MAX_POTENTIAL_ACTIONS:
        raise ActionLimitExceeded(
            f"{owner} holds at most {MAX_POTENTIAL_ACTIONS} potential actions; "
            f"{len(existing)} present, {len(actions)} requested"
        )
    existing.extend(actions)


def _check_potential_actions(actions: List[PotentialAction], owner: str) -> None:
    if len(actions) > MAX_POTENTIAL_ACTIONS:
        raise ActionLimitExceeded(f"{owner} holds at most {MAX_POTENTIAL_ACTIONS} potential actions, has {len(actions)}")
    for action in actions:
        if not isinstance(action, PotentialAction):
            raise InvalidElementKind(f"expected a PotentialAction, got {type(action).__name__}")
        action.validate()


@dataclass(eq=False)
class SectionFact(Tracked):
    name: str = ""
    value: str = ""


@dataclass(eq=False)
class SectionImage(Tracked):
    image: str = ""
    title: str = ""


@dataclass(eq=False)
class Section(Tracked):
    title: str = ""
    text: str = ""
    activity_title: str = ""
    activity_subtitle: str = ""
    activity_text: str = ""
    activity_image: str = ""
    hero_image: Optional[SectionImage] = None
    facts: List[SectionFact] = field(default_factory=list)
    images: List[SectionImage] = field(default_factory=list)
    potential_actions: List[PotentialAction] = field(default_factory=list)
    markdown: bool = True
    start_group: bool = False

    def add_fact(self, *facts: SectionFact) -> None:
        for fact in facts:
            if not isinstance(fact, SectionFact) or not fact.name.strip():
                raise InvalidElementKind("section facts require a name")
        self.facts.extend(facts)

    def add_fact_from_key_value(self, key: str, *values: str) -> None:
        self.add_fact(SectionFact(name=key, value=", ".join(values)))

    def add_image(self, *images: SectionImage) -> None:
        for image in images:
            if not isinstance(image, SectionImage) or not image.image.strip():
                raise InvalidElementKind("section images require an image url")
        self.images.extend(images)

    def add_hero_image(self, url: str, title: str = "") -> None:
        if not url.strip():
            raise InvalidElementKind("hero image requires an image url")
        self.hero_image = SectionImage(image=url, title=title)

    def add_potential_action(self, *actions: PotentialAction) -> None:
        _add_potential_actions(self.potential_actions, actions, "section")

    def validate(self) -> None:
        _check_potential_actions(self.potential_actions, "section")
        for fact in self.facts:
            if not fact.name.strip():
                raise InvalidElementKind("section facts require a name")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, value in (
            ("title", self.title),
            ("text", self.text),
            ("activityTitle", self.activity_title),
            ("activitySubtitle", self.activity_subtitle),
            ("activityText", self.activity_text),
            ("activityImage", self.activity_image),
        ):
            if value:
                data[key] = value
        if self.hero_image is not None:
            data["heroImage"] = {"image": self.hero_image.image, "title": self.hero_image.title}
        if self.facts:
            data["facts"] = [{"name": fact.name, "value": fact.value} for fact in self.facts]
        if self.images:
            data["images"] = [{"image": image.image, "title": image.title} for image in self.images]
        if self.potential_actions:
            data["potentialAction"] = [action.to_dict() for action in self.potential_actions]
        data["markdown"] = self.markdown
        if self.start_group:
            data["startGroup"] = True
        return data


@dataclass(eq=False)
class MessageCard(PreparedMessage):
    format: ClassVar[MessageFormat] = MessageFormat.MESSAGE_CARD

    title: str = ""
    text: str = ""
    summary: str = ""
    theme_color: str = ""
    sections: List[Section] = field(default_factory=list)
    potential_actions: List[PotentialAction] = field(default_factory=list)

    def add_section(self, *sections: Section) -> None:
        for section in sections:
            if not isinstance(section, Section):
                raise InvalidElementKind(f"expected a Section, got {type(section).__name__}")
            section.validate()
        self.sections.extend(sections)

    def add_potential_action(self, *actions: PotentialAction) -> None:
        _add_potential_actions(self.potential_actions, actions, "message card")

    def _build_document(self) -> Dict[str, Any]:
        if not self.text.strip() and not self.summary.strip():
            raise ValidationError("message card requires text or summary")
        if self.theme_color and not _THEME_COLOR_PATTERN.fullmatch(self.theme_color):
            raise InvalidElementKind(f"theme color {self.theme_color!r} is not a hex colour")
        _check_potential_actions(self.potential_actions, "message card")
        for section in self.sections:
            if not isinstance(section, Section):
                raise InvalidElementKind(f"expected a Section, got {type(section).__name__}")
            section.validate()

        data: Dict[str, Any] = {"@type": MESSAGE_CARD_TYPE, "@context": MESSAGE_CARD_CONTEXT}
        for key, value in (
            ("summary", self.summary),
            ("title", self.title),
            ("text", self.text),
            ("themeColor", self.theme_color),
        ):
            if value:
                data[key] = value
        if self.sections:
            data["sections"] = [section.to_dict() for section in self.sections]
        if self.potential_actions:
            data["potentialAction"] = [action.to_dict() for action in self.potential_actions]
        return data


def new_message_card(title: str = "", text: str = "", theme_color: str = "") -> MessageCard:
    return MessageCard(title=title, text=text, theme_color=theme_color)


def new_section() -> Section:
    return Section()


def new_potential_action(action_type: str, name: str) -> PotentialAction:
    if action_type not in POTENTIAL_ACTION_TYPES:
        raise InvalidElementKind(f"unsupported potential action type {action_type!r}")
    if not name.strip():
        raise InvalidElementKind(f"{action_type} action requires a name")
    return PotentialAction(type=action_type, name=name)
