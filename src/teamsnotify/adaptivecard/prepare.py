"""Validation and serialization of Adaptive Card messages.

Preparation never writes to the model. Mentions are resolved into the
serialized copy, so a message can be prepared again after an edit without
tokens piling up in its text.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Sequence, Tuple

from ..errors import (
    ActionLimitExceeded,
    DuplicateElementID,
    InvalidElementKind,
    InvalidTableShape,
    UnresolvedTargetID,
    ValidationError,
)
from .actions import MAX_CARD_ACTIONS, Action, OpenUrl, Submit, ToggleVisibility, check_action
from .elements import (
    ActionSet,
    Column,
    ColumnSet,
    Container,
    Element,
    FactSet,
    Image,
    Table,
    TableCell,
    TableRow,
    TextBlock,
    walk_elements,
)
from .mentions import MentionRequest, MentionResolver, ResolvedMention

if TYPE_CHECKING:
    from .card import Card, Message

LOGGER = logging.getLogger(__name__)

ResolvedRequests = List[Tuple[MentionRequest, List[ResolvedMention]]]


class Preparer:
    """Turns a :class:`~teamsnotify.adaptivecard.card.Message` into its wire structure.

    Steps, in order: index element ids, check toggle targets, resolve
    mentions, check per-kind required fields, serialize.
    """

    def build(self, message: "Message") -> Dict[str, Any]:
        from .card import ADAPTIVE_CARD_SCHEMA, ADAPTIVE_CARD_TYPE, ATTACHMENT_CONTENT_TYPE, MESSAGE_TYPE

        cards = list(message.cards)
        if not cards:
            raise ValidationError("message has no attached cards")

        for card in cards:
            self._check_toggle_targets(card, self._index_ids(card))

        resolved = self._resolve_mentions(cards)

        for card in cards:
            self._check_card(card)

        attachments = []
        for position, card in enumerate(cards):
            body, rendered = self._render_elements(card.body)
            entities: List[Dict[str, Any]] = []
            for request, mentions in resolved[position]:
                self._apply_mentions(body, rendered, request, mentions)
                entities.extend(mention.entity() for mention in mentions)

            content: Dict[str, Any] = {
                "type": ADAPTIVE_CARD_TYPE,
                "$schema": ADAPTIVE_CARD_SCHEMA,
                "version": card.version,
                "body": body,
            }
            if card.actions:
                content["actions"] = [self._render_action(action) for action in card.actions]
            if card.fallback_text:
                content["fallbackText"] = card.fallback_text
            msteams: Dict[str, Any] = {"entities": entities}
            if card.full_width:
                msteams["width"] = "Full"
            content["msteams"] = msteams

            attachments.append({"contentType": ATTACHMENT_CONTENT_TYPE, "content": content})

        LOGGER.debug("Serialized %d card(s)", len(attachments))
        return {"type": MESSAGE_TYPE, "attachments": attachments}

    # -- id index and toggle targets -------------------------------------

    @staticmethod
    def _index_ids(card: "Card") -> Counter:
        return Counter(element.id for element in walk_elements(card.body) if element.id)

    @staticmethod
    def _toggle_actions(card: "Card") -> Iterable[ToggleVisibility]:
        for action in card.actions:
            if isinstance(action, ToggleVisibility):
                yield action
        for element in walk_elements(card.body):
            for action in element.actions():
                if isinstance(action, ToggleVisibility):
                    yield action

    def _check_toggle_targets(self, card: "Card", ids: Counter) -> None:
        for action in self._toggle_actions(card):
            for target in action.target_elements:
                element_id = target.resolved_id
                if not element_id:
                    raise UnresolvedTargetID(f"toggle action {action.title!r} has a target without an element id")
                count = ids.get(element_id, 0)
                if count == 0:
                    raise UnresolvedTargetID(
                        f"toggle action {action.title!r} targets unknown element id {element_id!r}",
                        element_id=element_id,
                    )
                if count > 1:
                    raise DuplicateElementID(
                        f"toggle action {action.title!r} targets element id {element_id!r} "
                        f"shared by {count} elements",
                        element_id=element_id,
                    )

    # -- mentions --------------------------------------------------------

    @staticmethod
    def _resolve_mentions(cards: Sequence["Card"]) -> Dict[int, ResolvedRequests]:
        queued = sorted(
            ((request.sequence, position, request) for position, card in enumerate(cards) for request in card.mentions),
            key=lambda item: (item[0], item[1]),
        )
        members = {position: {id(element) for element in walk_elements(card.body)} for position, card in enumerate(cards)}

        resolver = MentionResolver()
        resolved: Dict[int, ResolvedRequests] = defaultdict(list)
        for _, position, request in queued:
            if request.target is not None:
                if not isinstance(request.target, TextBlock):
                    raise InvalidElementKind("mention target must be a TextBlock")
                if id(request.target) not in members[position]:
                    raise InvalidElementKind("mention target TextBlock is not part of the card body")
            resolved[position].append((request, resolver.resolve(request)))
        return resolved

    @staticmethod
    def _apply_mentions(
        body: List[Dict[str, Any]],
        rendered: Dict[int, Dict[str, Any]],
        request: MentionRequest,
        mentions: List[ResolvedMention],
    ) -> None:
        tokens = [mention.token for mention in mentions]
        if request.target is not None:
            block = rendered[id(request.target)]
            block["text"] = MentionResolver.insert_tokens(block.get("text", ""), tokens, request.top_position)
            return

        block = {
            "type": TextBlock.type,
            "text": MentionResolver.insert_tokens(request.text, tokens, True),
            "wrap": True,
        }
        if request.top_position:
            body.insert(0, block)
        else:
            body.append(block)

    # -- per-kind checks -------------------------------------------------

    def _check_card(self, card: "Card") -> None:
        if len(card.actions) > MAX_CARD_ACTIONS:
            raise ActionLimitExceeded(f"card holds at most {MAX_CARD_ACTIONS} actions, has {len(card.actions)}")
        for action in card.actions:
            check_action(action)
        self._check_elements(card.body, nested=False)

    def _check_elements(self, elements: Sequence[Any], *, nested: bool) -> None:
        for element in elements:
            if not isinstance(element, Element):
                raise InvalidElementKind(f"expected an element, got {type(element).__name__}")
            if element.nested_only and not nested:
                raise InvalidElementKind(f"{element.type} cannot appear outside of its parent element")
            element.validate()
            for action in element.actions():
                check_action(action)

            if isinstance(element, Table):
                width = len(element.columns)
                for index, row in enumerate(element.rows):
                    if len(row.cells) != width:
                        raise InvalidTableShape(f"table row {index} has {len(row.cells)} cells; expected {width}")

            self._check_elements(element.children(), nested=isinstance(element, (ColumnSet, Table, TableRow)))

    # -- serialization ---------------------------------------------------

    def _render_elements(self, elements: Sequence[Element]) -> Tuple[List[Dict[str, Any]], Dict[int, Dict[str, Any]]]:
        rendered: Dict[int, Dict[str, Any]] = {}
        return [self._render_element(element, rendered) for element in elements], rendered

    def _render_children(self, elements: Sequence[Element], rendered: Dict[int, Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self._render_element(element, rendered) for element in elements]

    def _render_element(self, element: Element, rendered: Dict[int, Dict[str, Any]]) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": element.type}
        if element.id:
            data["id"] = element.id
        if not element.is_visible:
            data["isVisible"] = False
        if element.separator:
            data["separator"] = True
        if element.spacing:
            data["spacing"] = element.spacing

        if isinstance(element, TextBlock):
            data["text"] = element.text
            if element.wrap:
                data["wrap"] = True
            _set_optional(data, "size", element.size)
            _set_optional(data, "weight", element.weight)
            _set_optional(data, "color", element.color)
            if element.is_subtle:
                data["isSubtle"] = True
            if element.max_lines:
                data["maxLines"] = element.max_lines
            _set_optional(data, "style", element.style)
            _set_optional(data, "horizontalAlignment", element.horizontal_alignment)
        elif isinstance(element, Image):
            data["url"] = element.url
            _set_optional(data, "altText", element.alt_text)
            _set_optional(data, "size", element.size)
            _set_optional(data, "style", element.style)
        elif isinstance(element, FactSet):
            data["facts"] = [{"title": fact.title, "value": fact.value} for fact in element.facts]
        elif isinstance(element, Container):
            data["items"] = self._render_children(element.items, rendered)
            _set_optional(data, "style", element.style)
            if element.bleed:
                data["bleed"] = True
            _set_optional(data, "verticalContentAlignment", element.vertical_content_alignment)
            _set_optional(data, "minHeight", element.min_height)
            if element.select_action is not None:
                data["selectAction"] = self._render_action(element.select_action)
        elif isinstance(element, ColumnSet):
            data["columns"] = self._render_children(element.columns, rendered)
            _set_optional(data, "style", element.style)
            if element.select_action is not None:
                data["selectAction"] = self._render_action(element.select_action)
        elif isinstance(element, Column):
            data["items"] = self._render_children(element.items, rendered)
            if element.width is not None:
                data["width"] = element.width
            _set_optional(data, "style", element.style)
            _set_optional(data, "verticalContentAlignment", element.vertical_content_alignment)
            if element.select_action is not None:
                data["selectAction"] = self._render_action(element.select_action)
        elif isinstance(element, ActionSet):
            data["actions"] = [self._render_action(action) for action in element.items]
        elif isinstance(element, Table):
            data["columns"] = [_render_column_definition(column) for column in element.columns]
            data["rows"] = self._render_children(element.rows, rendered)
            data["firstRowAsHeader"] = element.first_row_as_header
            data["showGridLines"] = element.show_grid_lines
            _set_optional(data, "gridStyle", element.grid_style)
            _set_optional(data, "horizontalCellContentAlignment", element.horizontal_cell_content_alignment)
            _set_optional(data, "verticalCellContentAlignment", element.vertical_cell_content_alignment)
        elif isinstance(element, TableRow):
            data["cells"] = self._render_children(element.cells, rendered)
            _set_optional(data, "style", element.style)
        elif isinstance(element, TableCell):
            data["items"] = self._render_children(element.items, rendered)
            _set_optional(data, "style", element.style)
        else:
            raise InvalidElementKind(f"unsupported element kind {type(element).__name__}")

        rendered[id(element)] = data
        return data

    @staticmethod
    def _render_action(action: Action) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": action.type}
        if action.id:
            data["id"] = action.id
        if action.title:
            data["title"] = action.title

        if isinstance(action, OpenUrl):
            data["url"] = action.url
        elif isinstance(action, Submit):
            if action.data is not None:
                data["data"] = dict(action.data)
        elif isinstance(action, ToggleVisibility):
            targets = []
            for target in action.target_elements:
                entry: Dict[str, Any] = {"elementId": target.resolved_id}
                if target.is_visible is not None:
                    entry["isVisible"] = target.is_visible
                targets.append(entry)
            data["targetElements"] = targets
        else:
            raise InvalidElementKind(f"unsupported action kind {type(action).__name__}")
        return data


def _set_optional(data: Dict[str, Any], key: str, value: Any) -> None:
    if value:
        data[key] = value


def _render_column_definition(column: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": "TableColumnDefinition", "width": column.width}
    _set_optional(data, "horizontalCellContentAlignment", column.horizontal_cell_content_alignment)
    _set_optional(data, "verticalCellContentAlignment", column.vertical_cell_content_alignment)
    return data
