from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from ..errors import InvalidElementKind, UnresolvedTargetID
from ..model import Tracked

if TYPE_CHECKING:
    from .elements import Element

# Teams renders at most six card level actions.
MAX_CARD_ACTIONS = 6


@dataclass(eq=False, kw_only=True)
class Action(Tracked):
    """Base class for user triggerable card actions."""

    type: ClassVar[str] = ""

    title: str = ""
    id: str = ""

    def validate(self) -> None:
        return None


@dataclass(eq=False)
class OpenUrl(Action):
    type: ClassVar[str] = "Action.OpenUrl"

    url: str = ""

    def validate(self) -> None:
        if not self.url.strip():
            raise InvalidElementKind("Action.OpenUrl requires a url")


@dataclass(eq=False)
class Submit(Action):
    type: ClassVar[str] = "Action.Submit"

    data: Optional[Dict[str, Any]] = None


@dataclass(eq=False)
class TargetElement(Tracked):
    """One toggle target.

    Either ``element_id`` is given explicitly or ``element`` holds the element
    itself, in which case its identifier is read when the message is prepared.
    ``is_visible`` of ``None`` toggles, ``True`` shows and ``False`` hides.
    """

    element_id: str = ""
    element: Optional["Element"] = None
    is_visible: Optional[bool] = None

    @property
    def resolved_id(self) -> str:
        if self.element is not None:
            return self.element.id
        return self.element_id


@dataclass(eq=False)
class ToggleVisibility(Action):
    type: ClassVar[str] = "Action.ToggleVisibility"

    target_elements: List[TargetElement] = field(default_factory=list)

    def add_target_element_id(self, visible: Optional[bool], *element_ids: str) -> None:
        for element_id in element_ids:
            if not isinstance(element_id, str) or not element_id.strip():
                raise UnresolvedTargetID("toggle target element id must be a non-empty string")
        self.target_elements.extend(
            TargetElement(element_id=element_id, is_visible=visible) for element_id in element_ids
        )

    def add_target_element(self, visible: Optional[bool], *elements: "Element") -> None:
        from .elements import Element

        for element in elements:
            if not isinstance(element, Element):
                raise InvalidElementKind(f"toggle target must be an element, got {type(element).__name__}")
        self.target_elements.extend(TargetElement(element=element, is_visible=visible) for element in elements)

    def add_visible_target_element(self, *elements: "Element") -> None:
        self.add_target_element(True, *elements)

    def add_hidden_target_element(self, *elements: "Element") -> None:
        self.add_target_element(False, *elements)

    def validate(self) -> None:
        if not self.target_elements:
            raise InvalidElementKind("Action.ToggleVisibility requires at least one target element")


def check_action(action: Any) -> Action:
    if not isinstance(action, Action):
        raise InvalidElementKind(f"expected an action, got {type(action).__name__}")
    action.validate()
    return action


def new_action_open_url(url: str, title: str = "") -> OpenUrl:
    action = OpenUrl(url=url, title=title)
    action.validate()
    return action


def new_action_submit(title: str = "", data: Optional[Dict[str, Any]] = None) -> Submit:
    return Submit(title=title, data=data)


def new_action_toggle_visibility(title: str = "") -> ToggleVisibility:
    return ToggleVisibility(title=title)
