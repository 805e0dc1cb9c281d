"""Adaptive Card body elements.

Each element kind is its own dataclass carrying only the fields that kind
uses. Containers own their children directly; nothing points back up the
tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Iterator, List, Optional, Sequence, Set, Union

from ..errors import ActionLimitExceeded, InvalidElementKind
from ..model import Tracked
from .actions import MAX_CARD_ACTIONS, Action, check_action

SIZE_SMALL = "small"
SIZE_DEFAULT = "default"
SIZE_MEDIUM = "medium"
SIZE_LARGE = "large"
SIZE_EXTRA_LARGE = "extraLarge"

WEIGHT_LIGHTER = "lighter"
WEIGHT_DEFAULT = "default"
WEIGHT_BOLDER = "bolder"

TEXT_BLOCK_STYLE_HEADING = "heading"

CONTAINER_STYLES = frozenset({"default", "emphasis", "good", "attention", "warning", "accent"})

HORIZONTAL_ALIGNMENT_LEFT = "left"
HORIZONTAL_ALIGNMENT_CENTER = "center"
HORIZONTAL_ALIGNMENT_RIGHT = "right"

VERTICAL_ALIGNMENT_TOP = "top"
VERTICAL_ALIGNMENT_CENTER = "center"
VERTICAL_ALIGNMENT_BOTTOM = "bottom"


@dataclass(eq=False, kw_only=True)
class Element(Tracked):
    """Base class for every node of a card body."""

    type: ClassVar[str] = ""
    # Elements that may only appear inside a specific parent.
    nested_only: ClassVar[bool] = False

    id: str = ""
    is_visible: bool = True
    separator: bool = False
    spacing: Optional[str] = None

    def validate(self) -> None:
        """Check the fields this element kind cannot do without."""
        return None

    def children(self) -> Sequence["Element"]:
        return ()

    def actions(self) -> Sequence[Action]:
        return ()


def _check_style(style: Optional[str], kind: str) -> None:
    if style is not None and style not in CONTAINER_STYLES:
        raise InvalidElementKind(f"{kind} style {style!r} is not one of {sorted(CONTAINER_STYLES)}")


def check_elements(elements: Iterable[Any], *, allow_nested_only: bool = False) -> List[Element]:
    checked: List[Element] = []
    for element in elements:
        if not isinstance(element, Element):
            raise InvalidElementKind(f"expected an element, got {type(element).__name__}")
        if element.nested_only and not allow_nested_only:
            raise InvalidElementKind(f"{element.type} cannot be added outside of its parent element")
        element.validate()
        checked.append(element)
    return checked


def insert_items(target: List[Any], top_position: bool, items: Sequence[Any]) -> None:
    if not items:
        return
    if top_position:
        target[0:0] = items
    else:
        target.extend(items)


def attach_elements(
    parent: Any,
    target: List[Any],
    top_position: bool,
    elements: Iterable[Any],
    *,
    allow_nested_only: bool = False,
) -> None:
    """Insert ``elements`` into ``target``, the child list of ``parent``.

    An element has a single owner: it may not already sit below ``parent``
    and may not contain ``parent`` itself.
    """
    checked = check_elements(elements, allow_nested_only=allow_nested_only)
    owned = {id(element) for element in walk_elements(target)}
    for element in checked:
        for node in walk_elements([element]):
            if node is parent:
                raise InvalidElementKind(f"{element.type} cannot be added inside itself")
            if id(node) in owned:
                raise InvalidElementKind(f"{node.type} already belongs to this element tree")
            owned.add(id(node))
    insert_items(target, top_position, checked)


@dataclass(eq=False)
class TextBlock(Element):
    type: ClassVar[str] = "TextBlock"

    text: str = ""
    wrap: bool = False
    size: Optional[str] = None
    weight: Optional[str] = None
    color: Optional[str] = None
    is_subtle: bool = False
    max_lines: int = 0
    style: Optional[str] = None
    horizontal_alignment: Optional[str] = None

    def validate(self) -> None:
        if self.max_lines < 0:
            raise InvalidElementKind("TextBlock max_lines cannot be negative")


@dataclass(eq=False)
class Image(Element):
    type: ClassVar[str] = "Image"

    url: str = ""
    alt_text: str = ""
    size: Optional[str] = None
    style: Optional[str] = None

    def validate(self) -> None:
        if not self.url.strip():
            raise InvalidElementKind("Image requires a url")


@dataclass(eq=False)
class Fact(Tracked):
    title: str = ""
    value: str = ""


@dataclass(eq=False)
class FactSet(Element):
    type: ClassVar[str] = "FactSet"

    facts: List[Fact] = field(default_factory=list)

    def add_fact(self, *facts: Fact) -> None:
        for fact in facts:
            if not isinstance(fact, Fact) or not fact.title.strip():
                raise InvalidElementKind("FactSet facts require a title")
        self.facts.extend(facts)

    def validate(self) -> None:
        if not self.facts:
            raise InvalidElementKind("FactSet requires at least one fact")


class _SelectActionMixin:
    select_action: Optional[Action]

    def add_select_action(self, action: Action) -> None:
        self.select_action = check_action(action)


@dataclass(eq=False)
class Container(_SelectActionMixin, Element):
    type: ClassVar[str] = "Container"

    items: List[Element] = field(default_factory=list)
    style: Optional[str] = None
    select_action: Optional[Action] = None
    bleed: bool = False
    vertical_content_alignment: Optional[str] = None
    min_height: Optional[str] = None

    def add_element(self, top_position: bool, *elements: Element) -> None:
        attach_elements(self, self.items, top_position, elements)

    def validate(self) -> None:
        _check_style(self.style, self.type)

    def children(self) -> Sequence[Element]:
        return self.items

    def actions(self) -> Sequence[Action]:
        return (self.select_action,) if self.select_action is not None else ()


@dataclass(eq=False)
class Column(_SelectActionMixin, Element):
    type: ClassVar[str] = "Column"
    nested_only: ClassVar[bool] = True

    items: List[Element] = field(default_factory=list)
    width: Union[str, int, None] = None
    style: Optional[str] = None
    vertical_content_alignment: Optional[str] = None
    select_action: Optional[Action] = None

    def add_element(self, top_position: bool, *elements: Element) -> None:
        attach_elements(self, self.items, top_position, elements)

    def validate(self) -> None:
        _check_style(self.style, self.type)
        if isinstance(self.width, int) and self.width < 0:
            raise InvalidElementKind("Column width cannot be negative")

    def children(self) -> Sequence[Element]:
        return self.items

    def actions(self) -> Sequence[Action]:
        return (self.select_action,) if self.select_action is not None else ()


@dataclass(eq=False)
class ColumnSet(_SelectActionMixin, Element):
    type: ClassVar[str] = "ColumnSet"

    columns: List[Column] = field(default_factory=list)
    style: Optional[str] = None
    select_action: Optional[Action] = None

    def add_column(self, top_position: bool, *columns: Column) -> None:
        for column in columns:
            if not isinstance(column, Column):
                raise InvalidElementKind(f"ColumnSet only holds columns, got {type(column).__name__}")
        attach_elements(self, self.columns, top_position, columns, allow_nested_only=True)

    def validate(self) -> None:
        _check_style(self.style, self.type)
        for column in self.columns:
            if not isinstance(column, Column):
                raise InvalidElementKind(f"ColumnSet only holds columns, got {type(column).__name__}")

    def children(self) -> Sequence[Element]:
        return self.columns

    def actions(self) -> Sequence[Action]:
        return (self.select_action,) if self.select_action is not None else ()


@dataclass(eq=False)
class ActionSet(Element):
    type: ClassVar[str] = "ActionSet"

    items: List[Action] = field(default_factory=list)

    def add_action(self, top_position: bool, *actions: Action) -> None:
        checked = [check_action(action) for action in actions]
        if len(self.items) + len(checked) > MAX_CARD_ACTIONS:
            raise ActionLimitExceeded(
                f"ActionSet holds at most {MAX_CARD_ACTIONS} actions; "
                f"{len(self.items)} present, {len(checked)} requested"
            )
        insert_items(self.items, top_position, checked)

    def validate(self) -> None:
        if not self.items:
            raise InvalidElementKind("ActionSet requires at least one action")
        if len(self.items) > MAX_CARD_ACTIONS:
            raise ActionLimitExceeded(f"ActionSet holds at most {MAX_CARD_ACTIONS} actions, has {len(self.items)}")

    def actions(self) -> Sequence[Action]:
        return self.items


@dataclass(eq=False)
class TableColumnDefinition(Tracked):
    type: ClassVar[str] = "TableColumnDefinition"

    width: Union[str, int] = 1
    horizontal_cell_content_alignment: Optional[str] = None
    vertical_cell_content_alignment: Optional[str] = None


@dataclass(eq=False)
class TableCell(Element):
    type: ClassVar[str] = "TableCell"
    nested_only: ClassVar[bool] = True

    items: List[Element] = field(default_factory=list)
    style: Optional[str] = None

    def add_element(self, top_position: bool, *elements: Element) -> None:
        attach_elements(self, self.items, top_position, elements)

    def validate(self) -> None:
        _check_style(self.style, self.type)

    def children(self) -> Sequence[Element]:
        return self.items


@dataclass(eq=False)
class TableRow(Element):
    type: ClassVar[str] = "TableRow"
    nested_only: ClassVar[bool] = True

    cells: List[TableCell] = field(default_factory=list)
    style: Optional[str] = None

    def validate(self) -> None:
        _check_style(self.style, self.type)
        for cell in self.cells:
            if not isinstance(cell, TableCell):
                raise InvalidElementKind(f"TableRow only holds table cells, got {type(cell).__name__}")

    def children(self) -> Sequence[Element]:
        return self.cells


@dataclass(eq=False)
class Table(Element):
    type: ClassVar[str] = "Table"

    columns: List[TableColumnDefinition] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)
    first_row_as_header: bool = False
    show_grid_lines: bool = True
    grid_style: Optional[str] = None
    horizontal_cell_content_alignment: Optional[str] = None
    vertical_cell_content_alignment: Optional[str] = None

    def validate(self) -> None:
        if not self.columns:
            raise InvalidElementKind("Table requires at least one column definition")
        _check_style(self.grid_style, self.type)
        for row in self.rows:
            if not isinstance(row, TableRow):
                raise InvalidElementKind(f"Table only holds table rows, got {type(row).__name__}")

    def children(self) -> Sequence[Element]:
        return self.rows


def new_text_block(text: str, wrap: bool = False) -> TextBlock:
    return TextBlock(text=text, wrap=wrap)


def new_title_text_block(title: str, wrap: bool = False) -> TextBlock:
    return TextBlock(
        text=title,
        wrap=wrap,
        size=SIZE_LARGE,
        weight=WEIGHT_BOLDER,
        style=TEXT_BLOCK_STYLE_HEADING,
    )


def new_hidden_text_block(text: str, wrap: bool = False) -> TextBlock:
    return TextBlock(text=text, wrap=wrap, is_visible=False)


def new_container(*items: Element) -> Container:
    container = Container()
    container.add_element(False, *items)
    return container


def new_hidden_container(*items: Element) -> Container:
    container = new_container(*items)
    container.is_visible = False
    return container


def new_column(*items: Element, width: Union[str, int, None] = None) -> Column:
    column = Column(width=width)
    column.add_element(False, *items)
    return column


def new_column_set(*columns: Column) -> ColumnSet:
    column_set = ColumnSet()
    column_set.add_column(False, *columns)
    return column_set


def new_image(url: str, alt_text: str = "") -> Image:
    image = Image(url=url, alt_text=alt_text)
    image.validate()
    return image


def new_fact_set(*facts: Fact) -> FactSet:
    fact_set = FactSet()
    fact_set.add_fact(*facts)
    return fact_set


def walk_elements(elements: Sequence[Element]) -> Iterable[Element]:
    """Yield every element below ``elements`` depth-first, children before parents.

    Reaching the same element twice means it is shared between parents or
    contains itself; that raises ``InvalidElementKind``.
    """
    return _walk(elements, set())


def _walk(elements: Sequence[Element], seen: Set[int]) -> Iterator[Element]:
    for element in elements:
        if not isinstance(element, Element):
            continue
        if id(element) in seen:
            raise InvalidElementKind(f"{element.type} appears more than once in the element tree")
        seen.add(id(element))
        yield from _walk(element.children(), seen)
        yield element

