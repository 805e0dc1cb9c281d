"""Adaptive Card ("rich") message format.

Public API:
    - Message / Card: envelope and card containers
    - Element variants: TextBlock, Image, FactSet, Container, ColumnSet, Column,
      ActionSet, Table, TableRow, TableCell
    - Action variants: OpenUrl, Submit, ToggleVisibility
    - Mention: user mention queued on a card and resolved at preparation time
    - Table builders: new_table_from_values, new_table_from_table_cells,
      new_table_with_grid_from_table_cells, new_table_cells_with_text_block
"""

from __future__ import annotations

from .actions import (
    MAX_CARD_ACTIONS,
    Action,
    OpenUrl,
    Submit,
    TargetElement,
    ToggleVisibility,
    new_action_open_url,
    new_action_submit,
    new_action_toggle_visibility,
)
from .card import (
    ADAPTIVE_CARD_SCHEMA,
    ADAPTIVE_CARD_VERSION,
    ATTACHMENT_CONTENT_TYPE,
    Card,
    Message,
    new_card,
    new_mention_message,
    new_message,
    new_message_from_card,
    new_simple_message,
    new_text_block_card,
)
from .elements import (
    ActionSet,
    Column,
    ColumnSet,
    Container,
    Element,
    Fact,
    FactSet,
    Image,
    Table,
    TableCell,
    TableColumnDefinition,
    TableRow,
    TextBlock,
    new_column,
    new_column_set,
    new_container,
    new_fact_set,
    new_hidden_container,
    new_hidden_text_block,
    new_image,
    new_text_block,
    new_title_text_block,
)
from .mentions import Mention, MentionResolver, new_mention
from .prepare import Preparer
from .tables import (
    new_table_cells_with_text_block,
    new_table_from_table_cells,
    new_table_from_values,
    new_table_with_grid_from_table_cells,
)

__all__ = [
    # Envelope
    "ADAPTIVE_CARD_SCHEMA",
    "ADAPTIVE_CARD_VERSION",
    "ATTACHMENT_CONTENT_TYPE",
    "Card",
    "Message",
    "Preparer",
    "new_card",
    "new_mention_message",
    "new_message",
    "new_message_from_card",
    "new_simple_message",
    "new_text_block_card",
    # Elements
    "ActionSet",
    "Column",
    "ColumnSet",
    "Container",
    "Element",
    "Fact",
    "FactSet",
    "Image",
    "Table",
    "TableCell",
    "TableColumnDefinition",
    "TableRow",
    "TextBlock",
    "new_column",
    "new_column_set",
    "new_container",
    "new_fact_set",
    "new_hidden_container",
    "new_hidden_text_block",
    "new_image",
    "new_text_block",
    "new_title_text_block",
    # Actions
    "MAX_CARD_ACTIONS",
    "Action",
    "OpenUrl",
    "Submit",
    "TargetElement",
    "ToggleVisibility",
    "new_action_open_url",
    "new_action_submit",
    "new_action_toggle_visibility",
    # Mentions
    "Mention",
    "MentionResolver",
    "new_mention",
    # Tables
    "new_table_cells_with_text_block",
    "new_table_from_table_cells",
    "new_table_from_values",
    "new_table_with_grid_from_table_cells",
]
