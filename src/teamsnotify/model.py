"""Mutation tracking shared by both card formats.

Every model node derives from :class:`Tracked`. Assigning a public attribute
stamps the node with a fresh revision from a process-wide clock, and list
attributes are stored as :class:`TrackedList` so in-place edits are stamped
too. A prepared message remembers the highest revision it saw when it
serialized itself; any later stamp anywhere in its tree makes it unprepared
again.
"""

from __future__ import annotations

import itertools
import json
import logging
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Optional, Set

LOGGER = logging.getLogger(__name__)

_CLOCK = itertools.count(1)


def _tick() -> int:
    return next(_CLOCK)


class MessageFormat(str, Enum):
    """Wire format discriminator."""

    ADAPTIVE_CARD = "adaptivecard"
    MESSAGE_CARD = "messagecard"


class TrackedList(list):
    """List that records a new revision whenever it is modified in place."""

    def __init__(self, iterable: Iterable[Any] = ()) -> None:
        super().__init__(iterable)
        self._revision = _tick()

    def _touch(self) -> None:
        self._revision = _tick()

    def append(self, item: Any) -> None:
        super().append(item)
        self._touch()

    def extend(self, items: Iterable[Any]) -> None:
        super().extend(items)
        self._touch()

    def insert(self, index: int, item: Any) -> None:
        super().insert(index, item)
        self._touch()

    def remove(self, item: Any) -> None:
        super().remove(item)
        self._touch()

    def pop(self, index: int = -1) -> Any:
        item = super().pop(index)
        self._touch()
        return item

    def clear(self) -> None:
        super().clear()
        self._touch()

    def sort(self, *args: Any, **kwargs: Any) -> None:
        super().sort(*args, **kwargs)
        self._touch()

    def reverse(self) -> None:
        super().reverse()
        self._touch()

    def __setitem__(self, index: Any, value: Any) -> None:
        super().__setitem__(index, value)
        self._touch()

    def __delitem__(self, index: Any) -> None:
        super().__delitem__(index)
        self._touch()

    def __iadd__(self, items: Iterable[Any]) -> "TrackedList":
        result = super().__iadd__(items)
        self._touch()
        return result

    def __imul__(self, count: int) -> "TrackedList":
        result = super().__imul__(count)
        self._touch()
        return result


class Tracked:
    """Base class for model nodes whose edits invalidate a prepared payload.

    Attributes starting with an underscore are bookkeeping and are not stamped.
    """

    _revision: int = 0

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        if isinstance(value, list) and not isinstance(value, TrackedList):
            value = TrackedList(value)
        object.__setattr__(self, name, value)
        object.__setattr__(self, "_revision", _tick())

    def latest_revision(self) -> int:
        """Return the newest revision stamped anywhere below this node."""
        return _latest_revision(self, set())


def _latest_revision(node: Any, seen: Set[int]) -> int:
    if isinstance(node, Tracked):
        children: Iterable[Any] = vars(node).values()
    elif isinstance(node, TrackedList):
        children = node
    elif isinstance(node, dict):
        children = node.values()
    else:
        return 0

    marker = id(node)
    if marker in seen:
        return 0
    seen.add(marker)

    latest = getattr(node, "_revision", 0)
    for child in children:
        latest = max(latest, _latest_revision(child, seen))
    return latest


class PreparedMessage(Tracked):
    """Unprepared/Prepared state machine shared by the message formats.

    Subclasses implement :meth:`_build_document`, which validates the model and
    returns the JSON-ready wire structure without modifying the model.
    """

    format: ClassVar[MessageFormat]

    _payload: Optional[bytes] = None
    _prepared_revision: int = -1

    @property
    def prepared(self) -> bool:
        if self._payload is None:
            return False
        return self.latest_revision() <= self._prepared_revision

    @property
    def payload(self) -> Optional[bytes]:
        """Serialized payload, or ``None`` while the message is unprepared."""
        if not self.prepared:
            return None
        return self._payload

    def prepare(self) -> bytes:
        """Validate and serialize the message once and return the payload.

        Calling it again without modifying the message returns the cached
        bytes. On failure the message is left unprepared and any stale payload
        is discarded.
        """
        cached = self._payload
        if cached is not None and self.prepared:
            LOGGER.debug("%s already prepared; reusing cached payload", type(self).__name__)
            return cached

        revision = self.latest_revision()
        self._payload = None
        document = self._build_document()
        payload = json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        self._payload = payload
        self._prepared_revision = revision
        LOGGER.debug("Prepared %s payload (%d bytes)", self.format.value, len(payload))
        return payload

    def pretty_print(self) -> str:
        """Return the prepared payload as indented JSON."""
        return json.dumps(json.loads(self.prepare()), indent=2, ensure_ascii=False)

    def _build_document(self) -> Dict[str, Any]:
        raise NotImplementedError
