"""Webhook URL validation.

A URL is accepted when at least one pattern matches the *whole* URL, so a
host such as ``outlook.office.com.attacker.example`` does not slip through
on a matching prefix.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Pattern, Tuple
from urllib.parse import urlsplit

LOGGER = logging.getLogger(__name__)

DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS: Tuple[str, ...] = (
    r"^https://outlook\.office\.com/.*$",
    r"^https://outlook\.office365\.com/.*$",
)

_CONTROL_OR_SPACE = re.compile(r"[\x00-\x20\x7f]")


def is_well_formed_url(url: str) -> bool:
    """Return True when ``url`` parses into a scheme and host without stray whitespace."""
    if not isinstance(url, str) or not url:
        return False
    if _CONTROL_OR_SPACE.search(url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


class WebhookURLValidator:
    """Ordered, de-duplicated set of regular expressions describing accepted webhook URLs."""

    def __init__(self, patterns: Optional[Iterable[str]] = None) -> None:
        self._patterns: List[Tuple[str, Pattern[str]]] = []
        self.add_patterns(*(DEFAULT_WEBHOOK_URL_VALIDATION_PATTERNS if patterns is None else patterns))

    @property
    def patterns(self) -> Tuple[str, ...]:
        return tuple(source for source, _ in self._patterns)

    def add_patterns(self, *patterns: str) -> None:
        """Append patterns, skipping exact repeats. Invalid expressions raise ``ValueError``."""
        compiled: List[Tuple[str, Pattern[str]]] = []
        known = set(self.patterns)
        for pattern in patterns:
            if not isinstance(pattern, str) or not pattern:
                raise ValueError("webhook URL validation pattern must be a non-empty string")
            if pattern in known:
                continue
            try:
                compiled.append((pattern, re.compile(pattern)))
            except re.error as exc:
                raise ValueError(f"invalid webhook URL validation pattern {pattern!r}: {exc}") from exc
            known.add(pattern)
        self._patterns.extend(compiled)

    def clear(self) -> None:
        self._patterns.clear()

    def validate(self, url: str) -> bool:
        if not is_well_formed_url(url):
            LOGGER.debug("Webhook URL is malformed")
            return False
        for source, pattern in self._patterns:
            if pattern.fullmatch(url):
                LOGGER.debug("Webhook URL accepted by pattern %s", source)
                return True
        return False

    def __len__(self) -> int:
        return len(self._patterns)
