from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator

from .utils import env_bool, env_list, load_yaml_file
from .version import __version__

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
DEFAULT_USER_AGENT = f"teamsnotify/{__version__}"

ENV_WEBHOOK_URL = "TEAMSNOTIFY_WEBHOOK_URL"
ENV_WEBHOOK_URL_FALLBACK = "WEBHOOK_URL"
ENV_TIMEOUT = "TEAMSNOTIFY_TIMEOUT"
ENV_USER_AGENT = "TEAMSNOTIFY_USER_AGENT"
ENV_PROXY = "TEAMSNOTIFY_PROXY"
ENV_SKIP_VALIDATION = "TEAMSNOTIFY_SKIP_VALIDATION"
ENV_VALIDATION_PATTERNS = "TEAMSNOTIFY_VALIDATION_PATTERNS"

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "webhook_url": {"type": ["string", "null"]},
        "timeout": {"type": "number", "exclusiveMinimum": 0},
        "user_agent": {"type": "string", "minLength": 1},
        "proxy_url": {"type": ["string", "null"]},
        "skip_validation": {"type": "boolean"},
        "validation": {
            "type": "object",
            "properties": {
                "patterns": {"type": "array", "items": {"type": "string", "minLength": 1}},
                "replace_defaults": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


@dataclass
class ClientSettings:
    webhook_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    proxy_url: Optional[str] = None
    skip_validation: bool = False
    validation_patterns: List[str] = field(default_factory=list)
    replace_default_patterns: bool = False  # Drop the built-in Teams patterns before adding custom ones


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    parts: List[str] = []
    for element in path:
        if isinstance(element, int):
            parts.append(f"[{element}]")
        else:
            parts.append(f".{element}" if parts else str(element))
    return "".join(parts) or "<root>"


def validate_settings_data(data: Dict[str, Any]) -> List[str]:
    """Return one message per schema violation, sorted by location."""
    validator = Draft7Validator(SETTINGS_SCHEMA)
    issues = []
    for error in sorted(validator.iter_errors(data), key=lambda item: list(item.absolute_path)):
        issues.append(f"{_format_jsonschema_path(error.absolute_path)}: {error.message}")
    return issues


def _build_settings(data: Dict[str, Any]) -> ClientSettings:
    validation = data.get("validation", {}) or {}
    return ClientSettings(
        webhook_url=data.get("webhook_url") or None,
        timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
        proxy_url=data.get("proxy_url") or None,
        skip_validation=bool(data.get("skip_validation", False)),
        validation_patterns=list(validation.get("patterns", []) or []),
        replace_default_patterns=bool(validation.get("replace_defaults", False)),
    )


def _apply_env_overrides(settings: ClientSettings) -> ClientSettings:
    webhook_url = os.getenv(ENV_WEBHOOK_URL) or os.getenv(ENV_WEBHOOK_URL_FALLBACK)
    if webhook_url:
        settings.webhook_url = webhook_url.strip()

    raw_timeout = os.getenv(ENV_TIMEOUT)
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"{ENV_TIMEOUT} must be a number of seconds, got {raw_timeout!r}") from exc
        if timeout <= 0:
            raise ValueError(f"{ENV_TIMEOUT} must be positive, got {raw_timeout!r}")
        settings.timeout = timeout

    user_agent = os.getenv(ENV_USER_AGENT)
    if user_agent:
        settings.user_agent = user_agent

    proxy_url = os.getenv(ENV_PROXY)
    if proxy_url:
        settings.proxy_url = proxy_url

    skip_validation = env_bool(ENV_SKIP_VALIDATION)
    if skip_validation is not None:
        settings.skip_validation = skip_validation

    patterns = env_list(ENV_VALIDATION_PATTERNS)
    if patterns:
        settings.validation_patterns.extend(patterns)

    return settings


def load_settings(path: Optional[Path] = None) -> ClientSettings:
    """Load client settings from an optional YAML file, then apply environment overrides."""
    data: Dict[str, Any] = {}
    if path is not None:
        data = load_yaml_file(path)
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping of settings")
        issues = validate_settings_data(data)
        if issues:
            raise ValueError(f"Invalid settings in {path}:\n  " + "\n  ".join(issues))
        LOGGER.debug("Loaded client settings from %s", path)

    return _apply_env_overrides(_build_settings(data))
