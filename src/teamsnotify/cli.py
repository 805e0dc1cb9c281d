from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

import yaml
from rich.console import Console

from .adaptivecard import Mention, new_action_open_url, new_message_from_card, new_text_block_card
from .client import TeamsClient
from .config import (
    ENV_PROXY,
    ENV_SKIP_VALIDATION,
    ENV_TIMEOUT,
    ENV_USER_AGENT,
    ENV_VALIDATION_PATTERNS,
    ENV_WEBHOOK_URL,
    load_settings,
)
from .errors import DeliveryError, ValidationError
from .help_formatter import CommandHelp, formatter_for
from .messagecard import POTENTIAL_ACTION_OPEN_URI, new_message_card, new_potential_action
from .model import MessageFormat, PreparedMessage
from .utils import redact_url
from .version import __version__

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_DELIVERY = 2

SEND_HELP = CommandHelp(
    examples=[
        (
            "Send a titled notification",
            'teamsnotify send https://outlook.office.com/webhook/... --title "Deploy" --text "v1.2 is live"',
        ),
        (
            "Mention a user and add a link button",
            'teamsnotify send --text "Build failed" --mention "Ada=ada@example.com" '
            '--open-url "Logs=https://ci.example.com/42"',
        ),
        (
            "Preview the payload without sending",
            'teamsnotify send --text "hello" --format messagecard --theme-color "#0078D7" --dry-run',
        ),
    ],
    env_vars=[
        (ENV_WEBHOOK_URL, "Webhook URL used when none is given on the command line"),
        (ENV_TIMEOUT, "Request timeout in seconds (default 5)"),
        (ENV_USER_AGENT, "User-Agent header sent with each request"),
        (ENV_PROXY, "Proxy URL for HTTP and HTTPS requests"),
        (ENV_SKIP_VALIDATION, "Set to true to send to any webhook URL"),
        (ENV_VALIDATION_PATTERNS, "Comma separated extra URL patterns"),
    ],
    tips=[
        "Patterns must match the whole webhook URL, e.g. ^https://.*\\.example\\.com/.*$",
        "Mentions are only supported by the adaptivecard format",
    ],
)


def _key_value(raw: str) -> Tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip() or not value.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {raw!r}")
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="teamsnotify", description="Send notifications to Microsoft Teams webhooks.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser(
        "send",
        help="Send a message to an incoming webhook",
        description="Build a message from the given options and deliver it to a Teams webhook.",
        formatter_class=formatter_for(SEND_HELP),
    )
    send.add_argument("webhook_url", nargs="?", help=f"Webhook URL (defaults to ${ENV_WEBHOOK_URL})")
    send.add_argument("--text", required=True, help="Message body")
    send.add_argument("--title", default="", help="Message title")
    send.add_argument(
        "--format",
        dest="message_format",
        choices=[item.value for item in MessageFormat],
        default=MessageFormat.ADAPTIVE_CARD.value,
        help="Payload format (default: adaptivecard)",
    )
    send.add_argument(
        "--mention",
        dest="mentions",
        action="append",
        type=_key_value,
        default=[],
        metavar="NAME=ID",
        help="Mention a user; repeatable",
    )
    send.add_argument(
        "--open-url",
        dest="links",
        action="append",
        type=_key_value,
        default=[],
        metavar="LABEL=URL",
        help="Add a button opening URL; repeatable",
    )
    send.add_argument("--theme-color", default="", help="Hex accent colour (messagecard only)")
    send.add_argument("--full-width", action="store_true", help="Render the card at full width (adaptivecard only)")
    send.add_argument("--config", type=Path, help="YAML file with client settings")
    send.add_argument("--timeout", type=float, help="Request timeout in seconds")
    send.add_argument("--user-agent", help="User-Agent header value")
    send.add_argument("--proxy", help="Proxy URL")
    send.add_argument("--skip-validation", action="store_true", help="Do not check the webhook URL against patterns")
    send.add_argument(
        "--pattern",
        dest="patterns",
        action="append",
        default=[],
        help="Additional webhook URL pattern; repeatable",
    )
    send.add_argument("--dry-run", action="store_true", help="Print the payload instead of sending it")
    send.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s\n%(message)s\n",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_message(args: argparse.Namespace) -> PreparedMessage:
    if args.message_format == MessageFormat.MESSAGE_CARD.value:
        if args.mentions:
            raise ValidationError("mentions are only supported by the adaptivecard format")
        card = new_message_card(title=args.title, text=args.text, theme_color=args.theme_color)
        for label, url in args.links:
            action = new_potential_action(POTENTIAL_ACTION_OPEN_URI, label)
            action.add_target(url)
            card.add_potential_action(action)
        return card

    card = new_text_block_card(args.text, title=args.title)
    card.full_width = args.full_width
    if args.mentions:
        card.add_mention(True, *[Mention(display_name=name, identity=identity) for name, identity in args.mentions])
    links = [new_action_open_url(url, label) for label, url in args.links]
    if links:
        card.add_action(False, *links)
    return new_message_from_card(card)


def _build_client(args: argparse.Namespace) -> Tuple[TeamsClient, Optional[str]]:
    settings = load_settings(args.config)
    if args.timeout is not None:
        settings.timeout = args.timeout
    if args.user_agent:
        settings.user_agent = args.user_agent
    if args.proxy:
        settings.proxy_url = args.proxy
    if args.skip_validation:
        settings.skip_validation = True
    settings.validation_patterns.extend(args.patterns)
    return TeamsClient.from_settings(settings), args.webhook_url or settings.webhook_url


def run_send(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    console = console or Console()
    try:
        message = build_message(args)
        payload = message.prepare()
    except ValidationError as exc:
        LOGGER.error("Invalid message: %s", exc)
        return EXIT_INVALID

    if args.dry_run:
        console.print_json(payload.decode("utf-8"))
        return EXIT_OK

    try:
        client, webhook_url = _build_client(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOGGER.error("Failed to load settings: %s", exc)
        return EXIT_INVALID
    if not webhook_url:
        LOGGER.error("No webhook URL given; pass one or set %s", ENV_WEBHOOK_URL)
        return EXIT_INVALID

    try:
        client.send(webhook_url, message)
    except ValidationError as exc:
        LOGGER.error("Refusing to send: %s", exc)
        return EXIT_INVALID
    except DeliveryError as exc:
        LOGGER.error("Delivery failed: %s", exc)
        return EXIT_DELIVERY

    LOGGER.info("Sent %s message to %s", message.format.value, redact_url(webhook_url))
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return run_send(args)


if __name__ == "__main__":
    sys.exit(main())
