from __future__ import annotations

import json

import pytest

from teamsnotify.errors import ActionLimitExceeded, InvalidElementKind, ValidationError
from teamsnotify.messagecard import (
    MAX_POTENTIAL_ACTIONS,
    POTENTIAL_ACTION_HTTP_POST,
    POTENTIAL_ACTION_OPEN_URI,
    SectionFact,
    SectionImage,
    new_message_card,
    new_potential_action,
    new_section,
)
from teamsnotify.model import MessageFormat


def _open_uri(name: str, uri: str = "https://example.com"):
    action = new_potential_action(POTENTIAL_ACTION_OPEN_URI, name)
    action.add_target(uri)
    return action


def test_minimal_card() -> None:
    card = new_message_card(title="Build", text="Pipeline finished", theme_color="#0078D7")

    card.prepare()
    payload = json.loads(card.payload)

    assert card.format is MessageFormat.MESSAGE_CARD
    assert payload == {
        "@type": "MessageCard",
        "@context": "https://schema.org/extensions",
        "title": "Build",
        "text": "Pipeline finished",
        "themeColor": "#0078D7",
    }


def test_summary_without_text_is_enough() -> None:
    card = new_message_card()
    card.summary = "Nightly report"

    card.prepare()

    assert json.loads(card.payload)["summary"] == "Nightly report"


def test_text_or_summary_required() -> None:
    card = new_message_card(title="only a title")

    with pytest.raises(ValidationError):
        card.prepare()
    assert card.prepared is False


def test_invalid_theme_color() -> None:
    card = new_message_card(text="hi", theme_color="blue")

    with pytest.raises(InvalidElementKind):
        card.prepare()


@pytest.mark.parametrize("theme_color", ["#ABCDEF\n", "ABCDEF0", " #ABCDEF"])
def test_theme_color_must_match_whole_value(theme_color: str) -> None:
    card = new_message_card(text="hi", theme_color=theme_color)

    with pytest.raises(InvalidElementKind):
        card.prepare()


def test_theme_color_without_hash_is_accepted() -> None:
    card = new_message_card(text="hi", theme_color="abcdef")

    assert json.loads(card.prepare())["themeColor"] == "abcdef"


def test_sections() -> None:
    section = new_section()
    section.activity_title = "Deploy"
    section.activity_subtitle = "by ci"
    section.add_fact_from_key_value("Hosts", "web-1", "web-2")
    section.add_fact(SectionFact(name="Version", value="1.2"))
    section.add_image(SectionImage(image="https://example.com/chart.png", title="Latency"))
    section.add_hero_image("https://example.com/hero.png")
    section.start_group = True
    card = new_message_card(text="Deploy report")
    card.add_section(section)

    card.prepare()
    rendered = json.loads(card.payload)["sections"][0]

    assert rendered["activityTitle"] == "Deploy"
    assert rendered["activitySubtitle"] == "by ci"
    assert rendered["facts"] == [{"name": "Hosts", "value": "web-1, web-2"}, {"name": "Version", "value": "1.2"}]
    assert rendered["images"] == [{"image": "https://example.com/chart.png", "title": "Latency"}]
    assert rendered["heroImage"] == {"image": "https://example.com/hero.png", "title": ""}
    assert rendered["markdown"] is True
    assert rendered["startGroup"] is True


def test_section_rejects_nameless_fact() -> None:
    with pytest.raises(InvalidElementKind):
        new_section().add_fact(SectionFact(name="", value="x"))


def test_potential_actions() -> None:
    post = new_potential_action(POTENTIAL_ACTION_HTTP_POST, "Acknowledge")
    post.target = "https://api.example.com/ack"
    post.body = '{"ack": true}'
    card = new_message_card(text="Alert")
    card.add_potential_action(_open_uri("Runbook", "https://runbooks.example.com"), post)

    card.prepare()
    actions = json.loads(card.payload)["potentialAction"]

    assert actions[0] == {
        "@type": "OpenUri",
        "name": "Runbook",
        "targets": [{"os": "default", "uri": "https://runbooks.example.com"}],
    }
    assert actions[1] == {
        "@type": "HttpPOST",
        "name": "Acknowledge",
        "target": "https://api.example.com/ack",
        "body": '{"ack": true}',
        "bodyContentType": "application/json",
    }


def test_potential_action_limit_per_card() -> None:
    card = new_message_card(text="Links")
    card.add_potential_action(*[_open_uri(f"Link {i}") for i in range(MAX_POTENTIAL_ACTIONS)])

    with pytest.raises(ActionLimitExceeded):
        card.add_potential_action(_open_uri("One more"))
    assert len(card.potential_actions) == MAX_POTENTIAL_ACTIONS


def test_potential_action_limit_per_section() -> None:
    section = new_section()
    section.add_potential_action(*[_open_uri(f"Link {i}") for i in range(MAX_POTENTIAL_ACTIONS)])

    with pytest.raises(ActionLimitExceeded):
        section.add_potential_action(_open_uri("One more"))


def test_open_uri_requires_target() -> None:
    card = new_message_card(text="Links")

    with pytest.raises(InvalidElementKind):
        card.add_potential_action(new_potential_action(POTENTIAL_ACTION_OPEN_URI, "Nowhere"))


@pytest.mark.parametrize(("action_type", "name"), [("Invoke", "Run"), (POTENTIAL_ACTION_OPEN_URI, " ")])
def test_new_potential_action_validates(action_type: str, name: str) -> None:
    with pytest.raises(InvalidElementKind):
        new_potential_action(action_type, name)


def test_edit_after_prepare_invalidates() -> None:
    section = new_section()
    section.add_fact_from_key_value("Status", "green")
    card = new_message_card(text="Status")
    card.add_section(section)
    card.prepare()

    section.facts[0].value = "red"

    assert card.prepared is False
    card.prepare()
    assert json.loads(card.payload)["sections"][0]["facts"][0]["value"] == "red"
