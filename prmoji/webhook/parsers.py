"""Parse inbound HTTP bodies from GitHub and Slack."""

import json
import logging
from typing import Any, Dict, NamedTuple
from urllib.parse import parse_qs

LOG = logging.getLogger("prmoji.webhook.parsers")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class SlackMessage(NamedTuple):
    text: str | None
    channel: str | None
    timestamp: str | None


class SlackCommand(NamedTuple):
    user_id: str | None
    text: str


def parse_form(body: bytes) -> Dict[str, str]:
    """application/x-www-form-urlencoded body -> first value per key."""
    parsed = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items() if values}


def parse_json_body(body: bytes, content_type: str = "") -> Dict[str, Any]:
    """Parse a JSON body, or the JSON in the `payload` field of a form body.

    Raises json.JSONDecodeError on invalid JSON. Non-object JSON yields {}.
    """
    if not body:
        return {}
    if FORM_CONTENT_TYPE in content_type:
        raw = parse_form(body).get("payload")
        if raw is None:
            return {}
        data = json.loads(raw)
    else:
        data = json.loads(body.decode("utf-8", errors="replace"))
    return data if isinstance(data, dict) else {}


def slack_challenge(payload: Dict[str, Any]) -> str | None:
    """The challenge to echo for Slack's url_verification request."""
    challenge = payload.get("challenge")
    if payload.get("type") == "url_verification" or challenge:
        return str(challenge) if challenge is not None else None
    return None


def slack_message(payload: Dict[str, Any]) -> SlackMessage | None:
    """Message fields from an event_callback body.

    Returns None for other event types and for bot or edited messages
    (messages carrying a subtype), so the bot never reacts to its own posts.
    """
    if payload.get("type") != "event_callback":
        return None
    event = payload.get("event")
    if not isinstance(event, dict) or event.get("type") != "message":
        return None
    if event.get("subtype") or event.get("bot_id"):
        LOG.debug("Skip Slack message with subtype %s", event.get("subtype") or "bot_message")
        return None
    return SlackMessage(
        text=event.get("text"),
        channel=event.get("channel"),
        timestamp=event.get("ts") or event.get("event_ts"),
    )


def slack_command(body: bytes) -> SlackCommand:
    """user_id and text from a slash command form body."""
    form = parse_form(body)
    return SlackCommand(user_id=form.get("user_id") or None, text=form.get("text", ""))
