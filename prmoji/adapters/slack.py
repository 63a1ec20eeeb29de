"""Slack Web API adapter (slack_sdk)."""

import logging

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

from prmoji.adapters.base import ChatClient, ChatPlatformError

LOG = logging.getLogger("prmoji.adapters.slack")

# Reacting twice with the same emoji is not a failure for us
_BENIGN_REACTION_ERRORS = frozenset({"already_reacted"})


def _api_error(e: SlackApiError) -> str:
    try:
        return str(e.response.get("error") or e)
    except AttributeError:
        return str(e)


class SlackAdapter(ChatClient):
    """Slack implementation of the chat client."""

    def __init__(self, token: str | None = None, client: WebClient | None = None) -> None:
        self._client = client or WebClient(token=token)

    def add_reaction(self, name: str, channel: str, timestamp: str) -> None:
        LOG.info("Adding reaction %s to %s/%s", name, channel, timestamp)
        try:
            self._client.reactions_add(name=name, channel=channel, timestamp=timestamp)
        except SlackApiError as e:
            code = _api_error(e)
            if code in _BENIGN_REACTION_ERRORS:
                LOG.debug("Reaction %s already present on %s/%s", name, channel, timestamp)
                return
            raise ChatPlatformError(f"reactions.add failed: {code}") from e
        except (SlackClientError, OSError) as e:
            raise ChatPlatformError(f"reactions.add failed: {e}") from e

    def send_message(self, text: str, channel: str) -> None:
        LOG.info("Sending message to %s", channel)
        try:
            self._client.chat_postMessage(channel=channel, text=text)
        except SlackApiError as e:
            raise ChatPlatformError(f"chat.postMessage failed: {_api_error(e)}") from e
        except (SlackClientError, OSError) as e:
            raise ChatPlatformError(f"chat.postMessage failed: {e}") from e
