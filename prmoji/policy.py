"""Notification decisions: which reaction, whether to broadcast, which DM text.

All functions here are pure. The emoji and template tables are keyed by
every LifecycleAction, including explicit None entries for actions that
never produce a reaction.
"""

from typing import Dict, Iterable

from prmoji.config import NotificationsConfig
from prmoji.models import LifecycleAction, PrEvent
from prmoji.utils import truncate

REACTION_EMOJI: Dict[LifecycleAction, str | None] = {
    LifecycleAction.CREATED: None,
    LifecycleAction.COMMENTED: "speech_balloon",
    LifecycleAction.APPROVED: "white_check_mark",
    LifecycleAction.CHANGES_REQUESTED: "no_entry",
    LifecycleAction.SUBMITTED: None,
    LifecycleAction.MERGED: "merged",
    LifecycleAction.CLOSED: "wastebasket",
}

DIRECT_MESSAGE_TEMPLATES: Dict[LifecycleAction, str] = {
    LifecycleAction.CREATED: "{sender} created <{pr_url}| PR> :heavy_plus_sign:",
    LifecycleAction.COMMENTED: "{sender} commented on your <{pr_url}|PR> :speech_balloon:",
    LifecycleAction.APPROVED: "{sender} approved your <{pr_url}|PR> :white_check_mark:",
    LifecycleAction.CHANGES_REQUESTED: "{sender} requested changes on your <{pr_url}|PR> :no_entry:",
    LifecycleAction.SUBMITTED: "{sender} submitted your <{pr_url}|PR> :rocket:",
    LifecycleAction.MERGED: "{sender} merged your <{pr_url}|PR> :merged:",
    LifecycleAction.CLOSED: "{sender} closed your <{pr_url}|PR> :wastebasket:",
}
DEFAULT_DIRECT_MESSAGE_TEMPLATE = "{sender} did something to your <{pr_url}|PR> :question:"

BROADCAST_TEMPLATE = "Merged: <{pr_url}|{repo} #{number} {title}> (by {author})"
BROADCAST_TITLE_MAX_LENGTH = 100


def reaction_emoji(action: LifecycleAction | None) -> str | None:
    """Emoji name for action, or None when no reaction should be added."""
    if action is None:
        return None
    return REACTION_EMOJI.get(action)


def direct_message_text(action: LifecycleAction | None, sender: str | None, pr_url: str | None) -> str:
    """DM text for the PR author; unknown or missing action uses the default template."""
    template = DIRECT_MESSAGE_TEMPLATES.get(action, DEFAULT_DIRECT_MESSAGE_TEMPLATE)
    return template.format(
        sender=sender or "(missing sender)",
        pr_url=pr_url or "(missing PR URL)",
    )


def broadcast_text(event: PrEvent) -> str:
    """Channel message announcing a merge."""
    return BROADCAST_TEMPLATE.format(
        pr_url=event.url or "(missing PR URL)",
        repo=event.repo_name or "(missing repo name)",
        number=event.number if event.number is not None else "(missing PR number)",
        title=truncate(event.title, BROADCAST_TITLE_MAX_LENGTH) or "(missing PR title)",
        author=event.author or "(missing PR author)",
    )


class NotificationPolicy:
    """Reaction and broadcast gates built from NotificationsConfig."""

    def __init__(self, config: NotificationsConfig | None = None) -> None:
        config = config or NotificationsConfig()
        self.ignored_commenters = frozenset(config.ignored_commenters)
        self.watched_repositories = frozenset(config.watched_repositories)
        self.watched_labels = frozenset(config.watched_labels)

    def should_react(self, action: LifecycleAction | None, commenter: str | None) -> bool:
        """False only for comments by ignore-listed accounts (bots)."""
        return not (action == LifecycleAction.COMMENTED and commenter in self.ignored_commenters)

    def reaction_emoji(self, action: LifecycleAction | None) -> str | None:
        return reaction_emoji(action)

    def should_broadcast(
        self,
        action: LifecycleAction | None,
        repo_full_name: str | None,
        labels: Iterable[str],
    ) -> bool:
        """Merged PRs in a watched repository carrying a watched label.

        An empty watch-list matches everything.
        """
        if action != LifecycleAction.MERGED:
            return False
        repo_ok = not self.watched_repositories or repo_full_name in self.watched_repositories
        labels_ok = not self.watched_labels or bool(self.watched_labels.intersection(labels))
        return repo_ok and labels_ok

    def direct_message_text(self, action: LifecycleAction | None, sender: str | None, pr_url: str | None) -> str:
        return direct_message_text(action, sender, pr_url)
