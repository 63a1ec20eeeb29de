"""Abstract store interfaces; SQLiteStore implements both."""

from abc import ABC, abstractmethod
from typing import List, Set

from prmoji.models import LifecycleAction, PrLinkRecord, UserSubscription


class StoreError(Exception):
    """Raised when a store read or write fails."""

    pass


class PrLinkStore(ABC):
    """PR URL -> Slack message associations."""

    @abstractmethod
    def store(self, pr_url: str, channel: str, timestamp: str) -> None:
        """Record that the message (channel, timestamp) mentions pr_url."""

    @abstractmethod
    def get(self, pr_url: str) -> List[PrLinkRecord]:
        """All messages mentioning pr_url; empty list if none."""

    @abstractmethod
    def delete_by_url(self, pr_url: str) -> None:
        """Delete every record for pr_url."""

    @abstractmethod
    def delete_older_than(self, days: int) -> None:
        """Delete records inserted before the start of the day `days` days ago."""

    @abstractmethod
    def delete_all(self) -> None:
        """Delete every record."""

    @abstractmethod
    def list_all(self) -> List[PrLinkRecord]:
        """Every stored record."""


class SubscriptionStore(ABC):
    """Per-Slack-user GitHub login and subscribed actions."""

    @abstractmethod
    def get_github_username(self, chat_user_id: str) -> str | None:
        """GitHub login bound to the user, or None."""

    @abstractmethod
    def set_github_username(self, chat_user_id: str, username: str) -> None:
        """Bind a GitHub login (upsert)."""

    @abstractmethod
    def get_subscriptions(self, chat_user_id: str) -> Set[LifecycleAction]:
        """Subscribed actions; empty set for unknown users."""

    @abstractmethod
    def set_subscriptions(self, chat_user_id: str, subscriptions: Set[LifecycleAction]) -> None:
        """Replace the subscribed actions (upsert)."""

    @abstractmethod
    def get_user_by_github_username(self, username: str) -> UserSubscription | None:
        """Look a user up by bound GitHub login."""
