"""Abstract base for the code host and chat platform adapters."""

from abc import ABC, abstractmethod

from prmoji.models import PullRequest


class GitPlatformError(Exception):
    """Raised when a code host API call fails."""

    pass


class ChatPlatformError(Exception):
    """Raised when a chat platform API call fails."""

    pass


class CodeHostClient(ABC):
    """Read-only access to pull requests on a Git hosting platform."""

    @abstractmethod
    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest | None:
        """Fetch a PR. Returns None if it does not exist (404); raises
        GitPlatformError on any other failure."""
        ...


class ChatClient(ABC):
    """Outbound side effects on the chat platform."""

    @abstractmethod
    def add_reaction(self, name: str, channel: str, timestamp: str) -> None:
        """Add emoji `name` to the message at (channel, timestamp)."""
        ...

    @abstractmethod
    def send_message(self, text: str, channel: str) -> None:
        """Post text to a channel, or to a user id (direct message)."""
        ...
