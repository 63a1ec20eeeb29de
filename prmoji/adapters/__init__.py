"""Code host and chat platform adapters (base and implementations)."""

from prmoji.adapters.base import ChatClient, ChatPlatformError, CodeHostClient, GitPlatformError
from prmoji.adapters.github import GitHubAdapter
from prmoji.adapters.slack import SlackAdapter

__all__ = [
    "ChatClient",
    "ChatPlatformError",
    "CodeHostClient",
    "GitHubAdapter",
    "GitPlatformError",
    "SlackAdapter",
]
