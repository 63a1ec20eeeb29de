"""Data models for actions, link records, users, jobs and webhook payloads (Pydantic)."""

from prmoji.models.action import ALL_ACTIONS, LifecycleAction, parse_action, sort_actions
from prmoji.models.checklist import ChecklistResult, ChecklistStatus
from prmoji.models.command import (
    CleanupSubcommand,
    GitHubUsernameSubcommand,
    HelpSubcommand,
    ListSubscriptionsSubcommand,
    Subcommand,
    SubscribeSubcommand,
    UnsubscribeSubcommand,
)
from prmoji.models.events import PrEvent, WebhookBody
from prmoji.models.job import ValidationJob
from prmoji.models.link import PrLinkRecord
from prmoji.models.pull_request import PullRequest
from prmoji.models.user import UserSubscription

__all__ = [
    "ALL_ACTIONS",
    "ChecklistResult",
    "ChecklistStatus",
    "CleanupSubcommand",
    "GitHubUsernameSubcommand",
    "HelpSubcommand",
    "LifecycleAction",
    "ListSubscriptionsSubcommand",
    "PrEvent",
    "PrLinkRecord",
    "PullRequest",
    "Subcommand",
    "SubscribeSubcommand",
    "UnsubscribeSubcommand",
    "UserSubscription",
    "ValidationJob",
    "WebhookBody",
    "parse_action",
    "sort_actions",
]
