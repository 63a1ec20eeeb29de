"""Parsed Slack slash-command subcommands."""

from typing import List, Literal, Set, Union

from pydantic import BaseModel, Field

from prmoji.models.action import LifecycleAction


class GitHubUsernameSubcommand(BaseModel):
    """`ghuser` (show) or `ghuser <name>` (bind)."""

    kind: Literal["ghuser"] = "ghuser"
    username: str | None = None
    args: List[str] = Field(default_factory=list)


class SubscribeSubcommand(BaseModel):
    kind: Literal["subscribe"] = "subscribe"
    actions: Set[LifecycleAction] = Field(default_factory=set)
    args: List[str] = Field(default_factory=list)


class UnsubscribeSubcommand(BaseModel):
    kind: Literal["unsubscribe"] = "unsubscribe"
    actions: Set[LifecycleAction] = Field(default_factory=set)
    args: List[str] = Field(default_factory=list)


class ListSubscriptionsSubcommand(BaseModel):
    kind: Literal["subscriptions"] = "subscriptions"
    args: List[str] = Field(default_factory=list)


class CleanupSubcommand(BaseModel):
    """`cleanup` (delete everything) or `cleanup <days>` (age sweep)."""

    kind: Literal["cleanup"] = "cleanup"
    days: int | None = Field(default=None, ge=0)
    args: List[str] = Field(default_factory=list)


class HelpSubcommand(BaseModel):
    kind: Literal["help"] = "help"
    args: List[str] = Field(default_factory=list)


Subcommand = Union[
    GitHubUsernameSubcommand,
    SubscribeSubcommand,
    UnsubscribeSubcommand,
    ListSubscriptionsSubcommand,
    CleanupSubcommand,
    HelpSubcommand,
]
