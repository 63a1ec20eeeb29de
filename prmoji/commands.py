"""Slash command text parsing (`/prmoji <subcommand> [args]`)."""

import logging
import re
from typing import Dict, List, Sequence, Set

from prmoji.models import (
    ALL_ACTIONS,
    CleanupSubcommand,
    GitHubUsernameSubcommand,
    HelpSubcommand,
    LifecycleAction,
    ListSubscriptionsSubcommand,
    Subcommand,
    SubscribeSubcommand,
    UnsubscribeSubcommand,
)

LOG = logging.getLogger("prmoji.commands")

_SPLIT_RE = re.compile(r"[\s,]+")

ALL_TOKEN = "all"

SUBSCRIPTION_TOKENS: Dict[str, LifecycleAction] = {
    "approved": LifecycleAction.APPROVED,
    "created": LifecycleAction.CREATED,
    "commented": LifecycleAction.COMMENTED,
    "changes-requested": LifecycleAction.CHANGES_REQUESTED,
    # underscore spelling is the action's own value
    "changes_requested": LifecycleAction.CHANGES_REQUESTED,
    "submitted": LifecycleAction.SUBMITTED,
    "merged": LifecycleAction.MERGED,
    "closed": LifecycleAction.CLOSED,
}

GHUSER = "ghuser"
SUBSCRIBE = "subscribe"
UNSUBSCRIBE = "unsubscribe"
SUBSCRIPTIONS = "subscriptions"
CLEANUP = "cleanup"
HELP_ALIASES = frozenset({"", "hello", "help"})


def split_command_text(text: str | None) -> List[str]:
    """Split on runs of whitespace and commas, dropping empty tokens."""
    return [t for t in _SPLIT_RE.split((text or "").strip()) if t]


def parse_subscription_args(args: Sequence[str]) -> Set[LifecycleAction]:
    """Map subscription tokens to actions.

    No tokens, or `all` anywhere, means every action. Unknown tokens are
    ignored.
    """
    tokens = [a.strip().lower() for a in args if a and a.strip()]
    if not tokens or ALL_TOKEN in tokens:
        return set(ALL_ACTIONS)
    actions: Set[LifecycleAction] = set()
    for token in tokens:
        action = SUBSCRIPTION_TOKENS.get(token)
        if action is None:
            LOG.debug("Ignoring unknown subscription token %r", token)
            continue
        actions.add(action)
    return actions


def _parse_days(arg: str) -> int:
    if not arg.isdigit():
        raise ValueError(f"invalid days argument: {arg!r}")
    return int(arg)


def parse_command_text(text: str | None) -> Subcommand | None:
    """Parse slash command text into a subcommand.

    Empty text is help; an unknown first token or a non-numeric cleanup
    days argument yields None.
    """
    tokens = split_command_text(text)
    name = tokens[0].lower() if tokens else ""
    args = tokens[1:]

    if name == GHUSER:
        return GitHubUsernameSubcommand(username=args[0] if args else None, args=args)
    if name == SUBSCRIBE:
        return SubscribeSubcommand(actions=parse_subscription_args(args), args=args)
    if name == UNSUBSCRIBE:
        return UnsubscribeSubcommand(actions=parse_subscription_args(args), args=args)
    if name == SUBSCRIPTIONS:
        return ListSubscriptionsSubcommand(args=args)
    if name == CLEANUP:
        if not args:
            return CleanupSubcommand(args=args)
        try:
            return CleanupSubcommand(days=_parse_days(args[0]), args=args)
        except ValueError as e:
            LOG.debug("Rejecting cleanup command: %s", e)
            return None
    if name in HELP_ALIASES:
        return HelpSubcommand(args=args)
    return None
