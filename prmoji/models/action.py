"""Canonical pull request lifecycle actions."""

from enum import Enum


class LifecycleAction(str, Enum):
    """What happened to a pull request, independent of GitHub's event names.

    Declaration order matters: the classifier evaluates its predicates in
    this order and the first match wins.
    """

    CREATED = "created"
    COMMENTED = "commented"
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"
    SUBMITTED = "submitted"
    MERGED = "merged"
    CLOSED = "closed"


ALL_ACTIONS: frozenset[LifecycleAction] = frozenset(LifecycleAction)


def parse_action(value: str) -> LifecycleAction | None:
    """Return the action for a stored value, or None if it is not one."""
    try:
        return LifecycleAction(value.strip())
    except ValueError:
        return None


def sort_actions(actions: "set[LifecycleAction] | frozenset[LifecycleAction]") -> list[LifecycleAction]:
    """Return actions in declaration order (stable output for replies and storage)."""
    order = list(LifecycleAction)
    return sorted(actions, key=order.index)
