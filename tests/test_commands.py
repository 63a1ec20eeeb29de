"""Tests for prmoji.commands (slash command text parsing)."""

import pytest

from prmoji.commands import parse_command_text, parse_subscription_args, split_command_text
from prmoji.models import (
    ALL_ACTIONS,
    CleanupSubcommand,
    GitHubUsernameSubcommand,
    HelpSubcommand,
    LifecycleAction,
    ListSubscriptionsSubcommand,
    SubscribeSubcommand,
    UnsubscribeSubcommand,
)


def test_split_on_whitespace_and_commas() -> None:
    """Runs of spaces and commas separate tokens; empty tokens are dropped."""
    assert split_command_text("  subscribe merged,  closed ,approved ") == [
        "subscribe",
        "merged",
        "closed",
        "approved",
    ]
    assert split_command_text(None) == []


class TestSubscriptionArgs:
    """parse_subscription_args maps tokens to actions."""

    def test_no_args_means_all(self) -> None:
        """No tokens subscribe to everything."""
        assert parse_subscription_args([]) == set(ALL_ACTIONS)

    def test_all_token(self) -> None:
        """`all` anywhere means everything."""
        assert parse_subscription_args(["merged", "all"]) == set(ALL_ACTIONS)

    def test_hyphenated_changes_requested(self) -> None:
        """Both spellings of changes-requested are accepted."""
        assert parse_subscription_args(["changes-requested"]) == {LifecycleAction.CHANGES_REQUESTED}
        assert parse_subscription_args(["changes_requested"]) == {LifecycleAction.CHANGES_REQUESTED}

    def test_unknown_tokens_ignored(self) -> None:
        """Unknown tokens are dropped, known ones kept."""
        assert parse_subscription_args(["merged", "exploded", "CLOSED"]) == {
            LifecycleAction.MERGED,
            LifecycleAction.CLOSED,
        }


class TestParseCommandText:
    """parse_command_text returns a typed subcommand or None."""

    @pytest.mark.parametrize("text", ["", "   ", "help", "hello", "HELP"])
    def test_help(self, text: str) -> None:
        """Empty text and help aliases yield HelpSubcommand."""
        assert isinstance(parse_command_text(text), HelpSubcommand)

    def test_ghuser_with_name(self) -> None:
        """`ghuser name` binds a username."""
        cmd = parse_command_text("ghuser octocat")
        assert isinstance(cmd, GitHubUsernameSubcommand)
        assert cmd.username == "octocat"

    def test_ghuser_without_name(self) -> None:
        """`ghuser` alone queries the username."""
        cmd = parse_command_text("ghuser")
        assert isinstance(cmd, GitHubUsernameSubcommand)
        assert cmd.username is None

    def test_subscribe(self) -> None:
        """`subscribe a,b` lists the chosen actions."""
        cmd = parse_command_text("subscribe merged,closed")
        assert isinstance(cmd, SubscribeSubcommand)
        assert cmd.actions == {LifecycleAction.MERGED, LifecycleAction.CLOSED}

    def test_unsubscribe_defaults_to_all(self) -> None:
        """`unsubscribe` without args removes everything."""
        cmd = parse_command_text("unsubscribe")
        assert isinstance(cmd, UnsubscribeSubcommand)
        assert cmd.actions == set(ALL_ACTIONS)

    def test_subscriptions(self) -> None:
        """`subscriptions` lists current subscriptions."""
        assert isinstance(parse_command_text("subscriptions"), ListSubscriptionsSubcommand)

    def test_cleanup_all(self) -> None:
        """`cleanup` without days deletes everything."""
        cmd = parse_command_text("cleanup")
        assert isinstance(cmd, CleanupSubcommand)
        assert cmd.days is None

    def test_cleanup_days(self) -> None:
        """`cleanup 14` carries the day count."""
        cmd = parse_command_text("cleanup 14")
        assert isinstance(cmd, CleanupSubcommand)
        assert cmd.days == 14

    @pytest.mark.parametrize("text", ["cleanup abc", "cleanup -3", "cleanup 1.5"])
    def test_cleanup_bad_days(self, text: str) -> None:
        """Non-numeric or negative day counts are rejected."""
        assert parse_command_text(text) is None

    def test_unknown_command(self) -> None:
        """An unknown first token yields None."""
        assert parse_command_text("dance now") is None
