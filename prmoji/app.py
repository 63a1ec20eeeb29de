"""Relay orchestrator: Slack messages, GitHub PR events and slash commands.

Entry points never raise for well-formed but empty input, and failures of
Slack, GitHub or the store are caught and logged per side effect so one
failed reaction does not stop the others.
"""

import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Pattern, Tuple

from prmoji.adapters.base import ChatClient, ChatPlatformError, GitPlatformError
from prmoji.adapters.github import GitHubAdapter
from prmoji.adapters.slack import SlackAdapter
from prmoji.checklist import ReleaseChecklistScanner
from prmoji.classifier import parse_github_event
from prmoji.commands import parse_command_text
from prmoji.config import AppConfig
from prmoji.messages import (
    CLEANUP_COMPLETE_MESSAGE,
    INCOMPLETE_CHECKLIST_REMINDER,
    NO_SUBSCRIPTIONS_MESSAGE,
    help_message,
    unknown_command_message,
    unknown_user_message,
    username_set_message,
)
from prmoji.models import (
    ChecklistResult,
    ChecklistStatus,
    CleanupSubcommand,
    GitHubUsernameSubcommand,
    HelpSubcommand,
    LifecycleAction,
    ListSubscriptionsSubcommand,
    PrEvent,
    PrLinkRecord,
    SubscribeSubcommand,
    UnsubscribeSubcommand,
    ValidationJob,
)
from prmoji.policy import NotificationPolicy, broadcast_text
from prmoji.queue import DelayQueue
from prmoji.scheduler import DeferredValidationScheduler, JobResult, Reenqueue, Terminate
from prmoji.store.base import PrLinkStore, StoreError, SubscriptionStore
from prmoji.store.sqlite import SQLiteStore
from prmoji.utils import find_pr_urls, format_action_list

LOG = logging.getLogger("prmoji.app")

DEFAULT_CLEANUP_DAYS = 7


def compile_message_reactions(config: AppConfig) -> List[Tuple[Pattern[str], str]]:
    """Compile notifications.message_reactions; invalid patterns are skipped."""
    compiled = []
    for item in config.notifications.message_reactions:
        try:
            compiled.append((re.compile(item.pattern), item.emoji))
        except re.error as e:
            LOG.warning("Invalid message reaction pattern %r: %s", item.pattern, e)
    return compiled


class PrmojiApp:
    """Composes classifier, policy, scanner and scheduler with stores and clients."""

    def __init__(
        self,
        links: PrLinkStore,
        users: SubscriptionStore,
        chat: ChatClient,
        scanner: ReleaseChecklistScanner,
        scheduler: DeferredValidationScheduler,
        policy: NotificationPolicy | None = None,
        notifications_channel_id: str | None = None,
        message_reactions: List[Tuple[Pattern[str], str]] | None = None,
        app_name: str = "prmoji",
        app_display_name: str = "Prmoji",
    ) -> None:
        self.links = links
        self.users = users
        self.chat = chat
        self.scanner = scanner
        self.scheduler = scheduler
        self.policy = policy or NotificationPolicy()
        self.notifications_channel_id = notifications_channel_id
        self.message_reactions = message_reactions or []
        self.app_name = app_name
        self.app_display_name = app_display_name
        scheduler.on_fire(self.handle_validation_job)

    @property
    def validation_delay(self) -> timedelta:
        return self.scheduler.delay

    # Slack messages

    def handle_chat_message(self, text: str | None, channel: str | None, timestamp: str | None) -> None:
        """Store a link record per PR URL in the message; react to alert patterns."""
        LOG.info("Received Slack message %s", (text or "(no message text)")[:8])
        if not text or not channel or not timestamp:
            LOG.debug("Missing field(s), discarding message")
            return

        pr_urls = find_pr_urls(text)
        LOG.debug("PR URLs in message: %s", pr_urls or "none")
        for pr_url in pr_urls:
            try:
                self.links.store(pr_url, channel, timestamp)
            except StoreError as e:
                LOG.warning("Failed to store %s: %s", pr_url, e)

        for pattern, emoji in self.message_reactions:
            if pattern.search(text):
                self._add_reaction(emoji, channel, timestamp)

    # GitHub events

    def handle_pr_event(self, event_type: str | None, payload: Dict[str, Any] | None) -> None:
        """React, broadcast, DM, schedule validation or clean up for one PR event."""
        event = parse_github_event(event_type, payload)
        if event is None:
            return
        LOG.info("Received PR event %s: %s", event_type, event.number or "(no PR number)")
        if not event.url or not event.action:
            LOG.debug("Missing URL or no matching action, discarding PR event")
            return

        try:
            records = self.links.get(event.url)
        except StoreError as e:
            LOG.warning("Failed to look up %s: %s", event.url, e)
            return
        if not records:
            LOG.debug("No matching item found for %s, discarding event", event.url)
            return
        LOG.debug("Got %s matching item(s) for %s", len(records), event.url)

        self._react_to_records(event, records)
        self._broadcast(event)
        self._notify_author(event)

        if event.action == LifecycleAction.MERGED:
            self._schedule_validation(event.url)
        elif event.action == LifecycleAction.CLOSED:
            self._forget_pr(event.url)

    def _react_to_records(self, event: PrEvent, records: List[PrLinkRecord]) -> None:
        emoji = self.policy.reaction_emoji(event.action)
        if not emoji:
            LOG.debug("No emoji for %s", event.action)
            return
        if not self.policy.should_react(event.action, event.commenter):
            LOG.info("Ignoring comment by %s", event.commenter)
            return
        for record in records:
            self._add_reaction(emoji, record.message_channel, record.message_timestamp)

    def _broadcast(self, event: PrEvent) -> None:
        if not self.notifications_channel_id:
            return
        if not self.policy.should_broadcast(event.action, event.repo_full_name, event.labels):
            LOG.debug("Event does not meet broadcast criteria")
            return
        LOG.info("Broadcasting %s to %s", event.url, self.notifications_channel_id)
        self._send_message(broadcast_text(event), self.notifications_channel_id)

    def _notify_author(self, event: PrEvent) -> None:
        if not event.author or event.sender == event.author:
            return
        try:
            user = self.users.get_user_by_github_username(event.author)
        except StoreError as e:
            LOG.warning("Failed to look up user %s: %s", event.author, e)
            return
        if not user or event.action not in user.subscriptions:
            return
        LOG.info("User %s is subscribed to %s, sending message", user.chat_user_id, event.action.value)
        self._send_message(
            self.policy.direct_message_text(event.action, event.sender, event.url),
            user.chat_user_id,
        )

    def _schedule_validation(self, pr_url: str) -> None:
        try:
            self.scheduler.schedule(pr_url)
        except OSError as e:
            LOG.warning("Failed to schedule validation for %s: %s", pr_url, e)

    def _forget_pr(self, pr_url: str) -> None:
        try:
            self.scheduler.cancel(pr_url)
        except OSError as e:
            LOG.warning("Failed to cancel validation for %s: %s", pr_url, e)
        self._delete_links(pr_url)

    def _delete_links(self, pr_url: str) -> None:
        LOG.debug("Deleting %s", pr_url)
        try:
            self.links.delete_by_url(pr_url)
        except StoreError as e:
            LOG.warning("Failed to delete %s: %s", pr_url, e)

    def _add_reaction(self, emoji: str, channel: str, timestamp: str) -> None:
        try:
            self.chat.add_reaction(emoji, channel, timestamp)
        except ChatPlatformError as e:
            LOG.warning("Error adding emoji %s: %s", emoji, e)

    def _send_message(self, text: str, channel: str) -> bool:
        try:
            self.chat.send_message(text, channel)
        except ChatPlatformError as e:
            LOG.warning("Error sending message to %s: %s", channel, e)
            return False
        return True

    # Release checklist validation

    def _remind(self, pr_url: str, result: ChecklistResult) -> None:
        if not result.user:
            LOG.debug("PR %s has no author login, skipping reminder", pr_url)
            return
        try:
            user = self.users.get_user_by_github_username(result.user)
        except StoreError as e:
            LOG.warning("Failed to look up user %s: %s", result.user, e)
            return
        if not user:
            LOG.debug("User %s has no Slack ID, skipping notification", result.user)
            return
        if self._send_message(INCOMPLETE_CHECKLIST_REMINDER.format(pr_url=pr_url), user.chat_user_id):
            LOG.info("Reminded %s about incomplete PR %s", result.user, pr_url)

    def validate_pr(self, pr_url: str) -> JobResult:
        """Check one merged PR's release checklist.

        complete/irrelevant: delete its link records and stop. incomplete:
        remind the author when they have a Slack id, and check again later
        either way. A failed fetch also checks again later.
        """
        LOG.info("Validating PR %s", pr_url)
        try:
            result = self.scanner.scan(pr_url)
        except GitPlatformError as e:
            LOG.warning("Could not fetch %s: %s", pr_url, e)
            return Reenqueue(after=self.validation_delay)

        if result.status == ChecklistStatus.INCOMPLETE:
            LOG.info("PR %s is incomplete, trying to notify %s", pr_url, result.user)
            self._remind(pr_url, result)
            return Reenqueue(after=self.validation_delay)

        self._delete_links(pr_url)
        return Terminate()

    def handle_validation_job(self, job: ValidationJob) -> JobResult:
        """Scheduler callback."""
        LOG.debug("Validation job %s fired (attempt %s)", job.job_id, job.attempt)
        return self.validate_pr(job.pr_url)

    def validate_stored_prs(self) -> None:
        """One-shot sweep over every stored PR URL (no requeue)."""
        LOG.info("Checking PR release checklists")
        try:
            urls = list(dict.fromkeys(r.pr_url for r in self.links.list_all()))
        except StoreError as e:
            LOG.warning("Failed to list stored PRs: %s", e)
            return
        for pr_url in urls:
            self.validate_pr(pr_url)

    # Slash commands

    def handle_command(self, chat_user_id: str | None, text: str | None) -> str:
        """Run a slash command and return the reply text."""
        LOG.info("Received Slack command from %s: %r", chat_user_id, text)
        subcommand = parse_command_text(text)
        if subcommand is None or not chat_user_id:
            return unknown_command_message(self.app_name)
        try:
            if isinstance(subcommand, GitHubUsernameSubcommand):
                return self._command_ghuser(chat_user_id, subcommand)
            if isinstance(subcommand, SubscribeSubcommand):
                return self._command_subscribe(chat_user_id, subcommand)
            if isinstance(subcommand, UnsubscribeSubcommand):
                return self._command_unsubscribe(chat_user_id, subcommand)
            if isinstance(subcommand, ListSubscriptionsSubcommand):
                return self._command_subscriptions(chat_user_id)
            if isinstance(subcommand, CleanupSubcommand):
                # 0 days means everything, like a bare cleanup
                if subcommand.days:
                    self.cleanup_old(subcommand.days)
                else:
                    self.cleanup()
                return CLEANUP_COMPLETE_MESSAGE
        except StoreError as e:
            LOG.warning("Command %s failed: %s", subcommand.kind, e)
            return f"Something went wrong :crycat: ({subcommand.kind} failed, please try again later)"
        if isinstance(subcommand, HelpSubcommand):
            return self.help_text
        return unknown_command_message(self.app_name)

    @property
    def help_text(self) -> str:
        return help_message(self.app_name, self.app_display_name)

    def _command_ghuser(self, chat_user_id: str, subcommand: GitHubUsernameSubcommand) -> str:
        if subcommand.username:
            self.users.set_github_username(chat_user_id, subcommand.username)
            return username_set_message(self.app_name, subcommand.username)
        username = self.users.get_github_username(chat_user_id)
        if not username:
            return unknown_user_message(self.app_name)
        return f"Your GitHub username is `{username}`"

    def _command_subscribe(self, chat_user_id: str, subcommand: SubscribeSubcommand) -> str:
        if not self.users.get_github_username(chat_user_id):
            return unknown_user_message(self.app_name)
        subscriptions = self.users.get_subscriptions(chat_user_id) | subcommand.actions
        self.users.set_subscriptions(chat_user_id, subscriptions)
        return f"You will now be notified about {format_action_list(subcommand.actions)} events."

    def _command_unsubscribe(self, chat_user_id: str, subcommand: UnsubscribeSubcommand) -> str:
        if not self.users.get_github_username(chat_user_id):
            return unknown_user_message(self.app_name)
        subscriptions = self.users.get_subscriptions(chat_user_id) - subcommand.actions
        self.users.set_subscriptions(chat_user_id, subscriptions)
        return f"You will no longer be notified about {format_action_list(subcommand.actions)} events."

    def _command_subscriptions(self, chat_user_id: str) -> str:
        if not self.users.get_github_username(chat_user_id):
            return unknown_user_message(self.app_name)
        subscriptions = self.users.get_subscriptions(chat_user_id)
        if not subscriptions:
            return NO_SUBSCRIPTIONS_MESSAGE
        return f"You are subscribed to the following events: {format_action_list(subscriptions)}"

    # Maintenance

    def cleanup_old(self, days: int = DEFAULT_CLEANUP_DAYS) -> None:
        LOG.info("Cleaning up entries as old as %s days or older", days)
        self.links.delete_older_than(days)

    def cleanup(self) -> None:
        LOG.info("Cleaning up all entries")
        self.links.delete_all()

    def intro_to_user(self, chat_user_id: str) -> bool:
        """DM the help text to a user (e.g. a new team member)."""
        return self._send_message(self.help_text, chat_user_id)


def create_app(config: AppConfig) -> PrmojiApp:
    """Build the app with SQLite store, Slack and GitHub adapters from config."""
    store = SQLiteStore(config.storage.path)
    github = GitHubAdapter(
        token=config.github_token_resolved,
        api_url=config.github.api_url,
        timeout=config.github.timeout,
    )
    scheduler = DeferredValidationScheduler(
        DelayQueue(Path(config.validation.queue_dir)),
        delay=timedelta(seconds=config.validation.delay_seconds),
        poll_interval=config.validation.poll_interval_seconds,
    )
    return PrmojiApp(
        links=store,
        users=store,
        chat=SlackAdapter(token=config.slack_token_resolved),
        scanner=ReleaseChecklistScanner(github),
        scheduler=scheduler,
        policy=NotificationPolicy(config.notifications),
        notifications_channel_id=config.slack.notifications_channel_id,
        message_reactions=compile_message_reactions(config),
        app_name=config.slack.app_name,
        app_display_name=config.slack.app_display_name,
    )
