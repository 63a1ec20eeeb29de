"""SQLiteStore: relational store for link records and user subscriptions.

Schema:
  pr_messages: one row per (PR URL, Slack message) mention; one PR URL may
    appear in many rows.
  users: one row per Slack user, upserted on slack_id.

A new connection is opened per operation so the store can be shared by the
HTTP request threads and the scheduler thread; SQLite's own locking and
`INSERT ... ON CONFLICT` keep concurrent writes consistent.
"""

import logging
import sqlite3
from contextlib import closing
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any, List, Sequence, Set

from prmoji.models import LifecycleAction, PrLinkRecord, UserSubscription, parse_action, sort_actions
from prmoji.store.base import PrLinkStore, StoreError, SubscriptionStore

LOG = logging.getLogger("prmoji.store.sqlite")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS pr_messages (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    inserted_at        TEXT NOT NULL,
    pr_url             TEXT NOT NULL,
    message_channel    TEXT NOT NULL,
    message_timestamp  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_pr_messages_url ON pr_messages (pr_url);
CREATE TABLE IF NOT EXISTS users (
    slack_id       TEXT PRIMARY KEY,
    gh_username    TEXT,
    subscriptions  TEXT NOT NULL DEFAULT '',
    inserted_at    TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_users_gh_username ON users (gh_username);
"""


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _parse_ts(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _decode_subscriptions(raw: str | None) -> Set[LifecycleAction]:
    """Comma-separated stored values -> actions; unknown values are dropped."""
    actions = set()
    for part in (raw or "").split(","):
        action = parse_action(part) if part.strip() else None
        if action is not None:
            actions.add(action)
    return actions


def _encode_subscriptions(actions: Set[LifecycleAction]) -> str:
    return ",".join(a.value for a in sort_actions(actions))


def deletion_cutoff(now: datetime, days: int) -> str:
    """ISO date string of the day `days` days before now; older rows are deleted.

    A cutoff before year 1 is clamped to the earliest date, so nothing is deleted.
    """
    try:
        return (now - timedelta(days=days)).date().isoformat()
    except OverflowError:
        return date.min.isoformat()


class SQLiteStore(PrLinkStore, SubscriptionStore):
    """Stores link records and users in a local SQLite database file."""

    def __init__(self, db_path: str = ".prmoji/prmoji.db") -> None:
        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            with closing(self._connect()) as conn:
                conn.executescript(_SCHEMA)
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialize database {db_path}: {e}") from e

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, query: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        LOG.debug("Executing query: %s %s", " ".join(query.split()), tuple(params))
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(query, params).fetchall()
                conn.commit()
                return rows
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    # PrLinkStore

    def store(self, pr_url: str, channel: str, timestamp: str) -> None:
        LOG.debug("Storing %s -> %s/%s", pr_url, channel, timestamp)
        self._execute(
            "INSERT INTO pr_messages (inserted_at, pr_url, message_channel, message_timestamp) VALUES (?, ?, ?, ?)",
            (_now_iso(), pr_url, channel, timestamp),
        )

    def get(self, pr_url: str) -> List[PrLinkRecord]:
        rows = self._execute("SELECT * FROM pr_messages WHERE pr_url = ? ORDER BY id", (pr_url,))
        return [self._row_to_record(r) for r in rows]

    def delete_by_url(self, pr_url: str) -> None:
        LOG.debug("Deleting records for %s", pr_url)
        self._execute("DELETE FROM pr_messages WHERE pr_url = ?", (pr_url,))

    def delete_older_than(self, days: int) -> None:
        cutoff = deletion_cutoff(datetime.now(UTC), days)
        LOG.debug("Deleting records inserted before %s", cutoff)
        self._execute("DELETE FROM pr_messages WHERE inserted_at < ?", (cutoff,))

    def delete_all(self) -> None:
        LOG.debug("Deleting all records")
        self._execute("DELETE FROM pr_messages")

    def list_all(self) -> List[PrLinkRecord]:
        return [self._row_to_record(r) for r in self._execute("SELECT * FROM pr_messages ORDER BY id")]

    # SubscriptionStore

    def get_github_username(self, chat_user_id: str) -> str | None:
        rows = self._execute("SELECT gh_username FROM users WHERE slack_id = ?", (chat_user_id,))
        return (rows[0]["gh_username"] or None) if rows else None

    def set_github_username(self, chat_user_id: str, username: str) -> None:
        LOG.debug("Setting GitHub username %s for user %s", username, chat_user_id)
        self._execute(
            """
            INSERT INTO users (slack_id, gh_username, inserted_at) VALUES (?, ?, ?)
            ON CONFLICT (slack_id) DO UPDATE SET gh_username = excluded.gh_username
            """,
            (chat_user_id, username, _now_iso()),
        )

    def get_subscriptions(self, chat_user_id: str) -> Set[LifecycleAction]:
        rows = self._execute("SELECT subscriptions FROM users WHERE slack_id = ?", (chat_user_id,))
        return _decode_subscriptions(rows[0]["subscriptions"]) if rows else set()

    def set_subscriptions(self, chat_user_id: str, subscriptions: Set[LifecycleAction]) -> None:
        encoded = _encode_subscriptions(subscriptions)
        LOG.debug("Setting subscriptions %r for user %s", encoded, chat_user_id)
        self._execute(
            """
            INSERT INTO users (slack_id, subscriptions, inserted_at) VALUES (?, ?, ?)
            ON CONFLICT (slack_id) DO UPDATE SET subscriptions = excluded.subscriptions
            """,
            (chat_user_id, encoded, _now_iso()),
        )

    def get_user_by_github_username(self, username: str) -> UserSubscription | None:
        rows = self._execute(
            "SELECT * FROM users WHERE gh_username = ? ORDER BY inserted_at LIMIT 1",
            (username,),
        )
        if not rows:
            return None
        row = rows[0]
        return UserSubscription(
            chat_user_id=row["slack_id"],
            github_username=row["gh_username"],
            subscriptions=_decode_subscriptions(row["subscriptions"]),
            inserted_at=_parse_ts(row["inserted_at"]),
        )

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> PrLinkRecord:
        return PrLinkRecord(
            pr_url=row["pr_url"],
            message_channel=row["message_channel"],
            message_timestamp=row["message_timestamp"],
            inserted_at=_parse_ts(row["inserted_at"]),
        )
