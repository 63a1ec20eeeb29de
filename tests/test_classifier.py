"""Tests for prmoji.classifier (webhook -> canonical PrEvent)."""

import pytest

from prmoji.classifier import ACTION_PREDICATES, classify, parse_github_event
from prmoji.models import LifecycleAction, WebhookBody

PR_URL = "https://github.com/org/repo/pull/7"


def _review(state: str) -> dict:
    return {
        "action": "submitted",
        "review": {"state": state},
        "pull_request": {"number": 7, "html_url": PR_URL, "title": "Fix", "user": {"login": "author"}},
        "repository": {"name": "repo", "full_name": "org/repo"},
        "sender": {"login": "reviewer"},
    }


def _closed(merged: bool) -> dict:
    return {
        "action": "closed",
        "pull_request": {
            "number": 7,
            "html_url": PR_URL,
            "title": "Fix the thing",
            "merged": merged,
            "user": {"login": "author"},
            "labels": [{"name": "release"}, {"name": "bug"}],
            "base": {"ref": "main"},
        },
        "repository": {"name": "repo", "full_name": "org/repo"},
        "sender": {"login": "merger"},
    }


ISSUE_COMMENT = {
    "action": "created",
    "issue": {
        "number": 7,
        "title": "Fix",
        "user": {"login": "author"},
        "pull_request": {"html_url": PR_URL},
    },
    "comment": {"body": "LGTM", "user": {"login": "commenter"}},
    "repository": {"name": "repo", "full_name": "org/repo"},
    "sender": {"login": "commenter"},
}


def test_predicate_table_is_exhaustive() -> None:
    """Every lifecycle action has a predicate."""
    assert set(ACTION_PREDICATES) == set(LifecycleAction)


@pytest.mark.parametrize(
    "event_type,payload,expected",
    [
        ("issue_comment", ISSUE_COMMENT, LifecycleAction.COMMENTED),
        ("pull_request_review", _review("commented"), LifecycleAction.COMMENTED),
        ("pull_request_review", _review("approved"), LifecycleAction.APPROVED),
        ("pull_request_review", _review("APPROVED"), LifecycleAction.APPROVED),
        ("pull_request_review", _review("changes_requested"), LifecycleAction.CHANGES_REQUESTED),
        ("pull_request", _closed(True), LifecycleAction.MERGED),
        ("pull_request", _closed(False), LifecycleAction.CLOSED),
    ],
)
def test_classify(event_type: str, payload: dict, expected: LifecycleAction) -> None:
    """Each supported webhook maps to exactly one action."""
    assert classify(event_type, WebhookBody.model_validate(payload)) == expected


@pytest.mark.parametrize(
    "event_type,payload",
    [
        ("pull_request", {"action": "opened", "pull_request": {"html_url": PR_URL}}),
        ("pull_request_review", _review("dismissed")),
        ("issue_comment", {**ISSUE_COMMENT, "action": "edited"}),
        ("push", _closed(True)),
        ("", _closed(True)),
    ],
)
def test_classify_unmatched(event_type: str, payload: dict) -> None:
    """Unsupported events and states yield no action."""
    assert classify(event_type, WebhookBody.model_validate(payload)) is None


def test_merged_event_fields() -> None:
    """A merge event carries URL, repo, number, author, labels, title and sender."""
    event = parse_github_event("pull_request", _closed(True))
    assert event is not None
    assert event.action == LifecycleAction.MERGED
    assert event.url == PR_URL
    assert event.repo_name == "repo"
    assert event.repo_full_name == "org/repo"
    assert event.number == 7
    assert event.author == "author"
    assert event.labels == ["release", "bug"]
    assert event.title == "Fix the thing"
    assert event.sender == "merger"
    assert event.base_ref == "main"
    assert event.commenter is None


def test_issue_comment_event_fields() -> None:
    """Issue comments take URL and author from the issue, commenter from the comment."""
    event = parse_github_event("issue_comment", ISSUE_COMMENT)
    assert event is not None
    assert event.url == PR_URL
    assert event.author == "author"
    assert event.commenter == "commenter"
    assert event.comment == "LGTM"
    assert event.number == 7


def test_issue_comment_on_plain_issue_has_no_url() -> None:
    """A comment on an issue that is not a PR has no PR URL."""
    payload = {**ISSUE_COMMENT, "issue": {"number": 3, "user": {"login": "x"}}}
    event = parse_github_event("issue_comment", payload)
    assert event is not None
    assert event.url is None


def test_missing_fields_are_tolerated() -> None:
    """An empty object parses to an event with no action and no URL."""
    event = parse_github_event("pull_request", {})
    assert event is not None
    assert event.action is None
    assert event.url is None


def test_malformed_payload_returns_none() -> None:
    """Wrong field types and non-object payloads are discarded."""
    assert parse_github_event("pull_request", {"pull_request": "not-an-object"}) is None
    assert parse_github_event("pull_request", None) is None
