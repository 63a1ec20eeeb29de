"""Typed schemas for GitHub webhook payloads and the canonical PR event.

Only the fields the relay reads are declared; everything else in the
payload is ignored. Every nested object is optional because
pull_request, pull_request_review and issue_comment payloads each carry a
different subset.
"""

from typing import List

from pydantic import BaseModel, Field

from prmoji.models.action import LifecycleAction

_IGNORE_EXTRA = {"extra": "ignore"}


class GitHubUser(BaseModel):
    """Actor or author (only login is used)."""

    login: str | None = None

    model_config = _IGNORE_EXTRA


class Label(BaseModel):
    name: str | None = None

    model_config = _IGNORE_EXTRA


class BranchRef(BaseModel):
    ref: str | None = None

    model_config = _IGNORE_EXTRA


class PullRequestPayload(BaseModel):
    """pull_request object (pull_request and pull_request_review events)."""

    number: int | None = None
    html_url: str | None = None
    title: str | None = None
    merged: bool | None = None
    user: GitHubUser | None = None
    labels: List[Label] | None = None
    base: BranchRef | None = None

    model_config = _IGNORE_EXTRA


class IssuePullRequestLink(BaseModel):
    """issue.pull_request: present only when the issue is a PR."""

    html_url: str | None = None

    model_config = _IGNORE_EXTRA


class IssuePayload(BaseModel):
    """issue object (issue_comment events)."""

    number: int | None = None
    title: str | None = None
    user: GitHubUser | None = None
    pull_request: IssuePullRequestLink | None = None

    model_config = _IGNORE_EXTRA


class CommentPayload(BaseModel):
    body: str | None = None
    user: GitHubUser | None = None

    model_config = _IGNORE_EXTRA


class ReviewPayload(BaseModel):
    """Review state: approved, changes_requested, commented, dismissed."""

    state: str | None = None

    model_config = _IGNORE_EXTRA


class RepositoryPayload(BaseModel):
    name: str | None = None
    full_name: str | None = None

    model_config = _IGNORE_EXTRA


class WebhookBody(BaseModel):
    """Top-level webhook body shared by all PR-related event types."""

    action: str | None = None
    pull_request: PullRequestPayload | None = None
    issue: IssuePayload | None = None
    comment: CommentPayload | None = None
    review: ReviewPayload | None = None
    repository: RepositoryPayload | None = None
    sender: GitHubUser | None = None

    model_config = _IGNORE_EXTRA


class PrEvent(BaseModel):
    """Canonical PR event after classification."""

    url: str | None = None
    action: LifecycleAction | None = None
    commenter: str | None = None
    comment: str | None = None
    repo_name: str | None = None
    repo_full_name: str | None = None
    number: int | None = None
    author: str | None = None
    labels: List[str] = Field(default_factory=list)
    title: str | None = None
    sender: str | None = None
    base_ref: str | None = None
