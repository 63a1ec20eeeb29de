"""Turn a raw GitHub webhook into one canonical lifecycle action.

The classifier is an ordered table of predicates, one per LifecycleAction,
evaluated in the enum's declaration order; the first predicate that holds
wins. `created` and `submitted` never match a webhook: they exist only so
that direct-message templates can render them.
"""

import logging
from typing import Any, Callable, Dict

from pydantic import ValidationError

from prmoji.models import LifecycleAction, PrEvent, WebhookBody

LOG = logging.getLogger("prmoji.classifier")

ISSUE_COMMENT = "issue_comment"
PULL_REQUEST = "pull_request"
PULL_REQUEST_REVIEW = "pull_request_review"

Predicate = Callable[[str, WebhookBody], bool]


def _review_state(body: WebhookBody) -> str:
    return ((body.review.state if body.review else None) or "").lower()


def _is_review_submitted(event_type: str, body: WebhookBody, state: str) -> bool:
    return event_type == PULL_REQUEST_REVIEW and body.action == "submitted" and _review_state(body) == state


def _is_pr_closed(event_type: str, body: WebhookBody) -> bool:
    return event_type == PULL_REQUEST and body.action == "closed"


def _merged(body: WebhookBody) -> bool:
    return bool(body.pull_request and body.pull_request.merged)


def _never(event_type: str, body: WebhookBody) -> bool:
    return False


def _commented(event_type: str, body: WebhookBody) -> bool:
    if event_type == ISSUE_COMMENT and body.action == "created":
        return True
    return _is_review_submitted(event_type, body, "commented")


def _approved(event_type: str, body: WebhookBody) -> bool:
    return _is_review_submitted(event_type, body, "approved")


def _changes_requested(event_type: str, body: WebhookBody) -> bool:
    return _is_review_submitted(event_type, body, "changes_requested")


def _merged_event(event_type: str, body: WebhookBody) -> bool:
    return _is_pr_closed(event_type, body) and _merged(body)


def _closed_event(event_type: str, body: WebhookBody) -> bool:
    return _is_pr_closed(event_type, body) and not _merged(body)


ACTION_PREDICATES: Dict[LifecycleAction, Predicate] = {
    LifecycleAction.CREATED: _never,
    LifecycleAction.COMMENTED: _commented,
    LifecycleAction.APPROVED: _approved,
    LifecycleAction.CHANGES_REQUESTED: _changes_requested,
    LifecycleAction.SUBMITTED: _never,
    LifecycleAction.MERGED: _merged_event,
    LifecycleAction.CLOSED: _closed_event,
}


def classify(event_type: str | None, body: WebhookBody) -> LifecycleAction | None:
    """Return the first action whose predicate holds, or None."""
    if not event_type:
        return None
    for action in LifecycleAction:
        if ACTION_PREDICATES[action](event_type, body):
            return action
    return None


def _pr_url(body: WebhookBody) -> str | None:
    if body.pull_request and body.pull_request.html_url:
        return body.pull_request.html_url
    if body.issue and body.issue.pull_request:
        return body.issue.pull_request.html_url
    return None


def _author(body: WebhookBody) -> str | None:
    if body.issue and body.issue.user and body.issue.user.login:
        return body.issue.user.login
    if body.pull_request and body.pull_request.user:
        return body.pull_request.user.login
    return None


def _number(body: WebhookBody) -> int | None:
    if body.pull_request and body.pull_request.number is not None:
        return body.pull_request.number
    return body.issue.number if body.issue else None


def _title(body: WebhookBody) -> str | None:
    if body.issue and body.issue.title:
        return body.issue.title
    return body.pull_request.title if body.pull_request else None


def build_event(event_type: str | None, body: WebhookBody) -> PrEvent:
    """Extract the canonical PrEvent fields from a validated webhook body."""
    pull = body.pull_request
    comment = body.comment
    return PrEvent(
        url=_pr_url(body),
        action=classify(event_type, body),
        commenter=comment.user.login if comment and comment.user else None,
        comment=comment.body if comment else None,
        repo_name=body.repository.name if body.repository else None,
        repo_full_name=body.repository.full_name if body.repository else None,
        number=_number(body),
        author=_author(body),
        labels=[lb.name for lb in (pull.labels or []) if lb.name] if pull else [],
        title=_title(body),
        sender=body.sender.login if body.sender else None,
        base_ref=pull.base.ref if pull and pull.base else None,
    )


def parse_github_event(event_type: str | None, payload: Dict[str, Any] | None) -> PrEvent | None:
    """Validate a raw webhook payload and build the canonical event.

    Returns None when the payload is not an object or its fields have the
    wrong types (malformed input is discarded, not raised).
    """
    if not isinstance(payload, dict):
        LOG.debug("Webhook payload is not an object, discarding")
        return None
    try:
        body = WebhookBody.model_validate(payload)
    except ValidationError as e:
        LOG.debug("Malformed %s payload, discarding: %s", event_type, e)
        return None
    return build_event(event_type, body)
