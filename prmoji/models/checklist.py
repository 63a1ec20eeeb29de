"""Result of a release checklist scan."""

from enum import Enum

from pydantic import BaseModel


class ChecklistStatus(str, Enum):
    """complete: nothing left to do; incomplete: an unchecked item remains;
    irrelevant: bad URL, PR not found, or PR not merged."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    IRRELEVANT = "irrelevant"


class ChecklistResult(BaseModel):
    """Scan outcome; user is the PR author's login when incomplete."""

    status: ChecklistStatus
    user: str | None = None
