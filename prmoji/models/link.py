"""Association between a pull request URL and a Slack message."""

from datetime import datetime

from pydantic import BaseModel, Field


class PrLinkRecord(BaseModel):
    """A Slack message that mentioned a PR; reactions are added to it."""

    pr_url: str = Field(description="Canonical PR URL, e.g. https://github.com/o/r/pull/1")
    message_channel: str = Field(description="Slack channel id of the message")
    message_timestamp: str = Field(description="Slack message ts")
    inserted_at: datetime | None = None
