"""Deferred validation job as stored in the queue directory."""

from datetime import datetime

from pydantic import BaseModel, Field


class ValidationJob(BaseModel):
    """Re-check a merged PR's release checklist no earlier than not_before."""

    job_id: str = Field(description="Queue file stem")
    pr_url: str
    not_before: datetime
    enqueued_at: datetime
    attempt: int = Field(default=0, ge=0, description="How many checks ran before this one")

    model_config = {"extra": "ignore"}
