"""Per-user notification preferences."""

from datetime import datetime
from typing import Set

from pydantic import BaseModel, Field

from prmoji.models.action import LifecycleAction


class UserSubscription(BaseModel):
    """Slack user with optional GitHub login and subscribed actions."""

    chat_user_id: str
    github_username: str | None = None
    subscriptions: Set[LifecycleAction] = Field(default_factory=set)
    inserted_at: datetime | None = None
