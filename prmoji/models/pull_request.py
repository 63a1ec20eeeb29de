"""Pull request as fetched from the code host."""

from pydantic import BaseModel


class PullRequest(BaseModel):
    """The fields the checklist scan needs."""

    number: int
    body: str = ""
    merged: bool = False
    author_login: str | None = None
    html_url: str | None = None
