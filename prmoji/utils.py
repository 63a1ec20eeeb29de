"""Shared utilities (PR URL matching, text formatting)."""

import re
from typing import Iterable, List, Tuple

from prmoji.models.action import LifecycleAction, sort_actions

# https://github.com/<owner>/<repo>/pull/<number>; owner and repo are [A-Za-z0-9_-]+
PR_URL_RE = re.compile(r"https://github\.com/([A-Za-z0-9_-]+)/([A-Za-z0-9_-]+)/pull/(\d+)")


def find_pr_urls(text: str) -> List[str]:
    """Return every PR URL occurring in text, in order, duplicates included."""
    if not text:
        return []
    return [m.group(0) for m in PR_URL_RE.finditer(text)]


def parse_pr_url(url: str) -> Tuple[str, str, int] | None:
    """Split a PR URL into (owner, repo, number). Returns None if it is not one."""
    if not url:
        return None
    m = PR_URL_RE.search(url)
    if not m:
        return None
    return m.group(1), m.group(2), int(m.group(3))


def truncate(text: str | None, max_length: int = 100) -> str:
    """Cut text to max_length characters, appending '...' when shortened."""
    if not text:
        return ""
    return text[:max_length] + "..." if len(text) > max_length else text


def format_action_list(actions: Iterable[LifecycleAction]) -> str:
    """Render actions as `a`, `b` in declaration order."""
    return ", ".join(f"`{a.value}`" for a in sort_actions(set(actions)))
