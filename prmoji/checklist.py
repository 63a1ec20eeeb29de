"""Release checklist scan of a merged PR's description.

The scan is permissive: anything it cannot complain about counts as
complete, so the validation loop converges on malformed PR bodies.
"""

import logging

from prmoji.adapters.base import CodeHostClient
from prmoji.models import ChecklistResult, ChecklistStatus
from prmoji.utils import parse_pr_url

RELEASE_CHECKLIST_HEADING = "## Release checklist"
UNCHECKED_ITEM_PREFIX = "- [ ]"
STRIKETHROUGH_MARKER = "~~"
HEADING_PREFIX = "#"

LOG = logging.getLogger("prmoji.checklist")


def scan_body(body: str | None, author: str | None = None) -> ChecklistResult:
    """Scan PR body text for the first open item of the release checklist.

    Lines are compared after stripping whitespace. After the heading, the
    first `- [ ]` line without `~~` makes the result incomplete (with
    author); the next heading or the end of text makes it complete. A body
    without the heading is complete.
    """
    in_checklist = False
    for raw_line in (body or "").splitlines():
        line = raw_line.strip()
        if not in_checklist:
            if line == RELEASE_CHECKLIST_HEADING:
                in_checklist = True
            continue
        if line.startswith(UNCHECKED_ITEM_PREFIX):
            if STRIKETHROUGH_MARKER not in line:
                return ChecklistResult(status=ChecklistStatus.INCOMPLETE, user=author)
        elif line.startswith(HEADING_PREFIX):
            return ChecklistResult(status=ChecklistStatus.COMPLETE)
    return ChecklistResult(status=ChecklistStatus.COMPLETE)


class ReleaseChecklistScanner:
    """Fetches a PR from the code host and scans its release checklist."""

    def __init__(self, code_host: CodeHostClient) -> None:
        self._code_host = code_host

    def scan(self, pr_url: str) -> ChecklistResult:
        """Return the checklist status of the PR at pr_url.

        Irrelevant when the URL is not a PR URL, the PR does not exist or is
        not merged. Raises GitPlatformError on other code host failures.
        """
        parsed = parse_pr_url(pr_url)
        if not parsed:
            LOG.debug("Not a PR URL: %s", pr_url)
            return ChecklistResult(status=ChecklistStatus.IRRELEVANT)
        owner, repo, number = parsed
        pull = self._code_host.get_pull_request(owner, repo, number)
        if pull is None:
            LOG.info("PR %s not found", pr_url)
            return ChecklistResult(status=ChecklistStatus.IRRELEVANT)
        if not pull.merged:
            LOG.debug("PR %s is not merged", pr_url)
            return ChecklistResult(status=ChecklistStatus.IRRELEVANT)
        result = scan_body(pull.body, pull.author_login)
        LOG.debug("PR %s release checklist: %s", pr_url, result.status.value)
        return result
