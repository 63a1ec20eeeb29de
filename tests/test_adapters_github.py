"""Unit tests for GitHub adapter (mocked API)."""

from unittest.mock import Mock, patch

import pytest
import requests

from prmoji.adapters.base import GitPlatformError
from prmoji.adapters.github import GitHubAdapter
from prmoji.models import PullRequest


@pytest.fixture
def adapter() -> GitHubAdapter:
    return GitHubAdapter(token="test-token", api_url="https://api.github.com/")


def test_auth_headers(adapter: GitHubAdapter) -> None:
    """Token and API version are sent on every request."""
    assert adapter._session.headers["Authorization"] == "Bearer test-token"
    assert adapter._session.headers["Accept"] == "application/vnd.github.v3+json"


def test_get_pull_request_success(adapter: GitHubAdapter) -> None:
    """get_pull_request returns PullRequest when API returns 200."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {
        "number": 42,
        "body": "## Release checklist\n- [x] done",
        "merged": True,
        "html_url": "https://github.com/org/repo/pull/42",
        "user": {"login": "octocat"},
    }

    with patch.object(adapter._session, "request", return_value=mock_resp) as req:
        pr = adapter.get_pull_request("org", "repo", 42)

    assert isinstance(pr, PullRequest)
    assert pr.number == 42
    assert pr.merged is True
    assert pr.author_login == "octocat"
    assert pr.body.startswith("## Release checklist")
    req.assert_called_once()
    call_args = req.call_args
    assert call_args[0][0] == "GET"
    assert call_args[0][1] == "https://api.github.com/repos/org/repo/pulls/42"
    assert call_args[1]["timeout"] == 30


def test_get_pull_request_null_body(adapter: GitHubAdapter) -> None:
    """A PR without description has an empty body."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {"number": 1, "body": None, "merged": False, "user": None}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        pr = adapter.get_pull_request("org", "repo", 1)

    assert pr is not None
    assert pr.body == ""
    assert pr.author_login is None


def test_get_pull_request_404_returns_none(adapter: GitHubAdapter) -> None:
    """get_pull_request returns None when the PR does not exist."""
    mock_resp = Mock()
    mock_resp.status_code = 404
    mock_resp.text = "Not Found"

    with patch.object(adapter._session, "request", return_value=mock_resp):
        assert adapter.get_pull_request("org", "repo", 999) is None


def test_get_pull_request_api_error_raises(adapter: GitHubAdapter) -> None:
    """get_pull_request raises GitPlatformError on API error."""
    mock_resp = Mock()
    mock_resp.status_code = 403
    mock_resp.text = "Forbidden"
    mock_resp.json.return_value = {"message": "API rate limit exceeded"}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(GitPlatformError) as exc_info:
            adapter.get_pull_request("org", "repo", 1)
    assert "403" in str(exc_info.value)
    assert "rate limit" in str(exc_info.value)


def test_get_pull_request_network_error_raises(adapter: GitHubAdapter) -> None:
    """Connection errors are wrapped in GitPlatformError."""
    with patch.object(adapter._session, "request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(GitPlatformError):
            adapter.get_pull_request("org", "repo", 1)


def test_get_pull_request_unexpected_json_raises(adapter: GitHubAdapter) -> None:
    """A 200 response without a PR number is an error."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {"message": "weird"}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(GitPlatformError):
            adapter.get_pull_request("org", "repo", 1)
