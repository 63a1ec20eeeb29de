"""GitHub API adapter."""

from typing import Any, Dict

import requests

from prmoji.adapters.base import CodeHostClient, GitPlatformError
from prmoji.models import PullRequest


def _pr_from_api(data: Dict[str, Any]) -> PullRequest:
    user = data.get("user") or {}
    return PullRequest(
        number=data["number"],
        body=data.get("body") or "",
        merged=bool(data.get("merged")),
        author_login=user.get("login"),
        html_url=data.get("html_url"),
    )


class GitHubAdapter(CodeHostClient):
    """GitHub REST API implementation."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        timeout: int = 30,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path}: {e}") from e
        return resp

    @staticmethod
    def _error(resp: requests.Response) -> GitPlatformError:
        msg = resp.text or resp.reason or str(resp.status_code)
        try:
            msg = resp.json().get("message", msg)
        except Exception:
            pass
        return GitPlatformError(f"{resp.status_code}: {msg}")

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest | None:
        resp = self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise self._error(resp)
        try:
            return _pr_from_api(resp.json())
        except (ValueError, KeyError, TypeError) as e:
            raise GitPlatformError(f"Unexpected response for {owner}/{repo}#{number}: {e}") from e
