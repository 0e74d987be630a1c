"""GitHub REST collaborator: changed files of a pull request and the report comment."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import requests

from lcovreport import logger
from lcovreport.config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from lcovreport.errors import ConfigError, GitHubAPIError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

PER_PAGE = 100


@dataclass(frozen=True, slots=True)
class PullRequestContext:
    """Identity of the pull request the run belongs to."""

    owner: str
    repo: str
    number: int
    base_sha: str
    head_sha: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> PullRequestContext | None:
        """Load the context of a ``pull_request`` workflow run.

        Returns ``None`` for any other event.
        """
        if environ.get("GITHUB_EVENT_NAME") != "pull_request":
            return None

        repository = environ.get("GITHUB_REPOSITORY", "")
        owner, sep, repo = repository.partition("/")
        if not sep or not owner or not repo:
            msg = f"GITHUB_REPOSITORY must look like 'owner/repo', got {repository!r}"
            raise ConfigError(msg)

        event_path = environ.get("GITHUB_EVENT_PATH")
        if not event_path:
            msg = "GITHUB_EVENT_PATH is not set"
            raise ConfigError(msg)
        try:
            payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
            pull_request = payload["pull_request"]
            return cls(
                owner=owner,
                repo=repo,
                number=int(pull_request["number"]),
                base_sha=str(pull_request["base"]["sha"]),
                head_sha=str(pull_request["head"]["sha"]),
            )
        except (OSError, ValueError, KeyError, TypeError) as exc:
            msg = f"cannot read pull request event from {event_path}: {exc}"
            raise ConfigError(msg) from exc


class GitHubClient:
    """Minimal client for the four REST calls the report needs."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": "lcovreport",
            "X-GitHub-Api-Version": "2022-11-28",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    # ------------------------------------------------------------------ #
    # transport                                                          #
    # ------------------------------------------------------------------ #

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if not url.startswith(("http://", "https://")):
            url = f"{self.api_url}{url}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            msg = f"{method} {url} failed: {exc}"
            raise GitHubAPIError(msg) from exc
        if response.status_code >= 400:  # noqa: PLR2004
            try:
                detail = response.json().get("message", "")
            except ValueError:
                detail = response.text
            msg = f"{method} {url} returned {response.status_code}: {detail}"
            raise GitHubAPIError(msg, status=response.status_code)
        return response

    def _paginate(self, url: str, params: dict[str, Any]) -> Iterator[requests.Response]:
        next_url: str | None = url
        next_params: dict[str, Any] | None = params
        while next_url:
            response = self._request("GET", next_url, params=next_params)
            yield response
            next_url = response.links.get("next", {}).get("url")
            # the "next" link already carries the query string
            next_params = None

    # ------------------------------------------------------------------ #
    # pull requests                                                      #
    # ------------------------------------------------------------------ #

    def changed_files(self, context: PullRequestContext, *, base: Path) -> set[str]:
        """Return the files changed by the pull request, resolved against *base*."""
        url = f"/repos/{context.owner}/{context.repo}/compare/{context.base_sha}...{context.head_sha}"
        names: set[str] = set()
        for response in self._paginate(url, {"per_page": PER_PAGE}):
            for item in response.json().get("files") or []:
                filename = item.get("filename")
                if filename:
                    names.add(str((base / filename).resolve()))
        logger.info("Found %d changed file(s)", len(names))
        return names

    def list_comments(self, context: PullRequestContext) -> list[dict[str, Any]]:
        logger.info("Getting comments...")
        url = f"/repos/{context.owner}/{context.repo}/issues/{context.number}/comments"
        comments: list[dict[str, Any]] = []
        for response in self._paginate(url, {"per_page": PER_PAGE}):
            comments.extend(response.json())
        return comments

    def create_comment(self, context: PullRequestContext, body: str) -> dict[str, Any]:
        url = f"/repos/{context.owner}/{context.repo}/issues/{context.number}/comments"
        return self._request("POST", url, json={"body": body}).json()

    def update_comment(self, context: PullRequestContext, comment_id: int, body: str) -> dict[str, Any]:
        url = f"/repos/{context.owner}/{context.repo}/issues/comments/{comment_id}"
        return self._request("PATCH", url, json={"body": body}).json()

    def post_comment(
        self,
        context: PullRequestContext,
        identity: str,
        body: str,
    ) -> Literal["created", "updated"]:
        """Update the comment starting with *identity*, or create a new one."""
        existing = next(
            (c for c in self.list_comments(context) if (c.get("body") or "").startswith(identity)),
            None,
        )
        if existing is None:
            logger.info("Existing comment is not found, creating new comment...")
            self.create_comment(context, body)
            return "created"
        logger.info("Existing comment is found, updating existing comment...")
        self.update_comment(context, int(existing["id"]), body)
        return "updated"


__all__ = ["PER_PAGE", "GitHubClient", "PullRequestContext"]
