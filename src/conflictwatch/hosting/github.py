"""Minimal GitHub REST client for pull request inventory and reviews."""

from __future__ import annotations

from typing import Any

import httpx

from conflictwatch.core.config import GitHubConfig
from conflictwatch.core.errors import ConfigurationError, HostingError
from conflictwatch.core.log import logger

API_VERSION = "2022-11-28"


class GitHubClient:
    """Synchronous client for the handful of endpoints a run needs.

    Every failed request raises HostingError; nothing is retried.
    """

    def __init__(
        self,
        config: GitHubConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        if not config.token:
            raise ConfigurationError(
                "A GitHub token is required (input github-token, "
                "GITHUB_TOKEN or config.github.token)"
            )
        owner, name = config.owner_and_name
        if not owner or not name:
            raise ConfigurationError(
                "Repository must be given as owner/name "
                "(GITHUB_REPOSITORY or config.github.repository)"
            )

        self.config = config
        self.owner = owner
        self.repo = name
        self._client = httpx.Client(
            base_url=config.api_url,
            timeout=config.timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: Any = None,
    ) -> Any:
        try:
            response = self._client.request(
                method, path, params=params, json=json
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise HostingError(
                f"{method} {path} returned {e.response.status_code}: "
                f"{e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise HostingError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _paginate(self, path: str, params: dict | None = None) -> list:
        """Collect every page of a list endpoint.

        Stops at the first page holding fewer than page_size items.
        """
        items = []
        page = 1
        per_page = self.config.page_size
        while True:
            data = self._request(
                "GET",
                path,
                params={**(params or {}), "per_page": per_page, "page": page},
            )
            items.extend(data or [])
            if not data or len(data) < per_page:
                break
            page += 1
        logger.spew("GET {path}: {count} items", path=path, count=len(items))
        return items

    def list_open_pull_requests(self) -> list[dict]:
        return self._paginate(f"{self.repo_path}/pulls", {"state": "open"})

    def get_pull_request(self, number: int) -> dict:
        return self._request("GET", f"{self.repo_path}/pulls/{number}")

    def list_changed_files(self, number: int) -> list[dict]:
        return self._paginate(f"{self.repo_path}/pulls/{number}/files")

    def list_reviews(self, number: int) -> list[dict]:
        return self._paginate(f"{self.repo_path}/pulls/{number}/reviews")

    def list_requested_reviewers(self, number: int) -> list[str]:
        data = self._request(
            "GET",
            f"{self.repo_path}/pulls/{number}/requested_reviewers",
            params={"per_page": self.config.page_size},
        )
        return [user["login"] for user in (data or {}).get("users", [])]

    def create_comment(self, number: int, body: str) -> dict:
        logger.info("Commenting on #{number}", number=number)
        return self._request(
            "POST",
            f"{self.repo_path}/issues/{number}/comments",
            json={"body": body},
        )

    def request_reviewers(self, number: int, reviewers: list[str]) -> dict:
        logger.info(
            "Requesting reviews from {reviewers} on #{number}",
            reviewers=", ".join(reviewers),
            number=number,
        )
        return self._request(
            "POST",
            f"{self.repo_path}/pulls/{number}/requested_reviewers",
            json={"reviewers": reviewers},
        )
