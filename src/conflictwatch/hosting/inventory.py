"""Build PullRequestRef snapshots from API payloads."""

from __future__ import annotations

from conflictwatch.conflict.overlap import is_excluded
from conflictwatch.core.config import ConflictConfig
from conflictwatch.core.log import logger
from conflictwatch.hosting.github import GitHubClient
from conflictwatch.hosting.models import PullRequestRef


def _login(user: dict | None) -> str | None:
    return user.get("login") if user else None


class PullRequestInventory:
    """Resolves pull requests into PullRequestRef snapshots."""

    def __init__(self, client: GitHubClient, config: ConflictConfig):
        self.client = client
        self.config = config

    def reviewers(self, number: int) -> frozenset[str]:
        """Users who reviewed the PR or have a pending review request."""
        reviewed = {
            login for login in (
                _login(review.get("user"))
                for review in self.client.list_reviews(number)
            ) if login
        }
        requested = set(self.client.list_requested_reviewers(number))
        return frozenset(reviewed | requested)

    def resolve(self, payload: dict) -> PullRequestRef:
        """Snapshot one pull request from its API representation."""
        number = payload["number"]
        head = payload["head"]
        head_repo = head.get("repo")
        base_repo = payload["base"].get("repo") or {}

        files = self.client.list_changed_files(number)
        kept = [
            f for f in files
            if not is_excluded(f["filename"], self.config.excluded_paths)
        ]

        return PullRequestRef(
            number=number,
            branch=head["ref"],
            author=_login(payload.get("user")) or "",
            title=payload.get("title") or "",
            base_branch=payload["base"]["ref"],
            is_fork=(
                head_repo is None
                or head_repo.get("full_name") != base_repo.get("full_name")
            ),
            source_repo_full_name=(
                head_repo.get("full_name") if head_repo else None
            ),
            changed_files=frozenset(f["filename"] for f in kept),
            reviewers=self.reviewers(number),
            blob_urls={
                f["filename"]: f["blob_url"] for f in kept if f.get("blob_url")
            },
        )

    def subject(self, number: int) -> PullRequestRef:
        return self.resolve(self.client.get_pull_request(number))

    def candidates(self, subject_number: int) -> list[PullRequestRef]:
        """Open, non-draft PRs other than the subject that target the
        integration branch."""
        candidates = []
        for payload in self.client.list_open_pull_requests():
            if payload["number"] == subject_number:
                continue
            if payload.get("draft"):
                logger.debug("Skipping draft #{number}", number=payload["number"])
                continue
            if payload["base"]["ref"] != self.config.main_branch:
                continue
            candidates.append(self.resolve(payload))
        logger.info(
            "Found {count} candidate pull requests", count=len(candidates)
        )
        return candidates
