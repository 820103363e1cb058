"""Pull request snapshot used throughout a run."""

from pydantic import BaseModel, ConfigDict, Field


class PullRequestRef(BaseModel):
    """Immutable snapshot of one open pull request.

    Fetched fresh at the start of every run.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    branch: str = Field(description="Head branch name")
    author: str
    title: str = ""
    base_branch: str = Field(
        default="main", description="Branch the PR targets"
    )
    is_fork: bool = Field(
        default=False,
        description="Head repository differs from the base repository",
    )
    source_repo_full_name: str | None = Field(
        default=None,
        description="owner/repo of the head; None if it was deleted",
    )
    changed_files: frozenset[str] = Field(
        default_factory=frozenset,
        description="Changed paths, excluded paths already removed",
    )
    reviewers: frozenset[str] = Field(
        default_factory=frozenset,
        description="Users who reviewed or have a pending review request",
    )
    blob_urls: dict[str, str] = Field(
        default_factory=dict,
        description="Web URL of each changed file at the head commit",
    )

    def __str__(self) -> str:
        return f"#{self.number} ({self.branch})"
