"""Result types for merge attempts."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from conflictwatch.hosting.models import PullRequestRef


class Clean(BaseModel):
    """The candidate pair merges without conflicts."""

    kind: Literal["clean"] = "clean"


class Conflict(BaseModel):
    """git reported an automatic-merge failure.

    `lines` maps each conflicted file to the pristine line numbers that
    could be recovered for it; a file may map to an empty tuple.
    """

    kind: Literal["conflict"] = "conflict"
    files: frozenset[str]
    lines: dict[str, tuple[int, ...]] = Field(default_factory=dict)


class Skipped(BaseModel):
    """The pair was not merged, e.g. no overlapping files."""

    kind: Literal["skipped"] = "skipped"
    reason: str


class InfrastructureFailure(BaseModel):
    """A git operation failed for a reason other than a conflict."""

    kind: Literal["infrastructure_failure"] = "infrastructure_failure"
    cause: str


MergeAttemptOutcome = Annotated[
    Clean | Conflict | Skipped | InfrastructureFailure,
    Field(discriminator="kind"),
]


class ConflictRecord(BaseModel):
    """Conflicts between the subject PR and one other PR.

    Only built when at least one file has a recovered line.
    """

    model_config = ConfigDict(frozen=True)

    other_pr: PullRequestRef
    conflicts: dict[str, tuple[int, ...]]

    @model_validator(mode="after")
    def _check_lines(self) -> ConflictRecord:
        if not any(self.conflicts.values()):
            raise ValueError(
                f"ConflictRecord for #{self.other_pr.number} has no "
                f"conflicting lines"
            )
        for path, lines in self.conflicts.items():
            if any(b <= a for a, b in zip(lines, lines[1:])):
                raise ValueError(
                    f"Line numbers for {path} must be strictly increasing"
                )
        return self

    @classmethod
    def from_outcome(
        cls, other_pr: PullRequestRef, outcome: Conflict
    ) -> ConflictRecord | None:
        """Build a record from a conflict outcome.

        Files with no recovered lines are dropped. Returns None when
        nothing is left.
        """
        conflicts = {
            path: lines
            for path, lines in sorted(outcome.lines.items())
            if lines
        }
        if not conflicts:
            return None
        return cls(other_pr=other_pr, conflicts=conflicts)

    @property
    def file_count(self) -> int:
        return len(self.conflicts)
