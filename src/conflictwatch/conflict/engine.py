"""Speculative merges of one candidate pull request against the subject."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from conflictwatch.conflict.lines import recover_lines
from conflictwatch.core.config import ConflictConfig
from conflictwatch.core.errors import InfrastructureError
from conflictwatch.core.log import logger
from conflictwatch.core.result import (
    Clean,
    Conflict,
    InfrastructureFailure,
    MergeAttemptOutcome,
    Skipped,
)
from conflictwatch.git.workspace import WorkspaceController
from conflictwatch.hosting.models import PullRequestRef


class MergeStage(StrEnum):
    """States a pair attempt passes through, in order."""

    INIT = "init"
    BASE_SYNCED = "base_synced"
    CANDIDATE_STAGED = "candidate_staged"
    CANDIDATE_MERGED_WITH_BASE = "candidate_merged_with_base"
    MERGE_ATTEMPTED = "merge_attempted"
    CLEAN = "clean"
    CONFLICT = "conflict"
    SKIPPED = "skipped"
    FAILED = "failed"
    CLEANED_UP = "cleaned_up"


@dataclass
class PairResult:
    """Outcome of one attempt plus the stages it went through."""

    outcome: MergeAttemptOutcome
    stages: list[MergeStage] = field(default_factory=list)


class SpeculativeMergeEngine:
    """Runs merge attempts through a WorkspaceController.

    For each candidate the integration branch is synced, the candidate
    is staged into a temporary ref and brought up to date with the
    integration branch, and the subject's prepared ref is merged into
    it without committing. The checkout is reset and the temporary ref
    deleted before attempt() returns, whatever happened.
    """

    def __init__(self, workspace: WorkspaceController, config: ConflictConfig):
        self.workspace = workspace
        self.config = config

    def _merges_with_base(self, ref: str) -> bool:
        """Check out ref and test-merge the integration branch into it."""
        self.workspace.checkout(ref)
        with self.workspace.attempt_merge(self.config.main_branch) as merge:
            return isinstance(merge, Clean)

    def prepare_subject(self, subject: PullRequestRef) -> str:
        """Stage the subject PR once per run.

        Returns:
            The subject's temporary ref; the caller deletes it when
            the run ends

        Raises:
            InfrastructureError: If git fails; the ref is deleted first
        """
        ref = self.workspace.stage_branch(subject)
        try:
            merges = self._merges_with_base(ref)
        except InfrastructureError:
            self.workspace.delete_temp_ref(ref)
            raise
        if not merges:
            logger.warning(
                "{pr} does not merge cleanly with {branch}",
                pr=str(subject),
                branch=self.config.main_branch,
            )
        return ref

    def _recover(self, merge: Conflict, ref: str) -> Conflict:
        lines = {}
        for path in sorted(merge.files):
            logger.debug("Extracting conflicting lines of {path}", path=path)
            lines[path] = recover_lines(
                self.workspace.read_worktree_file(path),
                self.workspace.show_pristine(ref, path),
                strategy=self.config.line_strategy,
                fallback=self.config.positional_fallback,
                path=path,
            )
        return Conflict(files=merge.files, lines=lines)

    def attempt(
        self, subject_ref: str, candidate: PullRequestRef
    ) -> PairResult:
        """Merge the subject's ref into the candidate without committing.

        The candidate is "ours", so recovered line numbers refer to the
        candidate's files.

        Args:
            subject_ref: Ref returned by prepare_subject()
            candidate: The other pull request

        Returns:
            PairResult; infrastructure errors are reported as an
            InfrastructureFailure outcome rather than raised
        """
        stages = [MergeStage.INIT]
        outcome: MergeAttemptOutcome

        with logger.span("Checking {pr}", pr=str(candidate)):
            try:
                self.workspace.sync_base(self.config.main_branch)
                stages.append(MergeStage.BASE_SYNCED)

                with self.workspace.staged(candidate) as ref:
                    stages.append(MergeStage.CANDIDATE_STAGED)

                    if not self._merges_with_base(ref):
                        stages.append(MergeStage.SKIPPED)
                        outcome = Skipped(
                            reason=(
                                f"{candidate} does not merge cleanly with "
                                f"{self.config.main_branch}"
                            )
                        )
                    else:
                        stages.append(MergeStage.CANDIDATE_MERGED_WITH_BASE)
                        with self.workspace.attempt_merge(subject_ref) as merge:
                            stages.append(MergeStage.MERGE_ATTEMPTED)
                            if isinstance(merge, Conflict):
                                outcome = self._recover(merge, ref)
                                stages.append(MergeStage.CONFLICT)
                            else:
                                outcome = merge
                                stages.append(MergeStage.CLEAN)
            except InfrastructureError as e:
                logger.error(
                    "Merge attempt for {pr} failed",
                    pr=str(candidate),
                    _exc_info=e,
                )
                stages.append(MergeStage.FAILED)
                outcome = InfrastructureFailure(cause=str(e))

            stages.append(MergeStage.CLEANED_UP)
            logger.info(
                "{pr}: {kind}", pr=str(candidate), kind=outcome.kind
            )

        return PairResult(outcome=outcome, stages=stages)
