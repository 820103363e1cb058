"""Check the subject pull request against every candidate, one at a time."""

from __future__ import annotations

from dataclasses import dataclass, field

from conflictwatch.conflict.engine import SpeculativeMergeEngine
from conflictwatch.conflict.overlap import worth_attempting
from conflictwatch.core.errors import InfrastructureError
from conflictwatch.core.log import logger
from conflictwatch.core.result import (
    Conflict,
    ConflictRecord,
    InfrastructureFailure,
    MergeAttemptOutcome,
    Skipped,
)
from conflictwatch.hosting.models import PullRequestRef


@dataclass
class ScanResult:
    records: list[ConflictRecord] = field(default_factory=list)
    outcomes: dict[int, MergeAttemptOutcome] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        """Number of candidates that reached the merge engine."""
        return sum(
            1 for outcome in self.outcomes.values()
            if not isinstance(outcome, Skipped)
        )


class ConflictScanner:
    """Gates candidates with the overlap filter and aggregates results.

    Attempts run strictly in sequence because they share one checkout.
    """

    def __init__(self, engine: SpeculativeMergeEngine):
        self.engine = engine

    def check_pair(
        self,
        subject: PullRequestRef,
        subject_ref: str,
        candidate: PullRequestRef,
    ) -> MergeAttemptOutcome:
        if not worth_attempting(subject.changed_files, candidate.changed_files):
            return Skipped(reason="no overlapping files")
        if candidate.is_fork and not candidate.source_repo_full_name:
            return Skipped(reason="head repository no longer exists")
        return self.engine.attempt(subject_ref, candidate).outcome

    def scan(
        self,
        subject: PullRequestRef,
        subject_ref: str,
        candidates: list[PullRequestRef],
    ) -> ScanResult:
        """Check every candidate against the subject.

        Raises:
            InfrastructureError: As soon as one attempt fails; the run
                cannot continue on a checkout in an unknown state
        """
        result = ScanResult()

        for candidate in candidates:
            outcome = self.check_pair(subject, subject_ref, candidate)
            result.outcomes[candidate.number] = outcome

            if isinstance(outcome, InfrastructureFailure):
                raise InfrastructureError(
                    f"Checking {candidate} failed: {outcome.cause}"
                )

            if isinstance(outcome, Skipped):
                logger.debug(
                    "Skipped {pr}: {reason}",
                    pr=str(candidate),
                    reason=outcome.reason,
                )
                continue

            if isinstance(outcome, Conflict):
                record = ConflictRecord.from_outcome(candidate, outcome)
                if record is None:
                    logger.warning(
                        "{pr} conflicts in {files} but no conflicting "
                        "line could be recovered",
                        pr=str(candidate),
                        files=sorted(outcome.files),
                    )
                    continue
                result.records.append(record)

        logger.info(
            "Found conflicts with {count} of {total} pull requests",
            count=len(result.records),
            total=len(candidates),
        )
        return result
