"""Decide and apply reviewer requests in both directions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from conflictwatch.core.log import logger
from conflictwatch.core.result import ConflictRecord
from conflictwatch.hosting.github import GitHubClient
from conflictwatch.hosting.models import PullRequestRef


class ReviewPlan(BaseModel):
    """Reviewers to request on the subject and on each conflicting PR."""

    model_config = ConfigDict(frozen=True)

    subject_number: int
    subject_requests: tuple[str, ...] = ()
    candidate_requests: dict[int, tuple[str, ...]] = Field(
        default_factory=dict
    )

    @property
    def empty(self) -> bool:
        return not self.subject_requests and not self.candidate_requests


class ReviewCounts(BaseModel):
    subject: int = 0
    candidates: int = 0

    @property
    def total(self) -> int:
        return self.subject + self.candidates


def plan_reviews(
    subject: PullRequestRef,
    subject_reviewers: frozenset[str],
    records: list[ConflictRecord],
) -> ReviewPlan:
    """Work out which reviewers are missing.

    The subject gets every distinct conflicting author who is neither its
    author nor already a reviewer. Each conflicting PR gets the subject's
    author unless they wrote that PR or already review it. Running the
    plan a second time against the updated reviewer sets yields nothing.
    """
    authors = []
    for record in records:
        author = record.other_pr.author
        if (
            author
            and author != subject.author
            and author not in subject_reviewers
            and author not in authors
        ):
            authors.append(author)

    candidate_requests = {}
    for record in records:
        other = record.other_pr
        if other.number in candidate_requests:
            continue
        if other.author == subject.author or subject.author in other.reviewers:
            continue
        candidate_requests[other.number] = (subject.author,)

    return ReviewPlan(
        subject_number=subject.number,
        subject_requests=tuple(authors),
        candidate_requests=candidate_requests,
    )


def request_reviews(client: GitHubClient, plan: ReviewPlan) -> ReviewCounts:
    """Send the requests in a plan and count them.

    Raises:
        HostingError: If any request is rejected
    """
    counts = ReviewCounts()

    if plan.subject_requests:
        client.request_reviewers(plan.subject_number, list(plan.subject_requests))
        counts.subject = len(plan.subject_requests)
    else:
        logger.debug("No new reviews to request on the subject")

    for number, reviewers in plan.candidate_requests.items():
        client.request_reviewers(number, list(reviewers))
        counts.candidates += len(reviewers)

    logger.info(
        "Requested {subject} reviewers on the subject and {candidates} on "
        "conflicting pull requests",
        subject=counts.subject,
        candidates=counts.candidates,
    )
    return counts
