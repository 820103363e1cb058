"""Tests for reviewer reconciliation."""

import pytest

from conflictwatch.core.errors import HostingError
from conflictwatch.core.result import ConflictRecord
from conflictwatch.hosting.models import PullRequestRef
from conflictwatch.review.reconcile import (
    ReviewPlan,
    plan_reviews,
    request_reviews,
)

SUBJECT = PullRequestRef(number=1, branch="subject", author="bob")


def record(number, author, reviewers=()):
    return ConflictRecord(
        other_pr=PullRequestRef(
            number=number,
            branch=f"b{number}",
            author=author,
            reviewers=frozenset(reviewers),
        ),
        conflicts={"a.py": (1,)},
    )


class RecordingClient:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def request_reviewers(self, number, reviewers):
        if number == self.fail_on:
            raise HostingError("rejected", status_code=422)
        self.calls.append((number, reviewers))


def test_requests_in_both_directions():
    plan = plan_reviews(SUBJECT, frozenset(), [record(2, "alice")])

    assert plan.subject_requests == ("alice",)
    assert plan.candidate_requests == {2: ("bob",)}


def test_subject_author_never_requested_on_own_pr():
    plan = plan_reviews(SUBJECT, frozenset(), [record(2, "bob")])

    assert plan.subject_requests == ()
    assert plan.candidate_requests == {}


def test_authors_deduplicated():
    plan = plan_reviews(
        SUBJECT, frozenset(), [record(2, "alice"), record(3, "alice")]
    )

    assert plan.subject_requests == ("alice",)
    assert plan.candidate_requests == {2: ("bob",), 3: ("bob",)}


def test_directions_are_independent():
    """alice already reviews the subject; bob does not review #2."""
    plan = plan_reviews(SUBJECT, frozenset({"alice"}), [record(2, "alice")])

    assert plan.subject_requests == ()
    assert plan.candidate_requests == {2: ("bob",)}

    plan = plan_reviews(
        SUBJECT, frozenset(), [record(2, "alice", reviewers={"bob"})]
    )

    assert plan.subject_requests == ("alice",)
    assert plan.candidate_requests == {}


def test_second_plan_is_empty():
    records = [record(2, "alice"), record(3, "carol")]
    first = plan_reviews(SUBJECT, frozenset(), records)

    updated = [
        record(r.other_pr.number, r.other_pr.author, reviewers={"bob"})
        for r in records
    ]
    second = plan_reviews(
        SUBJECT, frozenset(first.subject_requests), updated
    )

    assert not first.empty
    assert second.empty


def test_request_reviews_counts():
    client = RecordingClient()
    plan = ReviewPlan(
        subject_number=1,
        subject_requests=("alice", "carol"),
        candidate_requests={2: ("bob",), 3: ("bob",)},
    )

    counts = request_reviews(client, plan)

    assert client.calls == [(1, ["alice", "carol"]), (2, ["bob"]), (3, ["bob"])]
    assert counts.subject == 2
    assert counts.candidates == 2
    assert counts.total == 4


def test_empty_plan_makes_no_calls():
    client = RecordingClient()
    counts = request_reviews(client, ReviewPlan(subject_number=1))

    assert client.calls == []
    assert counts.total == 0


def test_hosting_error_propagates():
    client = RecordingClient(fail_on=2)
    plan = ReviewPlan(subject_number=1, candidate_requests={2: ("bob",)})

    with pytest.raises(HostingError):
        request_reviews(client, plan)
