from conflictwatch.review.reconcile import (
    ReviewCounts,
    ReviewPlan,
    plan_reviews,
    request_reviews,
)

__all__ = ["ReviewCounts", "ReviewPlan", "plan_reviews", "request_reviews"]
