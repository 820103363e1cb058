"""ReconcileReviewers node - request missing reviewers both ways."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from conflictwatch.core.config import State
from conflictwatch.core.log import logger
from conflictwatch.review.reconcile import plan_reviews, request_reviews


@dataclass
class ReconcileReviewers(BaseNode[State, None, int]):
    async def run(
        self, ctx: GraphRunContext[State]
    ) -> PostSummary | End[int]:
        run = ctx.state.runtime.run

        if not run.records:
            logger.info("No conflicts found")
            run.status = "complete"
            return End(0)

        plan = plan_reviews(run.subject, run.subject.reviewers, run.records)
        run.review_counts = request_reviews(run.client, plan)

        from conflictwatch.workflow.nodes.report import PostSummary
        return PostSummary()
