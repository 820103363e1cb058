"""PostSummary node - comment on the subject pull request."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from conflictwatch.core.config import State
from conflictwatch.core.log import logger
from conflictwatch.report.comment import compose_comment


@dataclass
class PostSummary(BaseNode[State, None, int]):
    """Post the conflict summary unless quiet or nothing changed.

    A summary is only worth posting when this run requested at least
    one reviewer; otherwise an earlier run already said the same thing.
    """

    async def run(self, ctx: GraphRunContext[State]) -> End[int]:
        run = ctx.state.runtime.run

        if ctx.state.config.conflicts.quiet:
            logger.debug("Quiet mode, not commenting")
        elif run.review_counts is None or run.review_counts.total == 0:
            logger.debug("No new reviewers requested, not commenting")
        else:
            run.client.create_comment(
                run.subject.number, compose_comment(run.records)
            )
            run.comment_posted = True

        run.status = "complete"
        return End(0)
