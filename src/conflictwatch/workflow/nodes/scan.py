"""ScanCandidates node - speculative merge against every candidate."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from conflictwatch.conflict.engine import SpeculativeMergeEngine
from conflictwatch.conflict.scanner import ConflictScanner
from conflictwatch.core.config import State


@dataclass
class ScanCandidates(BaseNode[State]):
    async def run(self, ctx: GraphRunContext[State]) -> ReconcileReviewers:
        run = ctx.state.runtime.run
        engine = SpeculativeMergeEngine(
            run.workspace, ctx.state.config.conflicts
        )
        result = ConflictScanner(engine).scan(
            run.subject, run.subject_ref, run.candidates
        )
        run.outcomes = result.outcomes
        run.records = result.records

        from conflictwatch.workflow.nodes.reconcile import ReconcileReviewers
        return ReconcileReviewers()
