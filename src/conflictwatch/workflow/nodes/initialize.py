"""Initialize node - connect to the host and prepare the checkout."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from conflictwatch.conflict.engine import SpeculativeMergeEngine
from conflictwatch.core.config import State
from conflictwatch.core.log import logger
from conflictwatch.git.workspace import WorkspaceController
from conflictwatch.hosting.github import GitHubClient
from conflictwatch.hosting.inventory import PullRequestInventory


@dataclass
class Initialize(BaseNode[State]):
    """Resolve the subject PR and the candidate set, then stage the
    subject's head in the checkout."""

    async def run(self, ctx: GraphRunContext[State]) -> ScanCandidates:
        config = ctx.state.config
        run = ctx.state.runtime.run
        run.status = "running"

        if run.client is None:
            run.client = GitHubClient(config.github)
        if run.workspace is None:
            run.workspace = WorkspaceController(config.git)

        inventory = PullRequestInventory(run.client, config.conflicts)
        run.subject = inventory.subject(run.subject_number)
        run.candidates = inventory.candidates(run.subject_number)
        logger.info(
            "Checking {pr} by @{author} against {count} pull requests",
            pr=str(run.subject),
            author=run.subject.author,
            count=len(run.candidates),
        )

        workspace = run.workspace
        workspace.configure_identity()
        workspace.sync_base(config.conflicts.main_branch)
        engine = SpeculativeMergeEngine(workspace, config.conflicts)
        run.subject_ref = engine.prepare_subject(run.subject)

        from conflictwatch.workflow.nodes.scan import ScanCandidates
        return ScanCandidates()
