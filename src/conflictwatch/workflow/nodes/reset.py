"""Reset node - remove temporary refs and fork remotes."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from conflictwatch.core.config import State
from conflictwatch.core.log import logger
from conflictwatch.git.workspace import WorkspaceController


@dataclass
class Reset(BaseNode[State, None, int]):
    """Discard everything earlier runs may have left in the checkout.

    A run killed mid-attempt leaves its temporary refs, fork remotes
    and possibly a half-done merge behind.
    """

    async def run(self, ctx: GraphRunContext[State]) -> End[int]:
        reset = ctx.state.runtime.reset
        workspace = WorkspaceController(ctx.state.config.git)

        workspace.reset_hard()
        refs, remotes = workspace.purge()
        reset.refs_deleted = refs
        reset.remotes_removed = remotes
        reset.status = "complete"

        if not refs and not remotes:
            logger.info("Nothing to reset")
        else:
            logger.info(
                "Deleted {refs} temporary refs and {remotes} fork remotes",
                refs=len(refs),
                remotes=len(remotes),
            )
        return End(0)
