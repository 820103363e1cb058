"""Reset command - removes leftovers of interrupted runs."""

from pydantic import BaseModel

from conflictwatch.core.errors import ConflictWatchError
from conflictwatch.core.log import logger


class ResetCommand(BaseModel):
    """Delete every temporary ref and fork remote a check may have
    left behind, and discard any half-done merge in the checkout.
    """

    async def run_workflow(self, state: "State") -> int:
        """Run reset workflow.

        Args:
            state: State instance

        Returns:
            Exit code (0=success, 1=failure)
        """
        from conflictwatch.workflow.graph import create_reset_workflow
        from conflictwatch.workflow.nodes.reset import Reset

        workflow = create_reset_workflow()
        try:
            result = await workflow.run(Reset(), state=state)
        except ConflictWatchError as e:
            logger.error("Reset failed: {error}", error=str(e))
            return 1

        logger.info("Reset complete")
        return result.output
