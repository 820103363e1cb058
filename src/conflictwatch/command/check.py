"""Check command - runs the conflict check workflow."""

from pydantic import BaseModel, Field
from pydantic_graph import End

from conflictwatch.core.errors import ConflictWatchError
from conflictwatch.core.log import logger
from conflictwatch.hosting.event import (
    annotate_failure,
    event_pull_request_number,
)


class CheckCommand(BaseModel):
    """Check a pull request for line-level conflicts with every other
    open pull request and request reviewers where they collide.

    Each candidate is merged speculatively in the local checkout, never
    committed and never pushed.
    """

    pr: int | None = Field(
        default=None,
        description=(
            "Pull request number to check; defaults to the pull request "
            "of the triggering GitHub Actions event"
        ),
    )

    async def run_workflow(self, state: "State") -> int:
        """Run the check workflow.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code (0=success, 1=failure)
        """
        run = state.runtime.run
        try:
            run.subject_number = (
                self.pr if self.pr is not None else event_pull_request_number()
            )

            from conflictwatch.workflow.graph import create_workflow
            from conflictwatch.workflow.nodes.initialize import Initialize

            workflow = create_workflow()
            async with workflow.iter(Initialize(), state=state) as graph_run:
                async for node in graph_run:
                    if isinstance(node, End):
                        logger.info(
                            "Check of #{number} complete",
                            number=run.subject_number,
                        )
                        return node.data

            logger.error("Check failed - workflow ended unexpectedly")
            return 1
        except ConflictWatchError as e:
            run.status = "failed"
            logger.error("Check failed: {error}", error=str(e))
            annotate_failure(str(e))
            return 1
        finally:
            self._cleanup(run)

    @staticmethod
    def _cleanup(run):
        if run.workspace is not None and run.subject_ref:
            run.workspace.delete_temp_ref(run.subject_ref)
            run.subject_ref = None
        if run.client is not None:
            run.client.close()
