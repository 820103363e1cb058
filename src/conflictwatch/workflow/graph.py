"""Graph workflow definitions."""

from pydantic_graph import Graph

from conflictwatch.core.config import State
from conflictwatch.core.log import logger


def create_workflow():
    """Create the conflict check graph.

    Initialize → ScanCandidates → ReconcileReviewers → PostSummary → End

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    from conflictwatch.workflow.nodes.initialize import Initialize
    from conflictwatch.workflow.nodes.reconcile import ReconcileReviewers
    from conflictwatch.workflow.nodes.report import PostSummary
    from conflictwatch.workflow.nodes.scan import ScanCandidates

    return Graph(
        nodes=(Initialize, ScanCandidates, ReconcileReviewers, PostSummary),
        state_type=State,
    )


def create_reset_workflow():
    """Single-node graph that purges leftovers from earlier runs."""
    from conflictwatch.workflow.nodes.reset import Reset

    return Graph(nodes=(Reset,), state_type=State)
