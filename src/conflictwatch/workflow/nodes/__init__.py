"""Workflow nodes for graph state machine."""

from conflictwatch.workflow.nodes.initialize import Initialize
from conflictwatch.workflow.nodes.reconcile import ReconcileReviewers
from conflictwatch.workflow.nodes.report import PostSummary
from conflictwatch.workflow.nodes.reset import Reset
from conflictwatch.workflow.nodes.scan import ScanCandidates

__all__ = [
    "Initialize",
    "ScanCandidates",
    "ReconcileReviewers",
    "PostSummary",
    "Reset",
]
