"""Speculative merge conflict detection."""

from conflictwatch.conflict.engine import (
    MergeStage,
    PairResult,
    SpeculativeMergeEngine,
)
from conflictwatch.conflict.lines import recover_lines
from conflictwatch.conflict.overlap import filter_excluded, worth_attempting
from conflictwatch.conflict.scanner import ConflictScanner, ScanResult

__all__ = [
    "ConflictScanner",
    "MergeStage",
    "PairResult",
    "ScanResult",
    "SpeculativeMergeEngine",
    "filter_excluded",
    "recover_lines",
    "worth_attempting",
]
