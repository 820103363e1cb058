"""Recover pristine line numbers of conflicting hunks.

Two strategies are available:

anchor (default)
    Each hunk's "ours" block is located verbatim in the pristine file
    (the checked branch's tip before the merge). The pristine line
    numbers it spans are reported. Blocks that cannot be found, for
    example because the content drifted, contribute nothing.

positional
    Line numbers are derived from the conflicted file itself: ours and
    theirs are compared position by position and every position where
    both sides have a line and the lines differ is reported. Positions
    present on one side only are not reported.

Marker lines are never reported by either strategy.
"""

from __future__ import annotations

from typing import Literal

from conflictwatch.conflict.markup import ConflictedFile, parse
from conflictwatch.core.errors import MalformedConflictError
from conflictwatch.core.log import logger

Strategy = Literal["anchor", "positional"]


def _find_block(block: list[str], haystack: list[str], start: int) -> int:
    """Index of the first full occurrence of block at or after start."""
    first = block[0]
    last = len(haystack) - len(block)
    for index in range(start, last + 1):
        if haystack[index] != first:
            continue
        if haystack[index:index + len(block)] == block:
            return index
    return -1


def anchor_lines(conflicted: ConflictedFile, pristine: str) -> list[int]:
    """Pristine line numbers spanned by every locatable ours block.

    Hunks appear in file order, so each search starts after the
    previous match and only wraps to the top when that fails.
    """
    pristine_lines = pristine.splitlines()
    found: set[int] = set()
    cursor = 0

    for hunk in conflicted.hunks:
        if not hunk.ours:
            continue
        index = _find_block(hunk.ours, pristine_lines, cursor)
        if index == -1 and cursor:
            index = _find_block(hunk.ours, pristine_lines, 0)
        if index == -1:
            logger.debug(
                "Ours block at line {line} not found in pristine file",
                line=hunk.marker_line,
            )
            continue
        found.update(range(index + 1, index + len(hunk.ours) + 1))
        cursor = index + len(hunk.ours)

    return sorted(found)


def positional_lines(conflicted: ConflictedFile) -> list[int]:
    """Line numbers where ours and theirs differ at the same offset."""
    found: set[int] = set()
    for hunk in conflicted.hunks:
        for offset, (ours, theirs) in enumerate(zip(hunk.ours, hunk.theirs)):
            if ours != theirs:
                found.add(hunk.ours_start + offset)
    return sorted(found)


def recover_lines(
    conflicted_text: str,
    pristine_text: str | None,
    strategy: Strategy = "anchor",
    fallback: bool = True,
    path: str = "",
) -> tuple[int, ...]:
    """Recover the original line numbers of a conflicted file.

    Args:
        conflicted_text: Working tree content with conflict markup
        pristine_text: Content at the checked branch's tip, or None if
            the file does not exist there
        strategy: "anchor" or "positional"
        fallback: With the anchor strategy, use the positional result
            when no block could be anchored
        path: File path, for log messages

    Returns:
        Strictly increasing 1-indexed line numbers
    """
    try:
        conflicted = parse(conflicted_text)
    except MalformedConflictError as e:
        logger.warning(
            "Skipping {path}: {error}", path=path, error=str(e)
        )
        return ()

    if not conflicted.has_conflicts:
        return ()

    if strategy == "positional":
        return tuple(positional_lines(conflicted))

    lines = anchor_lines(conflicted, pristine_text or "")
    if not lines and fallback:
        lines = positional_lines(conflicted)
        if lines:
            logger.warning(
                "No conflict block of {path} matched its pristine "
                "content; using positional line numbers",
                path=path,
            )
    return tuple(lines)
