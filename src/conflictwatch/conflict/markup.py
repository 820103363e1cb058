"""Parse git conflict markers into structured hunks."""

from dataclasses import dataclass, field

from conflictwatch.core.errors import MalformedConflictError

START = "<<<<<<<"
BASE = "|||||||"
SEPARATOR = "======="
END = ">>>>>>>"


def _is_marker(line: str, marker: str) -> bool:
    """Git writes a marker alone or followed by a space and a label."""
    return line == marker or line.startswith(marker + " ")


@dataclass
class Hunk:
    """One conflict region of a file.

    Attributes:
        ours: Lines between the start marker and the separator (or the
            base marker in diff3 markup)
        theirs: Lines between the separator and the end marker
        base: diff3 base lines, None for standard markup
        ours_start: 1-indexed line number of the first ours line,
            counting every non-marker line before it except the theirs
            and base lines of earlier hunks
        marker_line: 1-indexed line number of the start marker in the
            conflicted file
    """

    ours: list[str]
    theirs: list[str]
    base: list[str] | None = None
    ours_start: int = 1
    marker_line: int = 1
    ours_ref: str = "ours"
    theirs_ref: str = "theirs"


@dataclass
class ConflictedFile:
    """A conflicted file split into hunks."""

    lines: list[str]
    hunks: list[Hunk] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.hunks)


def parse(content: str) -> ConflictedFile:
    """Split conflicted file content into hunks.

    Args:
        content: File content with conflict markers

    Returns:
        ConflictedFile with one Hunk per conflict region

    Raises:
        MalformedConflictError: If a start marker has no separator or
            no end marker
    """
    lines = content.splitlines()
    parsed = ConflictedFile(lines=lines)
    ours_line = 0
    i = 0

    while i < len(lines):
        line = lines[i]
        if not _is_marker(line, START):
            ours_line += 1
            i += 1
            continue

        base_idx = None
        separator_idx = None
        for j in range(i + 1, len(lines)):
            if _is_marker(lines[j], BASE) and base_idx is None:
                base_idx = j
            elif lines[j] == SEPARATOR:
                separator_idx = j
                break
            elif _is_marker(lines[j], START) or _is_marker(lines[j], END):
                break

        if separator_idx is None:
            raise MalformedConflictError(
                f"Malformed conflict at line {i + 1}: no separator found",
                line=i + 1,
            )

        end_idx = None
        for j in range(separator_idx + 1, len(lines)):
            if _is_marker(lines[j], END):
                end_idx = j
                break
            if _is_marker(lines[j], START) or lines[j] == SEPARATOR:
                break

        if end_idx is None:
            raise MalformedConflictError(
                f"Malformed conflict at line {i + 1}: no end marker found",
                line=i + 1,
            )

        ours_end = base_idx if base_idx is not None else separator_idx
        hunk = Hunk(
            ours=lines[i + 1:ours_end],
            theirs=lines[separator_idx + 1:end_idx],
            base=(
                lines[base_idx + 1:separator_idx]
                if base_idx is not None else None
            ),
            ours_start=ours_line + 1,
            marker_line=i + 1,
            ours_ref=line[len(START):].strip() or "ours",
            theirs_ref=lines[end_idx][len(END):].strip() or "theirs",
        )
        parsed.hunks.append(hunk)

        ours_line += len(hunk.ours)
        i = end_idx + 1

    return parsed
