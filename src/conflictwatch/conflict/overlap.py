"""Changed-file filtering and the overlap pre-check."""

from collections.abc import Iterable


def is_excluded(path: str, excluded: Iterable[str]) -> bool:
    """True if any excluded pattern is a substring of path."""
    return any(pattern in path for pattern in excluded)


def filter_excluded(
    paths: Iterable[str], excluded: Iterable[str]
) -> frozenset[str]:
    """Drop lockfiles, vendored directories and similar paths."""
    excluded = list(excluded)
    return frozenset(path for path in paths if not is_excluded(path, excluded))


def overlapping_files(a: Iterable[str], b: Iterable[str]) -> frozenset[str]:
    return frozenset(a) & frozenset(b)


def worth_attempting(a: Iterable[str], b: Iterable[str]) -> bool:
    """Whether two changed-file sets can conflict at all.

    Pairs that share no file never produce a textual conflict, so the
    merge simulation is skipped for them.
    """
    return bool(overlapping_files(a, b))
