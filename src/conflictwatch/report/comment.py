"""Markdown summary posted on the subject pull request."""

from collections.abc import Iterable

from conflictwatch.core.result import ConflictRecord

NBSP = "\u00a0"
BAR = "\u2015"


def format_line_numbers(numbers: Iterable[int]) -> str:
    """Render ascending line numbers compactly.

    Runs of three or more consecutive numbers collapse to "start...end";
    shorter runs are listed one by one.

        >>> format_line_numbers([5, 6, 7, 10])
        '5...7, 10'
        >>> format_line_numbers([5, 7])
        '5, 7'
    """
    numbers = list(numbers)
    if not numbers:
        return ""

    items = []
    start = end = numbers[0]

    def flush():
        if end - start >= 2:
            items.append(f"{start}...{end}")
        else:
            items.append(str(start))
            if end != start:
                items.append(str(end))

    for number in numbers[1:]:
        if number == end + 1:
            end = number
            continue
        flush()
        start = end = number
    flush()

    return ", ".join(items)


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def _file_line(record: ConflictRecord, path: str, lines) -> str:
    url = record.other_pr.blob_urls.get(path)
    link = f'<a href="{url}">{path}</a>' if url else path
    return f"{NBSP * 3} {link} {BAR} {format_line_numbers(lines)}<br />"


def compose_comment(records: list[ConflictRecord]) -> str:
    """Summary of every conflicting pull request, one collapsible
    section each."""
    file_count = sum(record.file_count for record in records)
    pr_count = len(records)

    parts = [
        f"Conflicts detected in {file_count} {_plural(file_count, 'file')} "
        f"across {pr_count} {_plural(pr_count, 'PR')}\n\n"
    ]
    for record in records:
        pr = record.other_pr
        parts.append("<details>\n")
        parts.append(
            f"  <summary>{pr.title} (#{pr.number}) by @{pr.author}</summary>\n"
        )
        for path, lines in record.conflicts.items():
            parts.append(_file_line(record, path, lines))
        parts.append("</details>\n\n")

    return "".join(parts)
