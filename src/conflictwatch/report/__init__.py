from conflictwatch.report.comment import compose_comment, format_line_numbers

__all__ = ["compose_comment", "format_line_numbers"]
