"""Exception types.

Merge conflicts are not errors and never appear here; they are reported
as data (see conflictwatch.core.result).
"""

from __future__ import annotations


class ConflictWatchError(Exception):
    """Base class for all conflictwatch failures."""


class ConfigurationError(ConflictWatchError):
    """Required configuration is missing or inconsistent."""


class InfrastructureError(ConflictWatchError):
    """A git operation failed for a reason other than a merge conflict.

    Attributes:
        command: Shell command that failed
        exit_code: Process exit code
        stderr: Captured standard error
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        if self.command:
            text += f" (command: {self.command}, exit code {self.exit_code})"
        if self.stderr:
            text += f"\nstderr: {self.stderr.strip()}"
        return text


class HostingError(ConflictWatchError):
    """A call to the hosting API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedConflictError(ValueError):
    """Conflict markup is missing its separator or end marker."""

    def __init__(self, message: str, line: int):
        super().__init__(message)
        self.line = line


__all__ = [
    "ConflictWatchError",
    "ConfigurationError",
    "InfrastructureError",
    "HostingError",
    "MalformedConflictError",
]
