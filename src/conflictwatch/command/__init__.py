"""CLI command modules for conflictwatch."""

from conflictwatch.command.check import CheckCommand
from conflictwatch.command.reset import ResetCommand

__all__ = ["CheckCommand", "ResetCommand"]
