#!/usr/bin/env python3
"""conflictwatch CLI - speculative merge conflict detection for pull
requests."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from conflictwatch.command.check import CheckCommand
from conflictwatch.command.reset import ResetCommand
from conflictwatch.core.config import State
from conflictwatch.core.log import logger


class CliState(State):
    """Detect line-level conflicts between a pull request and every
    other open pull request, and request reviewers across them.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.conflicts.main_branch develop)
    2. GitHub Actions inputs (INPUT_GITHUB-TOKEN, INPUT_QUIET, ...)
    3. conflictwatch.yaml in the current directory, plus --include files
    4. .env file for secrets
    5. Environment variables
       (CONFLICTWATCH_CONFIG__CONFLICTS__MAIN_BRANCH=develop)
    """

    check: CliSubCommand[CheckCommand]
    reset: CliSubCommand[ResetCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Close sinks on exit so file logs are flushed
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
