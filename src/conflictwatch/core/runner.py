"""Shell command execution on top of invoke."""

from pathlib import Path

from invoke import Context, Result

from conflictwatch.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    Output is always captured; nothing is echoed to the terminal.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Run a shell command.

        Args:
            command: Command string to execute
            cwd: Working directory for the command
            check: If True, raise on a non-zero exit code
            env: Extra environment variables (merged into os.environ)

        Returns:
            invoke.Result with stdout, stderr and exited

        Raises:
            invoke.UnexpectedExit: If check is True and the command fails
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if env:
            kwargs["env"] = env

        logger.spew("exec", command=command, cwd=str(cwd) if cwd else None)

        if cwd:
            with self.cd(str(cwd)):
                result = self.run(command, **kwargs)
        else:
            result = self.run(command, **kwargs)

        logger.spew(
            "exit {exited}",
            exited=result.exited,
            stdout_bytes=len(result.stdout),
            stderr_bytes=len(result.stderr),
        )
        return result
