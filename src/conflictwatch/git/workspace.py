"""The shared checkout used for speculative merges.

WorkspaceController is the only code that runs git or touches the
working tree. It owns a single checkout, so callers must finish one
merge attempt (stage, merge, inspect, clean up) before starting the
next.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from invoke import Result

from conflictwatch.core.config import GitConfig
from conflictwatch.core.errors import InfrastructureError
from conflictwatch.core.log import logger
from conflictwatch.core.result import Clean, Conflict
from conflictwatch.core.runner import Runner
from conflictwatch.hosting.models import PullRequestRef

MERGE_FAILED = "Automatic merge failed"

# Output is matched against English messages
GIT_ENV = {"LC_ALL": "C"}


def fork_remote_name(full_name: str) -> str:
    """Remote name for a fork, e.g. 'octo/repo' -> 'fork-octo-repo'."""
    return "fork-" + re.sub(r"[^A-Za-z0-9._-]+", "-", full_name).strip("-")


class WorkspaceController:
    """Scoped git operations on one exclusively-owned checkout."""

    def __init__(self, config: GitConfig, runner: Runner | None = None):
        self.config = config
        self.workdir = Path(config.workdir)
        self.runner = runner or Runner()

    # --------------------------------------------------------
    # command plumbing
    # --------------------------------------------------------

    def _command(self, operation: str, **values: str) -> str:
        template = self.config.commands[operation]
        return template.format(
            **{key: shlex.quote(value) for key, value in values.items()}
        )

    def _git(
        self, operation: str, check: bool = True, **values: str
    ) -> Result:
        """Run a configured git command.

        Raises:
            InfrastructureError: If check is True and git fails
        """
        cmd = self._command(operation, **values)
        result = self.runner.execute(
            cmd, cwd=self.workdir, check=False, env=GIT_ENV
        )
        if check and result.exited != 0:
            raise InfrastructureError(
                f"git {operation.replace('_', ' ')} failed",
                command=cmd,
                exit_code=result.exited,
                stderr=result.stderr,
            )
        return result

    def temp_ref(self, pr: PullRequestRef | int) -> str:
        """Temporary ref name for a pull request."""
        number = pr if isinstance(pr, int) else pr.number
        return f"{self.config.ref_prefix}/pr-{number}"

    # --------------------------------------------------------
    # operations
    # --------------------------------------------------------

    def configure_identity(self):
        """Set a committer identity local to the checkout."""
        self._git("config_user_email", email=self.config.user_email)
        self._git("config_user_name", name=self.config.user_name)

    def sync_base(self, main_branch: str):
        """Fetch the integration branch and fast-forward it locally.

        HEAD is detached first: git refuses to fetch into the branch
        that is checked out.
        """
        logger.debug("Syncing {branch}", branch=main_branch)
        self._git("detach")
        self._git(
            "fetch_branch",
            remote=self.config.remote,
            refspec=f"+refs/heads/{main_branch}:refs/heads/{main_branch}",
        )

    def ensure_remote(self, full_name: str) -> str:
        """Add a remote for a fork; an existing remote is reused."""
        name = fork_remote_name(full_name)
        url = f"https://{self.config.host}/{full_name}.git"
        result = self._git("remote_add", check=False, name=name, url=url)
        if result.exited != 0:
            if "already exists" not in result.stderr:
                raise InfrastructureError(
                    f"Could not add remote for {full_name}",
                    command=self._command("remote_add", name=name, url=url),
                    exit_code=result.exited,
                    stderr=result.stderr,
                )
            logger.debug("Remote {name} already exists", name=name)
        return name

    def stage_branch(self, pr: PullRequestRef) -> str:
        """Fetch a pull request's head branch into its temporary ref.

        Fork branches are fetched from a remote pointing at the fork.

        Returns:
            The temporary ref name
        """
        if pr.is_fork:
            if not pr.source_repo_full_name:
                raise InfrastructureError(
                    f"Head repository of #{pr.number} no longer exists"
                )
            remote = self.ensure_remote(pr.source_repo_full_name)
        else:
            remote = self.config.remote

        ref = self.temp_ref(pr)
        self._git(
            "fetch_branch",
            remote=remote,
            refspec=f"+refs/heads/{pr.branch}:{ref}",
        )
        logger.debug("Staged {pr} as {ref}", pr=str(pr), ref=ref)
        return ref

    @contextmanager
    def staged(self, pr: PullRequestRef) -> Iterator[str]:
        """Stage a pull request for the duration of a with block.

        The temporary ref is deleted on every exit path, including
        when staging itself fails half way.
        """
        ref = self.temp_ref(pr)
        try:
            yield self.stage_branch(pr)
        finally:
            self.delete_temp_ref(ref)

    def checkout(self, ref: str):
        self._git("checkout", ref=ref)

    @contextmanager
    def attempt_merge(self, ref: str) -> Iterator[Clean | Conflict]:
        """Merge `ref` into HEAD without committing.

        Yields Clean or Conflict(files) while the merge result is still
        in the working tree, then hard-resets whatever happened.

        Raises:
            InfrastructureError: If git fails without reporting an
                automatic-merge failure (e.g. unknown ref)
        """
        try:
            result = self._git("merge", check=False, ref=ref)
            if result.exited == 0:
                yield Clean()
            elif MERGE_FAILED in result.stdout + result.stderr:
                yield Conflict(files=frozenset(self.unmerged_files()))
            else:
                raise InfrastructureError(
                    f"Merge of {ref} failed",
                    command=self._command("merge", ref=ref),
                    exit_code=result.exited,
                    stderr=result.stderr or result.stdout,
                )
        finally:
            self.reset_hard()

    def reset_hard(self):
        self._git("reset_hard")

    def unmerged_files(self) -> list[str]:
        """Paths with unresolved conflicts in the working tree."""
        output = self._git("diff_conflicted_files").stdout.strip()
        return output.split("\n") if output else []

    def delete_temp_ref(self, ref: str) -> bool:
        """Delete a temporary ref.

        Failures are logged and swallowed: by the time a ref is deleted
        the caller's result is already known.

        Returns:
            True if the ref was deleted
        """
        result = self._git("delete_ref", check=False, ref=ref)
        if result.exited != 0:
            logger.error(
                "Could not delete temporary ref {ref}",
                ref=ref,
                stderr=result.stderr.strip(),
            )
            return False
        logger.spew("Deleted {ref}", ref=ref)
        return True

    def show_pristine(self, ref: str, path: str) -> str | None:
        """File content as committed at `ref`.

        Returns:
            The content, or None when `path` does not exist at `ref`
        """
        result = self._git("show", check=False, object=f"{ref}:{path}")
        if result.exited == 0:
            return result.stdout
        if (
            "does not exist" in result.stderr
            or "exists on disk, but not in" in result.stderr
        ):
            return None
        raise InfrastructureError(
            f"Could not read {path} at {ref}",
            command=self._command("show", object=f"{ref}:{path}"),
            exit_code=result.exited,
            stderr=result.stderr,
        )

    def read_worktree_file(self, path: str) -> str:
        """Working tree content, conflict markup included."""
        file_path = self.workdir / path
        if not file_path.is_file():
            return ""
        return file_path.read_text(encoding="utf-8", errors="replace")

    def temp_refs(self) -> list[str]:
        """Temporary refs currently present in the checkout."""
        output = self._git(
            "for_each_ref", prefix=self.config.ref_prefix
        ).stdout.strip()
        return output.split("\n") if output else []

    def fork_remotes(self) -> list[str]:
        output = self._git("remote_list").stdout.split()
        return [name for name in output if name.startswith("fork-")]

    def purge(self) -> tuple[list[str], list[str]]:
        """Remove every temporary ref and fork remote.

        Returns:
            (deleted refs, removed remotes)
        """
        refs = [ref for ref in self.temp_refs() if self.delete_temp_ref(ref)]
        remotes = []
        for name in self.fork_remotes():
            self._git("remote_remove", name=name)
            remotes.append(name)
        return refs, remotes
