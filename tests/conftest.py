"""Pytest configuration and fixtures for conflictwatch tests."""

import tempfile
from pathlib import Path

import pytest

from conflictwatch.core.config import GitConfig
from conflictwatch.core.log import ConsoleSink, setup_logger
from conflictwatch.core.runner import Runner
from conflictwatch.git.workspace import WorkspaceController

BASE_LINES = [f"line {n}" for n in range(1, 11)]

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test Author",
    "GIT_AUTHOR_EMAIL": "author@example.com",
    "GIT_COMMITTER_NAME": "Test Author",
    "GIT_COMMITTER_EMAIL": "author@example.com",
    "LC_ALL": "C",
}


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure logging for console-only mode during tests.

    This enables debug output during test runs without requiring
    authentication or sending logs to logfire.dev.
    """
    test_log_root = Path(tempfile.gettempdir()) / "conflictwatch-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


def text(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def with_changes(changes: dict[int, str], lines=None) -> str:
    """BASE_LINES with 1-indexed lines replaced."""
    lines = list(lines or BASE_LINES)
    for number, value in changes.items():
        lines[number - 1] = value
    return text(lines)


class Origin:
    """A bare 'origin' repository plus a seed clone that pushes to it.

    Branches are built in the seed clone and pushed; the checkout under
    test is a separate clone.
    """

    def __init__(self, root: Path):
        self.root = root
        self.runner = Runner()
        self.bare = root / "origin.git"
        self.seed = root / "seed"
        self.git(f"git init --quiet --bare -b main {self.bare}", cwd=root)
        self.git(f"git init --quiet -b main {self.seed}", cwd=root)
        self.git(f"git remote add origin {self.bare}")

        self._write({"app.py": text(BASE_LINES)})
        self.git("git add -A")
        self.git("git commit --quiet -m base")
        self.git("git push --quiet origin main")

    def git(self, command: str, cwd: Path | None = None):
        return self.runner.execute(command, cwd=cwd or self.seed, env=GIT_ENV)

    def _write(self, files: dict[str, str]):
        for path, content in files.items():
            target = self.seed / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)

    def branch(self, name: str, files: dict[str, str], base: str = "main"):
        """Commit `files` on a new branch off `base` and push it."""
        self.git(f"git checkout --quiet -B {name} {base}")
        self._write(files)
        self.git("git add -A")
        self.git(f"git commit --quiet -m {name}")
        self.git(f"git push --quiet --force origin {name}")
        self.git("git checkout --quiet main")

    def orphan(self, name: str, files: dict[str, str]):
        """Push a branch that shares no history with main."""
        self.git(f"git checkout --quiet --orphan {name}")
        self.git("git rm -rf --quiet .")
        self._write(files)
        self.git("git add -A")
        self.git(f"git commit --quiet -m {name}")
        self.git(f"git push --quiet --force origin {name}")
        self.git("git checkout --quiet -f main")

    def advance_main(self, files: dict[str, str]):
        self.git("git checkout --quiet main")
        self._write(files)
        self.git("git add -A")
        self.git("git commit --quiet -m advance")
        self.git("git push --quiet origin main")

    def clone(self, name: str = "work") -> Path:
        target = self.root / name
        self.git(f"git clone --quiet {self.bare} {target}", cwd=self.root)
        return target


@pytest.fixture
def origin(tmp_path):
    """Origin repository whose main holds app.py with ten lines."""
    return Origin(tmp_path)


@pytest.fixture
def git_config(origin):
    return GitConfig(workdir=origin.clone())


@pytest.fixture
def workspace(git_config):
    controller = WorkspaceController(git_config)
    controller.configure_identity()
    controller.sync_base("main")
    return controller


def git_output(workspace: WorkspaceController, command: str) -> str:
    return workspace.runner.execute(
        command, cwd=workspace.workdir, env=GIT_ENV
    ).stdout.strip()
