"""Application state and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from conflictwatch.core.action_settings import GitHubActionSettingsSource
from conflictwatch.core.base import BaseConfig, BaseState
from conflictwatch.core.log import Logger
from conflictwatch.core.yaml_settings import YamlWithIncludesSettingsSource
from conflictwatch.hosting.models import PullRequestRef

TRUTHY = ("true", "yes", "on")


def parse_flag(value: Any) -> bool:
    """Parse a boolean switch.

    "true", "yes" and "on" (any case) are true; every other string,
    including typos, is false.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


# Shell templates for every git operation. Placeholders are filled with
# shell-quoted values by WorkspaceController.
DEFAULT_GIT_COMMANDS = {
    "config_user_email": "git config user.email {email}",
    "config_user_name": "git config user.name {name}",
    "detach": "git checkout --quiet --detach",
    "fetch_branch": "git fetch --no-tags {remote} {refspec}",
    "remote_add": "git remote add {name} {url}",
    "remote_remove": "git remote remove {name}",
    "remote_list": "git remote",
    "checkout": "git checkout --quiet --detach {ref}",
    "merge": (
        "git -c merge.conflictStyle=merge merge --no-commit --no-ff {ref}"
    ),
    "reset_hard": "git reset --hard HEAD",
    "diff_conflicted_files": "git diff --name-only --diff-filter=U",
    "show": "git show {object}",
    "delete_ref": "git update-ref -d {ref}",
    "for_each_ref": "git for-each-ref --format='%(refname)' {prefix}",
}


# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI, frozen)
# ============================================================

class GitConfig(BaseConfig):
    """Local checkout and git command configuration."""

    workdir: Path = Field(
        default_factory=Path.cwd,
        description="Checkout used for speculative merges",
    )
    remote: str = Field(
        default="origin",
        description="Remote holding the base repository",
    )
    host: str = Field(
        default="github.com",
        description="Host used to build fork remote URLs",
    )
    user_name: str = Field(
        default="GitHub Action",
        description="Committer name configured in the checkout",
    )
    user_email: str = Field(
        default="action@github.com",
        description="Committer email configured in the checkout",
    )
    ref_prefix: str = Field(
        default="refs/conflictwatch",
        description="Namespace for temporary refs",
    )
    commands: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_GIT_COMMANDS),
        description="git command templates by operation name",
    )

    @field_validator("commands")
    @classmethod
    def _fill_commands(cls, value: dict[str, str]) -> dict[str, str]:
        return {**DEFAULT_GIT_COMMANDS, **value}


class GitHubConfig(BaseConfig):
    """Hosting API access."""

    token: str | None = Field(
        default=None,
        repr=False,
        description="Access token (required to run a check)",
    )
    repository: str | None = Field(
        default=None,
        description="Base repository as owner/name",
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="REST API root",
    )
    page_size: int = Field(
        default=100,
        description="per_page for paginated endpoints",
    )
    timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds",
    )

    @property
    def owner_and_name(self) -> tuple[str, str]:
        owner, _, name = (self.repository or "").partition("/")
        return owner, name


class ConflictConfig(BaseConfig):
    """Conflict detection behaviour."""

    main_branch: str = Field(
        default="main",
        description="Integration branch all pull requests target",
    )
    quiet: bool = Field(
        default=False,
        description="Do not post the summary comment",
    )
    excluded_paths: list[str] = Field(
        default_factory=lambda: ["go.mod", "go.sum", "vendor/"],
        description=(
            "Changed files whose path contains any of these substrings "
            "are ignored"
        ),
    )
    line_strategy: Literal["anchor", "positional"] = Field(
        default="anchor",
        description="How conflicting line numbers are recovered",
    )
    positional_fallback: bool = Field(
        default=True,
        description=(
            "Use the positional strategy for a file when the anchor "
            "strategy recovers no line"
        ),
    )

    @field_validator("quiet", mode="before")
    @classmethod
    def _parse_quiet(cls, value: Any) -> bool:
        return parse_flag(value)


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default_factory=Logger,
        description="Logger configuration and runtime instance",
    )
    git: GitConfig = Field(default_factory=GitConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    conflicts: ConflictConfig = Field(default_factory=ConflictConfig)

    debug: bool = Field(
        default=False,
        description="Verbose logging",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "conflictwatch"
        ),
        description="Root directory for log files",
    )
    run_name: str = Field(
        default="check",
        description="Subdirectory of log_root for this run's log file",
    )

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, value: Any) -> bool:
        return parse_flag(value)

    @model_validator(mode='after')
    def _setup_logger(self) -> Config:
        """Configure the global logger once configuration is known."""
        from conflictwatch.core.log import setup_logger

        setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            level="debug" if self.debug else self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
        )
        return self

    def close(self):
        from conflictwatch.core.log import close_logger

        close_logger()
        super().close()


# ============================================================
# RUNTIME STATE (mutable during a run)
# ============================================================

class RunState(BaseState):
    """State of the `check` workflow."""

    client: Any = Field(default=None, description="GitHubClient")
    workspace: Any = Field(default=None, description="WorkspaceController")
    subject_number: int | None = Field(
        default=None, description="Pull request under review"
    )
    subject: PullRequestRef | None = None
    subject_ref: str | None = Field(
        default=None, description="Temporary ref holding the subject head"
    )
    candidates: list[PullRequestRef] = Field(default_factory=list)
    outcomes: dict[int, Any] = Field(
        default_factory=dict,
        description="MergeAttemptOutcome per candidate PR number",
    )
    records: list[Any] = Field(
        default_factory=list, description="ConflictRecords"
    )
    review_counts: Any = None
    comment_posted: bool = False
    status: str = Field(
        default="pending",
        description="pending, running, complete, failed",
    )


class ResetState(BaseState):
    """State of the `reset` workflow."""

    refs_deleted: list[str] = Field(default_factory=list)
    remotes_removed: list[str] = Field(default_factory=list)
    status: str = "pending"


class Runtime(BaseModel):
    """Runtime state grouped by workflow."""

    run: RunState = Field(default_factory=RunState)
    reset: ResetState = Field(default_factory=ResetState)


# ============================================================
# STATE (config + runtime)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every workflow.

    Configuration sources, highest priority first: constructor
    arguments / CLI, GitHub Actions inputs, YAML files, .env,
    CONFLICTWATCH_* environment variables, file secrets.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description="Additional YAML files to include and merge",
    )

    model_config = SettingsConfigDict(
        yaml_file="conflictwatch.yaml",
        env_file=".env",
        env_prefix="CONFLICTWATCH_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            GitHubActionSettingsSource(settings_cls),
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )


__all__ = [
    "State",
    "Config",
    "GitConfig",
    "GitHubConfig",
    "ConflictConfig",
    "parse_flag",
]
