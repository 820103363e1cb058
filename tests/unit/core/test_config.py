"""Tests for configuration: flags, Actions inputs and source priority."""

import pytest
from pydantic import ValidationError

from conflictwatch.core.action_settings import action_settings, split_list
from conflictwatch.core.config import (
    DEFAULT_GIT_COMMANDS,
    ConflictConfig,
    GitConfig,
    GitHubConfig,
    State,
    parse_flag,
)

ACTIONS_VARIABLES = [
    "INPUT_GITHUB-TOKEN",
    "INPUT_MAIN-BRANCH",
    "INPUT_QUIET",
    "INPUT_DEBUG",
    "INPUT_EXCLUDED-PATHS",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_SERVER_URL",
]


@pytest.fixture
def clean_environ(monkeypatch):
    for name in ACTIONS_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("sys.argv", ["prog"])
    return monkeypatch


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("YES", True),
        (" On ", True),
        ("false", False),
        ("1", False),
        ("tru", False),
        ("", False),
        (None, False),
        (True, True),
    ],
)
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected


def test_quiet_uses_flag_parsing():
    assert ConflictConfig(quiet="on").quiet is True
    assert ConflictConfig(quiet="nope").quiet is False


def test_conflict_defaults():
    config = ConflictConfig()
    assert config.main_branch == "main"
    assert config.excluded_paths == ["go.mod", "go.sum", "vendor/"]
    assert config.line_strategy == "anchor"


def test_unknown_line_strategy_rejected():
    with pytest.raises(ValidationError):
        ConflictConfig(line_strategy="guess")


def test_config_is_frozen():
    config = ConflictConfig()
    with pytest.raises(ValidationError):
        config.main_branch = "develop"


def test_git_commands_partial_override():
    config = GitConfig(commands={"merge": "git merge --no-commit {ref}"})
    assert config.commands["merge"] == "git merge --no-commit {ref}"
    assert config.commands["show"] == DEFAULT_GIT_COMMANDS["show"]


def test_owner_and_name():
    assert GitHubConfig(repository="octo/repo").owner_and_name == (
        "octo", "repo",
    )
    assert GitHubConfig().owner_and_name == ("", "")


def test_token_hidden_from_repr():
    assert "s3cret" not in repr(GitHubConfig(token="s3cret"))


def test_split_list():
    assert split_list("go.mod, go.sum\nvendor/\n\n") == [
        "go.mod", "go.sum", "vendor/",
    ]


def test_action_settings_mapping():
    data = action_settings({
        "INPUT_GITHUB-TOKEN": "tok",
        "INPUT_MAIN-BRANCH": "develop",
        "INPUT_QUIET": "true",
        "INPUT_DEBUG": "",
        "INPUT_EXCLUDED-PATHS": "go.mod,vendor/",
        "GITHUB_REPOSITORY": "octo/repo",
        "GITHUB_SERVER_URL": "https://ghe.example.com",
    })

    assert data == {
        "config": {
            "github": {"token": "tok", "repository": "octo/repo"},
            "conflicts": {
                "main_branch": "develop",
                "quiet": "true",
                "excluded_paths": ["go.mod", "vendor/"],
            },
            "git": {"host": "ghe.example.com"},
        }
    }


def test_github_token_fallback():
    data = action_settings({"GITHUB_TOKEN": "fallback"})
    assert data["config"]["github"]["token"] == "fallback"

    data = action_settings({"INPUT_GITHUB-TOKEN": "input", "GITHUB_TOKEN": "x"})
    assert data["config"]["github"]["token"] == "input"


def test_state_reads_actions_inputs(clean_environ):
    clean_environ.setenv("INPUT_MAIN-BRANCH", "develop")
    clean_environ.setenv("INPUT_QUIET", "yes")
    clean_environ.setenv("GITHUB_REPOSITORY", "octo/repo")

    config = State().config

    assert config.conflicts.main_branch == "develop"
    assert config.conflicts.quiet is True
    assert config.github.repository == "octo/repo"


def test_actions_inputs_beat_environment(clean_environ):
    clean_environ.setenv("CONFLICTWATCH_CONFIG__CONFLICTS__MAIN_BRANCH", "env")
    clean_environ.setenv("INPUT_MAIN-BRANCH", "input")

    assert State().config.conflicts.main_branch == "input"


def test_environment_used_without_inputs(clean_environ):
    clean_environ.setenv("CONFLICTWATCH_CONFIG__CONFLICTS__MAIN_BRANCH", "env")

    assert State().config.conflicts.main_branch == "env"
