"""Settings source for GitHub Actions inputs and context variables.

The Actions runner exposes `with:` inputs as INPUT_<NAME> environment
variables, with the name upper-cased and hyphens preserved
(e.g. INPUT_GITHUB-TOKEN), and describes the repository through
GITHUB_* variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

# input variable -> path inside State
INPUTS = {
    "INPUT_GITHUB-TOKEN": ("config", "github", "token"),
    "INPUT_MAIN-BRANCH": ("config", "conflicts", "main_branch"),
    "INPUT_QUIET": ("config", "conflicts", "quiet"),
    "INPUT_DEBUG": ("config", "debug"),
    "INPUT_EXCLUDED-PATHS": ("config", "conflicts", "excluded_paths"),
}

CONTEXT = {
    "GITHUB_REPOSITORY": ("config", "github", "repository"),
    "GITHUB_API_URL": ("config", "github", "api_url"),
}


def _set_path(target: dict, path: tuple[str, ...], value: Any) -> None:
    for key in path[:-1]:
        target = target.setdefault(key, {})
    target[path[-1]] = value


def split_list(value: str) -> list[str]:
    """Split a comma- or newline-separated input into items."""
    items = value.replace(",", "\n").splitlines()
    return [item.strip() for item in items if item.strip()]


def action_settings(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate Actions environment variables into nested settings.

    Empty values are ignored: the runner sets unspecified optional
    inputs to an empty string.
    """
    data: dict[str, Any] = {}

    token = environ.get("INPUT_GITHUB-TOKEN") or environ.get("GITHUB_TOKEN")
    if token:
        _set_path(data, INPUTS["INPUT_GITHUB-TOKEN"], token)

    for name, path in INPUTS.items():
        if name == "INPUT_GITHUB-TOKEN":
            continue
        value = environ.get(name, "").strip()
        if not value:
            continue
        if name == "INPUT_EXCLUDED-PATHS":
            _set_path(data, path, split_list(value))
        else:
            _set_path(data, path, value)

    for name, path in CONTEXT.items():
        value = environ.get(name, "").strip()
        if value:
            _set_path(data, path, value)

    server = environ.get("GITHUB_SERVER_URL", "").strip()
    if server:
        _set_path(data, ("config", "git", "host"), urlparse(server).netloc)

    return data


class GitHubActionSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading the GitHub Actions environment."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        environ: Mapping[str, str] | None = None,
    ):
        super().__init__(settings_cls)
        self.environ = os.environ if environ is None else environ

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        # Values are produced as a whole in __call__
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return action_settings(self.environ)

    def __repr__(self) -> str:
        return "GitHubActionSettingsSource()"
