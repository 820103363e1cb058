"""YAML configuration loading with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from conflictwatch.core.log import logger

CONFIG_FILENAME = "conflictwatch.yaml"


def default_config_path() -> Path:
    """Package defaults shipped next to the code."""
    return Path(__file__).parent.parent / "defaults" / "default.yaml"


def cli_includes(argv: list[str]) -> list[str]:
    """Collect `--include FILE` values from an argument vector."""
    includes = []
    i = 1
    while i < len(argv):
        if argv[i] == "--include" and i + 1 < len(argv):
            includes.append(argv[i + 1])
            i += 1
        i += 1
    return includes


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML settings source with `include:` and `--include` support.

    Deep merges, lowest priority first:
    package defaults < user config < ./conflictwatch.yaml < --include files.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        # --include is read before pydantic parses the command line
        includes = cli_includes(sys.argv)
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        if base and includes:
            yaml_file = (
                [base] if isinstance(base, str) else list(base)
            ) + includes
        elif includes:
            yaml_file = includes
        else:
            yaml_file = base

        super().__init__(settings_cls, yaml_file)

    def _read_files(self, files, deep_merge: bool = True):  # noqa: ARG002
        """Load every existing config file and deep-merge them.

        Args:
            files: Configured yaml_file value plus CLI includes
            deep_merge: Accepted for signature compatibility; merging
                is always deep

        Returns:
            Merged settings dictionary
        """
        files_to_load = [
            default_config_path(),
            Path(user_config_dir("conflictwatch", appauthor=False))
            / CONFIG_FILENAME,
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            files_to_load.extend(Path(f).expanduser() for f in files)

        result = {}
        seen = set()
        for file_path in files_to_load:
            resolved = file_path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)

            if not file_path.is_file():
                logger.debug(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
                continue
            data = self._load_file_recursive(file_path, set())
            result = self._deep_merge(result, data)

        return result

    def _load_file_recursive(
        self, filepath: Path, visited: set[Path]
    ) -> dict:
        """Load a YAML file, resolving `include:` recursively.

        Included files are merged underneath the including file, so the
        including file wins on conflicts.

        Raises:
            ValueError: On a circular include
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        for inc in includes:
            inc_path = Path(inc)
            if not inc_path.is_absolute():
                inc_path = filepath.parent / inc_path
            inc_data = self._load_file_recursive(inc_path, visited.copy())
            data = self._deep_merge(inc_data, data)

        return data

    def _deep_merge(self, base: dict, override: dict) -> dict:
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
