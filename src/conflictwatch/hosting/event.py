"""Reading the GitHub Actions event that triggered a run."""

import json
import os
from pathlib import Path

from conflictwatch.core.errors import ConfigurationError


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def event_pull_request_number(event_path: Path | None = None) -> int:
    """Pull request number from the triggering event payload.

    Args:
        event_path: Payload file; defaults to GITHUB_EVENT_PATH

    Raises:
        ConfigurationError: If there is no payload or it does not
            describe a pull request
    """
    if event_path is None:
        env_path = os.environ.get("GITHUB_EVENT_PATH")
        if not env_path:
            raise ConfigurationError(
                "No pull request given and GITHUB_EVENT_PATH is not set"
            )
        event_path = Path(env_path)

    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Cannot read event payload {event_path}: {e}"
        ) from e

    pull_request = payload.get("pull_request")
    if not pull_request or "number" not in pull_request:
        raise ConfigurationError(
            f"Event payload {event_path} is not a pull request event"
        )
    return int(pull_request["number"])


def annotate_failure(message: str) -> None:
    """Emit a workflow error annotation when running under Actions."""
    if running_in_actions():
        text = message.replace("%", "%25").replace("\r", "%0D")
        print(f"::error::{text.replace(chr(10), '%0A')}", flush=True)
