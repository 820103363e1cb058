"""Base classes for configuration and runtime state models.

- Closeable protocol for anything holding an external resource
- BaseCloseable, which closes its Closeable children on close()
- BaseConfig for immutable configuration sections
- BaseState for runtime state that changes during a run

Kept apart from config.py so log.py can import it without a cycle.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class Closeable(Protocol):
    """Protocol for objects that support close()."""

    def close(self) -> None:
        """Release resources."""
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its Closeable fields.

    Usable as a context manager. A failing child does not stop the
    remaining children from being closed; the failure is reported on
    stderr because the logger may be one of the children being closed.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None:
                continue

            if isinstance(child, Closeable):
                try:
                    child.close()
                except Exception as e:
                    print(
                        f"Warning: Error closing {field_name}: {e}",
                        file=sys.stderr,
                    )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Base class for configuration sections.

    Sections are frozen: configuration is built once per run and handed
    to every component by value.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BaseState(BaseCloseable):
    """Base class for runtime state sections (mutable during a run)."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
