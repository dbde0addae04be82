"""Result type for explicit error handling.

Every fallible operation in pstore (validation, file access, catalog calls)
returns either ``Ok(value)`` or ``Err(error)`` instead of raising, so the
orchestrator can decide exactly when a failure needs an edit rollback.

Usage:
    created = client.create_edit("com.sample.app")
    match created:
        case Ok(edit_id):
            print(f"edit: {edit_id}")
        case Err(error):
            print(f"failed: {error.message}")
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Apply f to the contained value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result.

    Attributes:
        error: The error payload (usually a frozen error dataclass).
    """

    error: E

    def map(self, f: Callable[[T], U]) -> Err[E]:
        """Return self unchanged (no value to map)."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[E]
