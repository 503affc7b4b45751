"""Result type for explicit error handling.

Every step of a release run (git, gpg, svn, file writes) can fail. Steps
return ``Ok(value)`` or ``Err(error)`` and the orchestrator checks each one
before moving on, instead of relying on exceptions unwinding through a
half-mutated repository.

Usage:
    def read_marker(path: Path) -> Result[str, str]:
        if not path.is_file():
            return Err(f"missing marker: {path}")
        return Ok(path.read_text(encoding="utf-8"))

    match read_marker(root / "VERSION"):
        case Ok(text):
            print(text.strip())
        case Err(error):
            print(f"error: {error}")
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeGuard, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Apply ``f`` to the contained value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Raise, since there is no value.

        Raises:
            ValueError: Always, containing the error.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Err[E]:
        """Return self unchanged (no value to map)."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Union[Ok[T], Err[E]]


def is_ok(result: Result[T, E]) -> TypeGuard[Ok[T]]:
    """Type guard narrowing a Result to Ok."""
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> TypeGuard[Err[E]]:
    """Type guard narrowing a Result to Err."""
    return isinstance(result, Err)
