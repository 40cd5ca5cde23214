"""Result type used at every fallible boundary.

Fetching, parsing and settings loading return `Ok(value)` or `Err(error)`
instead of raising, so callers decide how a failure is presented:

    match fetch_active_releases(client, "Fabrikam", "Web"):
        case Ok(releases):
            render(releases)
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeGuard, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Apply `f` to the contained value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Raise ValueError: an Err has no value."""
        raise ValueError(f"called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[..., U]) -> Err[E]:
        """Return self unchanged; there is no value to map."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]


def is_ok(result: Result[T, E]) -> TypeGuard[Ok[T]]:
    """Narrow `result` to Ok for type checkers."""
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> TypeGuard[Err[E]]:
    """Narrow `result` to Err for type checkers."""
    return isinstance(result, Err)
