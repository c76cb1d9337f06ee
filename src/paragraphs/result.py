"""Result type for explicit error handling without exceptions.

Operations return ``Ok(value)`` or ``Err(error)`` where ``error`` is one of
the typed failures in ``src.paragraphs.errors``. Callers branch on
``is_ok()``/``is_err()``; ``unwrap()`` re-raises the carried exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:  # type: ignore[type-var]
        return fn(self.value)


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing a typed failure."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:  # type: ignore[type-var]
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:  # type: ignore[type-var]
        return Err(self.error)  # type: ignore[return-value]


Result = Union[Ok[T], Err[E]]
