"""
errors/result.py - Success-or-failure carrier

Each pipeline step returns a Result holding either its value or the
BudgetError that stopped it. Callers check `ok` and return the failure
unchanged when it is set.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .taxonomy import BudgetError

T = TypeVar("T")


class BudgetFailure(Exception):
    """Raised by Result.unwrap() when the result holds an error."""

    def __init__(self, error: BudgetError):
        super().__init__(str(error))
        self.error = error


@dataclass(frozen=True)
class Result(Generic[T]):
    """Tagged success/failure value."""

    value: Optional[T] = None
    error: Optional[BudgetError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BudgetError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising BudgetFailure if this is a failure."""
        if self.error is not None:
            raise BudgetFailure(self.error)
        return self.value
