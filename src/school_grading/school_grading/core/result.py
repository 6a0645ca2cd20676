from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .exceptions import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or validation error returned by the public grading operations."""

    value: Optional[T] = None
    error: Optional[ValidationError] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ValidationError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, re-raising the error for callers that prefer exceptions."""

        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
