from __future__ import annotations

from typing import Optional

from .enums import GradingErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates grading rules.

    ``field`` names the offending input field, ``subject`` the offending
    subject (submissions) or grade label (threshold tables).
    """

    def __init__(
        self,
        code: GradingErrorCode,
        message: str,
        *,
        field: Optional[str] = None,
        subject: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field
        self.subject = subject

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "subject": self.subject,
        }

    def __repr__(self) -> str:
        return f"ValidationError({self.code.value}, {self.message!r})"
