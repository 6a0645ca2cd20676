from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import GradingErrorCode
from ..core.exceptions import ValidationError


def require_non_empty(
    value: Optional[str],
    field_name: str,
    *,
    code: GradingErrorCode,
    subject: Optional[str] = None,
) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(code, f"{field_name} must not be empty", field=field_name, subject=subject)
    return str(value).strip()


def as_finite_number(value) -> Optional[float]:
    """Return ``value`` as a finite float, or None if it is not one.

    Numeric strings are accepted because marks usually arrive from form fields.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
