from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GradeThreshold:
    """One row of the threshold table: the lowest percentage earning ``label``."""

    label: str
    min_percentage: float

    def to_dict(self) -> dict:
        return {"grade": self.label, "minPercentage": self.min_percentage}
