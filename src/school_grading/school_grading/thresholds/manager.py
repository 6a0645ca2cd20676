"""Threshold table manager.

Holds the active grade-boundary table and classifies percentages against it.
The table is an immutable tuple kept highest grade first; replacing it swaps
the reference, so a classification running during a replacement sees either
the old or the new table, never a mix.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Sequence

from ..common.validators import as_finite_number
from ..core.constants import DEFAULT_GRADE_THRESHOLDS, MAX_PERCENTAGE, MIN_PERCENTAGE
from ..core.enums import GradingErrorCode
from ..core.exceptions import ValidationError
from ..core.result import Result
from .model import GradeThreshold

logger = logging.getLogger(__name__)


def default_table() -> tuple[GradeThreshold, ...]:
    return tuple(GradeThreshold(label=label, min_percentage=float(pct)) for label, pct in DEFAULT_GRADE_THRESHOLDS)


def _check_table(rows: Sequence[GradeThreshold]) -> None:
    if not rows:
        raise ValidationError(GradingErrorCode.MISSING_FLOOR_GRADE, "Grade table is empty; a 0% floor grade is required")

    for row in rows:
        pct = as_finite_number(row.min_percentage)
        if pct is None or not MIN_PERCENTAGE <= pct <= MAX_PERCENTAGE:
            raise ValidationError(
                GradingErrorCode.OUT_OF_RANGE,
                f"Invalid percentage for {row.label}. Must be between {MIN_PERCENTAGE} and {MAX_PERCENTAGE}.",
                field="minPercentage",
                subject=row.label,
            )

    for row in rows:
        if not isinstance(row.label, str) or not row.label.strip():
            raise ValidationError(GradingErrorCode.INVALID_LABEL, "Grade label must not be empty", field="grade")

    seen_labels: set[str] = set()
    seen_pcts: set[float] = set()
    for row in rows:
        label = row.label.strip()
        if label in seen_labels:
            raise ValidationError(
                GradingErrorCode.DUPLICATE_ENTRY, f"Grade {label} appears more than once", field="grade", subject=label
            )
        pct = float(row.min_percentage)
        if pct in seen_pcts:
            raise ValidationError(
                GradingErrorCode.DUPLICATE_ENTRY,
                f"Minimum percentage {pct:g} is used by more than one grade",
                field="minPercentage",
                subject=label,
            )
        seen_labels.add(label)
        seen_pcts.add(pct)

    # Rows are in rank order (highest grade first); each grade must need more than the next one.
    for current, nxt in zip(rows, rows[1:]):
        if float(current.min_percentage) <= float(nxt.min_percentage):
            raise ValidationError(
                GradingErrorCode.NON_MONOTONIC,
                f"Percentage for {current.label} must be greater than {nxt.label}.",
                field="minPercentage",
                subject=current.label,
            )

    floor = rows[-1]
    if float(floor.min_percentage) != 0:
        raise ValidationError(
            GradingErrorCode.MISSING_FLOOR_GRADE,
            f"The lowest grade ({floor.label}) must start at 0%",
            field="minPercentage",
            subject=floor.label,
        )


def normalize_table(rows: Iterable[GradeThreshold]) -> tuple[GradeThreshold, ...]:
    return tuple(GradeThreshold(label=r.label.strip(), min_percentage=float(r.min_percentage)) for r in rows)


class ThresholdTableManager:
    """Owns the active grade table. Safe to share between threads."""

    def __init__(self, rows: Optional[Sequence[GradeThreshold]] = None):
        self._lock = threading.Lock()
        self._table: tuple[GradeThreshold, ...] = default_table()
        if rows is not None:
            self.replace_table(rows).unwrap()

    @property
    def table(self) -> tuple[GradeThreshold, ...]:
        return self._table

    @staticmethod
    def validate_table(rows: Sequence[GradeThreshold]) -> Result[None]:
        try:
            _check_table(list(rows))
        except ValidationError as e:
            return Result.failure(e)
        return Result.success()

    def replace_table(self, rows: Sequence[GradeThreshold]) -> Result[None]:
        rows = list(rows)
        result = self.validate_table(rows)
        if not result.ok:
            logger.info("Rejected grade table: %s", result.error)
            return result

        new_table = normalize_table(rows)
        with self._lock:
            self._table = new_table
        logger.info("Installed grade table: %s", ", ".join(f"{r.label}>={r.min_percentage:g}" for r in new_table))
        return result

    def classify(self, percentage: float) -> str:
        """Map a percentage in [0, 100] to a grade label.

        A percentage equal to a row's minimum earns that row's grade.
        """

        table = self._table
        for row in table:
            if percentage >= row.min_percentage:
                return row.label
        return table[-1].label

    def rank_of(self, label: str) -> int:
        """Position of ``label`` in the table, 0 for the highest grade."""

        for index, row in enumerate(self._table):
            if row.label == label:
                return index
        raise KeyError(label)
