from __future__ import annotations

import logging
from typing import Any, Sequence

from ..common.validators import as_finite_number
from ..core.enums import GradingErrorCode
from ..core.exceptions import ValidationError
from ..core.result import Result
from .manager import ThresholdTableManager, default_table, normalize_table
from .model import GradeThreshold
from .repository import ThresholdRepository

logger = logging.getLogger(__name__)


class GradeSettingsService:
    """Use case: load and update the administrator's grade settings."""

    def __init__(self, thresholds: ThresholdRepository, manager: ThresholdTableManager):
        self._thresholds = thresholds
        self._manager = manager

    @property
    def manager(self) -> ThresholdTableManager:
        return self._manager

    def load(self) -> tuple[GradeThreshold, ...]:
        stored = self._thresholds.load_table()
        if not stored:
            logger.info("No stored grade table; using defaults")
            self._manager.replace_table(default_table())
            return self._manager.table

        result = self._manager.replace_table(stored)
        if not result.ok:
            logger.warning("Stored grade table is invalid (%s); using defaults", result.error)
            self._manager.replace_table(default_table())
        return self._manager.table

    def update(self, rows: Sequence[GradeThreshold]) -> Result[None]:
        """Validate, persist, then install. A failed save leaves the active table alone."""

        rows = list(rows)
        result = self._manager.validate_table(rows)
        if not result.ok:
            logger.info("Rejected grade table: %s", result.error)
            return result

        table = normalize_table(rows)
        self._thresholds.save_table(table)
        return self._manager.replace_table(table)

    def current(self) -> tuple[GradeThreshold, ...]:
        return self._manager.table

    @staticmethod
    def rows_from_payload(payload: Any) -> Result[list[GradeThreshold]]:
        """Parse ``{"settings": [{"grade": "A+", "minPercentage": 90}, ...]}``."""

        settings = payload.get("settings") if isinstance(payload, dict) else None
        if not isinstance(settings, list):
            return Result.failure(
                ValidationError(GradingErrorCode.INVALID_PAYLOAD, "settings must be a list of grades", field="settings")
            )

        rows: list[GradeThreshold] = []
        for item in settings:
            if not isinstance(item, dict):
                return Result.failure(
                    ValidationError(GradingErrorCode.INVALID_PAYLOAD, "Each grade setting must be an object", field="settings")
                )
            label = str(item.get("grade") or "").strip()
            pct = as_finite_number(item.get("minPercentage"))
            if pct is None:
                return Result.failure(
                    ValidationError(
                        GradingErrorCode.OUT_OF_RANGE,
                        f"Invalid percentage for {label or 'grade'}. Must be between 0 and 100.",
                        field="minPercentage",
                        subject=label or None,
                    )
                )
            rows.append(GradeThreshold(label=label, min_percentage=pct))
        return Result.success(rows)
