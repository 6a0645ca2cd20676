from __future__ import annotations

import logging
from typing import Optional, Sequence

import pytest

from src.school_grading.school_grading.core.enums import GradingErrorCode
from src.school_grading.school_grading.thresholds.manager import ThresholdTableManager, default_table
from src.school_grading.school_grading.thresholds.model import GradeThreshold
from src.school_grading.school_grading.thresholds.service import GradeSettingsService


class FakeThresholdRepo:
    def __init__(self, stored: Optional[Sequence[GradeThreshold]] = None):
        self.stored = list(stored) if stored is not None else None
        self.saves = 0

    def load_table(self):
        return self.stored

    def save_table(self, rows):
        self.saves += 1
        self.stored = list(rows)


class UnavailableThresholdRepo(FakeThresholdRepo):
    def save_table(self, rows):
        raise RuntimeError("database is down")


def test_load_uses_defaults_when_nothing_stored():
    manager = ThresholdTableManager()
    svc = GradeSettingsService(FakeThresholdRepo(), manager)

    assert svc.load() == default_table()


def test_load_installs_stored_table():
    stored = [GradeThreshold("Distinction", 75), GradeThreshold("Pass", 40), GradeThreshold("Fail", 0)]
    manager = ThresholdTableManager()
    svc = GradeSettingsService(FakeThresholdRepo(stored), manager)

    svc.load()

    assert manager.classify(80) == "Distinction"
    assert manager.classify(39) == "Fail"


def test_load_falls_back_to_defaults_when_stored_table_is_invalid(caplog):
    stored = [GradeThreshold("A", 80), GradeThreshold("B", 40)]
    svc = GradeSettingsService(FakeThresholdRepo(stored), ThresholdTableManager())

    with caplog.at_level(logging.WARNING):
        table = svc.load()

    assert table == default_table()
    assert "invalid" in caplog.text


def test_update_installs_and_persists():
    repo = FakeThresholdRepo()
    manager = ThresholdTableManager()
    svc = GradeSettingsService(repo, manager)

    result = svc.update([GradeThreshold("Pass", 50), GradeThreshold("Fail", 0)])

    assert result.ok
    assert repo.saves == 1
    assert [r.label for r in repo.stored] == ["Pass", "Fail"]
    assert manager.classify(60) == "Pass"


def test_rejected_update_is_not_persisted():
    repo = FakeThresholdRepo()
    manager = ThresholdTableManager()
    svc = GradeSettingsService(repo, manager)

    result = svc.update([GradeThreshold("Pass", 50), GradeThreshold("Fail", 5)])

    assert result.error.code == GradingErrorCode.MISSING_FLOOR_GRADE
    assert repo.saves == 0
    assert manager.table == default_table()


def test_failed_save_leaves_active_table_unchanged():
    manager = ThresholdTableManager()
    svc = GradeSettingsService(UnavailableThresholdRepo(), manager)

    with pytest.raises(RuntimeError):
        svc.update([GradeThreshold("Pass", 50), GradeThreshold("Fail", 0)])

    assert manager.table == default_table()
    assert manager.classify(60) == "B"


def test_rows_from_payload_parses_form_values():
    result = GradeSettingsService.rows_from_payload(
        {"settings": [{"grade": "A+", "minPercentage": "90"}, {"grade": "F", "minPercentage": 0}]}
    )

    assert result.ok
    assert result.value == [GradeThreshold("A+", 90.0), GradeThreshold("F", 0.0)]


def test_rows_from_payload_rejects_non_numeric_percentage():
    result = GradeSettingsService.rows_from_payload({"settings": [{"grade": "A", "minPercentage": "ninety"}]})

    assert result.error.code == GradingErrorCode.OUT_OF_RANGE
    assert result.error.subject == "A"


def test_rows_from_payload_requires_a_list():
    result = GradeSettingsService.rows_from_payload({})

    assert not result.ok
    assert result.error.code == GradingErrorCode.INVALID_PAYLOAD
    assert result.error.field == "settings"


@pytest.mark.parametrize("payload", [[], "settings", {"settings": "A+"}, {"settings": None}])
def test_rows_from_payload_rejects_wrong_shapes(payload):
    result = GradeSettingsService.rows_from_payload(payload)

    assert result.error.code == GradingErrorCode.INVALID_PAYLOAD


def test_rows_from_payload_rejects_non_object_rows():
    result = GradeSettingsService.rows_from_payload({"settings": ["A+", {"grade": "F", "minPercentage": 0}]})

    assert result.error.code == GradingErrorCode.INVALID_PAYLOAD
    assert result.error.field == "settings"
