from __future__ import annotations

from enum import Enum


class AssessmentType(str, Enum):
    """Category of exam event; governs how many subjects one record may hold."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"
    SURPRISE = "surprise"


class GradingErrorCode(str, Enum):
    """Validation failures reported to the table author or the submitter."""

    # threshold table defects
    OUT_OF_RANGE = "OUT_OF_RANGE"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    NON_MONOTONIC = "NON_MONOTONIC"
    MISSING_FLOOR_GRADE = "MISSING_FLOOR_GRADE"
    INVALID_LABEL = "INVALID_LABEL"

    # submission defects
    UNKNOWN_ASSESSMENT_TYPE = "UNKNOWN_ASSESSMENT_TYPE"
    MISSING_DATE = "MISSING_DATE"
    NO_SUBJECTS = "NO_SUBJECTS"
    SURPRISE_REQUIRES_SINGLE_SUBJECT = "SURPRISE_REQUIRES_SINGLE_SUBJECT"
    DUPLICATE_SUBJECT = "DUPLICATE_SUBJECT"
    INVALID_MARKS = "INVALID_MARKS"

    # request body is not the expected JSON shape
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
