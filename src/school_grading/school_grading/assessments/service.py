from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import coerce_exam_date, now_local
from ..common.validators import as_finite_number, require_non_empty, round_half_up
from ..core.constants import DEFAULT_RECORD_LIMIT, PERCENTAGE_PLACES, SUMMARY_PERCENTAGE_PLACES
from ..core.enums import AssessmentType, GradingErrorCode
from ..core.exceptions import ValidationError
from ..core.result import Result
from ..thresholds.manager import ThresholdTableManager
from .model import AssessmentDraft, AssessmentRecord, AssessmentSummary, SubjectMarks, SubjectScore
from .repository import AssessmentRepository

logger = logging.getLogger(__name__)


def _parse_assessment_type(value: Any) -> AssessmentType:
    raw = value.value if isinstance(value, AssessmentType) else value
    try:
        return AssessmentType(str(raw).strip().lower())
    except ValueError:
        raise ValidationError(
            GradingErrorCode.UNKNOWN_ASSESSMENT_TYPE,
            f"Unknown assessment type: {raw!r}",
            field="assessmentType",
        )


def _parse_exam_date(value: Any) -> date:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(GradingErrorCode.MISSING_DATE, "Please select an exam date.", field="examDate")
    try:
        return coerce_exam_date(value)
    except (TypeError, ValueError):
        raise ValidationError(GradingErrorCode.MISSING_DATE, f"Invalid exam date: {value!r}", field="examDate")


def _check_marks(subject: Optional[str], marks_obtained: Any, total_marks: Any) -> tuple[float, float]:
    obtained = as_finite_number(marks_obtained)
    total = as_finite_number(total_marks)
    name = subject or "subject"

    def fail(message: str, field: str) -> ValidationError:
        return ValidationError(GradingErrorCode.INVALID_MARKS, message, field=field, subject=subject)

    if obtained is None:
        raise fail(f"Marks obtained for {name} must be a number.", "marksObtained")
    if total is None:
        raise fail(f"Total marks for {name} must be a number.", "totalMarks")
    if total <= 0:
        raise fail(f"Total marks for {name} must be greater than 0.", "totalMarks")
    if obtained < 0:
        raise fail(f"Marks obtained for {name} cannot be negative.", "marksObtained")
    if obtained > total:
        raise fail(f"Marks obtained cannot exceed total marks for {name}.", "marksObtained")
    return obtained, total


def compute_percentage(marks_obtained: float, total_marks: float) -> float:
    return round_half_up((marks_obtained / total_marks) * 100, PERCENTAGE_PLACES)


class AssessmentService:
    """Use case: validate and record one exam event for one student."""

    def __init__(self, assessments: AssessmentRepository, thresholds: ThresholdTableManager):
        self._assessments = assessments
        self._thresholds = thresholds

    def _validate(self, draft: AssessmentDraft) -> tuple[AssessmentType, date, list[tuple[str, float, float]]]:
        assessment_type = _parse_assessment_type(draft.assessment_type)
        exam_date = _parse_exam_date(draft.exam_date)

        subjects: Sequence[SubjectMarks] = draft.subjects or ()
        if not subjects:
            raise ValidationError(GradingErrorCode.NO_SUBJECTS, "Please select at least one subject.", field="subjects")

        if assessment_type == AssessmentType.SURPRISE and len(subjects) != 1:
            raise ValidationError(
                GradingErrorCode.SURPRISE_REQUIRES_SINGLE_SUBJECT,
                f"A surprise test records exactly one subject (got {len(subjects)}).",
                field="subjects",
            )

        names: list[str] = []
        seen: set[str] = set()
        for s in subjects:
            name = require_non_empty(s.subject, "subject", code=GradingErrorCode.INVALID_MARKS)
            if name in seen:
                raise ValidationError(
                    GradingErrorCode.DUPLICATE_SUBJECT,
                    f"{name} appears more than once.",
                    field="subject",
                    subject=name,
                )
            seen.add(name)
            names.append(name)

        checked: list[tuple[str, float, float]] = []
        for name, s in zip(names, subjects):
            obtained, total = _check_marks(name, s.marks_obtained, s.total_marks)
            checked.append((name, obtained, total))
        return assessment_type, exam_date, checked

    def _score(self, subject: str, obtained: float, total: float) -> SubjectScore:
        percentage = compute_percentage(obtained, total)
        return SubjectScore(
            subject=subject,
            marks_obtained=obtained,
            total_marks=total,
            percentage=percentage,
            grade=self._thresholds.classify(percentage),
        )

    def submit_assessment(self, draft: AssessmentDraft, *, now: Optional[datetime] = None) -> Result[AssessmentRecord]:
        # student_id is an opaque reference owned by the student directory; it is not checked here.
        student_id = str(draft.student_id).strip()
        try:
            assessment_type, exam_date, checked = self._validate(draft)
        except ValidationError as e:
            logger.debug("Rejected submission for student %s: %s", draft.student_id, e)
            return Result.failure(e)

        scores = tuple(self._score(name, obtained, total) for name, obtained, total in checked)
        created_at = now or now_local()
        exam_id = self._assessments.generate_exam_id(student_id=student_id, created_at=created_at)
        comments = (draft.comments or "").strip() or None

        return Result.success(
            AssessmentRecord(
                exam_id=exam_id,
                student_id=student_id,
                assessment_type=assessment_type,
                exam_date=exam_date,
                subject_scores=scores,
                created_at=created_at,
                comments=comments,
            )
        )

    def record_assessment(self, draft: AssessmentDraft, *, now: Optional[datetime] = None) -> Result[AssessmentRecord]:
        """Submit, then hand the finished record to storage."""

        result = self.submit_assessment(draft, now=now)
        if not result.ok:
            return result

        record = result.value
        self._assessments.save(record)
        logger.info(
            "Recorded %s assessment %s for student %s (%d subject(s))",
            record.assessment_type.value,
            record.exam_id,
            record.student_id,
            len(record.subject_scores),
        )
        return result

    def preview_grade(self, marks_obtained: Any, total_marks: Any) -> Result[SubjectScore]:
        try:
            obtained, total = _check_marks(None, marks_obtained, total_marks)
        except ValidationError as e:
            return Result.failure(e)
        return Result.success(self._score("", obtained, total))

    def list_for_student(
        self,
        student_id: str,
        *,
        assessment_type: Any = None,
        exam_date: Any = None,
        limit: int = DEFAULT_RECORD_LIMIT,
    ) -> Result[list[AssessmentRecord]]:
        try:
            type_filter = _parse_assessment_type(assessment_type) if assessment_type else None
            date_filter = _parse_exam_date(exam_date) if exam_date else None
        except ValidationError as e:
            return Result.failure(e)

        rows = self._assessments.list_for_student(
            student_id=str(student_id),
            assessment_type=type_filter,
            exam_date=date_filter,
            limit=int(limit),
        )
        return Result.success(list(rows))

    @staticmethod
    def summarize(record: AssessmentRecord) -> AssessmentSummary:
        total_obtained = sum(s.marks_obtained for s in record.subject_scores)
        total_marks = sum(s.total_marks for s in record.subject_scores)
        overall = 0.0
        if total_marks > 0:
            overall = round_half_up((total_obtained / total_marks) * 100, SUMMARY_PERCENTAGE_PLACES)
        return AssessmentSummary(total_obtained=total_obtained, total_marks=total_marks, overall_percentage=overall)
