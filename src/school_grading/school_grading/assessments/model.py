from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AssessmentType


@dataclass(frozen=True)
class SubjectScore:
    """Marks for one subject with the derived percentage and grade."""

    subject: str
    marks_obtained: float
    total_marks: float
    percentage: float
    grade: str

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "marksObtained": self.marks_obtained,
            "totalMarks": self.total_marks,
            "percentage": f"{self.percentage:.2f}",
            "grade": self.grade,
        }


@dataclass(frozen=True)
class AssessmentRecord:
    """One exam event for one student, immutable once built."""

    exam_id: str
    student_id: str
    assessment_type: AssessmentType
    exam_date: date
    subject_scores: tuple[SubjectScore, ...]
    created_at: datetime
    comments: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "examId": self.exam_id,
            "studentId": self.student_id,
            "gradeType": self.assessment_type.value,
            "examDate": self.exam_date.strftime("%Y-%m-%d"),
            "comments": self.comments or "",
            "subjects": [s.to_dict() for s in self.subject_scores],
            "createdAt": self.created_at.isoformat(timespec="milliseconds"),
        }


@dataclass(frozen=True)
class AssessmentSummary:
    """Totals row shown under a record's subject table."""

    total_obtained: float
    total_marks: float
    overall_percentage: float

    def to_dict(self) -> dict:
        return {
            "totalObtained": self.total_obtained,
            "totalMarks": self.total_marks,
            "overallPercentage": f"{self.overall_percentage:.1f}",
        }


@dataclass(frozen=True)
class SubjectMarks:
    """Raw marks for one subject as typed into the form (numbers or strings)."""

    subject: Any
    marks_obtained: Any
    total_marks: Any


def _subject_from_payload(item: Any) -> SubjectMarks:
    # a non-object entry has no name or marks and fails as INVALID_MARKS
    if not isinstance(item, dict):
        return SubjectMarks(subject=None, marks_obtained=None, total_marks=None)
    return SubjectMarks(
        subject=item.get("subject"),
        marks_obtained=item.get("marksObtained"),
        total_marks=item.get("totalMarks"),
    )


@dataclass(frozen=True)
class AssessmentDraft:
    """The caller's in-progress submission. Nothing here is validated yet."""

    student_id: Any
    assessment_type: Any
    exam_date: Any
    subjects: tuple[SubjectMarks, ...] = field(default_factory=tuple)
    comments: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "AssessmentDraft":
        if not isinstance(payload, dict):
            payload = {}
        raw_subjects = payload.get("subjects")
        if not isinstance(raw_subjects, list):
            raw_subjects = []
        subjects = tuple(_subject_from_payload(s) for s in raw_subjects)
        comments = payload.get("comments")
        return cls(
            student_id=payload.get("studentId"),
            assessment_type=payload.get("assessmentType", payload.get("gradeType")),
            exam_date=payload.get("examDate"),
            subjects=subjects,
            comments=comments if isinstance(comments, str) else None,
        )
