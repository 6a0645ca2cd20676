from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AssessmentType
from .model import AssessmentRecord


class AssessmentRepository(Protocol):
    def generate_exam_id(self, *, student_id: str, created_at: datetime) -> str:
        raise NotImplementedError

    def save(self, record: AssessmentRecord) -> None:
        raise NotImplementedError

    def list_for_student(
        self,
        *,
        student_id: str,
        assessment_type: Optional[AssessmentType] = None,
        exam_date: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[AssessmentRecord]:
        """Records for one student, newest exam date first."""

        raise NotImplementedError
