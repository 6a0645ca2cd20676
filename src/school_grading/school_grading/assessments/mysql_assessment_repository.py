from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AssessmentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .exam_ids import derive_exam_id
from .model import AssessmentRecord, SubjectScore
from .repository import AssessmentRepository


class MySQLAssessmentRepository(AssessmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def generate_exam_id(self, *, student_id: str, created_at: datetime) -> str:
        return derive_exam_id(student_id, created_at)

    def save(self, record: AssessmentRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO assessments(exam_id, student_id, assessment_type, exam_date, comments, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.exam_id,
                    record.student_id,
                    record.assessment_type.value,
                    record.exam_date,
                    record.comments,
                    record.created_at,
                ),
            )
            cur.executemany(
                """
                INSERT INTO assessment_subjects(exam_id, position, subject, marks_obtained, total_marks, percentage, grade)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (record.exam_id, i, s.subject, s.marks_obtained, s.total_marks, s.percentage, s.grade)
                    for i, s in enumerate(record.subject_scores)
                ],
            )

    def list_for_student(
        self,
        *,
        student_id: str,
        assessment_type: Optional[AssessmentType] = None,
        exam_date: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[AssessmentRecord]:
        clauses = ["a.student_id=%s"]
        params: list[object] = [str(student_id)]
        if assessment_type is not None:
            clauses.append("a.assessment_type=%s")
            params.append(assessment_type.value)
        if exam_date is not None:
            clauses.append("a.exam_date=%s")
            params.append(exam_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT exam_id, student_id, assessment_type, exam_date, comments, created_at
                FROM assessments a
                WHERE {where}
                ORDER BY a.exam_date DESC, a.created_at DESC
                LIMIT %s
                """,
                tuple(params) + (int(limit),),
            )
            headers = fetchall(cur)
            if not headers:
                return []

            exam_ids = [h["exam_id"] for h in headers]
            placeholders = ",".join(["%s"] * len(exam_ids))
            cur.execute(
                f"""
                SELECT exam_id, subject, marks_obtained, total_marks, percentage, grade
                FROM assessment_subjects
                WHERE exam_id IN ({placeholders})
                ORDER BY exam_id, position ASC
                """,
                tuple(exam_ids),
            )
            scores: dict[str, list[SubjectScore]] = {}
            for r in fetchall(cur):
                scores.setdefault(r["exam_id"], []).append(
                    SubjectScore(
                        subject=r["subject"],
                        marks_obtained=float(r["marks_obtained"]),
                        total_marks=float(r["total_marks"]),
                        percentage=float(r["percentage"]),
                        grade=r["grade"],
                    )
                )

            return [
                AssessmentRecord(
                    exam_id=h["exam_id"],
                    student_id=h["student_id"],
                    assessment_type=AssessmentType(h["assessment_type"]),
                    exam_date=h["exam_date"],
                    subject_scores=tuple(scores.get(h["exam_id"], [])),
                    created_at=h["created_at"],
                    comments=h.get("comments"),
                )
                for h in headers
            ]
