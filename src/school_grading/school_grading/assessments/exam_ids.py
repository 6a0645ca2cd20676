from __future__ import annotations

from datetime import datetime


def derive_exam_id(student_id: str, created_at: datetime) -> str:
    """Deterministic exam id from the student and the creation time (millisecond precision)."""

    stamp = created_at.strftime("%Y%m%d%H%M%S") + f"{created_at.microsecond // 1000:03d}"
    return f"EX-{student_id}-{stamp}"
