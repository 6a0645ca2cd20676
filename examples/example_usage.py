"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; grading rules live in the services.
"""

import importlib

from config import get_settings_module

from src.school_grading.school_grading.assessments.model import AssessmentDraft, SubjectMarks
from src.school_grading.school_grading.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    draft = AssessmentDraft(
        student_id="STU-001",
        assessment_type="weekly",
        exam_date="2025-03-14",
        subjects=(
            SubjectMarks(subject="Math", marks_obtained=75, total_marks=100),
            SubjectMarks(subject="Science", marks_obtained=73, total_marks=90),
        ),
    )
    result = container.assessment_service.record_assessment(draft)
    if result.ok:
        print(result.value.to_dict())
    else:
        print(result.error.to_dict())


if __name__ == "__main__":
    main()
