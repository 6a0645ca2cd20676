from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import GradingErrorCode
from ..core.exceptions import ValidationError
from .model import AssessmentDraft

logger = logging.getLogger(__name__)


def _json_object():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(GradingErrorCode.INVALID_PAYLOAD, "Request body must be a JSON object")
    return data


def register(app: Flask, container: Container) -> None:
    def _record_json(record) -> dict:
        data = record.to_dict()
        data["summary"] = container.assessment_service.summarize(record).to_dict()
        return data

    @app.route("/api/grades/preview", methods=["POST"], endpoint="preview_grade")
    def preview_grade():
        try:
            data = _json_object()
        except ValidationError as e:
            return jsonify({"success": False, **e.to_dict()}), 400
        result = container.assessment_service.preview_grade(data.get("marksObtained"), data.get("totalMarks"))
        if not result.ok:
            return jsonify({"success": False, **result.error.to_dict()}), 400

        score = result.value
        return jsonify({"success": True, "percentage": f"{score.percentage:.2f}", "grade": score.grade}), 200

    @app.route("/api/grades", methods=["POST"], endpoint="add_grades")
    def add_grades():
        try:
            data = _json_object()
            if not str(data.get("studentId") or "").strip():
                return jsonify({"success": False, "field": "studentId", "message": "studentId is required"}), 400

            result = container.assessment_service.record_assessment(AssessmentDraft.from_payload(data))
            if not result.ok:
                return jsonify({"success": False, **result.error.to_dict()}), 400

            record = result.value
            return jsonify({
                "success": True,
                "message": "Grades added successfully!",
                "examId": record.exam_id,
                "grade": _record_json(record),
            }), 201
        except ValidationError as e:
            return jsonify({"success": False, **e.to_dict()}), 400
        except Exception:
            logger.exception("Failed to add grades")
            return jsonify({"success": False, "message": "An error occurred while adding grades."}), 500

    @app.route("/api/students/<student_id>/grades", methods=["GET"], endpoint="student_grades")
    def student_grades(student_id: str):
        try:
            result = container.assessment_service.list_for_student(
                student_id,
                assessment_type=request.args.get("gradeType") or None,
                exam_date=request.args.get("date") or None,
            )
            if not result.ok:
                return jsonify({"success": False, **result.error.to_dict()}), 400

            return jsonify({"success": True, "grades": [_record_json(r) for r in result.value]}), 200
        except Exception:
            logger.exception("Failed to fetch grades for student %s", student_id)
            return jsonify({"success": False, "message": "Failed to fetch grades."}), 500
