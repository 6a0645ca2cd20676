from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/grade-settings", methods=["GET"], endpoint="get_grade_settings")
    def get_grade_settings():
        rows = container.grade_settings_service.current()
        return jsonify({"success": True, "gradeSettings": [r.to_dict() for r in rows]}), 200

    @app.route("/api/grade-settings", methods=["PUT", "POST"], endpoint="update_grade_settings")
    def update_grade_settings():
        try:
            parsed = container.grade_settings_service.rows_from_payload(request.get_json(silent=True) or {})
            if not parsed.ok:
                return jsonify({"success": False, **parsed.error.to_dict()}), 400

            result = container.grade_settings_service.update(parsed.value)
            if not result.ok:
                return jsonify({"success": False, **result.error.to_dict()}), 400

            rows = container.grade_settings_service.current()
            return jsonify({
                "success": True,
                "message": "Grade settings updated successfully!",
                "gradeSettings": [r.to_dict() for r in rows],
            }), 200
        except Exception:
            logger.exception("Failed to save grade settings")
            return jsonify({"success": False, "message": "Failed to save grade settings."}), 500
