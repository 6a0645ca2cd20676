from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.school_grading.school_grading.assessments.controller import register as register_assessments
from src.school_grading.school_grading.assessments.exam_ids import derive_exam_id
from src.school_grading.school_grading.assessments.service import AssessmentService
from src.school_grading.school_grading.thresholds.controller import register as register_thresholds
from src.school_grading.school_grading.thresholds.manager import ThresholdTableManager
from src.school_grading.school_grading.thresholds.service import GradeSettingsService


class FakeThresholdRepo:
    def __init__(self):
        self.stored = None

    def load_table(self):
        return self.stored

    def save_table(self, rows):
        self.stored = list(rows)


class FakeAssessmentRepo:
    def __init__(self):
        self.saved = []

    def generate_exam_id(self, *, student_id, created_at):
        return derive_exam_id(student_id, created_at)

    def save(self, record):
        self.saved.append(record)

    def list_for_student(self, *, student_id, assessment_type=None, exam_date=None, limit=200):
        rows = [r for r in self.saved if r.student_id == student_id]
        if assessment_type is not None:
            rows = [r for r in rows if r.assessment_type == assessment_type]
        if exam_date is not None:
            rows = [r for r in rows if r.exam_date == exam_date]
        return rows[:limit]


class UnavailableThresholdRepo(FakeThresholdRepo):
    def save_table(self, rows):
        raise RuntimeError("database is down")


class ExplodingAssessmentRepo(FakeAssessmentRepo):
    def save(self, record):
        raise RuntimeError("database is down")


def _client(assessments_repo=None, thresholds_repo=None):
    manager = ThresholdTableManager()
    thresholds_repo = thresholds_repo or FakeThresholdRepo()
    assessments_repo = assessments_repo or FakeAssessmentRepo()
    container = SimpleNamespace(
        threshold_manager=manager,
        thresholds_repo=thresholds_repo,
        assessments_repo=assessments_repo,
        grade_settings_service=GradeSettingsService(thresholds_repo, manager),
        assessment_service=AssessmentService(assessments_repo, manager),
    )
    container.grade_settings_service.load()

    app = Flask(__name__)
    app.config["TESTING"] = True
    register_thresholds(app, container)
    register_assessments(app, container)
    return app.test_client(), container


@pytest.fixture
def client():
    return _client()


def _payload(**overrides):
    data = {
        "studentId": "STU-1",
        "gradeType": "weekly",
        "examDate": "2025-03-14",
        "comments": "",
        "subjects": [
            {"subject": "Math", "marksObtained": 75, "totalMarks": 100},
            {"subject": "Science", "marksObtained": "73", "totalMarks": "90"},
        ],
    }
    data.update(overrides)
    return data


def test_get_grade_settings_returns_defaults(client):
    http, _ = client

    resp = http.get("/api/grade-settings")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["gradeSettings"][0] == {"grade": "A+", "minPercentage": 90.0}
    assert body["gradeSettings"][-1] == {"grade": "F", "minPercentage": 0.0}


def test_put_grade_settings_installs_and_persists(client):
    http, container = client

    resp = http.put(
        "/api/grade-settings",
        json={"settings": [{"grade": "Pass", "minPercentage": "50"}, {"grade": "Fail", "minPercentage": 0}]},
    )

    assert resp.status_code == 200
    assert [r.label for r in container.thresholds_repo.stored] == ["Pass", "Fail"]
    assert container.threshold_manager.classify(50) == "Pass"


def test_put_grade_settings_reports_offending_row(client):
    http, container = client

    resp = http.put(
        "/api/grade-settings",
        json={
            "settings": [
                {"grade": "A", "minPercentage": 50},
                {"grade": "B", "minPercentage": 60},
                {"grade": "F", "minPercentage": 0},
            ]
        },
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["code"] == "NON_MONOTONIC"
    assert body["field"] == "minPercentage"
    assert body["subject"] == "A"
    assert container.thresholds_repo.stored is None


def test_add_grades_records_and_returns_exam_id(client):
    http, container = client

    resp = http.post("/api/grades", json=_payload())

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["examId"].startswith("EX-STU-1-")
    assert [s["grade"] for s in body["grade"]["subjects"]] == ["A", "A"]
    assert body["grade"]["subjects"][1]["percentage"] == "81.11"
    assert body["grade"]["summary"]["overallPercentage"] == "77.9"
    assert len(container.assessments_repo.saved) == 1


def test_add_grades_rejects_invalid_marks(client):
    http, container = client

    resp = http.post(
        "/api/grades",
        json=_payload(subjects=[{"subject": "Math", "marksObtained": 110, "totalMarks": 100}]),
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "INVALID_MARKS"
    assert body["subject"] == "Math"
    assert container.assessments_repo.saved == []


def test_add_grades_requires_student(client):
    http, _ = client

    resp = http.post("/api/grades", json=_payload(studentId=""))

    assert resp.status_code == 400
    assert resp.get_json()["field"] == "studentId"


def test_add_grades_storage_failure_is_500():
    http, _ = _client(ExplodingAssessmentRepo())

    resp = http.post("/api/grades", json=_payload())

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False


def test_student_grades_filters(client):
    http, _ = client
    http.post("/api/grades", json=_payload())
    http.post(
        "/api/grades",
        json=_payload(gradeType="surprise", subjects=[{"subject": "Urdu", "marksObtained": 9, "totalMarks": 10}]),
    )

    all_resp = http.get("/api/students/STU-1/grades")
    surprise_resp = http.get("/api/students/STU-1/grades?gradeType=surprise&date=2025-03-14")
    bad_resp = http.get("/api/students/STU-1/grades?gradeType=termly")

    assert len(all_resp.get_json()["grades"]) == 2
    grades = surprise_resp.get_json()["grades"]
    assert [g["gradeType"] for g in grades] == ["surprise"]
    assert grades[0]["subjects"][0]["grade"] == "A+"
    assert bad_resp.status_code == 400
    assert bad_resp.get_json()["code"] == "UNKNOWN_ASSESSMENT_TYPE"


def test_preview_grade_endpoint(client):
    http, _ = client

    ok = http.post("/api/grades/preview", json={"marksObtained": 55, "totalMarks": 100})
    bad = http.post("/api/grades/preview", json={"marksObtained": 50, "totalMarks": 0})

    assert ok.get_json() == {"success": True, "percentage": "55.00", "grade": "C+"}
    assert bad.status_code == 400
    assert bad.get_json()["code"] == "INVALID_MARKS"


def test_put_grade_settings_storage_failure_keeps_active_table():
    http, container = _client(thresholds_repo=UnavailableThresholdRepo())

    resp = http.put(
        "/api/grade-settings",
        json={"settings": [{"grade": "Pass", "minPercentage": 50}, {"grade": "Fail", "minPercentage": 0}]},
    )

    assert resp.status_code == 500
    assert container.threshold_manager.classify(50) == "C"
    assert http.get("/api/grade-settings").get_json()["gradeSettings"][0]["grade"] == "A+"


@pytest.mark.parametrize(
    "body",
    [
        ["Pass", "Fail"],
        {"settings": "A+"},
        {"settings": ["A+", {"grade": "F", "minPercentage": 0}]},
    ],
)
def test_put_grade_settings_rejects_malformed_body(client, body):
    http, container = client

    resp = http.put("/api/grade-settings", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "INVALID_PAYLOAD"
    assert container.thresholds_repo.stored is None


def test_add_grades_rejects_non_object_body(client):
    http, container = client

    resp = http.post("/api/grades", json=[_payload()])

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "INVALID_PAYLOAD"
    assert container.assessments_repo.saved == []


def test_add_grades_subjects_must_be_a_list(client):
    http, _ = client

    resp = http.post("/api/grades", json=_payload(subjects="Math"))

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "NO_SUBJECTS"


@pytest.mark.parametrize("entry", [7, "Math", None, ["Math", 5, 10]])
def test_add_grades_subject_entry_must_be_an_object(client, entry):
    http, container = client

    resp = http.post(
        "/api/grades",
        json=_payload(subjects=[{"subject": "Math", "marksObtained": 5, "totalMarks": 10}, entry]),
    )

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "INVALID_MARKS"
    assert container.assessments_repo.saved == []


@pytest.mark.parametrize("body", [[55, 100], "55/100"])
def test_preview_grade_rejects_non_object_body(client, body):
    http, _ = client

    resp = http.post("/api/grades/preview", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "INVALID_PAYLOAD"
