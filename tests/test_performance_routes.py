from datetime import datetime

import pytest

from app import app
from utils import student_records
from utils.student_records import RecordTransportError, StudentNotFoundError


def record_set(student_id):
    return {
        "student": {"id": student_id, "fullname": "Ayesha Khan", "class": "8", "section": "B"},
        "exams": [
            {"id": 1, "student_id": student_id, "subject": "Math", "exam_type": "Midterm",
             "total_marks": 100, "marks_obtained": 60, "percentage": 60,
             "grade": "C", "created_at": datetime(2024, 1, 10)},
            {"id": 2, "student_id": student_id, "subject": "Math", "exam_type": "Final",
             "total_marks": 100, "marks_obtained": 80, "percentage": 80,
             "grade": "A", "created_at": datetime(2024, 3, 10)},
        ],
        "quizzes": [{"id": 1, "student_id": student_id, "subject": "Math", "rubric": 8,
                     "date": datetime(2024, 2, 1)}],
        "progress_reports": [{"date": datetime(2024, 2, 2), "behavior": "Good"}],
        "quality_reviews": [],
    }


@pytest.fixture
def client(monkeypatch):
    for name in ("MIDTERM_EXAM_TYPES", "FINAL_EXAM_TYPES", "EXAM_TYPE_CASE_INSENSITIVE"):
        monkeypatch.delenv(name, raising=False)
    return app.test_client()


def test_welcome(client):
    resp = client.get("/welcome")
    assert resp.status_code == 200
    assert "message" in resp.get_json()


def test_student_performance(client, monkeypatch):
    monkeypatch.setattr(student_records, "fetch_record_set", record_set)
    resp = client.get("/api/students/5/performance")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["student"]["fullname"] == "Ayesha Khan"
    [math] = data["subject_metrics"]
    assert math["average"] == 70
    assert math["predicted"] == 90
    assert data["behavioral_scores"][0]["date"] == "2024-02-02T00:00:00"
    assert data["commentary"][0].startswith("Satisfactory performance")


def test_student_report_card(client, monkeypatch):
    monkeypatch.setattr(student_records, "fetch_record_set", record_set)
    resp = client.get("/api/students/5/report-card")
    assert resp.status_code == 200
    [math] = resp.get_json()["results"]
    # 8*0.2 + 60*0.3 + 80*0.5 = 59.6
    assert math["cumulative_score"] == 60
    assert math["mid_term"]["grade"] == "C"


def test_unknown_student_is_404(client, monkeypatch):
    def missing(student_id):
        raise StudentNotFoundError(student_id)

    monkeypatch.setattr(student_records, "fetch_record_set", missing)
    resp = client.get("/api/students/404/performance")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Student 404 not found"}


def test_database_failure_is_502(client, monkeypatch):
    def broken(student_id):
        raise RecordTransportError("connection refused")

    monkeypatch.setattr(student_records, "fetch_record_set", broken)
    resp = client.get("/api/students/1/report-card")
    assert resp.status_code == 502
    assert resp.get_json()["error"] == "Database error"


def test_analyze_posted_records(client):
    payload = {
        "exams": [
            {"studentId": 1, "subject": "Math", "percentage": 60, "createdAt": "2024-01-01"},
            {"studentId": 1, "subject": "Math", "percentage": 80, "createdAt": "2024-02-01"},
            {"studentId": 1, "percentage": 99},
        ]
    }
    resp = client.post("/api/performance/analyze", json=payload)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["subject_metrics"][0]["trend"] == 20
    assert data["overall_trend"] == 20
    assert data["dropped"]["exams"] == 1


def test_analyze_empty_body_returns_fallback(client):
    resp = client.post("/api/performance/analyze", json={})
    assert resp.status_code == 200
    assert resp.get_json()["commentary"] == ["No performance data available yet."]


def test_non_object_body_is_rejected(client):
    assert client.post("/api/performance/analyze", json=[1, 2]).status_code == 400
    assert client.post("/api/performance/report-card", data="oops").status_code == 400


def test_report_card_from_posted_records(client):
    payload = {
        "exams": [{"student_id": 1, "subject": "Art", "exam_type": "Final",
                   "marks_obtained": 90, "total_marks": 100}],
        "quizzes": [{"student_id": 1, "subject": "Art", "rubricScore": 10}],
    }
    resp = client.post("/api/performance/report-card", json=payload)
    assert resp.status_code == 200
    [art] = resp.get_json()["results"]
    assert art["cumulative_score"] == 47
    assert art["final_term"]["grade"] == "A+"
