import logging
from datetime import date, datetime
from flask import Blueprint, jsonify, request
from utils import student_records
from utils.performance_engine import analyze_student_performance, build_report_card
from utils.student_records import RecordTransportError, StudentNotFoundError

logger = logging.getLogger(__name__)

performance_bp = Blueprint("performance", __name__)


def _jsonable(value):
    """Render timestamps as ISO-8601 instead of Flask's HTTP-date format."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _student_payload(student):
    return {
        "id": student.get("id"),
        "fullname": student.get("fullname"),
        "class": student.get("class"),
        "section": student.get("section"),
    }


def _load_records(student_id):
    """Return (record_set, None) or (None, error_response)."""
    try:
        return student_records.fetch_record_set(student_id), None
    except StudentNotFoundError as e:
        logger.warning(f"Performance lookup for unknown student {student_id}")
        return None, (jsonify({"error": str(e)}), 404)
    except RecordTransportError as e:
        logger.error(f"Database error loading records for student {student_id}: {str(e)}")
        return None, (jsonify({"error": "Database error"}), 502)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


@performance_bp.route("/api/students/<int:student_id>/performance", methods=["GET"])
def student_performance(student_id):
    records, error = _load_records(student_id)
    if error:
        return error
    analysis = analyze_student_performance(records)
    analysis["student"] = _student_payload(records["student"])
    return jsonify(_jsonable(analysis))


@performance_bp.route("/api/students/<int:student_id>/report-card", methods=["GET"])
def student_report_card(student_id):
    records, error = _load_records(student_id)
    if error:
        return error
    report_card = build_report_card(records)
    report_card["student"] = _student_payload(records["student"])
    return jsonify(_jsonable(report_card))


@performance_bp.route("/api/performance/analyze", methods=["POST"])
def analyze_records():
    """Analyze a record set posted as JSON ({"exams": [...], "quizzes": [...], ...})."""
    data = _json_body()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    return jsonify(_jsonable(analyze_student_performance(data)))


@performance_bp.route("/api/performance/report-card", methods=["POST"])
def report_card_from_records():
    data = _json_body()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    return jsonify(_jsonable(build_report_card(data)))
