import logging
from typing import Dict, List, Optional

from utils.number_utils import parse_timestamp, to_float
from utils.subject_aggregator import get_letter_grade

logger = logging.getLogger(__name__)

RECORD_KINDS = ("exams", "quizzes", "progress_reports", "quality_reviews")

BEHAVIOR_FIELDS = (
    "uniform_compliance",
    "homework_completion",
    "class_discipline",
    "punctuality",
    "behavior",
)

QUALITY_DIMENSIONS = ("completeness", "accuracy", "clarity", "feedback", "presentation")


def _pick(record: Dict, *keys):
    """Return the first non-None value among snake_case/camelCase spellings."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_list(value) -> List:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def normalize_exam(record) -> Optional[Dict]:
    """Coerce one raw exam row. Returns None when the row cannot be attributed."""
    if not isinstance(record, dict):
        return None
    subject = _text(_pick(record, "subject"))
    student_id = _pick(record, "student_id", "studentId")
    if subject is None or student_id is None:
        return None

    total_marks = to_float(_pick(record, "total_marks", "totalMarks"))
    marks_obtained = to_float(_pick(record, "marks_obtained", "marksObtained"))
    percentage = to_float(_pick(record, "percentage"))
    if percentage is None and marks_obtained is not None and total_marks:
        percentage = marks_obtained * 100 / total_marks
    if percentage is not None and not 0 <= percentage <= 100:
        logger.debug(
            f"Exam {record.get('id')} has out-of-range percentage {percentage}; ignoring it"
        )
        percentage = None

    grade = _text(_pick(record, "grade"))
    if grade is None:
        grade = get_letter_grade(percentage)

    return {
        "id": record.get("id"),
        "student_id": student_id,
        "subject": subject,
        "exam_type": _text(_pick(record, "exam_type", "examType")),
        "total_marks": total_marks,
        "marks_obtained": marks_obtained,
        "percentage": percentage,
        "grade": grade,
        "created_at": parse_timestamp(_pick(record, "created_at", "createdAt")),
    }


def normalize_quiz(record) -> Optional[Dict]:
    if not isinstance(record, dict):
        return None
    subject = _text(_pick(record, "subject"))
    student_id = _pick(record, "student_id", "studentId")
    if subject is None or student_id is None:
        return None
    return {
        "id": record.get("id"),
        "student_id": student_id,
        "subject": subject,
        "rubric_score": to_float(_pick(record, "rubric_score", "rubricScore", "rubric")),
        "date": parse_timestamp(_pick(record, "date")),
    }


def normalize_progress_report(record) -> Optional[Dict]:
    if not isinstance(record, dict):
        return None
    report = {"date": parse_timestamp(_pick(record, "date"))}
    for field in BEHAVIOR_FIELDS:
        camel = "".join(
            part.capitalize() if i else part for i, part in enumerate(field.split("_"))
        )
        report[field] = _text(_pick(record, field, camel))
    return report


def normalize_quality_review(record) -> Optional[Dict]:
    if not isinstance(record, dict):
        return None
    # rechecking_schedule stores the subject in a column named "subjects"
    subject = _text(_pick(record, "subject", "subjects"))
    student_id = _pick(record, "student_id", "studentId")
    if subject is None or student_id is None:
        return None
    review = {"id": record.get("id"), "student_id": student_id, "subject": subject}
    for dimension in QUALITY_DIMENSIONS:
        review[dimension] = to_float(record.get(dimension))
    return review


_NORMALIZERS = {
    "exams": normalize_exam,
    "quizzes": normalize_quiz,
    "progress_reports": normalize_progress_report,
    "quality_reviews": normalize_quality_review,
}

_RAW_ALIASES = {
    "progress_reports": ("progress_reports", "progressReports"),
    "quality_reviews": ("quality_reviews", "qualityReviews", "rechecking"),
}


def normalize_records(raw) -> Dict:
    """Normalize a raw record set for one student.

    Input: a mapping holding lists under exams / quizzes / progress_reports /
    quality_reviews. Missing or non-list entries are treated as empty.

    Output: the same four keys holding normalized copies, plus "dropped" with
    the number of records excluded per kind. Malformed records are excluded,
    never raised.
    """
    raw = raw if isinstance(raw, dict) else {}
    normalized = {}
    dropped = {}

    for kind in RECORD_KINDS:
        rows = []
        for key in _RAW_ALIASES.get(kind, (kind,)):
            if raw.get(key) is not None:
                rows = _as_list(raw.get(key))
                break

        kept = []
        for row in rows:
            record = _NORMALIZERS[kind](row)
            if record is None:
                logger.debug(f"Dropping malformed {kind} record: {row!r}")
                continue
            kept.append(record)

        normalized[kind] = kept
        dropped[kind] = len(rows) - len(kept)

    normalized["dropped"] = dropped
    if any(dropped.values()):
        logger.info(f"Record normalization dropped malformed records: {dropped}")
    return normalized
