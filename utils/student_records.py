import logging
from typing import Dict, List

from utils.db_conn import get_db_connection

logger = logging.getLogger(__name__)


class StudentRecordsError(Exception):
    """Base class for data-access failures."""


class StudentNotFoundError(StudentRecordsError):
    def __init__(self, student_id):
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class RecordTransportError(StudentRecordsError):
    """The database could not be reached or the query failed."""


def _fetch_all(query: str, params: tuple) -> List[Dict]:
    try:
        with get_db_connection().cursor() as cursor:
            cursor.execute(query, params)
            return list(cursor.fetchall())
    except Exception as e:
        logger.error(f"Record query failed: {str(e)}")
        raise RecordTransportError(str(e)) from e


def fetch_student(student_id) -> Dict:
    rows = _fetch_all(
        "SELECT id, fullname, class, section FROM students WHERE id = %s",
        (student_id,),
    )
    if not rows:
        raise StudentNotFoundError(student_id)
    return rows[0]


def fetch_exams(student_id) -> List[Dict]:
    return _fetch_all(
        """
        SELECT id, student_id, subject, exam_type, total_marks, marks_obtained,
               percentage, grade, created_at
        FROM exams
        WHERE student_id = %s
        """,
        (student_id,),
    )


def fetch_quizzes(student_id) -> List[Dict]:
    return _fetch_all(
        "SELECT id, student_id, subject, rubric, date FROM quiz WHERE student_id = %s",
        (student_id,),
    )


def fetch_progress_reports(student_id) -> List[Dict]:
    return _fetch_all(
        """
        SELECT date, uniform_compliance, homework_completion, class_discipline,
               punctuality, behavior
        FROM student_progress_report
        WHERE student_id = %s
        """,
        (student_id,),
    )


def fetch_quality_reviews(student_id) -> List[Dict]:
    return _fetch_all(
        """
        SELECT id, student_id, subjects, completeness, accuracy, clarity,
               feedback, presentation
        FROM rechecking_schedule
        WHERE student_id = %s
        """,
        (student_id,),
    )


def fetch_record_set(student_id) -> Dict:
    """Fetch everything the performance engine needs for one student.

    Raises StudentNotFoundError before touching the record tables when the
    student does not exist.
    """
    student = fetch_student(student_id)
    record_set = {
        "student": student,
        "exams": fetch_exams(student_id),
        "quizzes": fetch_quizzes(student_id),
        "progress_reports": fetch_progress_reports(student_id),
        "quality_reviews": fetch_quality_reviews(student_id),
    }
    logger.info(
        f"Fetched records for student {student_id}: "
        f"{len(record_set['exams'])} exams, {len(record_set['quizzes'])} quizzes"
    )
    return record_set
