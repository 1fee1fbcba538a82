import logging
from typing import Dict, List, Optional

from utils.number_utils import chronological_key, round_half_up, safe_mean
from utils.performance_config import TermLabels, load_term_labels
from utils.subject_aggregator import get_letter_grade

logger = logging.getLogger(__name__)

QUIZ_WEIGHT = 0.2
MIDTERM_WEIGHT = 0.3
FINAL_WEIGHT = 0.5


def _term_entry(exam: Optional[Dict]) -> Optional[Dict]:
    if exam is None:
        return None
    grade = exam.get("grade") or get_letter_grade(exam.get("percentage"))
    return {
        "marks_obtained": exam.get("marks_obtained"),
        "total_marks": exam.get("total_marks"),
        "grade": grade,
    }


def compute_cumulative_score(
    quiz_average: float, mid_term: Optional[Dict], final_term: Optional[Dict]
) -> int:
    """Weighted report-card score: 20% quizzes, 30% mid-term marks, 50% final-term marks.

    A missing term contributes 0.
    """
    mid_marks = (mid_term or {}).get("marks_obtained") or 0
    final_marks = (final_term or {}).get("marks_obtained") or 0
    return round_half_up(
        (quiz_average or 0) * QUIZ_WEIGHT
        + mid_marks * MIDTERM_WEIGHT
        + final_marks * FINAL_WEIGHT
    )


def compose_cumulative(
    exams: List[Dict], quizzes: List[Dict], term_labels: Optional[TermLabels] = None
) -> List[Dict]:
    """Merge quiz average, mid-term and final-term marks per subject for the report card.

    Subjects are listed in order of first appearance (exams, then quizzes).
    When a subject has several exams of the same term the most recent one is used.
    """
    if term_labels is None:
        term_labels = load_term_labels()

    subjects: List[str] = []
    terms: Dict[str, Dict[str, Dict]] = {}
    quiz_scores: Dict[str, List[float]] = {}

    for exam in sorted(exams or [], key=chronological_key("created_at")):
        subject = exam["subject"]
        if subject not in terms:
            subjects.append(subject)
            terms[subject] = {}
        term = term_labels.term_of(exam.get("exam_type"))
        if term is not None:
            terms[subject][term] = exam

    for quiz in quizzes or []:
        subject = quiz["subject"]
        if subject not in terms:
            subjects.append(subject)
            terms[subject] = {}
        if quiz.get("rubric_score") is not None:
            quiz_scores.setdefault(subject, []).append(quiz["rubric_score"])

    results = []
    for subject in subjects:
        scores = quiz_scores.get(subject, [])
        quiz_average = safe_mean(scores)
        mid_term = _term_entry(terms[subject].get("mid_term"))
        final_term = _term_entry(terms[subject].get("final_term"))
        if mid_term is None and final_term is None:
            logger.debug(
                f"No exam of {subject!r} matched report-card term labels {term_labels!r}"
            )
        results.append(
            {
                "subject": subject,
                "quiz_average": round_half_up(quiz_average, 2),
                "quiz_count": len(scores),
                "mid_term": mid_term,
                "final_term": final_term,
                "cumulative_score": compute_cumulative_score(
                    quiz_average, mid_term, final_term
                ),
            }
        )
    return results
