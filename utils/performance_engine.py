"""Student performance pipeline.

Every stage is a pure function over the record lists of a single student:

    raw records -> normalize_records -> aggregate_subjects -> predict -> generate_commentary
                                     -> map_behavioral
                                     -> compose_cumulative (report card)

Callers rerun the pipeline whenever their record snapshot changes; nothing is
cached between calls.
"""

import logging
from typing import Dict, Optional

from utils.behavioral_scores import map_behavioral, map_score, summarize_behavioral
from utils.commentary import generate_commentary
from utils.cumulative_results import compose_cumulative
from utils.performance_config import TermLabels
from utils.performance_prediction import compute_overall_average, predict
from utils.quality_reviews import summarize_quality_reviews
from utils.record_normalizer import normalize_records
from utils.subject_aggregator import (
    aggregate_subjects,
    compute_overall_trend,
    get_letter_grade,
)

logger = logging.getLogger(__name__)

__all__ = [
    "normalize_records",
    "aggregate_subjects",
    "predict",
    "compose_cumulative",
    "map_behavioral",
    "map_score",
    "generate_commentary",
    "get_letter_grade",
    "analyze_student_performance",
    "build_report_card",
]


def analyze_student_performance(raw: Dict) -> Dict:
    """Dashboard view: subject metrics with predictions, behavior and commentary."""
    records = normalize_records(raw)
    exams = records["exams"]

    metrics = predict(aggregate_subjects(exams))
    overall_average = compute_overall_average(metrics)
    overall_trend = compute_overall_trend(exams)
    behavioral_scores = map_behavioral(records["progress_reports"])

    logger.info(
        f"Performance analysis built: {len(metrics)} subjects, "
        f"{len(exams)} exams, overall average {overall_average}"
    )
    return {
        "subject_metrics": metrics,
        "overall_average": overall_average,
        "overall_trend": overall_trend,
        "behavioral_scores": behavioral_scores,
        "behavioral_summary": summarize_behavioral(behavioral_scores),
        "quality_reviews": summarize_quality_reviews(records["quality_reviews"]),
        "commentary": generate_commentary(overall_average, overall_trend, metrics),
        "dropped": records["dropped"],
    }


def build_report_card(raw: Dict, term_labels: Optional[TermLabels] = None) -> Dict:
    """Report-card view: weighted cumulative result per subject."""
    records = normalize_records(raw)
    results = compose_cumulative(records["exams"], records["quizzes"], term_labels)
    logger.info(f"Report card built for {len(results)} subjects")
    return {"results": results, "dropped": records["dropped"]}
