import math
from typing import Dict, List, Optional

import numpy as np

from utils.number_utils import chronological_key, round_half_up, safe_mean


def get_letter_grade(percentage: Optional[float]) -> Optional[str]:
    """Map a percentage to the letter grade printed on exam records."""
    if percentage is None:
        return None
    if percentage >= 90:
        return "A+"
    if percentage >= 80:
        return "A"
    if percentage >= 70:
        return "B"
    if percentage >= 60:
        return "C"
    if percentage >= 50:
        return "D"
    return "F"


def sort_exams_chronologically(exams: List[Dict]) -> List[Dict]:
    """Exams with a usable percentage, oldest first. Equal timestamps keep input order."""
    scored = [e for e in (exams or []) if e.get("percentage") is not None]
    return sorted(scored, key=chronological_key("created_at"))


def aggregate_subjects(exams: List[Dict]) -> List[Dict]:
    """Group normalized exam records by subject.

    Subjects are listed in order of their first appearance in the chronological
    exam list. Each metric carries:
      average      mean percentage, 2 decimals
      latest       percentage of the most recent exam
      trend        latest minus earliest percentage (0 with a single exam)
      data_points  number of exams used
    """
    grouped: Dict[str, List[float]] = {}
    for exam in sort_exams_chronologically(exams):
        grouped.setdefault(exam["subject"], []).append(float(exam["percentage"]))

    metrics = []
    for subject, scores in grouped.items():
        latest = scores[-1] if scores else 0.0
        trend = scores[-1] - scores[0] if len(scores) > 1 else 0.0
        metrics.append(
            {
                "subject": subject,
                "average": round_half_up(safe_mean(scores), 2),
                "trend": trend,
                "latest": latest,
                "data_points": len(scores),
            }
        )
    return metrics


def compute_overall_trend(exams: List[Dict]) -> float:
    """Mean change between consecutive exams across all subjects.

    Every exam takes a slot in the chronological list; a pair where either
    exam has no percentage contributes nothing but still counts toward the
    divisor. Returns 0 with fewer than two exams.
    """
    ordered = sorted(exams or [], key=chronological_key("created_at"))
    if len(ordered) < 2:
        return 0.0
    percentages = np.array(
        [np.nan if e.get("percentage") is None else float(e["percentage"]) for e in ordered]
    )
    deltas = np.diff(percentages)
    trend = float(np.nansum(deltas)) / (len(ordered) - 1)
    if math.isnan(trend):
        return 0.0
    return trend
