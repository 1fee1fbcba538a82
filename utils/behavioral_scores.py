from typing import Dict, List, Optional

from utils.number_utils import chronological_key, round_half_up, safe_mean
from utils.record_normalizer import BEHAVIOR_FIELDS

NEUTRAL_SCORE = 6

# Checked top to bottom; the first phrase contained in the rating wins.
# "Very Good" therefore maps to 8 and "Good, needs improvement" also to 8.
BEHAVIOR_SCORE_TABLE = (
    ("excellent", 10),
    ("good", 8),
    ("satisfactory", 6),
    ("needs improvement", 4),
)


def map_score(text: Optional[str]) -> int:
    """Translate a free-text progress-report rating into a 1-10 score."""
    if not text or not str(text).strip():
        return NEUTRAL_SCORE
    lowered = str(text).lower()
    for phrase, score in BEHAVIOR_SCORE_TABLE:
        if phrase in lowered:
            return score
    return NEUTRAL_SCORE


def build_behavioral_score(report: Dict) -> Dict:
    scores = {field: map_score(report.get(field)) for field in BEHAVIOR_FIELDS}
    return {
        "date": report.get("date"),
        **scores,
        "overall": round_half_up(safe_mean(scores.values()), 1),
    }


def map_behavioral(reports: List[Dict]) -> List[Dict]:
    """Score each progress report, oldest first (undated reports keep input order, first)."""
    ordered = sorted(reports or [], key=chronological_key("date"))
    return [build_behavioral_score(report) for report in ordered]


def summarize_behavioral(scores: List[Dict]) -> Dict:
    return {
        "report_count": len(scores),
        "latest": dict(scores[-1]) if scores else None,
        "average_overall": round_half_up(
            safe_mean(score["overall"] for score in scores), 1
        ),
    }
