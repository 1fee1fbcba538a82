from typing import Dict, List

from utils.number_utils import round_half_up, safe_mean
from utils.record_normalizer import QUALITY_DIMENSIONS


def summarize_quality_reviews(reviews: List[Dict]) -> List[Dict]:
    """One summary per rechecking review, in input order, with an overall 0-100 score."""
    summaries = []
    for review in reviews or []:
        values = [review.get(d) for d in QUALITY_DIMENSIONS]
        summaries.append(
            {
                "subject": review.get("subject"),
                **{d: review.get(d) for d in QUALITY_DIMENSIONS},
                "overall": round_half_up(
                    safe_mean(v for v in values if v is not None), 1
                ),
            }
        )
    return summaries
