from typing import Dict, List

from utils.number_utils import round_half_up, safe_mean

# Half of the observed trend is carried forward. Commentary thresholds assume this weight.
TREND_CARRY_WEIGHT = 0.5
MIN_SCORE = 0.0
MAX_SCORE = 100.0


def predict_next_score(latest: float, trend: float) -> float:
    """Half-weighted linear extrapolation of the latest score, clamped to 0-100."""
    projected = (latest or 0) + (trend or 0) * TREND_CARRY_WEIGHT
    return round_half_up(min(MAX_SCORE, max(MIN_SCORE, projected)), 2)


def predict(metrics: List[Dict]) -> List[Dict]:
    """Return copies of the subject metrics with a "predicted" score added."""
    return [
        {**metric, "predicted": predict_next_score(metric.get("latest"), metric.get("trend"))}
        for metric in (metrics or [])
    ]


def compute_overall_average(metrics: List[Dict]) -> float:
    """Mean of the per-subject averages, 2 decimals; 0 when there are no subjects."""
    return round_half_up(safe_mean(m.get("average") or 0 for m in (metrics or [])), 2)
