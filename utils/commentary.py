from typing import Dict, List

NO_DATA_MESSAGE = "No performance data available yet."

STRONG_SUBJECT_AVERAGE = 85
WEAK_SUBJECT_AVERAGE = 75


def _overall_band_phrase(overall_average: float):
    if overall_average >= 90:
        return (
            "Outstanding academic performance! The student consistently "
            "demonstrates excellence across subjects."
        )
    if overall_average >= 80:
        return "Strong academic performance with room for further improvement in specific areas."
    if overall_average >= 70:
        return "Satisfactory performance with significant potential for improvement."
    if overall_average > 0:
        return "Academic performance needs attention and focused intervention."
    return None


def _trend_phrase(overall_trend: float, overall_average: float):
    if overall_trend > 2:
        return "Excellent upward trend - the student is showing consistent improvement over time."
    if overall_trend > 0:
        return "Positive trend - gradual improvement observed in recent assessments."
    if overall_trend < -2:
        return "Concerning downward trend - immediate attention and support recommended."
    if overall_average > 0:
        return "Stable performance - maintaining consistent academic standards."
    return None


def _subject_list(predictions: List[Dict], keep) -> str:
    return ", ".join(p["subject"] for p in predictions if keep(p))


def generate_commentary(
    overall_average: float, overall_trend: float, predictions: List[Dict]
) -> List[str]:
    """Ordered natural-language observations for the performance dashboard.

    Order: overall band, trend, strong subjects, subjects needing attention,
    predicted improvements. Falls back to a single "no data" message.
    """
    overall_average = overall_average or 0
    overall_trend = overall_trend or 0
    predictions = predictions or []
    commentary = []

    for phrase in (
        _overall_band_phrase(overall_average),
        _trend_phrase(overall_trend, overall_average),
    ):
        if phrase:
            commentary.append(phrase)

    strong = _subject_list(
        predictions, lambda p: (p.get("average") or 0) >= STRONG_SUBJECT_AVERAGE
    )
    if strong:
        commentary.append(f"Strong performance in: {strong}")

    weak = _subject_list(
        predictions, lambda p: (p.get("average") or 0) < WEAK_SUBJECT_AVERAGE
    )
    if weak:
        commentary.append(f"Areas needing attention: {weak}")

    improving = _subject_list(
        predictions,
        lambda p: (p.get("predicted") or 0) > (p.get("latest") or 0),
    )
    if improving:
        commentary.append(f"Predicted improvements in: {improving}")

    return commentary or [NO_DATA_MESSAGE]
