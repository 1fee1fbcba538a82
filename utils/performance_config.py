import os
import logging
from typing import Optional, Tuple
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Exam-type labels recorded by the marks-entry screen for the two report-card terms.
DEFAULT_MIDTERM_EXAM_TYPES = ("Midterm",)
DEFAULT_FINAL_EXAM_TYPES = ("Final",)

_TRUTHY = {"1", "true", "yes", "on"}


class TermLabels:
    """Exam-type vocabulary used to find the mid-term and final-term record of a subject.

    Matching is exact (after trimming whitespace) unless case_insensitive is set.
    """

    def __init__(
        self,
        midterm: Tuple[str, ...] = DEFAULT_MIDTERM_EXAM_TYPES,
        final: Tuple[str, ...] = DEFAULT_FINAL_EXAM_TYPES,
        case_insensitive: bool = False,
    ):
        self.case_insensitive = case_insensitive
        self.midterm = tuple(self._fold(label) for label in midterm if label)
        self.final = tuple(self._fold(label) for label in final if label)

    def _fold(self, label: str) -> str:
        label = str(label).strip()
        return label.casefold() if self.case_insensitive else label

    def term_of(self, exam_type: Optional[str]) -> Optional[str]:
        """Return "mid_term", "final_term" or None for an exam_type string."""
        if exam_type is None:
            return None
        key = self._fold(exam_type)
        if key in self.midterm:
            return "mid_term"
        if key in self.final:
            return "final_term"
        return None

    def __repr__(self):
        return (
            f"TermLabels(midterm={self.midterm!r}, final={self.final!r}, "
            f"case_insensitive={self.case_insensitive!r})"
        )


def _split_labels(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if raw is None:
        return default
    labels = tuple(part.strip() for part in raw.split(",") if part.strip())
    return labels or default


def load_term_labels() -> TermLabels:
    """Build TermLabels from the environment (.env supported)."""
    load_dotenv()
    midterm = _split_labels(os.getenv("MIDTERM_EXAM_TYPES"), DEFAULT_MIDTERM_EXAM_TYPES)
    final = _split_labels(os.getenv("FINAL_EXAM_TYPES"), DEFAULT_FINAL_EXAM_TYPES)
    case_insensitive = (
        os.getenv("EXAM_TYPE_CASE_INSENSITIVE", "").strip().lower() in _TRUTHY
    )
    labels = TermLabels(midterm, final, case_insensitive)
    logger.debug(f"Report-card term labels loaded: {labels!r}")
    return labels
