"""Skills assessment: marking sheets, checklist scoring, signed assessment records."""

from assessment.marking_sheet import normalize_marking_sheet, score_marking_sheet
from assessment.records import RecordError, acknowledge_assessment, finalize_assessment, preview_assessment
from assessment.scoring import InvalidInputError, ScoreResult, ScoreStatus, calculate_assessment_score

__all__ = [
    "InvalidInputError",
    "RecordError",
    "ScoreResult",
    "ScoreStatus",
    "acknowledge_assessment",
    "calculate_assessment_score",
    "finalize_assessment",
    "normalize_marking_sheet",
    "preview_assessment",
    "score_marking_sheet",
]
