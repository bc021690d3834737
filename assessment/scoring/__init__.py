"""Deterministic checklist scoring engine."""

from assessment.scoring.engine import (
    DEFAULT_PASSING_SCORE,
    InvalidInputError,
    ScoreResult,
    calculate_assessment_score,
)
from assessment.scoring.remarks import Remark, RemarkKind, ScoreStatus

__all__ = [
    "DEFAULT_PASSING_SCORE",
    "InvalidInputError",
    "Remark",
    "RemarkKind",
    "ScoreResult",
    "ScoreStatus",
    "calculate_assessment_score",
]
