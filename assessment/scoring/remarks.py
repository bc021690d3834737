"""Status and remark payloads for scored assessments, plus the prose they render to."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class ScoreStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


class RemarkKind(str, Enum):
    CRITICAL_FAILURE = "critical_failure"
    EXCELLENT = "excellent"
    BELOW_PASSING = "below_passing"


def format_fixed(value: float, digits: int = 1) -> str:
    """
    Fixed-point formatting that rounds half up on the exact binary value.
    Matches how the stored remarks were produced: 12.25 -> "12.3", 12.35 -> "12.3".
    """
    exp = Decimal(1).scaleb(-digits)
    return f"{Decimal(value).quantize(exp, rounding=ROUND_HALF_UP):f}"


def format_number(value: float) -> str:
    """Shortest form of a number: 70.0 -> "70", 72.5 -> "72.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


@dataclass(frozen=True)
class Remark:
    """Structured remark. render() gives the exact text consumers (CSV, UI) expect."""

    kind: RemarkKind
    percentage_score: float
    passing_score: float
    failed_items: tuple[str, ...] = ()

    def render(self) -> str:
        if self.kind is RemarkKind.CRITICAL_FAILURE:
            return f"Critical failure: {', '.join(self.failed_items)}"
        achieved = format_fixed(self.percentage_score, 1)
        if self.kind is RemarkKind.EXCELLENT:
            return f"Excellent performance! Score: {achieved}%"
        return (
            f"Below passing score. Required: {format_number(self.passing_score)}%, "
            f"Achieved: {achieved}%"
        )
