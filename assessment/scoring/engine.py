"""Deterministic checklist scoring. Pure code, no I/O."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from assessment.scoring.remarks import Remark, RemarkKind, ScoreStatus

DEFAULT_PASSING_SCORE = 70
DEFAULT_ITEM_POINTS = 1


class InvalidInputError(ValueError):
    """Raised when checklist_items is not a list of items."""


@dataclass(frozen=True)
class ScoreResult:
    total_score: float
    max_possible_score: float
    percentage_score: float
    status: ScoreStatus
    remark: Remark

    @property
    def remarks(self) -> str:
        return self.remark.render()

    @property
    def passed(self) -> bool:
        return self.status is ScoreStatus.PASSED

    def as_dict(self) -> dict:
        """Columns stored on an assessment record."""
        return {
            "total_score": self.total_score,
            "max_possible_score": self.max_possible_score,
            "percentage_score": self.percentage_score,
            "status": self.status.value,
            "remarks": self.remarks,
        }


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def normalize_passing_score(passing_score) -> float:
    """Passing score must be a finite number in [0, 100]; anything else falls back to 70."""
    if _is_number(passing_score) and 0 <= passing_score <= 100:
        return passing_score
    return DEFAULT_PASSING_SCORE


def item_points(item: Mapping) -> float:
    points = item.get("points")
    if _is_number(points) and points > 0:
        return points
    return DEFAULT_ITEM_POINTS


def round_percentage(value: float) -> float:
    """Round to 2 decimal places, half up."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def has_valid_id(item) -> bool:
    """Item is a mapping whose id is a non-empty str or an int."""
    if not isinstance(item, Mapping):
        return False
    item_id = item.get("id")
    if isinstance(item_id, bool) or not isinstance(item_id, (str, int)):
        return False
    return item_id != ""


def calculate_assessment_score(
    checklist_items: list[dict],
    responses: Mapping | None,
    passing_score: float = DEFAULT_PASSING_SCORE,
) -> ScoreResult:
    """
    Score one filled-in checklist.
    - checklist_items must be a list/tuple, else InvalidInputError
    - responses that are not a mapping count as "nothing checked"
    - items that are not mappings or have no id are skipped
    - an unchecked critical item fails the assessment whatever the percentage
    """
    if not isinstance(checklist_items, (list, tuple)):
        raise InvalidInputError("checklist_items must be an array")
    if not isinstance(responses, Mapping):
        responses = {}
    passing_score = normalize_passing_score(passing_score)

    total_score = 0
    max_possible_score = 0
    critical_failures: list[str] = []

    for item in filter(has_valid_id, checklist_items):
        points = item_points(item)
        max_possible_score += points
        if responses.get(item["id"]) is True:
            total_score += points
        elif item.get("is_critical") is True:
            critical_failures.append(str(item.get("text") or f"Item {item['id']}"))

    percentage_score = (
        round_percentage(total_score / max_possible_score * 100) if max_possible_score > 0 else 0
    )

    if critical_failures:
        status, kind = ScoreStatus.FAILED, RemarkKind.CRITICAL_FAILURE
    elif percentage_score >= passing_score:
        status, kind = ScoreStatus.PASSED, RemarkKind.EXCELLENT
    else:
        status, kind = ScoreStatus.FAILED, RemarkKind.BELOW_PASSING

    return ScoreResult(
        total_score=total_score,
        max_possible_score=max_possible_score,
        percentage_score=percentage_score,
        status=status,
        remark=Remark(
            kind=kind,
            percentage_score=percentage_score,
            passing_score=passing_score,
            failed_items=tuple(critical_failures),
        ),
    )
