"""Marking sheet definitions: normalization, totals, passing score resolution."""

import copy
import logging

from assessment.scoring import DEFAULT_PASSING_SCORE, ScoreResult, calculate_assessment_score
from assessment.scoring.engine import item_points
from assessment.validation import validate_marking_sheet

log = logging.getLogger(__name__)


def resolve_passing_score(sheet: dict) -> float:
    """Sheet passing score, or the default when unset (None / 0 / missing)."""
    return sheet.get("passing_score") or DEFAULT_PASSING_SCORE


def _order_key(indexed_item: tuple[int, dict]):
    position, item = indexed_item
    order_index = item.get("order_index")
    # Items without order_index go last, keeping input order.
    return (order_index is None, order_index if order_index is not None else 0, position)


def normalize_marking_sheet(sheet: dict) -> dict:
    """
    Validate and normalize a marking sheet. Input is not mutated.
    - checklist_items sorted by order_index
    - passing_score defaults to 70
    - total_points recomputed from item points (missing points count as 1)
    Raises jsonschema.ValidationError if the sheet is malformed.
    """
    validate_marking_sheet(sheet)
    normalized = copy.deepcopy(sheet)

    items = [item for _, item in sorted(enumerate(normalized["checklist_items"]), key=_order_key)]
    normalized["checklist_items"] = items
    if normalized.get("passing_score") is None:
        normalized["passing_score"] = DEFAULT_PASSING_SCORE
    normalized["total_points"] = sum(item_points(item) for item in items)

    log.debug(
        "Normalized marking sheet %s: %d items, %s points, passing %s%%",
        normalized.get("id", "<new>"),
        len(items),
        normalized["total_points"],
        normalized["passing_score"],
    )
    return normalized


def score_marking_sheet(sheet: dict, responses: dict) -> ScoreResult:
    """Score responses against a sheet's checklist using the sheet's passing score."""
    return calculate_assessment_score(
        sheet.get("checklist_items") or [],
        responses,
        resolve_passing_score(sheet),
    )
