"""Assessment records: preview, dual-signature submission, student acknowledgment."""

import logging
from datetime import date, datetime

from assessment.marking_sheet import score_marking_sheet
from assessment.scoring import InvalidInputError
from assessment.scoring.engine import has_valid_id, round_percentage
from assessment.utils import iso_now, iso_timestamp
from assessment.validation import validate_assessment

log = logging.getLogger(__name__)

# Shown on the preview only; not stored on the assessment.
PREVIEW_ONLY_KEYS = ("marking_sheet_name", "assessment_date")


class RecordError(ValueError):
    """Raised when an assessment record cannot be built; message is user-facing."""


def _timestamp(now: datetime | None) -> str:
    return iso_timestamp(now) if now else iso_now()


def preview_assessment(
    sheet: dict,
    responses: dict,
    *,
    student_name: str,
    assessor_name: str,
    section_name: str,
    class_name: str,
    today: date | None = None,
) -> dict:
    """
    Build the results preview for a filled-in checklist.
    Raises RecordError on missing names, a sheet without id or items, or malformed checklist items.
    """
    names = {
        "student_name": (student_name or "").strip(),
        "assessor_name": (assessor_name or "").strip(),
        "section_name": (section_name or "").strip(),
        "class_name": (class_name or "").strip(),
    }
    if not sheet or not all(names.values()):
        raise RecordError("Please fill in all required fields")
    if not sheet.get("id"):
        raise RecordError("Marking sheet has no id")

    items = sheet.get("checklist_items")
    if not items:
        raise RecordError("No checklist items found for this marking sheet")

    responses = dict(responses or {})
    try:
        score = score_marking_sheet(sheet, responses)
    except InvalidInputError as e:
        raise RecordError(f"Score calculation failed: {e}") from e

    item_ids = {item["id"] for item in items if has_valid_id(item)}
    total_items = len(items)
    completed_items = sum(1 for item_id, checked in responses.items() if checked is True and item_id in item_ids)
    completion = round_percentage(completed_items / total_items * 100) if total_items else 0

    log.info(
        "Preview for sheet %s: %d/%d items, %s%% (%s)",
        sheet.get("id"),
        completed_items,
        total_items,
        score.percentage_score,
        score.status.value,
    )
    return {
        **names,
        "marking_sheet_name": sheet.get("name", ""),
        "marking_sheet_id": sheet["id"],
        "checklist_responses": responses,
        "total_items": total_items,
        "completed_items": completed_items,
        "completion_percentage": completion,
        **score.as_dict(),
        "assessment_date": (today or date.today()).isoformat(),
    }


def finalize_assessment(
    record: dict,
    *,
    student_signature: str,
    assessor_signature: str,
    now: datetime | None = None,
) -> dict:
    """
    Sign a previewed record by both parties. Returns the record to store.
    Raises RecordError if a signature is missing, jsonschema.ValidationError if the record is malformed.
    """
    student_signature = (student_signature or "").strip()
    assessor_signature = (assessor_signature or "").strip()
    if not record or not student_signature or not assessor_signature:
        raise RecordError("Both student and assessor signatures are required")

    final = {k: v for k, v in record.items() if k not in PREVIEW_ONLY_KEYS}
    final["checklist_responses"] = dict(record.get("checklist_responses") or {})
    final["acknowledged_at"] = _timestamp(now)
    final["acknowledged_by"] = f"Student: {student_signature} | Assessor: {assessor_signature}"
    validate_assessment(final)
    return final


def is_acknowledged(record: dict) -> bool:
    return bool(record.get("acknowledged_at"))


def acknowledge_assessment(
    record: dict,
    *,
    signature: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
    now: datetime | None = None,
) -> tuple[dict, dict]:
    """
    Student acknowledgment of a stored assessment.
    Returns (updated record, acknowledgment entry). Neither input is mutated.
    """
    signature = (signature or "").strip()
    if not signature:
        raise RecordError("Please enter your signature")
    if not record.get("id"):
        raise RecordError("Assessment has no id")
    if is_acknowledged(record):
        raise RecordError("Assessment already acknowledged")

    ts = _timestamp(now)
    acknowledgment = {
        "assessment_id": record["id"],
        "student_signature": signature,
        "acknowledgment_date": ts,
        "ip_address": ip_address,
        "user_agent": user_agent,
    }
    updated = {**record, "acknowledged_at": ts, "acknowledged_by": signature}
    log.info("Assessment %s acknowledged", record["id"])
    return updated, acknowledgment
