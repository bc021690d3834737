"""Assessment records: preview, dual-signature submission, student acknowledgment."""

from datetime import date, datetime, timezone

import jsonschema
import pytest

from assessment.records import (
    RecordError,
    acknowledge_assessment,
    finalize_assessment,
    is_acknowledged,
    preview_assessment,
)


SAMPLE_SHEET = {
    "id": "sheet-1",
    "name": "Hand hygiene",
    "passing_score": 70,
    "checklist_items": [
        {"id": "a", "text": "Removes jewellery", "points": 1},
        {"id": "b", "text": "Wets hands", "points": 1},
        {"id": "c", "text": "Applies soap", "points": 1, "is_critical": True},
        {"id": "d", "text": "Rubs for 20 seconds", "points": 1},
    ],
}

NAMES = {
    "student_name": "  Ana Ruiz ",
    "assessor_name": "Dr. Lee",
    "section_name": "A",
    "class_name": "Nursing 101",
}

NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _preview(responses=None, **overrides):
    kwargs = {**NAMES, **overrides}
    return preview_assessment(SAMPLE_SHEET, responses or {}, today=date(2025, 1, 2), **kwargs)


def test_preview_builds_record():
    record = _preview({"a": True, "b": True, "c": True, "zzz": True})
    assert record["student_name"] == "Ana Ruiz"
    assert record["marking_sheet_name"] == "Hand hygiene"
    assert record["marking_sheet_id"] == "sheet-1"
    assert record["total_items"] == 4
    assert record["completed_items"] == 3
    assert record["completion_percentage"] == 75
    assert record["total_score"] == 3
    assert record["max_possible_score"] == 4
    assert record["percentage_score"] == 75
    assert record["status"] == "passed"
    assert record["remarks"] == "Excellent performance! Score: 75.0%"
    assert record["assessment_date"] == "2025-01-02"


def test_preview_copies_responses():
    responses = {"a": True}
    record = _preview(responses)
    record["checklist_responses"]["b"] = True
    assert responses == {"a": True}


def test_preview_critical_failure():
    record = _preview({"a": True, "b": True, "d": True})
    assert record["status"] == "failed"
    assert record["remarks"] == "Critical failure: Applies soap"


@pytest.mark.parametrize("field", ["student_name", "assessor_name", "section_name", "class_name"])
def test_preview_requires_all_names(field):
    with pytest.raises(RecordError) as exc_info:
        _preview({"a": True}, **{field: "   "})
    assert str(exc_info.value) == "Please fill in all required fields"


def test_preview_requires_items():
    with pytest.raises(RecordError) as exc_info:
        preview_assessment({"id": "s", "name": "Empty", "checklist_items": []}, {}, **NAMES)
    assert "No checklist items found" in str(exc_info.value)


def test_preview_malformed_items():
    sheet = {"id": "s", "name": "Broken", "checklist_items": {"a": {"text": "x"}}}
    with pytest.raises(RecordError) as exc_info:
        preview_assessment(sheet, {}, **NAMES)
    assert str(exc_info.value).startswith("Score calculation failed:")


def test_finalize_signs_record():
    record = _preview({"a": True, "b": True, "c": True, "d": True})
    final = finalize_assessment(record, student_signature=" Ana ", assessor_signature="Lee", now=NOW)
    assert final["acknowledged_at"] == "2025-01-02T03:04:05.000Z"
    assert final["acknowledged_by"] == "Student: Ana | Assessor: Lee"
    assert "marking_sheet_name" not in final
    assert "assessment_date" not in final
    assert final["status"] == "passed"
    assert is_acknowledged(final)
    assert not is_acknowledged(record)


@pytest.mark.parametrize("student,assessor", [("", "Lee"), ("Ana", ""), ("  ", "  "), (None, "Lee")])
def test_finalize_requires_both_signatures(student, assessor):
    record = _preview({"a": True})
    with pytest.raises(RecordError) as exc_info:
        finalize_assessment(record, student_signature=student, assessor_signature=assessor)
    assert str(exc_info.value) == "Both student and assessor signatures are required"


def test_finalize_rejects_malformed_record():
    record = _preview({"a": True})
    record["checklist_responses"] = {"a": "yes"}
    with pytest.raises(jsonschema.ValidationError):
        finalize_assessment(record, student_signature="Ana", assessor_signature="Lee")


def test_acknowledge_assessment():
    stored = {"id": "asmt-1", "student_name": "Ana", "status": "failed"}
    updated, ack = acknowledge_assessment(
        stored, signature=" Ana R ", ip_address="10.0.0.1", user_agent="pytest", now=NOW
    )
    assert ack == {
        "assessment_id": "asmt-1",
        "student_signature": "Ana R",
        "acknowledgment_date": "2025-01-02T03:04:05.000Z",
        "ip_address": "10.0.0.1",
        "user_agent": "pytest",
    }
    assert updated["acknowledged_at"] == "2025-01-02T03:04:05.000Z"
    assert updated["acknowledged_by"] == "Ana R"
    assert "acknowledged_at" not in stored


def test_acknowledge_requires_signature():
    with pytest.raises(RecordError) as exc_info:
        acknowledge_assessment({"id": "asmt-1"}, signature="  ")
    assert str(exc_info.value) == "Please enter your signature"


def test_acknowledge_requires_id():
    with pytest.raises(RecordError):
        acknowledge_assessment({"student_name": "Ana"}, signature="Ana")


def test_acknowledge_twice_rejected():
    stored = {"id": "asmt-1", "acknowledged_at": "2025-01-01T00:00:00.000Z"}
    with pytest.raises(RecordError) as exc_info:
        acknowledge_assessment(stored, signature="Ana")
    assert "already acknowledged" in str(exc_info.value)


def test_preview_requires_sheet_id():
    sheet = {k: v for k, v in SAMPLE_SHEET.items() if k != "id"}
    with pytest.raises(RecordError) as exc_info:
        preview_assessment(sheet, {"a": True}, **NAMES)
    assert str(exc_info.value) == "Marking sheet has no id"


def test_preview_skips_items_with_unusable_ids():
    """Items with list/dict ids count toward total_items but never as completed."""
    sheet = {
        **SAMPLE_SHEET,
        "checklist_items": SAMPLE_SHEET["checklist_items"] + [{"id": ["x"], "text": "Bad"}, {"id": {"k": 1}}],
    }
    record = preview_assessment(sheet, {"a": True, "b": True, "c": True, "d": True}, **NAMES)
    assert record["total_items"] == 6
    assert record["completed_items"] == 4
    assert record["total_score"] == 4
    assert record["max_possible_score"] == 4
    assert record["status"] == "passed"
