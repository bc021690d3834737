#!/usr/bin/env python3
"""CLI for scoring checklists and exporting assessment records."""

import argparse
import json
import logging
import sys
from pathlib import Path

import jsonschema
from dotenv import load_dotenv

load_dotenv()

from assessment.audit import audit_log, setup_app_logging
from assessment.marking_sheet import normalize_marking_sheet, score_marking_sheet
from assessment.records import finalize_assessment, preview_assessment
from assessment.reporting import assessments_to_csv, export_filename, filter_assessments
from assessment.scoring import calculate_assessment_score
from assessment.utils import hash_responses

log = logging.getLogger("assessment.cli")

CLI_ERRORS = (ValueError, FileNotFoundError, jsonschema.ValidationError)


def _read_json(path: Path):
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def _fail(action: str, e: Exception, **fields) -> None:
    message = e.message if isinstance(e, jsonschema.ValidationError) else str(e)
    audit_log(action, "error", error=message, **fields)
    log.debug("%s failed", action, exc_info=True)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def cmd_score(args: argparse.Namespace) -> None:
    """Score a responses map against a marking sheet."""
    try:
        sheet = normalize_marking_sheet(_read_json(args.sheet))
        responses = _read_json(args.responses)
        if args.passing_score is not None:
            result = calculate_assessment_score(sheet["checklist_items"], responses, args.passing_score)
        else:
            result = score_marking_sheet(sheet, responses)
    except CLI_ERRORS as e:
        _fail("score", e)

    audit_log(
        "score",
        "success",
        marking_sheet_id=sheet.get("id"),
        responses_hash=hash_responses(responses),
        percentage_score=result.percentage_score,
        score_status=result.status.value,
    )
    log.info("Scored sheet %s: %s%% %s", sheet.get("id"), result.percentage_score, result.status.value)

    if args.json:
        print(json.dumps(result.as_dict(), indent=2))
    else:
        print("=== Score ===")
        print(f"Marking sheet: {sheet['name']}")
        print(f"Score: {result.total_score}/{result.max_possible_score} ({result.percentage_score}%)")
        print(f"Status: {result.status.value}")
        print(f"Remarks: {result.remarks}")


def cmd_preview(args: argparse.Namespace) -> None:
    """Build an assessment record; sign it when both signatures are given."""
    sheet_id = None
    try:
        sheet = normalize_marking_sheet(_read_json(args.sheet))
        sheet_id = sheet.get("id")
        responses = _read_json(args.responses)
        record = preview_assessment(
            sheet,
            responses,
            student_name=args.student,
            assessor_name=args.assessor,
            section_name=args.section,
            class_name=args.class_name,
        )
        if args.student_signature or args.assessor_signature:
            record = finalize_assessment(
                record,
                student_signature=args.student_signature,
                assessor_signature=args.assessor_signature,
            )
    except CLI_ERRORS as e:
        _fail("preview", e, marking_sheet_id=sheet_id)

    audit_log(
        "preview",
        "success",
        marking_sheet_id=sheet_id,
        responses_hash=hash_responses(record["checklist_responses"]),
        percentage_score=record["percentage_score"],
        score_status=record["status"],
        extra={"signed": bool(record.get("acknowledged_at"))},
    )
    print(json.dumps(record, indent=2))


def cmd_export_csv(args: argparse.Namespace) -> None:
    """Filter stored assessments and write them as CSV."""
    try:
        assessments = _read_json(args.assessments)
        if not isinstance(assessments, list):
            raise ValueError("Assessments file must contain a JSON array")
        selected = filter_assessments(
            assessments,
            marking_sheet_id=args.marking_sheet_id,
            start_date=args.start_date,
            end_date=args.end_date,
            status=args.status,
        )
    except CLI_ERRORS as e:
        _fail("export_csv", e)

    output = args.output or Path(export_filename())
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(assessments_to_csv(selected), encoding="utf-8")
    audit_log(
        "export_csv",
        "success",
        marking_sheet_id=args.marking_sheet_id,
        extra={"rows": len(selected), "output": str(output)},
    )
    print(f"Exported {len(selected)} assessments: {output}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Skills assessment scoring and export")
    sub = parser.add_subparsers(dest="command", required=True)

    # score
    p_score = sub.add_parser("score", help="Score checklist responses against a marking sheet")
    p_score.add_argument("sheet", type=Path, help="Marking sheet JSON file")
    p_score.add_argument("responses", type=Path, help="Responses JSON file ({item_id: true/false})")
    p_score.add_argument("--passing-score", type=float, help="Override the sheet's passing score")
    p_score.add_argument("--json", action="store_true", help="Output JSON")
    p_score.set_defaults(func=cmd_score)

    # preview
    p_prev = sub.add_parser("preview", help="Build an assessment record (signed if signatures given)")
    p_prev.add_argument("sheet", type=Path, help="Marking sheet JSON file")
    p_prev.add_argument("responses", type=Path, help="Responses JSON file")
    p_prev.add_argument("--student", required=True, help="Student name")
    p_prev.add_argument("--assessor", required=True, help="Assessor name")
    p_prev.add_argument("--section", required=True, help="Section name")
    p_prev.add_argument("--class", dest="class_name", required=True, help="Class name")
    p_prev.add_argument("--student-signature", help="Student signature")
    p_prev.add_argument("--assessor-signature", help="Assessor signature")
    p_prev.set_defaults(func=cmd_preview)

    # export-csv
    p_exp = sub.add_parser("export-csv", help="Export assessments as CSV")
    p_exp.add_argument("assessments", type=Path, help="JSON array of assessment records")
    p_exp.add_argument("-o", "--output", type=Path, help="Output path (default: assessments-<date>.csv)")
    p_exp.add_argument("--marking-sheet-id", help="Only this marking sheet")
    p_exp.add_argument("--status", choices=["pending", "passed", "failed"], help="Only this status")
    p_exp.add_argument("--start-date", help="Created on/after (YYYY-MM-DD)")
    p_exp.add_argument("--end-date", help="Created on/before (YYYY-MM-DD)")
    p_exp.set_defaults(func=cmd_export_csv)

    args = parser.parse_args(argv)
    setup_app_logging()
    args.func(args)


if __name__ == "__main__":
    main()
