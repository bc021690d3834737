"""Assessment listing filters and CSV export."""

import csv
import io
from datetime import date, datetime, timezone

from assessment.scoring.remarks import format_number
from assessment.utils import parse_datetime

CSV_HEADERS = [
    "Student Name",
    "Assessor",
    "Marking Sheet",
    "Date",
    "Score",
    "Max Score",
    "Percentage",
    "Status",
    "Remarks",
    "Acknowledged",
]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _end_of_day(value) -> datetime | None:
    """A bare date as upper bound covers the whole day."""
    moment = parse_datetime(value)
    if moment is None:
        return None
    is_bare_date = isinstance(value, date) and not isinstance(value, datetime)
    if is_bare_date or (isinstance(value, str) and len(value.strip()) == 10):
        moment = moment.replace(hour=23, minute=59, second=59, microsecond=999999)
    return moment


def filter_assessments(
    assessments: list[dict],
    *,
    marking_sheet_id: str | None = None,
    start_date=None,
    end_date=None,
    status: str | None = None,
) -> list[dict]:
    """
    Filter assessments like the listing page does; newest first.
    Date bounds are inclusive and compared with created_at.
    Records without a parseable created_at are excluded when a date bound is set.
    """
    start = parse_datetime(start_date)
    end = _end_of_day(end_date)

    selected = []
    for a in assessments:
        if marking_sheet_id and a.get("marking_sheet_id") != marking_sheet_id:
            continue
        if status and (a.get("status") or "pending") != status:
            continue
        if start or end:
            created = parse_datetime(a.get("created_at"))
            if created is None:
                continue
            if start and created < start:
                continue
            if end and created > end:
                continue
        selected.append(a)

    selected.sort(key=lambda a: parse_datetime(a.get("created_at")) or _EPOCH, reverse=True)
    return selected


def _row(assessment: dict) -> list:
    sheet = assessment.get("marking_sheets") or {}
    created = parse_datetime(assessment.get("created_at"))
    return [
        assessment.get("student_name", ""),
        assessment.get("assessor_name", ""),
        sheet.get("name") or "Unknown",
        created.date().isoformat() if created else "",
        format_number(assessment.get("total_score") or 0),
        format_number(assessment.get("max_possible_score") or 0),
        f"{format_number(assessment.get('percentage_score') or 0)}%",
        assessment.get("status") or "pending",
        assessment.get("remarks") or "",
        "Yes" if assessment.get("acknowledged_at") else "No",
    ]


def assessments_to_csv(assessments: list[dict]) -> str:
    """Render assessments as CSV text, every cell quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for a in assessments:
        writer.writerow(_row(a))
    return buf.getvalue()


def export_filename(day: date | None = None) -> str:
    return f"assessments-{(day or date.today()).isoformat()}.csv"
