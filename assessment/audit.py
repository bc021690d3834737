"""Audit trail for scoring runs and application logging."""

import json
import logging
from pathlib import Path

from assessment import config
from assessment.utils import iso_now

AUDIT_FILENAME = "audit.log"
APP_LOG_FILENAME = "app.log"


def _ensure_log_dir(log_dir: Path | None = None) -> Path:
    path = log_dir or config.log_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def audit_log(
    action: str,
    status: str,
    *,
    marking_sheet_id: str | None = None,
    responses_hash: str | None = None,
    percentage_score: float | None = None,
    score_status: str | None = None,
    error: str | None = None,
    extra: dict | None = None,
    log_dir: Path | None = None,
) -> dict:
    """
    Append a structured audit entry to the audit log (JSONL).
    Names and signatures are never written; responses only as a hash.
    Returns the entry written.
    """
    path = _ensure_log_dir(log_dir) / AUDIT_FILENAME
    entry = {
        "timestamp": iso_now(),
        "action": action,
        "status": status,
    }
    if marking_sheet_id:
        entry["marking_sheet_id"] = marking_sheet_id
    if responses_hash:
        entry["responses_hash"] = responses_hash
    if percentage_score is not None:
        entry["percentage_score"] = percentage_score
    if score_status:
        entry["score_status"] = score_status
    if error:
        entry["error"] = error
    if extra:
        entry.update(extra)

    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")
    return entry


def setup_app_logging(log_dir: Path | None = None) -> logging.Logger:
    """Configure application logging to console and file."""
    logger = logging.getLogger("assessment")
    if logger.handlers:
        return logger
    path = _ensure_log_dir(log_dir)
    logger.setLevel(logging.DEBUG)

    fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(config.log_level())
    ch.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(ch)

    # File
    fh = logging.FileHandler(path / APP_LOG_FILENAME, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(fh)

    return logger
