"""Runtime configuration from environment. The CLI loads .env before these are read."""

import os
from pathlib import Path


def log_dir() -> Path:
    return Path(os.environ.get("ASSESSMENT_LOG_DIR") or Path.cwd() / "logs")


def log_level() -> str:
    return (os.environ.get("ASSESSMENT_LOG_LEVEL") or "INFO").upper()
