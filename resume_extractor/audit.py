"""Audit trail for extraction runs and API operations."""

import csv
import json
import logging
from pathlib import Path

from src.utils import iso_now

AUDIT_DIR = Path(__file__).resolve().parent.parent / "logs"
AUDIT_FILE = AUDIT_DIR / "audit.log"
APP_LOG_FILE = AUDIT_DIR / "app.log"
EXTRACTION_PERF_JSONL = AUDIT_DIR / "extraction_performance.jsonl"
EXTRACTION_PERF_CSV = AUDIT_DIR / "extraction_performance.csv"

LOGGER_NAMES = ("resume_extractor", "src")

CSV_HEADERS = [
    "timestamp",
    "source",
    "source_hash",
    "byte_count",
    "method",
    "confidence",
    "text_length",
    "ocr_enabled",
    "parallel",
    "image_count",
    "hyperlink_count",
    "elapsed_ms",
    "attempts",
]


def _ensure_log_dir():
    AUDIT_DIR.mkdir(parents=True, exist_ok=True)


def log_extraction_performance(
    *,
    source: str,
    source_hash: str,
    byte_count: int,
    method: str,
    confidence: float,
    text_length: int,
    attempts: list[dict],
    ocr_enabled: bool = False,
    parallel: bool = False,
    image_count: int | None = None,
    hyperlink_count: int | None = None,
    elapsed_ms: int | None = None,
):
    """
    Record how each strategy scored on one document, for later tuning of the scorer.
    Appends to extraction_performance.jsonl and extraction_performance.csv.
    """
    _ensure_log_dir()
    entry = {
        "timestamp": iso_now(),
        "source": source,
        "source_hash": source_hash,
        "byte_count": byte_count,
        "method": method,
        "confidence": round(confidence, 4),
        "text_length": text_length,
        "ocr_enabled": ocr_enabled,
        "parallel": parallel,
        "image_count": image_count,
        "hyperlink_count": hyperlink_count,
        "elapsed_ms": elapsed_ms,
        "attempts": attempts,
    }

    with open(EXTRACTION_PERF_JSONL, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")

    csv_exists = EXTRACTION_PERF_CSV.exists()
    with open(EXTRACTION_PERF_CSV, "a", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
        if not csv_exists:
            writer.writeheader()
        row = dict(entry)
        row["image_count"] = image_count if image_count is not None else ""
        row["hyperlink_count"] = hyperlink_count if hyperlink_count is not None else ""
        row["elapsed_ms"] = elapsed_ms if elapsed_ms is not None else ""
        row["attempts"] = json.dumps(attempts, default=str)
        writer.writerow(row)


def audit_log(
    action: str,
    status: str,
    *,
    filename: str | None = None,
    byte_count: int | None = None,
    method: str | None = None,
    text_length: int | None = None,
    error: str | None = None,
    extra: dict | None = None,
):
    """Append a structured audit entry to the audit log (JSONL)."""
    _ensure_log_dir()
    entry = {
        "timestamp": iso_now(),
        "action": action,
        "status": status,
    }
    if filename:
        entry["filename"] = filename
    if byte_count is not None:
        entry["byte_count"] = byte_count
    if method:
        entry["method"] = method
    if text_length is not None:
        entry["text_length"] = text_length
    if error:
        entry["error"] = error
    if extra:
        entry.update(extra)

    with open(AUDIT_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def setup_app_logging():
    """Configure application logging to console and file. Returns the service logger."""
    _ensure_log_dir()
    logger = logging.getLogger(LOGGER_NAMES[0])
    if logger.handlers:
        return logger

    fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # File
    fh = logging.FileHandler(APP_LOG_FILE, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # The core pipeline logs under "src.*"; both trees share the handlers.
    for name in LOGGER_NAMES:
        named = logging.getLogger(name)
        named.setLevel(logging.DEBUG)
        named.addHandler(ch)
        named.addHandler(fh)

    return logger
