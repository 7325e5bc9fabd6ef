"""Generate extraction run reports for auditability."""

import json
import uuid
from pathlib import Path

from src.pipeline.models import ExtractionCandidate, StrategyAttempt
from src.utils import iso_now
from src.validation import validate_extraction_report


def build_extraction_report(
    source_hash: str,
    best: ExtractionCandidate,
    attempts: list[StrategyAttempt],
    *,
    image_count: int = 0,
    hyperlink_count: int = 0,
    run_id: str | None = None,
) -> dict:
    """
    Assemble the report dict: source hash, winner, per-strategy attempts, counts.
    No extracted text is included, only its length.
    """
    return {
        "run_id": run_id or uuid.uuid4().hex,
        "timestamp": iso_now(),
        "source_sha256": source_hash,
        "method": best.method.value,
        "confidence": round(best.confidence, 4),
        "text_length": len(best.text),
        "attempts": [a.to_dict() for a in attempts],
        "image_count": image_count,
        "hyperlink_count": hyperlink_count,
    }


def write_extraction_report(output_path: Path, report: dict) -> None:
    """Validate and write the report. Raises jsonschema.ValidationError before touching disk."""
    validate_extraction_report(report)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
