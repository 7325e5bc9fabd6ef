#!/usr/bin/env python3
"""Flask web service for résumé PDF extraction."""

import dataclasses
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_from_directory

from resume_extractor.audit import audit_log, log_extraction_performance, setup_app_logging
from resume_extractor.config import ExtractorConfig
from resume_extractor.extraction import build_orchestrator, extract_all_pdf_data
from src.pipeline.orchestrator import InsufficientTextError
from src.utils import hash_bytes

load_dotenv()

log = setup_app_logging()

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024  # 10MB
app.config["EXTRACTOR_CONFIG"] = ExtractorConfig.from_env()
app.config["UPLOAD_DIR"] = Path(app.config["EXTRACTOR_CONFIG"].upload_dir).resolve()


def _extractor_config() -> ExtractorConfig:
    config = app.config["EXTRACTOR_CONFIG"]
    return dataclasses.replace(config, upload_dir=Path(app.config["UPLOAD_DIR"]))


def _read_pdf_upload():
    """Returns (filename, bytes) or a ready error response."""
    if "file" not in request.files:
        return None, (jsonify({"success": False, "message": "No file provided"}), 400)

    file = request.files["file"]
    if file.filename == "":
        return None, (jsonify({"success": False, "message": "No file selected"}), 400)
    if not (file.content_type == "application/pdf" or file.filename.lower().endswith(".pdf")):
        return None, (jsonify({"success": False, "message": "Only PDF files are allowed"}), 400)

    buffer = file.read()
    if not buffer:
        return None, (jsonify({"success": False, "message": "Uploaded file is empty"}), 400)
    return (file.filename, buffer), None


def _record_performance(filename, buffer, extraction, config):
    log_extraction_performance(
        source=filename,
        source_hash=hash_bytes(buffer),
        byte_count=len(buffer),
        method=extraction.method.value,
        confidence=extraction.confidence,
        text_length=len(extraction.text),
        attempts=[a.to_dict() for a in extraction.attempts],
        ocr_enabled=config.ocr_enabled,
        parallel=config.parallel,
        image_count=len(extraction.images),
        hyperlink_count=len(extraction.hyperlinks),
        elapsed_ms=extraction.elapsed_ms,
    )


@app.route("/api/pdf/extract", methods=["POST"])
def api_pdf_extract():
    """Extract text, hyperlinks and embedded images from an uploaded PDF."""
    upload, error = _read_pdf_upload()
    if error:
        return error
    filename, buffer = upload

    log.info("Extract started: filename=%s, bytes=%d", filename, len(buffer))
    config = _extractor_config()
    try:
        extraction = extract_all_pdf_data(buffer, config)
    except InsufficientTextError as e:
        audit_log(action="pdf_extract", status="insufficient_text", filename=filename, byte_count=len(buffer), error=str(e))
        log.warning("Extract rejected: filename=%s: %s", filename, e)
        return jsonify({"success": False, "message": str(e)}), 422
    except Exception as e:
        audit_log(action="pdf_extract", status="error", filename=filename, byte_count=len(buffer), error=str(e))
        log.exception("Extract failed")
        return jsonify({"success": False, "message": "Failed to process PDF"}), 500

    _record_performance(filename, buffer, extraction, config)
    audit_log(
        action="pdf_extract",
        status="success",
        filename=filename,
        byte_count=len(buffer),
        method=extraction.method.value,
        text_length=len(extraction.text),
        extra={"image_count": len(extraction.images), "hyperlink_count": len(extraction.hyperlinks)},
    )
    log.info("Extract complete: filename=%s, method=%s, chars=%d", filename, extraction.method.value, len(extraction.text))
    return jsonify({"success": True, "filename": filename, **extraction.to_dict()})


@app.route("/api/pdf/text", methods=["POST"])
def api_pdf_text():
    """Extract only the text of an uploaded PDF."""
    upload, error = _read_pdf_upload()
    if error:
        return error
    filename, buffer = upload

    try:
        best = build_orchestrator(_extractor_config()).extract_candidate(buffer)
    except InsufficientTextError as e:
        audit_log(action="pdf_text", status="insufficient_text", filename=filename, byte_count=len(buffer), error=str(e))
        return jsonify({"success": False, "message": str(e)}), 422
    except Exception as e:
        audit_log(action="pdf_text", status="error", filename=filename, byte_count=len(buffer), error=str(e))
        log.exception("Text extraction failed")
        return jsonify({"success": False, "message": "Failed to process PDF"}), 500

    audit_log(action="pdf_text", status="success", filename=filename, byte_count=len(buffer), method=best.method.value, text_length=len(best.text))
    return jsonify({"success": True, "filename": filename, "text": best.text, "method": best.method.value})


@app.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(app.config["UPLOAD_DIR"], filename)


@app.errorhandler(413)
def too_large(_e):
    return jsonify({"success": False, "message": "File too large (max 10MB)"}), 413


if __name__ == "__main__":
    config = app.config["EXTRACTOR_CONFIG"]
    log.info(
        "Resume extractor starting on http://127.0.0.1:5000 | OCR enabled: %s | Parallel: %s | Uploads: %s | Logs: logs/app.log | Audit: logs/audit.log",
        config.ocr_enabled, config.parallel, app.config["UPLOAD_DIR"],
    )
    app.run(debug=True, port=5000)
