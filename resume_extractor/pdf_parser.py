"""pypdf-backed decoders: plain text, baseline-joined text and positioned runs."""

from __future__ import annotations

import logging
import math
from io import BytesIO
from pathlib import Path

from pypdf import PdfReader

from src.pipeline.models import DEFAULT_FONT_SIZE, PositionedTextRun
from src.pipeline.orchestrator import StrategyFailure

# pypdf warns on every malformed xref or font; the strategies already cope with those.
logging.getLogger("pypdf").setLevel(logging.ERROR)

log = logging.getLogger(__name__)

BASELINE_TOLERANCE = 0.5


def open_pdf(buffer: bytes) -> PdfReader:
    """Open a PDF from bytes, trying an empty password on encrypted files."""
    reader = PdfReader(BytesIO(buffer))
    if reader.is_encrypted:
        try:
            decrypted = reader.decrypt("")
        except Exception as e:
            raise StrategyFailure(f"PDF is encrypted: {e}") from e
        if not decrypted:
            raise StrategyFailure("PDF is encrypted with a non-empty password")
    return reader


def read_pdf_bytes(pdf_path: str | Path) -> bytes:
    path = Path(pdf_path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {path}")
    return path.read_bytes()


def extract_standard_text(buffer: bytes) -> str:
    """
    Extract text with the decoder's default settings.

    Returns:
        Page texts joined by a blank line. Scanned PDFs (image-only) return
        little or nothing; OCR handles those.
    """
    reader = open_pdf(buffer)
    text_parts = []

    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)

    return "\n\n".join(text_parts).strip()


def _device_point(cm, tm) -> tuple[float, float]:
    """Text-space origin mapped through the current transformation matrix."""
    x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
    y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
    return x, y


def _effective_font_size(cm, tm, font_size) -> float:
    if not font_size:
        return DEFAULT_FONT_SIZE
    scale = math.hypot(tm[2] * cm[0] + tm[3] * cm[2], tm[2] * cm[1] + tm[3] * cm[3])
    size = abs(font_size * scale)
    return size or DEFAULT_FONT_SIZE


def _font_name(font_dict) -> str:
    if not font_dict:
        return "default"
    name = font_dict.get("/BaseFont")
    return str(name).lstrip("/") if name else "default"


class _BaselineCollector:
    """Text visitor that starts a new line only when the baseline moves."""

    def __init__(self):
        self.parts: list[str] = []
        self.last_y: float | None = None

    def __call__(self, text, cm, tm, font_dict, font_size):
        if not text:
            return
        _, y = _device_point(cm, tm)
        size = _effective_font_size(cm, tm, font_size)
        # pypdf's own line breaks are dropped; only a baseline move starts a new line.
        for offset, piece in enumerate(text.split("\n")):
            if not piece:
                continue
            line_y = y - offset * size
            if self.last_y is not None and abs(line_y - self.last_y) > BASELINE_TOLERANCE:
                self.parts.append("\n")
            self.parts.append(piece)
            self.last_y = line_y

    def text(self) -> str:
        return "".join(self.parts)


def extract_baseline_text(buffer: bytes) -> str:
    """Generic decode with a custom page renderer: items concatenated, newline on baseline change."""
    reader = open_pdf(buffer)
    pages = []
    for page in reader.pages:
        collector = _BaselineCollector()
        page.extract_text(visitor_text=collector)
        page_text = collector.text()
        if page_text.strip():
            pages.append(page_text)
    return "\n\n".join(pages)


class _RunCollector:
    """Text visitor that records every shown string as a PositionedTextRun."""

    def __init__(self):
        self.runs: list[PositionedTextRun] = []

    def __call__(self, text, cm, tm, font_dict, font_size):
        if not text:
            return
        x, y = _device_point(cm, tm)
        size = _effective_font_size(cm, tm, font_size)
        name = _font_name(font_dict)
        # pypdf reports line breaks inside one show operation; later pieces sit one line lower.
        for offset, piece in enumerate(text.split("\n")):
            if piece:
                self.runs.append(PositionedTextRun(x=x, y=y - offset * size, content=piece, font_size=size, font_name=name))


def extract_positioned_runs(buffer: bytes) -> list[list[PositionedTextRun]]:
    """Object-model decode: one list of positioned runs per page."""
    reader = open_pdf(buffer)
    pages = []
    for index, page in enumerate(reader.pages):
        collector = _RunCollector()
        page.extract_text(visitor_text=collector)
        log.debug("Page %d: %d positioned runs", index + 1, len(collector.runs))
        pages.append(collector.runs)
    return pages
