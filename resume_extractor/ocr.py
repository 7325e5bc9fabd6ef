"""Tesseract OCR fallback for image-only resumes."""

from __future__ import annotations

import logging

from src.pipeline.orchestrator import StrategyFailure

log = logging.getLogger(__name__)


class TesseractOcrEngine:
    """
    Callable OCR engine: rasterize each page with pdf2image, recognize with pytesseract.

    Both libraries (and the poppler/tesseract binaries behind them) are optional;
    they are imported on first use so the text-layer pipeline works without them.
    """

    def __init__(self, language: str = "eng", dpi: int = 300):
        self.language = language
        self.dpi = dpi

    def __call__(self, buffer: bytes) -> str:
        try:
            import pytesseract
            from pdf2image import convert_from_bytes
        except ImportError as e:
            raise StrategyFailure(f"OCR dependencies not installed: {e}") from e

        try:
            images = convert_from_bytes(buffer, dpi=self.dpi)
        except Exception as e:
            raise StrategyFailure(f"Could not rasterize PDF: {e}") from e

        pages = []
        for index, image in enumerate(images):
            try:
                text = pytesseract.image_to_string(image, lang=self.language)
            except Exception as e:
                log.warning("OCR failed on page %d: %s", index + 1, e)
                continue
            if text.strip():
                pages.append(text.strip())
        log.info("OCR recognized %d of %d pages", len(pages), len(images))
        return "\n\n".join(pages)


def build_ocr_engine(config) -> TesseractOcrEngine | None:
    """OCR engine when enabled in config, else None (the OCR step is then skipped)."""
    if not config.ocr_enabled:
        return None
    return TesseractOcrEngine(language=config.ocr_language, dpi=config.ocr_dpi)
