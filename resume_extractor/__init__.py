"""Resume Extractor - best-effort text, links and photos from résumé PDFs."""

from resume_extractor.config import ExtractorConfig
from resume_extractor.extraction import (
    PdfExtraction,
    build_orchestrator,
    extract_all_pdf_data,
    extract_text_from_pdf,
)
from src.pipeline.orchestrator import InsufficientTextError

__all__ = [
    "ExtractorConfig",
    "InsufficientTextError",
    "PdfExtraction",
    "build_orchestrator",
    "extract_all_pdf_data",
    "extract_text_from_pdf",
]
