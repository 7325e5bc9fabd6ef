"""Composed entry points: text pipeline, embedded images and hyperlinks for one PDF."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from resume_extractor.config import ExtractorConfig
from resume_extractor.images import extract_all_images_to_files, extract_first_image_to_file
from resume_extractor.links import Hyperlink, extract_hyperlinks, group_links
from resume_extractor.ocr import build_ocr_engine
from resume_extractor.pdf_parser import (
    extract_baseline_text,
    extract_positioned_runs,
    extract_standard_text,
    read_pdf_bytes,
)
from src.pipeline.characters import reconstruct_characters
from src.pipeline.layout import reconstruct_layout
from src.pipeline.models import ExtractionCandidate, ExtractionMethod, StrategyAttempt
from src.pipeline.orchestrator import ExtractionOrchestrator, Strategy, ensure_sufficient

log = logging.getLogger(__name__)


def _layout_strategy(buffer: bytes) -> str:
    return reconstruct_layout(extract_positioned_runs(buffer))


def _character_strategy(buffer: bytes) -> str:
    return reconstruct_characters(extract_positioned_runs(buffer))


DEFAULT_STRATEGIES = (
    Strategy(ExtractionMethod.GENERIC_ENHANCED, extract_baseline_text),
    Strategy(ExtractionMethod.GENERIC_STANDARD, extract_standard_text),
    Strategy(ExtractionMethod.LAYOUT_RECONSTRUCTION, _layout_strategy),
    Strategy(ExtractionMethod.CHARACTER_RECONSTRUCTION, _character_strategy),
)


def build_orchestrator(config: ExtractorConfig | None = None) -> ExtractionOrchestrator:
    config = config or ExtractorConfig.from_env()
    return ExtractionOrchestrator(
        list(DEFAULT_STRATEGIES),
        ocr=build_ocr_engine(config),
        parallel=config.parallel,
        time_budget=config.time_budget,
    )


def extract_text_from_pdf(pdf_path: str | Path, config: ExtractorConfig | None = None) -> str:
    """
    Extract the best-effort text of a résumé PDF.

    Args:
        pdf_path: Path to the PDF file.
        config: Extraction settings; read from the environment when omitted.

    Returns:
        Normalized text, at least 100 characters.

    Raises:
        FileNotFoundError: The path does not exist.
        InsufficientTextError: No strategy produced enough text.
    """
    buffer = read_pdf_bytes(pdf_path)
    return build_orchestrator(config).extract(buffer)


@dataclass
class PdfExtraction:
    text: str
    method: ExtractionMethod
    confidence: float
    hyperlinks: list[Hyperlink] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    photo_url: str | None = None
    attempts: list[StrategyAttempt] = field(default_factory=list)
    elapsed_ms: int = 0

    @property
    def candidate(self) -> ExtractionCandidate:
        return ExtractionCandidate(text=self.text, confidence=self.confidence, method=self.method)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "method": self.method.value,
            "confidence": round(self.confidence, 4),
            "hyperlinks": [link.to_dict() for link in self.hyperlinks],
            "link_categories": group_links(self.hyperlinks),
            "images": list(self.images),
            "photo_url": self.photo_url,
            "attempts": [a.to_dict() for a in self.attempts],
        }


def extract_all_pdf_data(
    buffer: bytes,
    config: ExtractorConfig | None = None,
    upload_dir: str | Path | None = None,
    *,
    include_images: bool = True,
    orchestrator: ExtractionOrchestrator | None = None,
) -> PdfExtraction:
    """
    Text, hyperlinks and embedded images of one PDF.

    Image salvage runs in a worker thread alongside the text pipeline. The
    largest saved image doubles as the profile photo; with max_images=0 only
    the photo is saved. InsufficientTextError propagates; image and link
    failures only shrink the result.
    """
    config = config or ExtractorConfig.from_env()
    orchestrator = orchestrator or build_orchestrator(config)
    upload_dir = Path(upload_dir) if upload_dir is not None else config.upload_dir
    started = time.perf_counter()

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="images") as pool:
        images_future = photo_future = None
        if include_images and config.max_images > 0:
            images_future = pool.submit(extract_all_images_to_files, buffer, upload_dir, config.max_images)
        elif include_images:
            # Gallery disabled: only the profile photo is saved.
            photo_future = pool.submit(extract_first_image_to_file, buffer, upload_dir)
        result = orchestrator.run(buffer)
        images = images_future.result() if images_future is not None else []
        photo_url = photo_future.result() if photo_future is not None else None

    best = ensure_sufficient(result)
    hyperlinks = extract_hyperlinks(buffer, best.text)
    elapsed = int((time.perf_counter() - started) * 1000)
    log.info(
        "PDF extracted: method=%s chars=%d links=%d images=%d (%dms)",
        best.method.value, len(best.text), len(hyperlinks), len(images), elapsed,
    )
    return PdfExtraction(
        text=best.text,
        method=best.method,
        confidence=best.confidence,
        hyperlinks=hyperlinks,
        images=images,
        photo_url=images[0] if images else photo_url,
        attempts=result.attempts,
        elapsed_ms=elapsed,
    )
