"""Extraction pipeline: reconstruct -> normalize -> score -> select."""

from src.pipeline.characters import explode_run, reconstruct_characters
from src.pipeline.layout import CHAR_WIDTH_FACTOR, estimate_text_width, reconstruct_layout
from src.pipeline.models import (
    Character,
    ExtractionCandidate,
    ExtractionMethod,
    ExtractionResult,
    ImageCandidate,
    PositionedTextRun,
    StrategyAttempt,
)
from src.pipeline.normalize import normalize_text
from src.pipeline.orchestrator import (
    ExtractionOrchestrator,
    InsufficientTextError,
    Strategy,
    StrategyFailure,
    ensure_sufficient,
    select_best,
)

__all__ = [
    "CHAR_WIDTH_FACTOR",
    "Character",
    "ExtractionCandidate",
    "ExtractionMethod",
    "ExtractionOrchestrator",
    "ExtractionResult",
    "ImageCandidate",
    "InsufficientTextError",
    "PositionedTextRun",
    "Strategy",
    "StrategyAttempt",
    "StrategyFailure",
    "ensure_sufficient",
    "estimate_text_width",
    "explode_run",
    "normalize_text",
    "reconstruct_characters",
    "reconstruct_layout",
    "select_best",
]
