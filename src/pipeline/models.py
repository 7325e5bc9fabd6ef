"""Value types shared by the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_FONT_SIZE = 12.0


@dataclass(frozen=True)
class PositionedTextRun:
    """A run of characters sharing a baseline position and style on one page."""

    x: float
    y: float
    content: str
    font_size: float = DEFAULT_FONT_SIZE
    font_name: str = "default"


@dataclass(frozen=True)
class Character:
    """A single decoded character with an estimated position."""

    char: str
    x: float
    y: float
    font_size: float


@dataclass
class Line:
    """Runs or characters grouped under one anchor y; lives for one page reconstruction."""

    y: float
    items: list = field(default_factory=list)


class ExtractionMethod(str, Enum):
    GENERIC_ENHANCED = "generic-enhanced"
    GENERIC_STANDARD = "generic-standard"
    LAYOUT_RECONSTRUCTION = "layout-reconstruction"
    CHARACTER_RECONSTRUCTION = "character-reconstruction"
    OCR = "ocr"
    NONE = "none"


@dataclass(frozen=True)
class ExtractionCandidate:
    """One strategy's normalized text plus its quality score."""

    text: str
    confidence: float
    method: ExtractionMethod

    def __post_init__(self):
        if self.confidence < 0:
            raise ValueError(f"confidence must be non-negative, got {self.confidence}")
        if self.method is ExtractionMethod.NONE and (self.text or self.confidence):
            raise ValueError("method NONE requires empty text and zero confidence")

    @classmethod
    def empty(cls) -> ExtractionCandidate:
        return cls(text="", confidence=0.0, method=ExtractionMethod.NONE)


@dataclass(frozen=True)
class StrategyAttempt:
    """Outcome of one strategy in one orchestration run."""

    method: ExtractionMethod
    status: str  # ok | failed | skipped | timeout
    chars: int = 0
    confidence: float = 0.0
    elapsed_ms: int = 0
    detail: str | None = None

    def to_dict(self) -> dict:
        return {
            "method": self.method.value,
            "status": self.status,
            "chars": self.chars,
            "confidence": round(self.confidence, 4),
            "elapsed_ms": self.elapsed_ms,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ExtractionResult:
    best: ExtractionCandidate
    attempts: list[StrategyAttempt]


@dataclass(frozen=True)
class ImageCandidate:
    """Byte-range hypothesis for an embedded image."""

    start: int
    end: int
    ext: str
    size: int
