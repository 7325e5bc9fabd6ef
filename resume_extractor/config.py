"""Runtime configuration read from the environment (.env is loaded by the entry points)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class ExtractorConfig:
    ocr_enabled: bool = False
    ocr_language: str = "eng"
    ocr_dpi: int = 300
    parallel: bool = False
    time_budget_seconds: float = 120.0
    upload_dir: Path = Path("uploads")
    max_images: int = 6

    @property
    def time_budget(self) -> float | None:
        """Orchestrator budget; 0 disables the bound."""
        return self.time_budget_seconds or None

    @classmethod
    def from_env(cls) -> ExtractorConfig:
        return cls(
            ocr_enabled=_env_bool("RESUME_OCR_ENABLED", cls.ocr_enabled),
            ocr_language=os.environ.get("RESUME_OCR_LANG", "").strip() or cls.ocr_language,
            ocr_dpi=_env_number("RESUME_OCR_DPI", cls.ocr_dpi, int),
            parallel=_env_bool("RESUME_EXTRACT_PARALLEL", cls.parallel),
            time_budget_seconds=_env_number("RESUME_EXTRACT_TIME_BUDGET", cls.time_budget_seconds, float),
            upload_dir=Path(os.environ.get("RESUME_UPLOAD_DIR", "").strip() or cls.upload_dir),
            max_images=_env_number("RESUME_MAX_IMAGES", cls.max_images, int),
        )
