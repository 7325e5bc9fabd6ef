"""Quality scoring for candidate extractions."""

from src.scoring.quality import RESUME_KEYWORDS, score_breakdown, score_text

__all__ = ["RESUME_KEYWORDS", "score_breakdown", "score_text"]
