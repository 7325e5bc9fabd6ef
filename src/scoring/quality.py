"""Heuristic quality score for candidate extractions. Pure code, deterministic."""

import re

RESUME_KEYWORDS = (
    "experience", "education", "skills", "projects", "work", "university",
    "degree", "job", "company", "responsibilities", "achievements", "contact",
    "email", "phone", "address", "summary", "objective", "professional",
    "certifications",
)

LENGTH_CAP = 5.0
WORD_COUNT_CAP = 3.0
SENTENCE_CAP = 2.0
KEYWORD_WEIGHT = 0.5
EMAIL_BONUS = 2.0
PHONE_BONUS = 1.0
MIN_REPETITION_FACTOR = 0.5

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_RE = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def score_breakdown(text: str) -> dict:
    """
    Score text for resume-likeness, returning every term.

    Each additive term is capped before summation; the sum is then multiplied
    by the repetition factor max(2 * unique/total, 0.5).
    """
    if not text:
        return {
            "length": 0.0, "words": 0.0, "sentences": 0.0, "keywords": 0.0,
            "email": 0.0, "phone": 0.0, "repetition_factor": MIN_REPETITION_FACTOR, "total": 0.0,
        }

    words = text.split()
    sentences = [s for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > 10]
    lowered = text.lower()

    terms = {
        "length": min(len(text) / 1000, LENGTH_CAP),
        "words": min(len(words) / 100, WORD_COUNT_CAP),
        "sentences": min(len(sentences) / 10, SENTENCE_CAP),
        "keywords": sum(KEYWORD_WEIGHT for kw in RESUME_KEYWORDS if kw in lowered),
        "email": EMAIL_BONUS if _EMAIL_RE.search(text) else 0.0,
        "phone": PHONE_BONUS if _PHONE_RE.search(text) else 0.0,
    }

    unique_words = {w.lower() for w in words}
    ratio = len(unique_words) / max(len(words), 1)
    factor = max(ratio * 2, MIN_REPETITION_FACTOR)

    terms["repetition_factor"] = factor
    terms["total"] = sum(v for k, v in terms.items() if k != "repetition_factor") * factor
    return terms


def score_text(text: str) -> float:
    """Quality score >= 0 for a candidate extraction."""
    return score_breakdown(text)["total"]
