"""Orchestrator: retain-if-better fold, tie-break, OCR fallback, final gate, failure isolation."""

import sys
import threading
import time

import pytest

from resume_extractor.ocr import TesseractOcrEngine
from src.pipeline.models import ExtractionCandidate, ExtractionMethod as M
from src.pipeline.normalize import normalize_text
from src.pipeline.orchestrator import (
    ExtractionOrchestrator,
    InsufficientTextError,
    Strategy,
    select_best,
)

ORDER = [M.GENERIC_ENHANCED, M.GENERIC_STANDARD, M.LAYOUT_RECONSTRUCTION, M.CHARACTER_RECONSTRUCTION]


def _length_score(text):
    return float(len(text))


def _identity(text):
    return text


def _returning(text):
    return lambda buffer: text


def _raising(exc):
    def run(buffer):
        raise exc
    return run


def _strategies(*runs):
    return [Strategy(method, run) for method, run in zip(ORDER, runs)]


def _orchestrator(*runs, **kwargs):
    kwargs.setdefault("scorer", _length_score)
    kwargs.setdefault("normalizer", _identity)
    return ExtractionOrchestrator(_strategies(*runs), **kwargs)


def test_highest_score_wins():
    """Lengths 50, 200, 150, 300 with a length scorer -> strategy 4's output."""
    orch = _orchestrator(*(_returning("x" * n) for n in (50, 200, 150, 300)))
    best = orch.extract_candidate(b"%PDF")
    assert best.method is M.CHARACTER_RECONSTRUCTION
    assert best.text == "x" * 300


def test_tie_keeps_earlier_strategy():
    orch = _orchestrator(_returning(""), _returning("a" * 200), _returning("b" * 200), _returning("c" * 120))
    best = orch.extract_candidate(b"%PDF")
    assert best.method is M.GENERIC_STANDARD
    assert best.text == "a" * 200


def test_first_candidate_retained_by_length():
    """The first strategy only has to beat the empty sentinel on length; later ones need a higher score."""
    orch = _orchestrator(*(_returning("y" * 150) for _ in range(4)), scorer=lambda t: 0.0)
    best = orch.extract_candidate(b"%PDF")
    assert best.method is M.GENERIC_ENHANCED


def test_select_best_skips_missing_candidates():
    candidates = [None, ExtractionCandidate("abc", 1.0, M.GENERIC_STANDARD), None]
    assert select_best(candidates).method is M.GENERIC_STANDARD
    assert select_best([]).method is M.NONE


def test_insufficient_text_raises():
    orch = _orchestrator(*(_returning("too short") for _ in range(4)))
    with pytest.raises(InsufficientTextError) as exc_info:
        orch.extract(b"%PDF")
    assert "image-based or corrupted" in str(exc_info.value)
    assert len(exc_info.value.attempts) == 5


def test_insufficient_text_when_everything_fails():
    orch = _orchestrator(*(_raising(RuntimeError("bad xref")) for _ in range(4)))
    with pytest.raises(InsufficientTextError):
        orch.extract(b"")


def test_failing_strategy_does_not_abort():
    orch = _orchestrator(_raising(ValueError("boom")), _returning("s" * 150), _raising(KeyError("x")), _returning("c" * 120))
    result = orch.run(b"%PDF")
    assert result.best.method is M.GENERIC_STANDARD
    statuses = [a.status for a in result.attempts]
    assert statuses == ["failed", "ok", "failed", "ok", "skipped"]
    assert result.attempts[0].detail == "boom"


def test_parallel_matches_sequential():
    runs = [_returning("x" * n) for n in (120, 400, 400, 250)]
    sequential = _orchestrator(*runs).run(b"%PDF")
    parallel = _orchestrator(*runs, parallel=True).run(b"%PDF")
    assert parallel.best == sequential.best
    assert parallel.best.method is M.GENERIC_STANDARD
    assert [a.method for a in parallel.attempts] == [a.method for a in sequential.attempts]


def test_ocr_skipped_when_text_layer_is_long_enough():
    calls = []

    def ocr(buffer):
        calls.append(buffer)
        return "o" * 5000

    result = _orchestrator(*(_returning("x" * 600) for _ in range(4)), ocr=ocr).run(b"%PDF")
    assert calls == []
    assert result.best.method is M.GENERIC_ENHANCED
    assert result.attempts[-1].method is M.OCR
    assert result.attempts[-1].status == "skipped"


def test_ocr_disabled_is_recorded_as_skipped():
    result = _orchestrator(*(_returning("x" * 200) for _ in range(4))).run(b"%PDF")
    assert result.attempts[-1].status == "skipped"
    assert result.attempts[-1].detail == "ocr disabled"


def test_ocr_penalized_score_must_win():
    """240 chars * 0.8 = 192 does not beat 200; 300 chars * 0.8 = 240 does."""
    base = [_returning("x" * 200)] * 4

    kept = _orchestrator(*base, ocr=_returning("o" * 240)).extract_candidate(b"%PDF")
    assert kept.method is M.GENERIC_ENHANCED

    replaced = _orchestrator(*base, ocr=_returning("o" * 300)).extract_candidate(b"%PDF")
    assert replaced.method is M.OCR
    assert replaced.confidence == pytest.approx(240.0)


def test_ocr_rescues_image_only_pdf():
    orch = _orchestrator(*(_returning("") for _ in range(4)), ocr=_returning("scanned " * 30))
    assert orch.extract_candidate(b"%PDF").method is M.OCR


def test_ocr_failure_is_isolated(monkeypatch):
    monkeypatch.setitem(sys.modules, "pytesseract", None)
    orch = _orchestrator(*(_returning("x" * 200) for _ in range(4)), ocr=TesseractOcrEngine())
    result = orch.run(b"%PDF")
    assert result.best.method is M.GENERIC_ENHANCED
    assert result.attempts[-1].status == "failed"
    assert "OCR dependencies" in result.attempts[-1].detail


def test_time_budget_skips_unstarted_strategies():
    def slow(buffer):
        time.sleep(0.05)
        return "x" * 150

    orch = _orchestrator(slow, _returning("y" * 400), _returning("y" * 400), _returning("y" * 400), time_budget=0.01)
    result = orch.run(b"%PDF")
    assert [a.status for a in result.attempts[:4]] == ["ok", "skipped", "skipped", "skipped"]
    assert result.best.method is M.GENERIC_ENHANCED


def test_time_budget_times_out_parallel_strategies():
    release = threading.Event()

    def hung(buffer):
        release.wait(5)
        return "h" * 1000

    orch = _orchestrator(_returning("x" * 150), hung, _returning("x" * 120), _returning("x" * 110), parallel=True, time_budget=0.2)
    try:
        result = orch.run(b"%PDF")
    finally:
        release.set()
    assert result.attempts[1].status == "timeout"
    assert result.best.method is M.GENERIC_ENHANCED


RESUME_BODY = "\n".join([
    "Jane Doe",
    "Senior Software Engineer",
    "Email: jane.doe@example.com | Phone: 555-123-4567",
    "Summary",
    "Professional engineer with eight years of experience building reliable data platforms.",
    "Experience",
    "Acme Corp, Lead Engineer. Led a team of five engineers delivering payment services.",
    "Globex, Software Engineer. Built streaming pipelines processing billions of events per day.",
    "Education",
    "State University, Bachelor degree in Computer Science with honors.",
    "Skills",
    "Python, SQL, Flask, AWS, Kubernetes, Terraform, PostgreSQL, Kafka.",
    "Projects",
    "Open source maintainer of a popular scheduling library used by many companies.",
])


def test_layout_wins_when_generic_decode_is_truncated():
    """Generic decode yields 30 chars; layout yields a full resume -> layout-reconstruction."""
    short = "Name: John Doe\nSkills: Python"
    ocr_calls = []

    def ocr(buffer):
        ocr_calls.append(1)
        return ""

    orch = ExtractionOrchestrator(
        _strategies(_returning(short), _returning(short), _returning(RESUME_BODY), _returning(short)),
        ocr=ocr,
    )
    best = orch.extract_candidate(b"%PDF")
    assert len(RESUME_BODY) > 500
    assert best.method is M.LAYOUT_RECONSTRUCTION
    assert best.text == normalize_text(RESUME_BODY)
    assert ocr_calls == []
