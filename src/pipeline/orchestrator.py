"""Multi-strategy extraction: run every strategy over one buffer, score each, keep the best."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from src.pipeline.models import (
    ExtractionCandidate,
    ExtractionMethod,
    ExtractionResult,
    StrategyAttempt,
)
from src.pipeline.normalize import normalize_text
from src.scoring import score_text

MIN_TEXT_LENGTH = 100
OCR_TRIGGER_LENGTH = 500
OCR_CONFIDENCE_PENALTY = 0.8

INSUFFICIENT_TEXT_MESSAGE = (
    "Insufficient text extracted from PDF. The PDF may be image-based or corrupted."
)

log = logging.getLogger(__name__)


class InsufficientTextError(ValueError):
    """Raised when no strategy, OCR included, produced enough usable text."""

    def __init__(self, message: str = INSUFFICIENT_TEXT_MESSAGE, attempts: Iterable[StrategyAttempt] = ()):
        super().__init__(message)
        self.attempts = list(attempts)


class StrategyFailure(RuntimeError):
    """A collaborator could not produce text for a known, non-fatal reason."""


@dataclass(frozen=True)
class Strategy:
    method: ExtractionMethod
    run: Callable[[bytes], str]


def select_best(candidates: Iterable[ExtractionCandidate | None]) -> ExtractionCandidate:
    """
    Fold an ordered list of candidates (None = strategy produced nothing) into the winner.

    The first candidate is kept if it is longer than the empty sentinel; every
    later one must have a strictly higher score. Ties keep the earlier strategy.
    """
    best = ExtractionCandidate.empty()
    for index, candidate in enumerate(candidates):
        if candidate is None:
            continue
        if index == 0:
            better = len(candidate.text) > len(best.text)
        else:
            better = candidate.confidence > best.confidence
        if better:
            best = candidate
    return best


def ensure_sufficient(result: ExtractionResult) -> ExtractionCandidate:
    """Final gate. Raises InsufficientTextError; never returns short text."""
    if len(result.best.text) < MIN_TEXT_LENGTH:
        log.warning(
            "Insufficient text: best method=%s chars=%d (< %d)",
            result.best.method.value, len(result.best.text), MIN_TEXT_LENGTH,
        )
        raise InsufficientTextError(attempts=result.attempts)
    return result.best


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ExtractionOrchestrator:
    """
    Runs the text-layer strategies in a fixed order, then OCR if the best text is short.

    Args:
        strategies: Ordered strategies; order decides ties.
        ocr: Callable buffer -> text, or None to leave the OCR step unreachable.
        scorer: Quality score for normalized text.
        normalizer: Cleanup applied to every raw output before scoring.
        parallel: Run the text-layer strategies concurrently; the fold still
            happens afterwards in strategy order.
        time_budget: Seconds for the whole run. Strategies not started in time
            are skipped; in parallel mode late results are dropped.
    """

    def __init__(
        self,
        strategies: list[Strategy],
        ocr: Callable[[bytes], str] | None = None,
        *,
        scorer: Callable[[str], float] = score_text,
        normalizer: Callable[[str], str] = normalize_text,
        parallel: bool = False,
        time_budget: float | None = None,
    ):
        self.strategies = list(strategies)
        self.ocr = ocr
        self.scorer = scorer
        self.normalizer = normalizer
        self.parallel = parallel
        self.time_budget = time_budget

    def extract(self, buffer: bytes) -> str:
        return self.extract_candidate(buffer).text

    def extract_candidate(self, buffer: bytes) -> ExtractionCandidate:
        return ensure_sufficient(self.run(buffer))

    def run(self, buffer: bytes) -> ExtractionResult:
        """Run every strategy and return the winner with per-strategy attempts. Never raises."""
        log.info("Extraction started: %d bytes, %d strategies", len(buffer), len(self.strategies))
        deadline = time.monotonic() + self.time_budget if self.time_budget else None

        if self.parallel:
            outcomes = self._run_parallel(buffer, deadline)
        else:
            outcomes = self._run_sequential(buffer, deadline)

        best = select_best(candidate for candidate, _ in outcomes)
        attempts = [attempt for _, attempt in outcomes]

        best, ocr_attempt = self._run_ocr(buffer, best, deadline)
        attempts.append(ocr_attempt)

        log.info(
            "Best extraction method=%s chars=%d score=%.2f",
            best.method.value, len(best.text), best.confidence,
        )
        return ExtractionResult(best=best, attempts=attempts)

    def _candidate(self, raw: str, method: ExtractionMethod) -> ExtractionCandidate:
        text = self.normalizer(raw or "")
        return ExtractionCandidate(text=text, confidence=float(self.scorer(text)), method=method)

    def _attempt(self, strategy: Strategy, buffer: bytes) -> tuple[ExtractionCandidate | None, StrategyAttempt]:
        method = strategy.method
        started = time.perf_counter()
        try:
            candidate = self._candidate(strategy.run(buffer), method)
        except Exception as e:
            elapsed = _elapsed_ms(started)
            log.warning("Strategy %s failed after %dms: %s", method.value, elapsed, e)
            return None, StrategyAttempt(method, "failed", elapsed_ms=elapsed, detail=str(e) or type(e).__name__)

        elapsed = _elapsed_ms(started)
        log.info(
            "Strategy %s: chars=%d score=%.2f (%dms)",
            method.value, len(candidate.text), candidate.confidence, elapsed,
        )
        return candidate, StrategyAttempt(
            method, "ok", chars=len(candidate.text), confidence=candidate.confidence, elapsed_ms=elapsed,
        )

    def _run_sequential(self, buffer, deadline):
        outcomes = []
        for strategy in self.strategies:
            if deadline is not None and time.monotonic() >= deadline:
                log.warning("Time budget exhausted, skipping %s", strategy.method.value)
                outcomes.append((None, StrategyAttempt(strategy.method, "skipped", detail="time budget exhausted")))
                continue
            outcomes.append(self._attempt(strategy, buffer))
        return outcomes

    def _run_parallel(self, buffer, deadline):
        pool = ThreadPoolExecutor(max_workers=max(len(self.strategies), 1), thread_name_prefix="extract")
        try:
            futures = [pool.submit(self._attempt, s, buffer) for s in self.strategies]
            outcomes = []
            for strategy, future in zip(self.strategies, futures):
                timeout = None if deadline is None else max(deadline - time.monotonic(), 0.0)
                try:
                    outcomes.append(future.result(timeout=timeout))
                except FutureTimeoutError:
                    future.cancel()
                    log.warning("Strategy %s timed out", strategy.method.value)
                    outcomes.append((None, StrategyAttempt(strategy.method, "timeout", detail="time budget exhausted")))
            return outcomes
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def _run_ocr(self, buffer, best, deadline):
        method = ExtractionMethod.OCR
        if len(best.text) >= OCR_TRIGGER_LENGTH:
            return best, StrategyAttempt(method, "skipped", detail="text layer sufficient")
        if self.ocr is None:
            log.info("OCR fallback not configured; best text has %d chars", len(best.text))
            return best, StrategyAttempt(method, "skipped", detail="ocr disabled")
        if deadline is not None and time.monotonic() >= deadline:
            log.warning("Time budget exhausted, skipping OCR")
            return best, StrategyAttempt(method, "skipped", detail="time budget exhausted")

        log.info("Text layer insufficient (%d chars), attempting OCR", len(best.text))
        candidate, attempt = self._attempt(Strategy(method, self.ocr), buffer)
        if candidate is None:
            return best, attempt

        # OCR is less reliable: the penalized score has to win on its own.
        penalized = replace(candidate, confidence=candidate.confidence * OCR_CONFIDENCE_PENALTY)
        attempt = replace(attempt, confidence=penalized.confidence)
        if len(penalized.text) > len(best.text) and penalized.confidence > best.confidence:
            return penalized, attempt
        return best, attempt
