#!/usr/bin/env python3
"""
Repeatability harness: run extraction over the same PDF N times; assert identical results.
Exits 0 if stable, 1 if unstable. Prints a variance report on failure.
Prints provenance (source hash, winning method, text hash) so runs can be compared across machines.

Usage: python scripts/repeatability_check.py resume.pdf [--runs 10] [--parallel] [--ocr]

Run once sequentially and once with --parallel: both must report the same text_hash.
"""

import argparse
import dataclasses
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from resume_extractor.config import ExtractorConfig
from resume_extractor.extraction import build_orchestrator
from resume_extractor.pdf_parser import read_pdf_bytes
from src.utils import hash_bytes, hash_text

DEFAULT_RUNS = 10


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("pdf", type=Path)
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS)
    parser.add_argument("--parallel", action="store_true", help="Run strategies concurrently")
    parser.add_argument("--ocr", action="store_true", help="Enable the OCR fallback")
    args = parser.parse_args()

    try:
        buffer = read_pdf_bytes(args.pdf)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    base = ExtractorConfig.from_env()
    config = dataclasses.replace(
        base,
        parallel=args.parallel,
        ocr_enabled=args.ocr or base.ocr_enabled,
        time_budget_seconds=0,
    )
    orchestrator = build_orchestrator(config)

    print(f"Running extraction {args.runs} times (parallel={args.parallel})...")
    results = []
    for _ in range(args.runs):
        result = orchestrator.run(buffer)
        results.append({
            "method": result.best.method.value,
            "confidence": result.best.confidence,
            "text_length": len(result.best.text),
            "text_hash": hash_text(result.best.text),
            "statuses": [(a.method.value, a.status) for a in result.attempts],
        })

    first = results[0]
    variances = []
    for run_num, r in enumerate(results[1:], start=2):
        for key in ("method", "confidence", "text_hash", "statuses"):
            if r[key] != first[key]:
                variances.append((key, run_num, f"{r[key]} != {first[key]}"))

    if variances:
        print("\n=== VARIANCE REPORT ===\n")
        print(f"Runs: {args.runs} | Parallel: {args.parallel}")
        for stage, run, detail in variances:
            print(f"  Run {run} - {stage}: {detail}")
        print("\nRepeatability check FAILED.")
        sys.exit(1)

    print("\nPASS: Repeatability check passed.")
    print("\n--- Provenance ---")
    print(f"  source_hash: {hash_bytes(buffer)}")
    print(f"  text_hash: {first['text_hash']}")
    print("\n--- Run metrics ---")
    print(f"  runs: {args.runs}")
    print(f"  method: {first['method']}")
    print(f"  confidence: {first['confidence']:.4f}")
    print(f"  text_length: {first['text_length']}")
    for method, status in first["statuses"]:
        print(f"  {method}: {status}")
    sys.exit(0)


if __name__ == "__main__":
    main()
