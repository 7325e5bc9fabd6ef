#!/usr/bin/env python3
"""CLI for the résumé PDF extractor."""

import argparse
import dataclasses
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from resume_extractor import ExtractorConfig, InsufficientTextError, extract_all_pdf_data
from resume_extractor.pdf_parser import read_pdf_bytes
from src.run_report import build_extraction_report, write_extraction_report
from src.utils import hash_bytes


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Extract the best-effort text of a résumé PDF using several strategies."
    )
    parser.add_argument(
        "resume_pdf",
        type=Path,
        help="Path to the résumé PDF file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output text, method, links and images as JSON",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=None,
        help="Where to save embedded images (default: RESUME_UPLOAD_DIR or uploads/)",
    )
    parser.add_argument(
        "--max-images",
        type=int,
        default=None,
        help="Maximum number of embedded images to save (0 saves only the profile photo)",
    )
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Do not scan for embedded images",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a validated JSON run report to this path",
    )
    parser.add_argument(
        "--ocr",
        action="store_true",
        help="Enable the Tesseract OCR fallback (requires the ocr extra)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the text-layer strategies concurrently",
    )

    args = parser.parse_args()

    try:
        config = ExtractorConfig.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    overrides = {}
    if args.ocr:
        overrides["ocr_enabled"] = True
    if args.parallel:
        overrides["parallel"] = True
    if args.images_dir is not None:
        overrides["upload_dir"] = args.images_dir
    if args.max_images is not None:
        if args.max_images < 0:
            print("Error: --max-images must be non-negative", file=sys.stderr)
            sys.exit(1)
        overrides["max_images"] = args.max_images
    config = dataclasses.replace(config, **overrides)

    try:
        buffer = read_pdf_bytes(args.resume_pdf)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        extraction = extract_all_pdf_data(buffer, config, include_images=not args.no_images)
    except InsufficientTextError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.report:
        report = build_extraction_report(
            hash_bytes(buffer),
            extraction.candidate,
            extraction.attempts,
            image_count=len(extraction.images),
            hyperlink_count=len(extraction.hyperlinks),
        )
        write_extraction_report(args.report, report)
        print(f"Run report saved to: {args.report}", file=sys.stderr)

    if args.json:
        print(json.dumps(extraction.to_dict(), indent=2, ensure_ascii=False))
        return

    print(extraction.text)
    print(f"\n--- method: {extraction.method.value} | score: {extraction.confidence:.2f} ---", file=sys.stderr)
    for link in extraction.hyperlinks:
        print(f"  link ({link.platform}): {link.url}", file=sys.stderr)
    for url in extraction.images:
        print(f"  image: {url}", file=sys.stderr)
    if extraction.photo_url and not extraction.images:
        print(f"  photo: {extraction.photo_url}", file=sys.stderr)


if __name__ == "__main__":
    main()
