"""Salvage embedded photos by scanning the raw PDF bytes for image signatures."""

from __future__ import annotations

import logging
import struct
from pathlib import Path

from src.pipeline.models import ImageCandidate
from src.utils import timestamp_ms

log = logging.getLogger(__name__)

MIN_IMAGE_BYTES = 2 * 1024
MAX_IMAGE_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_IMAGES = 6
UPLOAD_URL_PREFIX = "/uploads"

JPEG_START = b"\xff\xd8"
JPEG_END = b"\xff\xd9"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
PNG_TRAILER = b"IEND\xaeB`\x82"
RIFF_TAG = b"RIFF"
WEBP_TAG = b"WEBP"


def _in_window(size: int) -> bool:
    return MIN_IMAGE_BYTES < size < MAX_IMAGE_BYTES


def _scan_markers(buffer: bytes, start_marker: bytes, end_marker: bytes, ext: str) -> list[ImageCandidate]:
    """Start/end marker pairs; the cursor resumes past each end marker, kept or not."""
    found = []
    cursor = 0
    while True:
        start = buffer.find(start_marker, cursor)
        if start < 0:
            break
        end_at = buffer.find(end_marker, start + len(start_marker))
        if end_at < 0:
            break
        end = end_at + len(end_marker)
        size = end - start
        if _in_window(size):
            found.append(ImageCandidate(start=start, end=end, ext=ext, size=size))
        cursor = end
    return found


def _scan_webp(buffer: bytes) -> list[ImageCandidate]:
    found = []
    cursor = 0
    while True:
        start = buffer.find(RIFF_TAG, cursor)
        if start < 0 or start + 12 > len(buffer):
            break
        if buffer[start + 8:start + 12] != WEBP_TAG:
            cursor = start + len(RIFF_TAG)
            continue
        (chunk_size,) = struct.unpack_from("<I", buffer, start + 4)
        end = start + chunk_size + 8
        if end > len(buffer):
            cursor = start + len(RIFF_TAG)
            continue
        size = end - start
        if _in_window(size):
            found.append(ImageCandidate(start=start, end=end, ext="webp", size=size))
        cursor = end
    return found


def find_image_candidates(buffer: bytes) -> list[ImageCandidate]:
    """JPEG, PNG and WEBP byte ranges within the size window, largest first."""
    candidates = (
        _scan_markers(buffer, JPEG_START, JPEG_END, "jpg")
        + _scan_markers(buffer, PNG_SIGNATURE, PNG_TRAILER, "png")
        + _scan_webp(buffer)
    )
    candidates.sort(key=lambda c: c.size, reverse=True)
    return candidates


def _save_candidates(buffer: bytes, candidates: list[ImageCandidate], upload_dir: str | Path) -> list[str]:
    upload_dir = Path(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    stamp = timestamp_ms()
    urls = []
    for index, candidate in enumerate(candidates, start=1):
        filename = f"resume-photo-{stamp}-{index}.{candidate.ext}"
        (upload_dir / filename).write_bytes(buffer[candidate.start:candidate.end])
        log.info("Saved embedded image %s (%s, %dKB)", filename, candidate.ext, candidate.size // 1024)
        urls.append(f"{UPLOAD_URL_PREFIX}/{filename}")
    return urls


def extract_first_image_to_file(buffer: bytes, upload_dir: str | Path) -> str | None:
    """Save the largest embedded image (profile photo). Never raises; None when nothing usable."""
    try:
        candidates = find_image_candidates(buffer)
        if not candidates:
            return None
        return _save_candidates(buffer, candidates[:1], upload_dir)[0]
    except Exception as e:
        log.warning("Image extraction failed: %s", e)
        return None


def extract_all_images_to_files(
    buffer: bytes, upload_dir: str | Path, max_images: int = DEFAULT_MAX_IMAGES
) -> list[str]:
    """Save up to max_images of the largest embedded images. Never raises; [] on failure."""
    try:
        candidates = find_image_candidates(buffer)
        return _save_candidates(buffer, candidates[:max_images], upload_dir)
    except Exception as e:
        log.warning("Multiple image extraction failed: %s", e)
        return []
