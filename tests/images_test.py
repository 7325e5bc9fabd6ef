"""Embedded-image salvage: magic-byte scanning, size window, saving."""

import struct

from resume_extractor.images import (
    extract_all_images_to_files,
    extract_first_image_to_file,
    find_image_candidates,
)

FILLER = b"\x00" * 64


def _jpeg(span: int) -> bytes:
    return b"\xff\xd8" + b"\x11" * (span - 4) + b"\xff\xd9"


def _png(span: int) -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x22" * (span - 16) + b"IEND\xaeB`\x82"


def _webp(span: int) -> bytes:
    return b"RIFF" + struct.pack("<I", span - 8) + b"WEBP" + b"\x33" * (span - 12)


def test_jpeg_below_floor_rejected():
    assert find_image_candidates(FILLER + _jpeg(1024) + FILLER) == []


def test_jpeg_in_window_accepted():
    candidates = find_image_candidates(FILLER + _jpeg(5 * 1024) + FILLER)
    assert len(candidates) == 1
    c = candidates[0]
    assert (c.start, c.end, c.ext, c.size) == (64, 64 + 5120, "jpg", 5120)


def test_png_and_webp_detected_and_sorted_by_size():
    buffer = FILLER + _png(3000) + FILLER + _webp(8000) + FILLER + _jpeg(4000) + FILLER
    candidates = find_image_candidates(buffer)
    assert [(c.ext, c.size) for c in candidates] == [("webp", 8000), ("jpg", 4000), ("png", 3000)]


def test_truncated_webp_rejected():
    chunk = _webp(8000)
    assert find_image_candidates(FILLER + chunk[:4000]) == []


def test_cursor_jumps_past_end_marker():
    """A start marker inside an accepted span is not scanned again."""
    nested = b"\xff\xd8" + b"\x11" * 3000 + b"\xff\xd8" + b"\x11" * 3000 + b"\xff\xd9"
    candidates = find_image_candidates(nested)
    assert len(candidates) == 1
    assert candidates[0].start == 0


def test_save_all_images(tmp_path):
    photo = _jpeg(6000)
    buffer = FILLER + _jpeg(3000) + FILLER + photo
    urls = extract_all_images_to_files(buffer, tmp_path, max_images=6)
    assert len(urls) == 2
    assert all(u.startswith("/uploads/resume-photo-") for u in urls)
    first = tmp_path / urls[0].rsplit("/", 1)[1]
    assert first.name.endswith("-1.jpg")
    assert first.read_bytes() == photo


def test_max_images_cap(tmp_path):
    buffer = FILLER + _jpeg(3000) + FILLER + _jpeg(6000) + FILLER + _png(4000)
    assert len(extract_all_images_to_files(buffer, tmp_path, max_images=2)) == 2


def test_first_image_is_largest(tmp_path):
    buffer = FILLER + _png(3000) + FILLER + _jpeg(9000)
    url = extract_first_image_to_file(buffer, tmp_path)
    assert url.endswith(".jpg")


def test_no_images():
    assert extract_first_image_to_file(FILLER, "unused") is None


def test_errors_are_swallowed(tmp_path):
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")
    buffer = FILLER + _jpeg(5000)
    assert extract_all_images_to_files(buffer, not_a_dir) == []
    assert extract_first_image_to_file(buffer, not_a_dir) is None
