"""Reading-order reconstruction from positioned text runs."""

from __future__ import annotations

from dataclasses import replace
from functools import cmp_to_key

from src.pipeline.models import Line, PositionedTextRun

# Empirical average glyph width per unit of font size. Shared by width
# estimation, gap detection and character reconstruction.
CHAR_WIDTH_FACTOR = 0.6
LINE_TOLERANCE = 0.5
WORD_GAP_THRESHOLD = 0.5


def estimate_text_width(content: str, font_size: float) -> float:
    return len(content) * font_size * CHAR_WIDTH_FACTOR


def reading_order(a, b) -> float:
    """Comparator: top-to-bottom (descending y), then left-to-right within tolerance."""
    y_diff = b.y - a.y
    if abs(y_diff) < LINE_TOLERANCE:
        return a.x - b.x
    return y_diff


def sort_reading_order(items: list) -> list:
    return sorted(items, key=cmp_to_key(reading_order))


def group_lines(items: list) -> list[Line]:
    """Group sorted items into lines anchored at the first item's y."""
    lines: list[Line] = []
    for item in items:
        if lines and abs(item.y - lines[-1].y) < LINE_TOLERANCE:
            lines[-1].items.append(item)
        else:
            lines.append(Line(y=item.y, items=[item]))
    return lines


def render_line(line: Line) -> str:
    """Concatenate a line's runs left to right, spacing runs separated by a visible gap."""
    runs = sorted(line.items, key=lambda r: r.x)
    parts: list[str] = []
    for i, run in enumerate(runs):
        parts.append(run.content)
        if i + 1 < len(runs):
            gap = runs[i + 1].x - (run.x + estimate_text_width(run.content, run.font_size))
            if gap > WORD_GAP_THRESHOLD:
                parts.append(" ")
    return "".join(parts).strip()


def reconstruct_page(runs: list[PositionedTextRun]) -> str:
    kept = [replace(r, content=r.content.strip()) for r in runs if r.content and r.content.strip()]
    if not kept:
        return ""
    line_texts = [render_line(line) for line in group_lines(sort_reading_order(kept))]
    return "\n".join(t for t in line_texts if t)


def reconstruct_layout(pages: list[list[PositionedTextRun]]) -> str:
    """
    Rebuild page text from positioned runs.

    Lines are joined with newlines and pages with a blank line; pages that
    yield no text are skipped.
    """
    page_texts = [reconstruct_page(runs) for runs in pages]
    return "\n\n".join(t for t in page_texts if t)
