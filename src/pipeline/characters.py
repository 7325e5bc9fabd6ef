"""Character-level reconstruction, for producers whose runs don't follow word boundaries."""

from __future__ import annotations

from src.pipeline.layout import CHAR_WIDTH_FACTOR, LINE_TOLERANCE, sort_reading_order
from src.pipeline.models import Character, PositionedTextRun

SPACE_GAP_FACTOR = 1.5


def explode_run(run: PositionedTextRun) -> list[Character]:
    """Spread a run's content across estimated per-character x positions."""
    step = run.font_size * CHAR_WIDTH_FACTOR
    return [
        Character(char=ch, x=run.x + i * step, y=run.y, font_size=run.font_size)
        for i, ch in enumerate(run.content)
    ]


def reconstruct_character_page(chars: list[Character]) -> str:
    out: list[str] = []
    last_x: float | None = None
    last_y: float | None = None

    for c in sort_reading_order(chars):
        if last_y is not None and abs(c.y - last_y) > LINE_TOLERANCE:
            out.append("\n")
            last_x = None
        elif last_x is not None and c.x - last_x > c.font_size * SPACE_GAP_FACTOR:
            out.append(" ")
        out.append(c.char)
        last_y = c.y
        last_x = c.x + c.font_size * CHAR_WIDTH_FACTOR

    return "".join(out).strip()


def reconstruct_characters(pages: list[list[PositionedTextRun]]) -> str:
    page_texts = []
    for runs in pages:
        chars = [c for run in runs if run.content for c in explode_run(run)]
        text = reconstruct_character_page(chars)
        if text:
            page_texts.append(text)
    return "\n\n".join(page_texts)
