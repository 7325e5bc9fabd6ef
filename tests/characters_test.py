"""Character-level reconstruction for producers that emit one run per glyph or chunk."""

from src.pipeline.characters import explode_run, reconstruct_characters
from src.pipeline.models import PositionedTextRun as Run


def test_explode_run_positions():
    chars = explode_run(Run(x=10, y=50, content="abc", font_size=10))
    assert [c.char for c in chars] == ["a", "b", "c"]
    assert [c.x for c in chars] == [10, 16, 22]
    assert all(c.y == 50 and c.font_size == 10 for c in chars)


def test_gap_and_line_break():
    page = [
        Run(x=0, y=100, content="AB", font_size=10),
        Run(x=100, y=100, content="CD", font_size=10),
        Run(x=0, y=80, content="EF", font_size=10),
    ]
    assert reconstruct_characters([page]) == "AB CD\nEF"


def test_scrambled_glyph_runs_reordered():
    """Glyph runs emitted out of order come back in reading order."""
    page = [
        Run(x=12, y=100, content="c", font_size=10),
        Run(x=0, y=100, content="a", font_size=10),
        Run(x=6, y=100, content="b", font_size=10),
    ]
    assert reconstruct_characters([page]) == "abc"


def test_empty_pages_skipped():
    pages = [[], [Run(x=0, y=100, content="", font_size=10)], [Run(x=0, y=100, content="Hi", font_size=10)]]
    assert reconstruct_characters(pages) == "Hi"
