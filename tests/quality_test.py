"""Quality scorer: capped terms, bonuses, repetition penalty."""

from src.scoring import RESUME_KEYWORDS, score_breakdown, score_text


def test_empty_text_scores_zero():
    assert score_text("") == 0
    assert score_breakdown("")["total"] == 0


def test_score_is_non_negative_and_deterministic():
    text = "Experience at Acme. Education at State University. Skills: Python."
    assert score_text(text) >= 0
    assert score_text(text) == score_text(text)


def test_length_term_monotonic_below_cap():
    long_text = " ".join(f"word{i}" for i in range(120))
    short_text = long_text[:400]
    assert len(long_text) < 1000
    assert score_breakdown(long_text)["length"] >= score_breakdown(short_text)["length"]


def test_length_term_capped():
    assert score_breakdown("x " * 10000)["length"] == 5


def test_repetition_penalty_boundary():
    """Same word 1000 times scores strictly below 1000 distinct words of equal length."""
    repeated = " ".join(["abcde"] * 1000)
    distinct = " ".join(f"w{i:04d}" for i in range(1000))
    assert len(repeated) == len(distinct)
    assert score_text(repeated) < score_text(distinct)
    assert score_breakdown(repeated)["repetition_factor"] == 0.5
    assert score_breakdown(distinct)["repetition_factor"] == 2


def test_keyword_term():
    assert len(RESUME_KEYWORDS) == 19
    assert score_breakdown("Experience and EDUCATION")["keywords"] == 1.0


def test_email_and_phone_bonuses():
    b = score_breakdown("Reach me at jane@doe.com or 555-123-4567")
    assert b["email"] == 2
    assert b["phone"] == 1

    b = score_breakdown("No contact details here at all")
    assert b["email"] == 0
    assert b["phone"] == 0


def test_sentence_term_counts_long_fragments_only():
    b = score_breakdown("Short. Another. This fragment is long enough! And this one too?")
    # "This fragment is long enough" and " And this one too" pass the > 10 chars filter.
    assert b["sentences"] == 0.2
