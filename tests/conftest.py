"""Shared fixtures: résumé PDFs generated on the fly with reportlab."""

from io import BytesIO

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

RESUME_LINES = [
    "Senior Software Engineer",
    "Email: jane.doe@example.com | Phone: 555-123-4567",
    "Summary",
    "Professional engineer with eight years of experience building data platforms.",
    "Experience",
    "Acme Corp - Led a team of five engineers delivering payment services.",
    "Education",
    "Computer Science degree, State University",
    "Skills",
    "Python, SQL, Flask, AWS",
]

PROFILE_URL = "https://github.com/janedoe"


def make_pdf(lines=(), title=None, link_url=None) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 740
    if title:
        c.setFont("Helvetica-Bold", 16)
        c.drawString(72, y, title)
        y -= 28
    c.setFont("Helvetica", 11)
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    if link_url:
        c.drawString(72, y, link_url)
        c.linkURL(link_url, (72, y - 2, 300, y + 12), relative=0)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def resume_pdf() -> bytes:
    return make_pdf(RESUME_LINES, title="Jane Doe", link_url=PROFILE_URL)


@pytest.fixture
def blank_pdf() -> bytes:
    return make_pdf()


@pytest.fixture
def split_line_pdf() -> bytes:
    """One line drawn as three strings: "Pyth" and "on" touching, "Developer" further right."""
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setFont("Helvetica", 11)
    c.drawString(72, 740, "Pyth")
    c.drawString(72 + stringWidth("Pyth", "Helvetica", 11), 740, "on")
    c.drawString(200, 740, "Developer")
    c.showPage()
    c.save()
    return buf.getvalue()
