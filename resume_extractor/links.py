"""Hyperlinks from /Link annotations and from URLs or emails written in the text."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass

from resume_extractor.pdf_parser import open_pdf

log = logging.getLogger(__name__)

LINK_PATTERN = re.compile(r"(https?://[^\s)]+|www\.[^\s)]+|[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,})", re.IGNORECASE)
TRAILING_PUNCTUATION = ".,;:!?'\""

# Host suffix -> platform. First match wins, so github.io sits before github.com.
PLATFORM_HOSTS = (
    ("github.io", "github_pages"),
    ("github.com", "github"),
    ("gitlab.com", "gitlab"),
    ("bitbucket.org", "bitbucket"),
    ("codepen.io", "codepen"),
    ("linkedin.com", "linkedin"),
    ("twitter.com", "twitter"),
    ("x.com", "twitter"),
    ("behance.net", "behance"),
    ("dribbble.com", "dribbble"),
    ("medium.com", "medium"),
    ("vercel.app", "vercel"),
    ("netlify.app", "netlify"),
    ("herokuapp.com", "herokuapp"),
    ("firebaseapp.com", "firebase"),
    ("web.app", "firebase"),
    ("scholar.google.com", "google_scholar"),
    ("researchgate.net", "researchgate"),
    ("orcid.org", "orcid"),
)

HOSTING = {"vercel", "netlify", "herokuapp", "firebase", "github_pages"}

# Where a link belongs on a portfolio page; one platform can sit in several groups.
LINK_CATEGORIES = {
    "social": {"github", "linkedin", "twitter", "behance", "dribbble", "medium"},
    "development": {"github", "gitlab", "bitbucket", "codepen"},
    "hosting": HOSTING,
    "academic": {"google_scholar", "researchgate", "orcid"},
    "professional": {"linkedin", "website"},
    "portfolio": HOSTING | {"behance", "dribbble"},
    "projects": HOSTING | {"github", "gitlab", "codepen"},
    "contact": {"email"},
}


@dataclass(frozen=True)
class Hyperlink:
    url: str
    link_text: str | None = None
    page: int | None = None
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    position: int | None = None
    platform: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def _normalize_url(raw: str) -> str:
    if raw.lower().startswith("www."):
        return f"https://{raw}"
    return raw


def _bare(url: str) -> str:
    """URL without scheme or leading www, for matching against visible text."""
    bare = re.sub(r"^(?:https?://|mailto:)", "", url, flags=re.IGNORECASE)
    bare = re.sub(r"^www\.", "", bare, flags=re.IGNORECASE)
    return bare.rstrip("/").lower()


def link_platform(url: str) -> str:
    """Platform a URL points at: "github", "linkedin", ..., "email", or "website" for anything else."""
    bare = _bare(url)
    host = re.split(r"[/?#]", bare, maxsplit=1)[0]
    if "@" in host or url.lower().startswith("mailto:"):
        return "email"
    host = host.split(":", 1)[0]
    for suffix, platform in PLATFORM_HOSTS:
        if host == suffix or host.endswith("." + suffix):
            return platform
    return "website"


def group_links(links: list[Hyperlink]) -> dict[str, list[str]]:
    """URLs per portfolio category, in link order without duplicates. Empty categories are left out."""
    groups: dict[str, list[str]] = {}
    for category, platforms in LINK_CATEGORIES.items():
        urls = []
        for link in links:
            platform = link.platform or link_platform(link.url)
            if platform in platforms and link.url not in urls:
                urls.append(link.url)
        if urls:
            groups[category] = urls
    return groups


def detect_text_links(text: str) -> list[Hyperlink]:
    """URLs and email addresses written in the text, with their character offsets."""
    links = []
    for match in LINK_PATTERN.finditer(text or ""):
        raw = match.group(0).rstrip(TRAILING_PUNCTUATION)
        if not raw:
            continue
        url = _normalize_url(raw)
        links.append(Hyperlink(url=url, link_text=raw, position=match.start(), platform=link_platform(url)))
    return links


def extract_annotation_links(buffer: bytes) -> list[Hyperlink]:
    """/Link annotations carrying a /URI action, with page number and rectangle."""
    reader = open_pdf(buffer)
    links = []
    for page_number, page in enumerate(reader.pages, start=1):
        annots = page.get("/Annots")
        if not annots:
            continue
        for ref in annots.get_object():
            annot = ref.get_object()
            if annot.get("/Subtype") != "/Link":
                continue
            action = annot.get("/A")
            action = action.get_object() if action is not None else None
            uri = action.get("/URI") if action else None
            if not uri:
                continue
            x1, y1, x2, y2 = (float(v) for v in annot.get("/Rect", [0, 0, 0, 0]))
            links.append(Hyperlink(
                url=str(uri),
                page=page_number,
                x=min(x1, x2),
                y=min(y1, y2),
                width=abs(x2 - x1),
                height=abs(y2 - y1),
                platform=link_platform(str(uri)),
            ))
    return links


def _locate(link: Hyperlink, text: str) -> Hyperlink:
    """Attach the offset and visible text of an annotation link when its URL appears in the text."""
    needle = _bare(link.url)
    if not needle:
        return link
    at = text.lower().find(needle)
    if at < 0:
        return link
    return Hyperlink(**{**asdict(link), "position": at, "link_text": text[at:at + len(needle)]})


def _covered(candidate: Hyperlink, annotated: list[Hyperlink]) -> bool:
    bare = _bare(candidate.url)
    others = [_bare(a.url) for a in annotated]
    return any(other and (bare in other or other in bare) for other in others)


def extract_hyperlinks(buffer: bytes, text: str) -> list[Hyperlink]:
    """
    Union of annotation links and text-detected links, ordered by position in the text.

    Text-detected links whose URL an annotation already carries are dropped.
    Annotation links that cannot be located in the text come last, in page order.
    Never raises.
    """
    try:
        annotated = [_locate(link, text or "") for link in extract_annotation_links(buffer)]
    except Exception as e:
        log.warning("Annotation link extraction failed: %s", e)
        annotated = []

    detected = [link for link in detect_text_links(text) if not _covered(link, annotated)]
    combined = annotated + detected
    combined.sort(key=lambda link: (link.position is None, link.position or 0, link.page or 0))
    log.debug("Hyperlinks: %d annotated, %d detected in text", len(annotated), len(detected))
    return combined
