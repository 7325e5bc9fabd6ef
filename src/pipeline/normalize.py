"""Text normalization applied to every raw extraction before scoring."""

import re

_ARTIFACT_TABLE = str.maketrans({
    "\u00ad": None,  # soft hyphen
    "\u200b": None,  # zero-width space
    "\ufeff": None,  # BOM
    "\u00a0": " ",
})

_WHITESPACE_RE = re.compile(r"\s+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")

# Repairs. Zero-width patterns so a single pass reaches a fixed point.
_PUNCT_BEFORE_UPPER_RE = re.compile(r"(?<=[a-zA-Z][.,:;!?])(?=[A-Z])")
_LOWER_BEFORE_UPPER_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_EMAIL_AT_RE = re.compile(r"(?<=\w)[ \t]*@[ \t]*(?=\w)")
_URL_SCHEME_RE = re.compile(r"(https?://)[ \t]+")
TLDS = ("com", "org", "net", "edu", "io", "dev")
# Only a dot with whitespace before it: "example . com", never a sentence end like "e.g. in".
_TLD_RE = re.compile(r"(?<=\w)[ \t]+\.[ \t]*(?=(?:" + "|".join(TLDS) + r")\b)")


def _strip_artifacts(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.translate(_ARTIFACT_TABLE)


def _collapse_whitespace(text: str) -> str:
    lines = [_WHITESPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def _repair_spacing(text: str) -> str:
    text = _PUNCT_BEFORE_UPPER_RE.sub(" ", text)  # "Developer.Built" -> "Developer. Built"
    text = _LOWER_BEFORE_UPPER_RE.sub(" ", text)  # "SkillsLanguages" -> "Skills Languages"
    text = _EMAIL_AT_RE.sub("@", text)
    text = _URL_SCHEME_RE.sub(r"\1", text)
    return _TLD_RE.sub(".", text)


def normalize_text(text: str) -> str:
    """
    Clean raw extracted text.

    Output has no leading/trailing whitespace per line, no whitespace run longer
    than one space, at most one consecutive blank line, and no soft hyphens,
    zero-width spaces or BOMs. Then applies heuristic spacing repairs; the
    lowercase->uppercase split will occasionally break legitimate CamelCase.
    Idempotent.
    """
    if not text:
        return ""
    text = _strip_artifacts(str(text))
    text = _collapse_whitespace(text)
    return _repair_spacing(text)
