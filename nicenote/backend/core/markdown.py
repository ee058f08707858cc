"""
Markdown Content Helpers.

Content sanitization and summary derivation shared by the note service
and the editor client's optimistic cache updates.
"""

import re

DEFAULT_NOTE_TITLE = "Untitled"
SUMMARY_MAX_LENGTH = 120

# [text](javascript:...), [text](vbscript:...), [text](data:...) unless data:image/
# The target may contain one level of balanced parentheses, e.g. alert(1).
_DANGEROUS_LINK_RE = re.compile(
    r"\[([^\]]*)\]\((?:javascript:|vbscript:|data:(?!image/))[^()]*(?:\([^()]*\)[^()]*)*\)",
    re.IGNORECASE,
)

_FENCE_RE = re.compile(r"^\s*(```|~~~).*$", re.MULTILINE)
_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+", re.MULTILINE)
_BLOCKQUOTE_RE = re.compile(r"^\s*>\s?", re.MULTILINE)
_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(?:\[[ xX]\]\s+)?", re.MULTILINE)
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_EMPHASIS_RE = re.compile(r"[*_~`]+")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_content(content: str) -> str:
    """
    Neutralize Markdown links that use script-capable URL schemes.

    The link target is replaced with "#" and the link text is kept.
    Image data URLs are left untouched.
    """
    return _DANGEROUS_LINK_RE.sub(r"[\1](#)", content)


def generate_summary(content: str | None, max_length: int = SUMMARY_MAX_LENGTH) -> str | None:
    """
    Derive a plain-text excerpt from Markdown content.

    Returns None when the content carries no text.
    """
    if not content:
        return None

    text = _FENCE_RE.sub("", content)
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _HEADING_RE.sub("", text)
    text = _BLOCKQUOTE_RE.sub("", text)
    text = _LIST_MARKER_RE.sub("", text)
    text = _HTML_TAG_RE.sub("", text)
    text = _EMPHASIS_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()

    if not text:
        return None
    if len(text) <= max_length:
        return text
    return text[: max_length - 1].rstrip() + "…"


def normalize_title(title: str | None) -> str:
    """Apply the default title when the given one is empty or absent."""
    if title is None or not title.strip():
        return DEFAULT_NOTE_TITLE
    return title
