"""Plain-text transformations over rich-text (HTML) descriptions.

Descriptions are stored as opaque markup produced by the editor. Nothing here
builds a document model: word counting uses a single tag-removal pass, and
export uses a block-aware pass that keeps paragraph and line breaks.
"""

from __future__ import annotations

import html
import re

_TAG_RE = re.compile(r"<.*?>")
_PARAGRAPH_OPEN_RE = re.compile(r"<p[^>]*>", re.IGNORECASE)
_PARAGRAPH_CLOSE_RE = re.compile(r"</p>", re.IGNORECASE)
_LINE_BREAK_RE = re.compile(r"<br[^>]*>", re.IGNORECASE)
_ANY_TAG_RE = re.compile(r"<[^>]+>")
_EXTRA_NEWLINES_RE = re.compile(r"\n\s*\n\s*\n+")


def strip_tags(markup: str | None) -> str:
    """Remove tags without decoding entities; used for word counts."""
    if not markup:
        return ""
    return _TAG_RE.sub("", markup)


def count_words(markup: str | None) -> int:
    """Count whitespace-delimited tokens after stripping tags."""
    if not markup or not markup.strip():
        return 0
    return len(strip_tags(markup).split())


def markup_to_text(markup: str | None) -> str:
    """Convert markup to readable text for rendering.

    ``</p>`` becomes a blank line, ``<br>`` a newline, other tags are dropped,
    entities are decoded and runs of three or more newlines collapse to two.
    """
    if not markup:
        return ""
    text = _PARAGRAPH_OPEN_RE.sub("", markup)
    text = _PARAGRAPH_CLOSE_RE.sub("\n\n", text)
    text = _LINE_BREAK_RE.sub("\n", text)
    text = _ANY_TAG_RE.sub("", text)
    text = html.unescape(text)
    text = _EXTRA_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def split_paragraphs(text: str) -> list[list[str]]:
    """Split plain text into paragraphs, each a list of lines."""
    if not text:
        return []
    return [paragraph.split("\n") for paragraph in text.split("\n\n") if paragraph.strip()]
