"""Flatten a timed-text caption document into a plain transcript."""

import re

from .errors import EmptyTranscript

TEXT_ELEMENT_RE = re.compile(r"<text\b[^>]*>(.*?)</text>", re.DOTALL)
TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>")
WHITESPACE_RE = re.compile(r"\s+")

# &amp; goes last so a double-escaped "&amp;#39;" only loses one level per pass
ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def decode_entities(text: str) -> str:
    """Decode the five standard HTML entities until none are left."""
    previous = None
    while previous != text:
        previous = text
        for entity, char in ENTITIES:
            text = text.replace(entity, char)
    return text


def extract_segments(document: str) -> list[str]:
    """Return the cleaned text of every ``<text>`` element, in order.

    Segments that are empty once cleaned are dropped.
    """
    segments = []
    for raw in TEXT_ELEMENT_RE.findall(document or ""):
        text = TAG_RE.sub("", decode_entities(raw))
        text = WHITESPACE_RE.sub(" ", text).strip()
        if text:
            segments.append(text)
    return segments


def parse_transcript(document: str) -> str:
    """Convert a raw caption document into one transcript string.

    Args:
        document: Caption XML as returned by the timed-text endpoint.

    Returns:
        Segment texts joined by single spaces.

    Raises:
        EmptyTranscript: If no text remains after parsing.
    """
    transcript = " ".join(extract_segments(document)).strip()
    if not transcript:
        raise EmptyTranscript("Caption document contained no text segments")
    return transcript
