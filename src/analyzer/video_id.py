"""Video id resolution from free-form user input.

The input is a single string holding a YouTube URL and, optionally, the
question to ask about it. Nothing in this module touches the network.
"""

import re

from .config import DEFAULT_QUESTION
from .errors import InvalidInput
from .schemas import ParsedInput

URL_RE = re.compile(r"(https?://[^\s]+)")
VIDEO_ID_RE = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"
)

YOUTUBE_WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


def extract_url(text: str) -> str | None:
    """Return the first http(s) URL substring in ``text``, if any."""
    match = URL_RE.search(text or "")
    return match.group(1) if match else None


def extract_video_id(url: str) -> str | None:
    """Extract the video id from a watch, short-link or embed URL.

    Examples:
        >>> extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42")
        'dQw4w9WgXcQ'
        >>> extract_video_id("https://youtu.be/dQw4w9WgXcQ")
        'dQw4w9WgXcQ'
        >>> extract_video_id("https://example.com/video") is None
        True
    """
    match = VIDEO_ID_RE.search(url or "")
    return match.group(1) if match else None


def build_watch_url(video_id: str) -> str:
    return YOUTUBE_WATCH_URL_TEMPLATE.format(video_id=video_id)


def parse_input(text: str | None) -> ParsedInput:
    """Split user input into URL, video id and question.

    The question is whatever remains once the URL is removed. When nothing
    remains the default question is used.

    Args:
        text: Free-form input such as
            "https://youtu.be/abc123 What is discussed at minute 2?".

    Returns:
        ParsedInput with the URL, the video id and the question.

    Raises:
        InvalidInput: If the input is empty, holds no URL, or the URL is not
            one of the supported YouTube shapes.
    """
    if not text or not text.strip():
        raise InvalidInput(
            "Input is required", user_message="Input is required"
        )

    url = extract_url(text)
    if url is None:
        raise InvalidInput("No URL found in input")

    video_id = extract_video_id(url)
    if video_id is None:
        raise InvalidInput(f"Unsupported URL: {url}")

    question = text.replace(url, "", 1).strip() or DEFAULT_QUESTION

    return ParsedInput(url=url, video_id=video_id, question=question)
