"""Caption track discovery and download.

YouTube has no public caption API, so tracks are located by scraping the
``captionTracks`` listing embedded in the watch page. The scraping strategy
sits behind the ``CaptionSource`` protocol so it can be swapped or faked
without touching the rest of the pipeline.
"""

import json
import re
from typing import Protocol

from httpx import AsyncClient, HTTPError, InvalidURL

from src.utils.logging import get_logger

from .config import AnalyzerConfig
from .errors import CaptionFetchFailed, NoCaptions, VideoUnavailable
from .schemas import CaptionTrack
from .video_id import build_watch_url

logger = get_logger(__name__)

YOUTUBE_BASE_URL = "https://www.youtube.com"
CONSENT_COOKIE = "CONSENT=YES+cb.20210328-17-p0.en+FX+888"

ENGLISH_VSS_RE = re.compile(r"(?:^|\.)en(?:$|[-.])", re.IGNORECASE)
FORMAT_PARAM_RE = re.compile(r"&fmt=[^&]*")


class CaptionSource(Protocol):
    """Anything that can list the caption tracks of a video."""

    async def list_tracks(self, video_id: str) -> list[CaptionTrack]: ...


# ==============================================================================
# Helper Functions
# ==============================================================================


def _track_name(name: dict | None) -> str | None:
    if not name:
        return None
    if name.get("simpleText"):
        return name["simpleText"]
    runs = name.get("runs") or []
    return "".join(run.get("text", "") for run in runs) or None


def parse_caption_tracks(html: str, video_id: str) -> list[CaptionTrack]:
    """Extract the caption track listing from a watch page document.

    Args:
        html: Watch page HTML.
        video_id: Video id, used for error context only.

    Returns:
        Caption tracks in the order the page lists them.

    Raises:
        CaptionFetchFailed: If YouTube answered with a captcha page.
        VideoUnavailable: If the page carries no player status at all.
        NoCaptions: If the listing is missing, unreadable or empty.
    """
    if 'class="g-recaptcha"' in html:
        raise CaptionFetchFailed(
            "YouTube answered with a captcha page",
            video_id=video_id,
            user_message="YouTube is receiving too many requests right now. Please try again later.",
        )

    if '"playabilityStatus":' not in html:
        raise VideoUnavailable(f"Video {video_id} is unavailable", video_id=video_id)

    parts = html.split('"captions":', 1)
    if len(parts) < 2:
        raise NoCaptions(f"Captions are disabled for {video_id}", video_id=video_id)

    raw_listing = parts[1].split(',"videoDetails', 1)[0].replace("\n", "")
    try:
        listing = json.loads(raw_listing)
    except ValueError as e:
        raise NoCaptions(
            f"Caption listing for {video_id} could not be decoded: {e}",
            video_id=video_id,
        ) from e

    if not isinstance(listing, dict):
        raise NoCaptions(f"Caption listing for {video_id} is not an object", video_id=video_id)

    renderer = listing.get("playerCaptionsTracklistRenderer") or {}
    tracks = []
    for entry in renderer.get("captionTracks") or []:
        base_url = entry.get("baseUrl")
        if not base_url:
            continue
        if base_url.startswith("/"):
            base_url = YOUTUBE_BASE_URL + base_url
        tracks.append(
            CaptionTrack(
                language_code=entry.get("languageCode") or "",
                fetch_url=base_url,
                track_id=entry.get("vssId"),
                kind=entry.get("kind"),
                name=_track_name(entry.get("name")),
            )
        )

    if not tracks:
        raise NoCaptions(f"No caption tracks listed for {video_id}", video_id=video_id)

    return tracks


def is_english(track: CaptionTrack) -> bool:
    code = track.language_code.lower()
    if code == "en" or code.startswith("en-"):
        return True
    return bool(track.track_id and ENGLISH_VSS_RE.search(track.track_id))


def select_track(tracks: list[CaptionTrack]) -> CaptionTrack:
    """Pick the first English track, falling back to the first listed one.

    Raises:
        NoCaptions: If ``tracks`` is empty.
    """
    if not tracks:
        raise NoCaptions("No caption tracks to choose from")
    for track in tracks:
        if is_english(track):
            return track
    return tracks[0]


# ==============================================================================
# Services
# ==============================================================================


class YouTubePageCaptionSource:
    """Lists caption tracks by scraping the public watch page."""

    def __init__(self, http_client: AsyncClient, config: AnalyzerConfig):
        self.http_client = http_client
        self.config = config

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept-Language": self.config.accept_language,
            "Cookie": CONSENT_COOKIE,
        }

    async def list_tracks(self, video_id: str) -> list[CaptionTrack]:
        """Fetch the watch page for ``video_id`` and parse its caption listing.

        Raises:
            CaptionFetchFailed: On transport errors, timeouts or non-200 responses.
            NoCaptions: If the video lists no caption tracks.
        """
        url = build_watch_url(video_id)
        logger.info("watch_page_fetch_started", video_id=video_id)

        try:
            response = await self.http_client.get(
                url,
                headers=self._headers(),
                timeout=self.config.http_timeout_seconds,
                follow_redirects=True,
            )
        except (HTTPError, InvalidURL) as e:
            raise CaptionFetchFailed(
                f"Watch page request failed: {type(e).__name__}: {e}",
                video_id=video_id,
            ) from e

        if response.status_code != 200:
            raise CaptionFetchFailed(
                f"Watch page returned HTTP {response.status_code}",
                video_id=video_id,
            )

        tracks = parse_caption_tracks(response.text, video_id)

        logger.info(
            "caption_tracks_located",
            video_id=video_id,
            count=len(tracks),
            languages=[track.language_code for track in tracks],
        )
        return tracks


class CaptionFetcher:
    """Downloads the timed-text document of a single caption track."""

    def __init__(self, http_client: AsyncClient, config: AnalyzerConfig):
        self.http_client = http_client
        self.config = config

    async def fetch(self, track: CaptionTrack, video_id: str | None = None) -> str:
        """Retrieve the raw caption XML for ``track``.

        The ``fmt`` parameter is dropped so the endpoint returns the classic
        ``<text>`` element format.

        Raises:
            CaptionFetchFailed: On transport errors, timeouts or non-200 responses.
        """
        url = FORMAT_PARAM_RE.sub("", track.fetch_url)

        try:
            response = await self.http_client.get(
                url,
                headers={"User-Agent": self.config.user_agent},
                timeout=self.config.http_timeout_seconds,
            )
        except (HTTPError, InvalidURL) as e:
            raise CaptionFetchFailed(
                f"Caption request failed: {type(e).__name__}: {e}",
                video_id=video_id,
            ) from e

        if response.status_code != 200:
            raise CaptionFetchFailed(
                f"Caption endpoint returned HTTP {response.status_code}",
                video_id=video_id,
            )

        logger.info(
            "caption_document_fetched",
            video_id=video_id,
            language=track.language_code,
            size=len(response.text),
        )
        return response.text
