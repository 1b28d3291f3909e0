"""Unit tests for caption track discovery and download."""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from src.analyzer.caption_source import (
    CaptionFetcher,
    YouTubePageCaptionSource,
    parse_caption_tracks,
    select_track,
)
from src.analyzer.config import AnalyzerConfig
from src.analyzer.errors import CaptionFetchFailed, NoCaptions, VideoUnavailable
from src.analyzer.schemas import CaptionTrack


def make_watch_page(tracks: list[dict] | None) -> str:
    """Build a minimal watch page embedding the given caption tracks."""
    player = '{"responseContext":{},"playabilityStatus":{"status":"OK"},'
    if tracks is not None:
        captions = {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": tracks,
                "audioTracks": [],
            }
        }
        player += '"captions":' + json.dumps(captions) + ","
    player += '"videoDetails":{"videoId":"abc123"}}'
    return f"<html><script>var ytInitialPlayerResponse = {player};</script></html>"


def make_response(status_code: int = 200, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def config() -> AnalyzerConfig:
    return AnalyzerConfig(anthropic_api_key="test-key", http_timeout_seconds=5)


@pytest.mark.unit
class TestParseCaptionTracks:
    """Test parse_caption_tracks scraping."""

    def test_tracks_in_page_order(self) -> None:
        html = make_watch_page(
            [
                {
                    "baseUrl": "https://www.youtube.com/api/timedtext?v=abc123&lang=de",
                    "languageCode": "de",
                    "vssId": ".de",
                    "name": {"simpleText": "German"},
                },
                {
                    "baseUrl": "https://www.youtube.com/api/timedtext?v=abc123&lang=en&kind=asr",
                    "languageCode": "en",
                    "vssId": "a.en",
                    "kind": "asr",
                    "name": {"runs": [{"text": "English (auto-generated)"}]},
                },
            ]
        )

        tracks = parse_caption_tracks(html, "abc123")

        assert [t.language_code for t in tracks] == ["de", "en"]
        assert tracks[0].name == "German"
        assert tracks[1].track_id == "a.en"
        assert tracks[1].kind == "asr"
        assert tracks[1].name == "English (auto-generated)"
        assert tracks[1].fetch_url.endswith("lang=en&kind=asr")

    def test_relative_base_url_is_made_absolute(self) -> None:
        html = make_watch_page(
            [{"baseUrl": "/api/timedtext?v=abc123&lang=en", "languageCode": "en"}]
        )

        tracks = parse_caption_tracks(html, "abc123")

        assert tracks[0].fetch_url == "https://www.youtube.com/api/timedtext?v=abc123&lang=en"

    def test_missing_listing_raises_no_captions(self) -> None:
        """Test a video with captions disabled."""
        with pytest.raises(NoCaptions) as exc_info:
            parse_caption_tracks(make_watch_page(None), "abc123")

        assert exc_info.value.video_id == "abc123"
        assert "captions enabled" in exc_info.value.user_message

    def test_empty_listing_raises_no_captions(self) -> None:
        with pytest.raises(NoCaptions):
            parse_caption_tracks(make_watch_page([]), "abc123")

    def test_undecodable_listing_raises_no_captions(self) -> None:
        html = '"playabilityStatus":{},"captions":{not json,"videoDetails":{}'
        with pytest.raises(NoCaptions):
            parse_caption_tracks(html, "abc123")

    def test_unavailable_video(self) -> None:
        with pytest.raises(VideoUnavailable) as exc_info:
            parse_caption_tracks("<html>This video isn't available</html>", "abc123")

        assert isinstance(exc_info.value, NoCaptions)

    def test_captcha_page(self) -> None:
        html = '<html><form><div class="g-recaptcha"></div></form></html>'
        with pytest.raises(CaptionFetchFailed) as exc_info:
            parse_caption_tracks(html, "abc123")

        assert "too many requests" in exc_info.value.user_message


@pytest.mark.unit
class TestSelectTrack:
    """Test select_track preference rules."""

    @staticmethod
    def track(code: str, vss: str | None = None) -> CaptionTrack:
        return CaptionTrack(
            language_code=code, track_id=vss, fetch_url=f"https://example.test/{code}"
        )

    def test_prefers_english_language_code(self) -> None:
        tracks = [self.track("fr", ".fr"), self.track("en-GB", ".en-GB"), self.track("en", ".en")]
        assert select_track(tracks).language_code == "en-GB"

    def test_prefers_english_track_id(self) -> None:
        tracks = [self.track("de", ".de"), self.track("", "a.en")]
        assert select_track(tracks).track_id == "a.en"

    def test_falls_back_to_first_track(self) -> None:
        tracks = [self.track("es", ".es"), self.track("de", ".de")]
        assert select_track(tracks).language_code == "es"

    def test_does_not_mistake_similar_codes(self) -> None:
        tracks = [self.track("eno", ".eno"), self.track("ja", ".ja")]
        assert select_track(tracks).language_code == "eno"

    def test_selection_is_deterministic(self) -> None:
        tracks = [self.track("fr"), self.track("en"), self.track("en-US")]
        assert select_track(tracks) == select_track(list(tracks))

    def test_empty_list_raises(self) -> None:
        with pytest.raises(NoCaptions):
            select_track([])


@pytest.mark.unit
class TestYouTubePageCaptionSource:
    """Test YouTubePageCaptionSource against a mocked HTTP client."""

    @pytest.mark.asyncio
    async def test_list_tracks_success(self, config: AnalyzerConfig) -> None:
        html = make_watch_page(
            [{"baseUrl": "https://www.youtube.com/api/timedtext?lang=en", "languageCode": "en"}]
        )
        http_client = AsyncMock()
        http_client.get = AsyncMock(return_value=make_response(200, html))

        source = YouTubePageCaptionSource(http_client, config)
        tracks = await source.list_tracks("abc123")

        assert len(tracks) == 1
        args, kwargs = http_client.get.call_args
        assert args[0] == "https://www.youtube.com/watch?v=abc123"
        assert kwargs["headers"]["Accept-Language"] == config.accept_language
        assert kwargs["headers"]["User-Agent"] == config.user_agent
        assert kwargs["timeout"] == 5

    @pytest.mark.asyncio
    async def test_list_tracks_non_200(self, config: AnalyzerConfig) -> None:
        http_client = AsyncMock()
        http_client.get = AsyncMock(return_value=make_response(503, "unavailable"))

        source = YouTubePageCaptionSource(http_client, config)

        with pytest.raises(CaptionFetchFailed) as exc_info:
            await source.list_tracks("abc123")

        assert "503" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_list_tracks_timeout(self, config: AnalyzerConfig) -> None:
        """Test that a timeout maps to the caption fetch failure kind."""
        http_client = AsyncMock()
        http_client.get = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))

        source = YouTubePageCaptionSource(http_client, config)

        with pytest.raises(CaptionFetchFailed) as exc_info:
            await source.list_tracks("abc123")

        assert "ReadTimeout" in exc_info.value.detail
        assert exc_info.value.video_id == "abc123"

    @pytest.mark.asyncio
    async def test_list_tracks_invalid_url(self, config: AnalyzerConfig) -> None:
        """Test that a URL httpx refuses to send maps to a caption fetch failure."""
        http_client = AsyncMock()
        http_client.get = AsyncMock(
            side_effect=httpx.InvalidURL("Invalid non-printable ASCII character in URL")
        )

        source = YouTubePageCaptionSource(http_client, config)

        with pytest.raises(CaptionFetchFailed) as exc_info:
            await source.list_tracks("abc123")

        assert "InvalidURL" in exc_info.value.detail


@pytest.mark.unit
class TestCaptionFetcher:
    """Test CaptionFetcher downloads."""

    @pytest.fixture
    def track(self) -> CaptionTrack:
        return CaptionTrack(
            language_code="en",
            fetch_url="https://www.youtube.com/api/timedtext?v=abc123&lang=en&fmt=srv3&xorb=2",
        )

    @pytest.mark.asyncio
    async def test_fetch_success_strips_format(
        self, config: AnalyzerConfig, track: CaptionTrack
    ) -> None:
        document = '<transcript><text start="0">hi</text></transcript>'
        http_client = AsyncMock()
        http_client.get = AsyncMock(return_value=make_response(200, document))

        fetcher = CaptionFetcher(http_client, config)
        result = await fetcher.fetch(track, video_id="abc123")

        assert result == document
        args, _ = http_client.get.call_args
        assert args[0] == "https://www.youtube.com/api/timedtext?v=abc123&lang=en&xorb=2"

    @pytest.mark.asyncio
    async def test_fetch_non_200(self, config: AnalyzerConfig, track: CaptionTrack) -> None:
        http_client = AsyncMock()
        http_client.get = AsyncMock(return_value=make_response(404))

        fetcher = CaptionFetcher(http_client, config)

        with pytest.raises(CaptionFetchFailed):
            await fetcher.fetch(track)

    @pytest.mark.asyncio
    async def test_fetch_network_error(self, config: AnalyzerConfig, track: CaptionTrack) -> None:
        http_client = AsyncMock()
        http_client.get = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        fetcher = CaptionFetcher(http_client, config)

        with pytest.raises(CaptionFetchFailed) as exc_info:
            await fetcher.fetch(track, video_id="abc123")

        assert "connection refused" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_fetch_invalid_url(self, config: AnalyzerConfig) -> None:
        """Test that a malformed track URL maps to a caption fetch failure."""
        track = CaptionTrack(
            language_code="en",
            fetch_url="https://www.youtube.com/api/timedtext?v=abc123&lang=en\x00",
        )
        http_client = AsyncMock()
        http_client.get = AsyncMock(
            side_effect=httpx.InvalidURL("Invalid non-printable ASCII character in URL")
        )

        fetcher = CaptionFetcher(http_client, config)

        with pytest.raises(CaptionFetchFailed) as exc_info:
            await fetcher.fetch(track, video_id="abc123")

        assert exc_info.value.status_code == 400
        assert exc_info.value.video_id == "abc123"
