"""Best-effort video metadata lookup through YouTube's oEmbed endpoint."""

from httpx import AsyncClient

from src.utils.logging import get_logger

from .config import AnalyzerConfig
from .schemas import VideoMetadata
from .video_id import build_watch_url

logger = get_logger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
DEFAULT_TITLE = "YouTube Video"
THUMBNAIL_URL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def default_metadata(video_id: str) -> VideoMetadata:
    return VideoMetadata(
        title=DEFAULT_TITLE,
        thumbnail_url=THUMBNAIL_URL_TEMPLATE.format(video_id=video_id),
    )


class MetadataFetcher:
    """Looks up title and thumbnail; never fails the request."""

    def __init__(self, http_client: AsyncClient, config: AnalyzerConfig):
        self.http_client = http_client
        self.config = config

    async def fetch(self, video_id: str) -> VideoMetadata:
        """Return oEmbed metadata for ``video_id``, or the defaults on any failure.

        Args:
            video_id: YouTube video ID.

        Returns:
            VideoMetadata with title and thumbnail URL.
        """
        defaults = default_metadata(video_id)

        try:
            response = await self.http_client.get(
                OEMBED_URL,
                params={"url": build_watch_url(video_id), "format": "json"},
                timeout=self.config.http_timeout_seconds,
            )
            if response.status_code != 200:
                logger.warning(
                    "metadata_lookup_failed",
                    video_id=video_id,
                    status_code=response.status_code,
                )
                return defaults

            data = response.json()
            if not isinstance(data, dict):
                logger.warning("metadata_lookup_failed", video_id=video_id, reason="not_an_object")
                return defaults

        except Exception as e:
            logger.warning(
                "metadata_lookup_failed",
                video_id=video_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return defaults

        metadata = VideoMetadata(
            title=str(data.get("title") or defaults.title),
            thumbnail_url=str(data.get("thumbnail_url") or defaults.thumbnail_url),
            from_lookup=True,
        )
        logger.info("metadata_lookup_completed", video_id=video_id, title=metadata.title)
        return metadata
