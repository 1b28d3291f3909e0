"""Main pipeline orchestrator for video question answering."""

import asyncio

from httpx import AsyncClient
from pydantic_ai.models import Model

from src.inference.client import InferenceClient
from src.inference.prompts import build_prompt
from src.utils.logging import get_logger

from .budget import apply_budget, is_truncated
from .caption_source import (
    CaptionFetcher,
    CaptionSource,
    YouTubePageCaptionSource,
    select_track,
)
from .config import AnalyzerConfig
from .errors import AnalysisError
from .metadata import MetadataFetcher
from .schemas import AnalysisResult, InferenceRequest
from .transcript_parser import parse_transcript
from .video_id import build_watch_url, parse_input

logger = get_logger(__name__)


class VideoAnalysisPipeline:
    """Orchestrates one question about one video.

    Stages run in a fixed order: parse input, resolve the id, fetch captions,
    parse the transcript, apply the context budget, then run inference while
    the metadata lookup runs alongside it. Any stage failure is raised as the
    matching ``AnalysisError``; metadata failures never are.
    """

    def __init__(
        self,
        config: AnalyzerConfig,
        caption_source: CaptionSource,
        caption_fetcher: CaptionFetcher,
        inference_client: InferenceClient,
        metadata_fetcher: MetadataFetcher,
    ):
        self.config = config
        self.caption_source = caption_source
        self.caption_fetcher = caption_fetcher
        self.inference_client = inference_client
        self.metadata_fetcher = metadata_fetcher

    @classmethod
    def create(
        cls, config: AnalyzerConfig, http_client: AsyncClient, model: Model
    ) -> "VideoAnalysisPipeline":
        """Wire the default YouTube-backed services around a shared HTTP client."""
        return cls(
            config=config,
            caption_source=YouTubePageCaptionSource(http_client, config),
            caption_fetcher=CaptionFetcher(http_client, config),
            inference_client=InferenceClient(
                model, timeout_seconds=config.inference_timeout_seconds
            ),
            metadata_fetcher=MetadataFetcher(http_client, config),
        )

    async def _fetch_transcript(self, video_id: str) -> str:
        tracks = await self.caption_source.list_tracks(video_id)
        track = select_track(tracks)

        logger.info(
            "caption_track_selected",
            video_id=video_id,
            language=track.language_code,
            track_id=track.track_id,
            kind=track.kind,
        )

        document = await self.caption_fetcher.fetch(track, video_id=video_id)
        return parse_transcript(document)

    async def analyze(self, text: str | None) -> AnalysisResult:
        """Answer the question contained in ``text`` about the video it links.

        Args:
            text: A YouTube URL optionally followed by a question.

        Returns:
            AnalysisResult with the answer and display metadata.

        Raises:
            InvalidInput: If the input is empty or has no supported URL.
            CaptionError: If captions cannot be located, fetched or parsed.
            InferenceFailed: If the model call fails.
        """
        parsed = parse_input(text)
        video_id = parsed.video_id

        logger.info(
            "analysis_started",
            video_id=video_id,
            question_length=len(parsed.question),
        )

        try:
            transcript = await self._fetch_transcript(video_id)
        except AnalysisError as e:
            e.video_id = e.video_id or video_id
            logger.warning(
                "transcript_unavailable",
                video_id=video_id,
                stage=e.stage,
                error_type=type(e).__name__,
                error=e.detail,
            )
            raise

        bounded = apply_budget(transcript)
        request = InferenceRequest(
            transcript=bounded,
            question=parsed.question,
            truncated=is_truncated(bounded),
        )

        logger.info(
            "transcript_ready",
            video_id=video_id,
            raw_length=len(transcript),
            bounded_length=len(bounded),
            truncated=request.truncated,
        )

        # Metadata has no dependency on the answer, so look it up meanwhile
        metadata_task = asyncio.create_task(self.metadata_fetcher.fetch(video_id))

        try:
            answer = await self.inference_client.complete(
                build_prompt(request), video_id=video_id
            )
        except Exception as e:
            metadata_task.cancel()
            logger.error(
                "inference_failed",
                video_id=video_id,
                stage="infer",
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        metadata = await metadata_task

        logger.info(
            "analysis_completed",
            video_id=video_id,
            answer_length=len(answer),
            metadata_from_lookup=metadata.from_lookup,
        )

        return AnalysisResult(
            answer_text=answer,
            video_id=video_id,
            video_title=metadata.title,
            thumbnail_url=metadata.thumbnail_url,
            video_url=build_watch_url(video_id),
        )
