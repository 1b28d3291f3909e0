"""Pydantic schemas for the video analysis pipeline and its HTTP surface."""

from pydantic import BaseModel, ConfigDict, Field


class CaptionTrack(BaseModel):
    """One timed-text stream listed on a video's watch page.

    Tracks keep the order the platform lists them in and are never mutated
    after being parsed.
    """

    model_config = ConfigDict(frozen=True)

    language_code: str
    fetch_url: str
    track_id: str | None = None  # vssId, e.g. ".en" or "a.en"
    kind: str | None = None  # "asr" for auto-generated tracks
    name: str | None = None


class ParsedInput(BaseModel):
    """Result of splitting the free-form input into URL, id and question."""

    url: str
    video_id: str
    question: str


class InferenceRequest(BaseModel):
    """Bounded transcript plus the question it should answer."""

    transcript: str
    question: str
    truncated: bool = False


class VideoMetadata(BaseModel):
    """Display metadata for a video, from oEmbed or synthesized defaults."""

    title: str
    thumbnail_url: str
    from_lookup: bool = False


class AnalysisResult(BaseModel):
    """Final output of one pipeline run."""

    answer_text: str
    video_id: str
    video_title: str
    thumbnail_url: str
    video_url: str


# ==============================================================================
# HTTP request/response models
# ==============================================================================


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    input: str | None = None


class VideoInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    thumbnail_url: str = Field(alias="thumbnailUrl")
    video_url: str = Field(alias="videoUrl")
    duration: str = "N/A"


class AnalyzeResponse(BaseModel):
    """Successful response for POST /api/analyze."""

    analysis: str
    video: VideoInfo

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalyzeResponse":
        return cls(
            analysis=result.answer_text,
            video=VideoInfo(
                title=result.video_title,
                thumbnail_url=result.thumbnail_url,
                video_url=result.video_url,
            ),
        )


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
