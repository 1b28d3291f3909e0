"""Error taxonomy for the video analysis pipeline.

Each stage raises exactly one of these. The API layer maps them to a single
JSON response using ``status_code`` and ``user_message``.
"""


class AnalysisError(Exception):
    """Base class for all pipeline failures."""

    status_code = 500
    stage = "unknown"
    user_message = "Failed to analyze video"

    def __init__(
        self,
        detail: str | None = None,
        *,
        video_id: str | None = None,
        user_message: str | None = None,
    ):
        self.detail = detail or self.user_message
        self.video_id = video_id
        if user_message is not None:
            self.user_message = user_message
        super().__init__(self.detail)


class InvalidInput(AnalysisError):
    status_code = 400
    stage = "parse_input"
    user_message = "Invalid YouTube URL"


class CaptionError(AnalysisError):
    """Base for every caption retrieval or parsing failure (400)."""

    status_code = 400
    stage = "fetch_captions"
    user_message = "Could not get transcript. Make sure the video has captions enabled."


class NoCaptions(CaptionError):
    user_message = "Could not get transcript. Make sure the video has captions enabled."


class VideoUnavailable(NoCaptions):
    user_message = "This video is unavailable, so its transcript could not be retrieved."


class CaptionFetchFailed(CaptionError):
    user_message = "Could not download the video's captions. Please try again later."


class EmptyTranscript(CaptionError):
    stage = "parse_transcript"
    user_message = "The video's captions did not contain any text."


class InferenceFailed(AnalysisError):
    status_code = 500
    stage = "infer"
    user_message = "Failed to analyze video"
