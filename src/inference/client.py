"""Inference client for the hosted LLM.

Sends one user message and flattens the structured reply into text.
"""

from pydantic_ai.direct import model_request
from pydantic_ai.messages import ModelRequest, ModelResponse, TextPart
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from src.analyzer.config import MAX_OUTPUT_TOKENS
from src.analyzer.errors import InferenceFailed
from src.utils.logging import get_logger

logger = get_logger(__name__)


def extract_answer_text(response: ModelResponse) -> str:
    """Join the text parts of a model response, in order.

    Non-text parts (tool calls, thinking) are skipped.

    Raises:
        InferenceFailed: If the response holds no text part.
    """
    texts = [part.content for part in response.parts if isinstance(part, TextPart)]
    if not texts:
        raise InferenceFailed("Model response contained no text content")
    return "\n".join(texts)


class InferenceClient:
    """Asks the configured model a single question."""

    def __init__(
        self,
        model: Model,
        max_tokens: int = MAX_OUTPUT_TOKENS,
        timeout_seconds: float | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

    def _settings(self) -> ModelSettings:
        settings = ModelSettings(max_tokens=self.max_tokens)
        if self.timeout_seconds is not None:
            settings["timeout"] = self.timeout_seconds
        return settings

    async def complete(self, prompt: str, video_id: str | None = None) -> str:
        """Send ``prompt`` as a user message and return the answer text.

        Args:
            prompt: Fully assembled prompt.
            video_id: Video id, for log context only.

        Returns:
            The model's answer.

        Raises:
            InferenceFailed: On transport, authentication or HTTP errors, on
                timeouts, and on responses without text.
        """
        logger.info(
            "inference_started",
            video_id=video_id,
            model=self.model.model_name,
            prompt_length=len(prompt),
        )

        try:
            response = await model_request(
                self.model,
                [ModelRequest.user_text_prompt(prompt)],
                model_settings=self._settings(),
            )
        except Exception as e:
            raise InferenceFailed(
                f"{type(e).__name__}: {e}", video_id=video_id
            ) from e

        try:
            answer = extract_answer_text(response)
        except InferenceFailed as e:
            e.video_id = video_id
            raise

        logger.info(
            "inference_completed",
            video_id=video_id,
            answer_length=len(answer),
            parts=len(response.parts),
        )
        return answer
