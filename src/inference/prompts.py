"""Prompt assembly for transcript question answering."""

from src.analyzer.schemas import InferenceRequest

# ==============================================================================
# Prompt Template
# ==============================================================================

# The transcript tags and the "based only on" instruction keep the model
# grounded in the transcript; change them with care.
TRANSCRIPT_QA_PROMPT = """Here is a transcript from a YouTube video:

<transcript>
{transcript}
</transcript>

Based on this transcript, please answer the following question:

{question}

Provide a clear, helpful answer based only on what's in the transcript."""


def build_prompt(request: InferenceRequest) -> str:
    """Render the single user message sent to the model.

    Args:
        request: Bounded transcript and question.

    Returns:
        Prompt text with the transcript delimited by <transcript> tags.
    """
    return TRANSCRIPT_QA_PROMPT.format(
        transcript=request.transcript,
        question=request.question,
    )
