"""Inference model configuration.

Builds the pydantic-ai model used to answer questions. The model name and
output token budget are fixed; only the API key comes from configuration.
"""

from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.providers.anthropic import AnthropicProvider

from src.analyzer.config import MODEL_NAME, AnalyzerConfig


def get_model(config: AnalyzerConfig) -> AnthropicModel:
    """Get the configured LLM model.

    Args:
        config: Application configuration holding the Anthropic API key.

    Returns:
        AnthropicModel for the fixed model identifier.

    Raises:
        ValueError: If no API key is configured.

    Examples:
        >>> model = get_model(AnalyzerConfig(anthropic_api_key="sk-ant-..."))
    """
    if not config.anthropic_api_key:
        raise ValueError("ANTHROPIC_API_KEY environment variable is required")

    return AnthropicModel(
        MODEL_NAME, provider=AnthropicProvider(api_key=config.anthropic_api_key)
    )
