"""Command-line interface for asking one question about one video."""

import argparse
import asyncio
import sys

from httpx import AsyncClient

from src.inference.config import get_model
from src.utils.logging import configure_logging, get_logger

from .config import get_config
from .errors import AnalysisError
from .pipeline import VideoAnalysisPipeline

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="YouTube Video Analyzer - ask a question about a video's transcript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default question ("What is this video about?")
  python -m src.analyzer.cli https://www.youtube.com/watch?v=dQw4w9WgXcQ

  # Ask something specific
  python -m src.analyzer.cli https://youtu.be/dQw4w9WgXcQ What is discussed at minute 2?
        """,
    )
    parser.add_argument(
        "input",
        nargs="+",
        help="YouTube URL optionally followed by a question",
    )
    return parser


async def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 on a pipeline failure.
    """
    args = build_parser().parse_args(argv)
    text = " ".join(args.input)

    config = get_config()
    configure_logging(config.log_level)

    logger.info("cli_started", input_length=len(text))

    async with AsyncClient() as http_client:
        pipeline = VideoAnalysisPipeline.create(config, http_client, get_model(config))

        try:
            result = await pipeline.analyze(text)
        except AnalysisError as e:
            logger.warning("cli_failed", stage=e.stage, error=e.detail)
            print(f"\n❌ {e.user_message}")
            if e.status_code >= 500:
                print(f"   {e.detail}")
            return 1

    print("\n" + "=" * 60)
    print(result.video_title)
    print(result.video_url)
    print("=" * 60 + "\n")
    print(result.answer_text)
    print()

    logger.info("cli_completed", video_id=result.video_id)
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
