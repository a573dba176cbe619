"""Command-line interface for indexing videos and asking questions about them."""

import argparse
import asyncio
import sys

from src.utils.logging import get_logger

from .config import get_config
from .errors import VideoQAError
from .pipeline import VideoQAPipeline

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="video-qa",
        description="Transcribe YouTube videos and ask questions about them with Gemini",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch and upload a transcript, printing its file URI
  video-qa index --url "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

  # Index a video and ask a question in one go
  video-qa query --url "https://youtu.be/dQw4w9WgXcQ" --question "What is this about?"
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Fetch and index a video transcript")
    index_parser.add_argument("-u", "--url", required=True, help="YouTube video URL")

    for name, help_text in (
        ("ask", "Ask a question about a video (re-indexes it first)"),
        ("query", "Index a video and immediately ask a question"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("-u", "--url", required=True, help="YouTube video URL")
        sub.add_argument(
            "-q", "--question", required=True, help="Question to ask about the video"
        )

    return parser


async def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Parses arguments, runs the requested pipeline operation, and prints the
    result.

    Returns:
        Process exit code: 0 on success, 1 on any pipeline failure.
    """
    args = build_parser().parse_args(argv)

    logger.info("cli_started", command=args.command)

    try:
        async with VideoQAPipeline(get_config()) as pipeline:
            if args.command == "index":
                print(f"🚀 Indexing video: {args.url}", file=sys.stderr)
                artifact_ref = await pipeline.index(args.url)
                print("\n✨ Video successfully indexed!", file=sys.stderr)
                print(artifact_ref)
            else:
                if args.command == "ask":
                    print(
                        "⚠️  Note: this re-indexes the video before answering.",
                        file=sys.stderr,
                    )
                print(f"🚀 Querying video: {args.url}", file=sys.stderr)
                operation = pipeline.ask if args.command == "ask" else pipeline.query
                answer = await operation(args.url, args.question)
                print("\n💡 Answer:", file=sys.stderr)
                print(answer)
    except VideoQAError as e:
        logger.error("cli_failed", command=args.command, stage=str(e.stage))
        print(f"\n❌ {args.command} failed: {e}", file=sys.stderr)
        return 1

    logger.info("cli_completed", command=args.command)
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
