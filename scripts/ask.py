#!/usr/bin/env python
"""Answer one query through the full chat pipeline.

Usage:
    python -m scripts.ask "Companies with market cap above 2000"

Uses the same environment configuration as the API server. Prints the
result (or the error) as JSON; exits non-zero on failure.
"""

import argparse
import asyncio
import json
import sys

import httpx

from screener_rag.config import get_settings
from screener_rag.exceptions import ScreenerRAGError
from screener_rag.logging_config import get_logger, setup_logging
from screener_rag.rag.pipeline import ChatOrchestrator

logger = get_logger(__name__)


async def ask(query: str) -> bool:
    """Run the pipeline once and print the outcome.

    Args:
        query: Question to answer.

    Returns:
        True if an answer was produced, False otherwise.
    """
    settings = get_settings()

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        orchestrator = ChatOrchestrator.from_settings(settings, client=client)
        try:
            result = await orchestrator.run(query)
        except ScreenerRAGError as e:
            print(json.dumps({"error": e.to_dict()}, indent=2, default=str))
            return False

    print(result.model_dump_json(indent=2))
    return True


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Answer a financial screener question from the vector index",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("query", help="Question to answer")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level",
    )

    args = parser.parse_args()
    setup_logging(level=args.log_level, json_output=False)

    answered = asyncio.run(ask(args.query))
    sys.exit(0 if answered else 1)


if __name__ == "__main__":
    main()
