#!/usr/bin/env python
"""Run the API server.

Usage:
    python -m scripts.serve [--reload]
"""

import argparse

import uvicorn

from screener_rag.config import get_settings


def main() -> None:
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Run the RAG chat service",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", default=settings.api_host, help="Bind host")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()

    uvicorn.run(
        "screener_rag.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
