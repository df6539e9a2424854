"""Run the vector-store node's HTTP host.

Usage:
    python -m opensearch_vectorstore.serving
    python -m opensearch_vectorstore.serving --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from opensearch_vectorstore.config import settings


def setup_logging(level: str) -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("opensearch").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start the OpenSearch vector-store node HTTP host")
    parser.add_argument("--host", default="127.0.0.1", help="Server host address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Server port (default: 8000)")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Root log level (default: {settings.log_level})",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level.upper())
    uvicorn.run(
        "opensearch_vectorstore.serving.app:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
