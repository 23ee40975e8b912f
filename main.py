"""CLI entrypoint for one-shot discovery runs and the HTTP server."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from config import get_webapp_settings
from discovery import find_videos
from utils.exceptions import DiscoveryError
from utils.logger import console, setup_package_loggers


def main() -> None:
    parser = argparse.ArgumentParser(description="Video Discovery Engine CLI")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    find = sub.add_parser("find-video")
    find.add_argument("--topic", required=True)

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    args = parser.parse_args()
    setup_package_loggers(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "find-video":
        try:
            result = asyncio.run(find_videos(args.topic))
        except DiscoveryError as exc:
            console.print(f"[red]{exc.message}[/red]")
            sys.exit(1)
        console.print_json(json.dumps(result.to_response(), ensure_ascii=False))
        return

    if args.command == "serve":
        import uvicorn

        settings = get_webapp_settings()
        uvicorn.run(
            "webapp.app:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
        )


if __name__ == "__main__":
    main()
