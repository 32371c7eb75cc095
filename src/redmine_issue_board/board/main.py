"""CLI entrypoint for the issue board.

Commands:
- serve:  run the HTTP server
- render: fetch once and write the page to a file (or stdout)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from redmine_issue_board import __version__
from redmine_issue_board.board.config import BoardSettings, load_sources
from redmine_issue_board.board.errors import ConfigError, FetchError, TemplateError
from redmine_issue_board.board.issue_service import IssueBoardService
from redmine_issue_board.board.logging import configure_logging
from redmine_issue_board.board.redmine.client import RedmineClient
from redmine_issue_board.board.render import IssueBoardRenderer
from redmine_issue_board.server.app import create_app
from redmine_issue_board.server.config import ServerSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redmine-board",
        description="Aggregate Redmine issues from several instances into one HTML page",
    )
    parser.add_argument("--version", action="version", version=f"redmine-issue-board {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve the issue board over HTTP")
    serve.add_argument(
        "--config",
        default=None,
        help="Sources YAML file (defaults to REDMINE_BOARD_CONFIG or ./config.yaml)",
    )
    serve.add_argument("--host", default=None, help="Interface to bind (default 0.0.0.0)")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on (default 8000)")

    render = subparsers.add_parser("render", help="Fetch all sources once and write the HTML page")
    render.add_argument(
        "--config",
        default=None,
        help="Sources YAML file (defaults to REDMINE_BOARD_CONFIG or ./config.yaml)",
    )
    render.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the page to this file instead of stdout",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = BoardSettings()
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)

    config_path = Path(args.config) if args.config else settings.config_path

    try:
        sources = load_sources(config_path)
        renderer = IssueBoardRenderer()
    except ConfigError as e:
        logger.error("Failed to load config", extra={"error": str(e)})
        print(f"Failed to load config: {e}", file=sys.stderr)
        return 1
    except TemplateError as e:
        logger.error("Failed to parse template", extra={"error": str(e)})
        print(f"Failed to parse template: {e}", file=sys.stderr)
        return 1

    client = RedmineClient(timeout_seconds=settings.fetch_timeout_seconds)
    service = IssueBoardService(client=client)

    try:
        if args.command == "serve":
            server_settings = ServerSettings()
            host = args.host or server_settings.host
            port = args.port or server_settings.port
            app = create_app(sources=sources, service=service, renderer=renderer)
            logger.info("Starting server", extra={"host": host, "port": port})
            uvicorn.run(app, host=host, port=port, log_config=None)
            return 0

        if args.command == "render":
            try:
                page = renderer.render(service.aggregate(sources))
            except FetchError as e:
                print(f"Failed to fetch Redmine issues: {e}", file=sys.stderr)
                return 2

            if args.output:
                Path(args.output).write_text(page, encoding="utf-8")
                print(f"Wrote {args.output}")
            else:
                sys.stdout.write(page)
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1

    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
