"""FastAPI app factory.

The app serves a single page. Everything it needs is passed in: the sources to
aggregate, the service that fetches them and the renderer. Nothing is cached
between requests; every hit on `/` fetches every source again.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, PlainTextResponse

from redmine_issue_board import __version__
from redmine_issue_board.board.config import BoardSettings, SourceConfig, load_sources
from redmine_issue_board.board.errors import FetchError, TemplateError
from redmine_issue_board.board.issue_service import IssueBoardService
from redmine_issue_board.board.redmine.client import RedmineClient
from redmine_issue_board.board.render import IssueBoardRenderer

logger = logging.getLogger(__name__)


def create_app(
    *,
    sources: Sequence[SourceConfig],
    service: IssueBoardService,
    renderer: IssueBoardRenderer,
) -> FastAPI:
    app = FastAPI(
        title="Redmine Issue Board",
        version=__version__,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    configured = tuple(sources)

    # Plain `def` so the fetches run in the server's threadpool, not on the event loop.
    @app.get("/", include_in_schema=False, response_model=None)
    def index() -> HTMLResponse | PlainTextResponse:
        try:
            issues = service.aggregate(configured)
        except FetchError as e:
            logger.error("Failed to fetch Redmine issues", extra={"error": str(e)})
            return PlainTextResponse(f"Failed to fetch Redmine issues: {e}\n", status_code=500)

        try:
            body = renderer.render(issues)
        except TemplateError:
            logger.exception("Template execution error")
            return PlainTextResponse("Failed to render issues\n", status_code=500)

        return HTMLResponse(body, status_code=200)

    return app


def create_app_from_settings(settings: BoardSettings | None = None) -> FastAPI:
    """Build the app from environment settings.

    Usable as a uvicorn factory:
    `uvicorn redmine_issue_board.server.app:create_app_from_settings --factory`.

    Raises:
        ConfigError: If the sources file cannot be loaded.
        TemplateError: If the page template cannot be loaded.
    """

    settings = settings or BoardSettings()
    sources = load_sources(settings.config_path)
    renderer = IssueBoardRenderer()
    client = RedmineClient(timeout_seconds=settings.fetch_timeout_seconds)
    return create_app(
        sources=sources,
        service=IssueBoardService(client=client),
        renderer=renderer,
    )
