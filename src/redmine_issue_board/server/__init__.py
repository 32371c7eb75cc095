"""FastAPI server adapter for redmine-issue-board.

Design intent:
- Keep fetching, aggregation and rendering in `redmine_issue_board.board.*`
- Keep server-specific concerns (routing, status codes) here
"""

from __future__ import annotations

__all__ = ["create_app", "create_app_from_settings"]

from redmine_issue_board.server.app import create_app, create_app_from_settings
