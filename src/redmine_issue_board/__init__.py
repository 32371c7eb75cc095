"""Redmine Issue Board.

Aggregates issues from one or more Redmine instances and serves them as a
single HTML page grouped by assignee:
- source list loaded from a YAML config file
- sequential fetches against each instance's REST API
- server-side HTML rendering with Jinja2
"""

__version__ = "0.1.0"

from redmine_issue_board.board.config import BoardSettings, SourceConfig

__all__ = ["__version__", "BoardSettings", "SourceConfig"]
