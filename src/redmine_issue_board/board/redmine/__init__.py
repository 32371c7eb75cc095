"""Redmine REST API access."""

from redmine_issue_board.board.redmine.client import Issue, RedmineClient

__all__ = ["Issue", "RedmineClient"]
