"""Exception taxonomy for the issue board."""

from __future__ import annotations


class IssueBoardError(Exception):
    """Base class for all issue board failures."""


class ConfigError(IssueBoardError):
    """The sources config file is missing, unreadable or malformed."""


class FetchError(IssueBoardError):
    """A Redmine source could not be fetched or decoded."""


class TemplateError(IssueBoardError):
    """The page template could not be loaded or rendered."""
