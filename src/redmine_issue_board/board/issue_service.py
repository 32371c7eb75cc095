"""Aggregation of issues across Redmine sources.

Sources are fetched one at a time, in configured order. The first failure aborts
the whole aggregation: a board built from some sources but not others would be
silently misleading.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from redmine_issue_board.board.config import SourceConfig
from redmine_issue_board.board.redmine.client import Issue, RedmineClient

logger = logging.getLogger(__name__)

# Assignee name ("" for unassigned) -> issues, in fetch order.
IssuesByAssignee = dict[str, list[Issue]]


class IssueBoardService:
    """Builds the per-assignee issue map from a set of sources."""

    def __init__(self, *, client: RedmineClient) -> None:
        self._client = client

    def aggregate(self, sources: Sequence[SourceConfig]) -> IssuesByAssignee:
        """Fetch every source and group the issues by assignee.

        Issues are never deduplicated: a ticket returned twice shows up twice.

        Raises:
            FetchError: From the first source that fails; later sources are not fetched.
        """

        combined: IssuesByAssignee = {}
        for index, source in enumerate(sources):
            try:
                issues = self._client.fetch(source)
            except Exception:
                logger.warning(
                    "Aborting aggregation: source fetch failed",
                    extra={"source": source.url, "position": index, "sources": len(sources)},
                )
                raise

            for issue in issues:
                combined.setdefault(issue.assignee, []).append(issue)

        logger.debug(
            "Aggregated Redmine issues",
            extra={
                "sources": len(sources),
                "assignees": len(combined),
                "issues": sum(len(v) for v in combined.values()),
            },
        )
        return combined
