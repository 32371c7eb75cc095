"""Redmine REST client.

Wraps a `requests.Session` so HTTP calls stay out of the aggregation code and
tests can inject a fake session.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import cast

import requests
import urllib3
from pydantic import BaseModel, StrictInt, ValidationError
from requests.models import PreparedRequest

from redmine_issue_board.board.config import SourceConfig
from redmine_issue_board.board.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0
_READ_CHUNK_BYTES = 64 * 1024


@dataclass(frozen=True, slots=True)
class Issue:
    """One Redmine ticket, normalized for display."""

    ticket_id: int
    project: str
    tracker: str
    status: str
    assignee: str
    subject: str
    source_link: str

    @property
    def url(self) -> str:
        """Browser link to the ticket on its Redmine instance."""

        return f"{self.source_link}issues/{self.ticket_id}"


class _NamedRef(BaseModel):
    name: str | None = None


class _IssuePayload(BaseModel):
    id: StrictInt
    project: _NamedRef | None = None
    tracker: _NamedRef | None = None
    status: _NamedRef | None = None
    assigned_to: _NamedRef | None = None
    subject: str | None = None


class _IssuesResponse(BaseModel):
    issues: list[_IssuePayload]


def _name_of(ref: _NamedRef | None) -> str:
    if ref is None or ref.name is None:
        return ""
    return ref.name


def _to_issue(item: _IssuePayload, *, source_link: str) -> Issue:
    return Issue(
        ticket_id=item.id,
        project=_name_of(item.project),
        tracker=_name_of(item.tracker),
        status=_name_of(item.status),
        assignee=_name_of(item.assigned_to),
        subject=item.subject or "",
        source_link=source_link,
    )


class RedmineClient:
    """Fetches issue lists from Redmine instances, one request per source."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": "redmine-issue-board",
            }
        )

    @staticmethod
    def issues_url(source: SourceConfig) -> str:
        """Build the `issues.json` URL for a source, with query parameters escaped."""

        prepared = PreparedRequest()
        prepared.prepare_url(
            f"{source.url}issues.json",
            {"key": source.api_key, "query_id": source.query_id, "limit": source.limit},
        )
        return cast(str, prepared.url)

    def fetch(self, source: SourceConfig) -> list[Issue]:
        """Fetch and decode the issues returned by one source's saved query.

        Raises:
            FetchError: On network failure or timeout, a non-success status, or a
                body that is not JSON or does not look like an issue list.
        """

        try:
            url = self.issues_url(source)
        except requests.RequestException as e:
            raise FetchError(f"invalid source URL {source.url!r}: {e}") from e

        logger.debug(
            "Fetching Redmine issues",
            extra={"source": source.url, "query_id": source.query_id, "limit": source.limit},
        )

        # The budget covers the whole exchange, not just connect and each socket read.
        deadline = time.monotonic() + self._timeout
        try:
            resp = self._session.get(url, timeout=self._timeout, stream=True)
        except requests.Timeout as e:
            raise FetchError(f"{source.url}: request timed out after {self._timeout}s") from e
        except requests.RequestException as e:
            raise FetchError(f"{source.url}: {type(e).__name__}") from e

        try:
            if not resp.ok:
                raise FetchError(
                    f"{source.url}: HTTP {resp.status_code} {resp.reason or ''}".rstrip()
                )
            body = self._read_body(resp, deadline=deadline, source=source)
        finally:
            resp.close()

        try:
            data = json.loads(body)
        except ValueError as e:
            raise FetchError(f"{source.url}: response is not valid JSON") from e

        try:
            parsed = _IssuesResponse.model_validate(data)
        except ValidationError as e:
            raise FetchError(
                f"{source.url}: unexpected response shape ({e.error_count()} errors)"
            ) from e

        issues = [_to_issue(item, source_link=source.url) for item in parsed.issues]
        logger.info("Fetched Redmine issues", extra={"source": source.url, "count": len(issues)})
        return issues

    def _read_body(
        self, resp: requests.Response, *, deadline: float, source: SourceConfig
    ) -> bytes:
        # read1() returns whatever has arrived, so a trickling body cannot hold a read open
        # past the deadline for longer than one socket read timeout.
        chunks: list[bytes] = []
        while True:
            if time.monotonic() >= deadline:
                raise FetchError(f"{source.url}: request timed out after {self._timeout}s")
            try:
                chunk = resp.raw.read1(_READ_CHUNK_BYTES, decode_content=True)
            except (urllib3.exceptions.HTTPError, OSError) as e:
                raise FetchError(f"{source.url}: {type(e).__name__} while reading body") from e
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)

    def close(self) -> None:
        """Close the underlying HTTP session."""

        self._session.close()
