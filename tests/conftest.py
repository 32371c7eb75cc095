"""Test configuration and fixtures."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest
import requests
import urllib3

from redmine_issue_board.board.config import SourceConfig

_REASONS = {200: "OK", 401: "Unauthorized", 404: "Not Found", 500: "Internal Server Error"}


def _make_response(
    status_code: int = 200, payload: Any = None, *, body: bytes | None = None
) -> requests.Response:
    """Build a real `requests.Response` without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = _REASONS.get(status_code, "")
    resp.url = "https://redmine.test/issues.json"
    if body is None:
        body = json.dumps(payload if payload is not None else {"issues": []}).encode("utf-8")
    resp.raw = urllib3.HTTPResponse(
        body=io.BytesIO(body), status=status_code, preload_content=False
    )
    resp.encoding = "utf-8"
    return resp


def _issue_payload(
    issue_id: int,
    *,
    assignee: str | None = "Alice",
    subject: str = "Fix login",
    project: str = "Web",
    tracker: str = "Bug",
    status: str = "New",
) -> dict[str, Any]:
    """One record as returned by Redmine's /issues.json."""
    record: dict[str, Any] = {
        "id": issue_id,
        "project": {"id": 1, "name": project},
        "tracker": {"id": 1, "name": tracker},
        "status": {"id": 1, "name": status},
        "subject": subject,
    }
    if assignee is not None:
        record["assigned_to"] = {"id": 5, "name": assignee}
    return record


@pytest.fixture
def source() -> SourceConfig:
    """Provide a single test source."""
    return SourceConfig(
        url="https://redmine-a.test/",
        api_key="test-key",
        query_id=7,
        limit=25,
    )


@pytest.fixture
def other_source() -> SourceConfig:
    """Provide a second test source on another instance."""
    return SourceConfig(
        url="https://redmine-b.test/redmine/",
        api_key="other-key",
        query_id=3,
        limit=100,
    )


@pytest.fixture
def make_response():
    """Factory for canned Redmine HTTP responses."""
    return _make_response


@pytest.fixture
def issue_payload():
    """Factory for Redmine issue records."""
    return _issue_payload
