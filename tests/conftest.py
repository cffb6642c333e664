"""Shared fakes for the Sensu API."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from shush.client import SensuClient
from shush.errors import NotFoundError


def make_response(status: int = 200, body: str = "") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class FakeSensu:
    """Stands in for SensuClient: canned GET answers, recorded POSTs."""

    def __init__(self, routes: dict[str, Any] | None = None, fail_post_at: int | None = None,
                 post_error: Exception | None = None):
        self.routes = routes or {}
        self.gets: list[str] = []
        self.posts: list[tuple[str, Any]] = []
        self.fail_post_at = fail_post_at
        self.post_error = post_error

    def __enter__(self) -> "FakeSensu":
        return self

    def __exit__(self, *exc) -> None:
        pass

    def get(self, endpoint: str) -> Any:
        self.gets.append(endpoint)
        if endpoint not in self.routes:
            raise NotFoundError(endpoint)
        value = self.routes[endpoint]
        if isinstance(value, Exception):
            raise value
        return value

    def post(self, endpoint: str, payload: Any) -> None:
        if self.fail_post_at is not None and len(self.posts) + 1 == self.fail_post_at:
            raise self.post_error
        self.posts.append((endpoint, payload))


@pytest.fixture()
def session() -> MagicMock:
    s = MagicMock(spec=requests.Session)
    s.request.return_value = make_response(200, "")
    return s


@pytest.fixture()
def sensu(session: MagicMock) -> SensuClient:
    return SensuClient("http://sensu.example.com:4567", timeout=5, session=session)


@pytest.fixture(autouse=True)
def fixed_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("USER", "jbaublitz")
