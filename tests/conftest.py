from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest
import requests

BASE_TIME = datetime(2017, 5, 2, 14, 0, 0, tzinfo=timezone.utc)


def iso(seconds: float) -> str:
    return (BASE_TIME + timedelta(seconds=seconds)).strftime("%Y-%m-%dT%H:%M:%SZ")


def link_header(more: bool, next_cursor: str = "0:100:0") -> str:
    return (
        '<https://sentry.io/api/0/x/?&cursor=0:0:1>; rel="previous"; results="false"; '
        'cursor="0:0:1", '
        f'<https://sentry.io/api/0/x/?&cursor={next_cursor}>; rel="next"; '
        f'results="{"true" if more else "false"}"; cursor="{next_cursor}"'
    )


def make_response(body: Any, status: int = 200, link: str | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = "application/json"
    if link is not None:
        resp.headers["Link"] = link
    return resp


class FakeSession:
    """Serves queued responses per API path and records every request."""

    def __init__(self, routes: dict[str, list[requests.Response]]) -> None:
        self.routes = {path: list(queue) for path, queue in routes.items()}
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, headers=None, params=None, timeout=None) -> requests.Response:
        path = url.split("/api", 1)[1]
        self.calls.append({"path": path, "headers": headers, "params": params, "timeout": timeout})
        queue = self.routes.get(path)
        if not queue:
            raise AssertionError(f"Unexpected request: GET {path} {params}")
        return queue.pop(0)

    def paths(self) -> list[str]:
        return [c["path"] for c in self.calls]


@pytest.fixture
def ts() -> Callable[[float], str]:
    return iso


@pytest.fixture
def page() -> Callable[..., requests.Response]:
    """A JSON list page; ``more`` controls the rel="next" results flag."""

    def _page(items: list[Any], more: bool = False, cursor: str = "0:100:0") -> requests.Response:
        return make_response(items, link=link_header(more, cursor))

    return _page


@pytest.fixture
def response() -> Callable[..., requests.Response]:
    return make_response


@pytest.fixture
def fake_session() -> Callable[[dict[str, list[requests.Response]]], FakeSession]:
    return FakeSession
