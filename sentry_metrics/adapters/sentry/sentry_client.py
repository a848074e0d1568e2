from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

import requests

from sentry_metrics.common.errors import MalformedResponseError, PaginationError, SentryApiError

logger = logging.getLogger(__name__)

INITIAL_CURSOR = "0:0:0"


@dataclass
class SentryClient:
    token: str
    api_base_url: str = "https://sentry.io/api/"
    timeout_s: float | None = None
    user_agent: str = "sentry-metrics"
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def _url(self, path: str) -> str:
        return self.api_base_url.rstrip("/") + "/" + path.lstrip("/")

    def get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        url = self._url(path)
        logger.debug("GET %s cursor=%s", path, (params or {}).get("cursor", ""))
        try:
            resp = self.session.get(
                url, headers=self._headers(), params=params, timeout=self.timeout_s
            )
        except requests.RequestException as exc:
            raise SentryApiError(f"GET {path} failed: {exc}") from exc
        if resp.status_code >= 400:
            raise SentryApiError(f"GET {path} failed: {resp.status_code} {resp.text[:200]}")
        return resp

    @staticmethod
    def _decode(path: str, resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"GET {path} returned a non-JSON body") from exc

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._decode(path, self.get(path, params=params))

    def iter_pages(self, path: str) -> Iterator[list[Any]]:
        """Yield each page of a cursor-paginated collection as it arrives.

        Sentry advertises continuation in the Link header: the ``rel="next"``
        entry carries ``results="true"`` while more pages exist and the
        ``cursor`` to send for the next one.
        """
        cursor = INITIAL_CURSOR
        while True:
            resp = self.get(path, params={"query": "", "cursor": cursor})
            data = self._decode(path, resp)
            if not isinstance(data, list):
                raise MalformedResponseError(
                    f"GET {path} returned {type(data).__name__}, expected a list"
                )
            next_link = _next_link(path, resp)
            yield data

            if next_link.get("results") != "true":
                return
            cursor = next_link.get("cursor") or ""
            if not cursor:
                raise PaginationError(f"GET {path}: next page announced without a cursor")

    def paginate(self, path: str) -> list[Any]:
        items: list[Any] = []
        for data in self.iter_pages(path):
            items.extend(data)
        return items


def _next_link(path: str, resp: requests.Response) -> dict[str, str]:
    if not resp.headers.get("Link"):
        raise PaginationError(f"GET {path}: response has no Link header")
    try:
        links = resp.links
    except (ValueError, IndexError) as exc:
        raise PaginationError(f"GET {path}: malformed Link header") from exc
    next_link = links.get("next")
    if next_link is None:
        raise PaginationError(f"GET {path}: Link header has no rel=\"next\" entry")
    return next_link
