"""Shared fixtures: a fake requests session that records calls and replays queued responses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from pixiv_illust.infrastructure.providers.pixiv.client import PixivApiClient

AUTH_URL = "https://oauth.secure.pixiv.net/auth/token"
BASE_URL = "https://app-api.pixiv.net"

CREDENTIALS = {
    "username": "user@example.com",
    "password": "hunter2",
    "client_id": "client-id-123",
    "client_secret": "client-secret-456",
}


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        *,
        payload: Any = None,
        content: bytes | None = None,
        content_type: str | None = None,
        status_code: int = 200,
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        if payload is not None:
            self.content = json.dumps(payload).encode("utf-8")
            content_type = content_type or "application/json; charset=utf-8"
        else:
            self.content = content or b""
        self.headers = CaseInsensitiveDict()
        if content_type:
            self.headers["Content-Type"] = content_type

    def json(self) -> Any:
        return json.loads(self.content)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: dict[str, Any]

    @property
    def headers(self) -> dict[str, str]:
        return self.kwargs.get("headers") or {}

    @property
    def params(self) -> dict[str, Any] | None:
        return self.kwargs.get("params")

    @property
    def data(self) -> dict[str, Any] | None:
        return self.kwargs.get("data")

    @property
    def full_url(self) -> str:
        prepared = requests.PreparedRequest()
        prepared.prepare_url(self.url, self.params)
        return prepared.url


@dataclass
class FakeSession:
    """Records every request and returns queued responses in order."""

    responses: list[Any] = field(default_factory=list)
    calls: list[RecordedCall] = field(default_factory=list)
    closed: bool = False

    def queue(self, *responses: Any) -> FakeSession:
        self.responses.extend(responses)
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(RecordedCall(method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def auth_ok(token: str = "token-1") -> FakeResponse:
    return FakeResponse(payload={"has_error": False, "response": {"access_token": token}})


def auth_failed(message: str = "Invalid grant") -> FakeResponse:
    return FakeResponse(
        payload={"has_error": True, "errors": {"system": {"message": message}}}
    )


def vendor_error(message: str, user_message: str = "") -> FakeResponse:
    return FakeResponse(
        payload={
            "error": {
                "user_message": user_message,
                "message": message,
                "reason": "",
                "user_message_details": {},
            }
        }
    )


def make_illust(illust_id: int = 12345, large: str | None = None, **extra: Any) -> dict:
    image_urls = {
        "square_medium": f"https://i.pximg.net/c/360x360/img/{illust_id}_sq.jpg",
        "medium": f"https://i.pximg.net/c/540x540/img/{illust_id}_m.jpg",
    }
    if large is not None:
        image_urls["large"] = large
    illust = {
        "id": illust_id,
        "title": f"Illust {illust_id}",
        "type": "illust",
        "image_urls": image_urls,
        "caption": "",
        "restrict": 0,
        "user": {"id": 1, "name": "Artist", "account": "artist", "is_followed": False},
        "tags": [{"name": "landscape", "translated_name": None}],
        "tools": [],
        "page_count": 1,
        "width": 800,
        "height": 600,
        "series": None,
        "meta_single_page": {"original_image_url": "https://i.pximg.net/img-original/x.jpg"},
        "meta_pages": [],
        "total_view": 10,
        "total_bookmarks": 3,
        "is_bookmarked": False,
        "visible": True,
        "is_muted": False,
        "x_restrict": 0,
        "sanity_level": 2,
    }
    illust.update(extra)
    return illust


def detail_ok(illust_id: int = 12345, large: str | None = None) -> FakeResponse:
    return FakeResponse(payload={"illust": make_illust(illust_id, large=large)})


def search_ok(*illusts: dict, next_url: str | None = None) -> FakeResponse:
    return FakeResponse(
        payload={"illusts": list(illusts), "ranking_illusts": [], "next_url": next_url}
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> PixivApiClient:
    return PixivApiClient(**CREDENTIALS, session=session)
