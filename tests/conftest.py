"""Shared fixtures: credentials in the environment and a fake Ads API."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from twitter_ads_api import TwitterAdsClient

ACCOUNT_ID = "18ce54d4x5t"
ACCOUNT_PATH = f"/12/accounts/{ACCOUNT_ID}"
STATS_PATH = f"/12/stats/accounts/{ACCOUNT_ID}"

CREDENTIALS_ENV = {
    "TWITTER_API_KEY": "consumer-key",
    "TWITTER_API_SECRET": "consumer-secret",
    "TWITTER_ACCESS_TOKEN": "token-key",
    "TWITTER_ACCESS_SECRET": "token-secret",
    "TWITTER_ADS_ACCOUNT_ID": ACCOUNT_ID,
}

Body = dict[str, Any] | Callable[[httpx.Request], dict[str, Any]] | None


class FakeAdsAPI:
    """Records requests and answers them from registered routes."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Body]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, body: Body = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"errors": [{"message": f"No route for {request.url.path}"}]})
        status, body = route
        if callable(body):
            body = body(request)
        return httpx.Response(status, json=body if body is not None else {})

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def last(self, method: str, path: str) -> httpx.Request:
        calls = self.calls(method, path)
        assert calls, f"no {method} {path} request was made"
        return calls[-1]


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Start every test without TWITTER_* variables or a stray .env file."""
    for name in [*CREDENTIALS_ENV, "TWITTER_ADS_API_BASE", "TWITTER_ADS_API_VERSION", "TWITTER_ADS_TIMEOUT"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def credentials_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    for name, value in CREDENTIALS_ENV.items():
        monkeypatch.setenv(name, value)
    return dict(CREDENTIALS_ENV)


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch) -> FakeAdsAPI:
    """Route every client built by ``TwitterAdsClient.from_env`` to a fake API."""
    api = FakeAdsAPI()
    original = TwitterAdsClient.from_env.__func__  # type: ignore[attr-defined]

    def from_env(cls: type[TwitterAdsClient], env_file: Any = None, **kwargs: Any) -> TwitterAdsClient:
        kwargs.setdefault("transport", httpx.MockTransport(api.handler))
        return original(cls, env_file=env_file, **kwargs)

    monkeypatch.setattr(TwitterAdsClient, "from_env", classmethod(from_env))
    return api
