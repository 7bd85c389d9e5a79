"""Tests for the signed HTTP client and its settings."""

from pathlib import Path

import httpx
import pytest
from conftest import ACCOUNT_ID, FakeAdsAPI, request_json
from pydantic import ValidationError

from twitter_ads_api import ConfigurationError, OAuth1Signer, Settings, TwitterAdsClient, TwitterAdsError

FIXED_TIMESTAMP = 1700000000
FIXED_NONCE = "0123456789abcdef"


@pytest.fixture
def settings(credentials_env: dict[str, str]) -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def signer(settings: Settings) -> OAuth1Signer:
    return OAuth1Signer(settings.credentials, clock=lambda: FIXED_TIMESTAMP, nonce_factory=lambda: FIXED_NONCE)


def make_client(settings: Settings, signer: OAuth1Signer, api: FakeAdsAPI) -> TwitterAdsClient:
    return TwitterAdsClient(settings, signer=signer, transport=httpx.MockTransport(api.handler))


def test_settings_from_environment(settings: Settings) -> None:
    assert settings.api_key == "consumer-key"
    assert settings.ads_account_id == ACCOUNT_ID
    assert settings.api_base == "https://ads-api.twitter.com/12"
    assert settings.credentials.token_secret == "token-secret"


def test_settings_are_immutable(settings: Settings) -> None:
    with pytest.raises(ValidationError):
        settings.api_key = "other"  # type: ignore[misc]


def test_settings_api_version_override(credentials_env: dict[str, str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TWITTER_ADS_API_VERSION", "11")
    monkeypatch.setenv("TWITTER_ADS_API_BASE", "https://ads-api.example.com/")
    assert Settings(_env_file=None).api_base == "https://ads-api.example.com/11"  # type: ignore[call-arg]


def test_settings_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / "ads.env"
    env_file.write_text(
        "TWITTER_API_KEY=k\nTWITTER_API_SECRET=s\nTWITTER_ACCESS_TOKEN=t\n"
        "TWITTER_ACCESS_SECRET=ts\nTWITTER_ADS_ACCOUNT_ID=acc\n"
    )
    client = TwitterAdsClient.from_env(env_file=env_file)
    assert client.account_id == "acc"
    client.close()


@pytest.mark.parametrize(
    "missing",
    ["TWITTER_API_KEY", "TWITTER_API_SECRET", "TWITTER_ACCESS_TOKEN", "TWITTER_ACCESS_SECRET", "TWITTER_ADS_ACCOUNT_ID"],
)
def test_from_env_reports_missing_variable(
    credentials_env: dict[str, str], monkeypatch: pytest.MonkeyPatch, missing: str
) -> None:
    monkeypatch.delenv(missing)
    with pytest.raises(ConfigurationError) as exc_info:
        TwitterAdsClient.from_env()
    assert exc_info.value.missing == [missing]
    assert missing in exc_info.value.message


def test_from_env_treats_empty_value_as_missing(
    credentials_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TWITTER_API_SECRET", "")
    with pytest.raises(ConfigurationError) as exc_info:
        TwitterAdsClient.from_env()
    assert exc_info.value.missing == ["TWITTER_API_SECRET"]


def test_from_env_reports_invalid_value_separately(
    credentials_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TWITTER_ADS_TIMEOUT", "abc")
    with pytest.raises(ConfigurationError) as exc_info:
        TwitterAdsClient.from_env()
    assert exc_info.value.missing == []
    assert exc_info.value.message.startswith("Invalid values in environment variables: TWITTER_ADS_TIMEOUT")
    assert "Missing" not in exc_info.value.message


def test_get_sends_signed_query_and_no_body(settings: Settings, signer: OAuth1Signer) -> None:
    api = FakeAdsAPI()
    api.add("GET", f"/12/accounts/{ACCOUNT_ID}/campaigns", {"data": []})

    with make_client(settings, signer, api) as client:
        client.get(f"/accounts/{ACCOUNT_ID}/campaigns", {"account_id": ACCOUNT_ID, "with_deleted": False})

    request = api.requests[0]
    url = f"https://ads-api.twitter.com/12/accounts/{ACCOUNT_ID}/campaigns"
    assert dict(request.url.params) == {"account_id": ACCOUNT_ID, "with_deleted": "false"}
    assert request.content == b""
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == signer.authorization_header(
        "GET", url, {"account_id": ACCOUNT_ID, "with_deleted": "false"}
    )


@pytest.mark.parametrize("method", ["POST", "PUT"])
def test_body_methods_send_json_and_no_query(settings: Settings, signer: OAuth1Signer, method: str) -> None:
    api = FakeAdsAPI()
    api.add(method, "/12/things", {"data": {"id": "1"}})
    params = {"name": "Launch", "total_budget_amount_local_micro": 500_000_000, "placements": ["ALL_ON_TWITTER"]}

    with make_client(settings, signer, api) as client:
        client.request(method, "/things", params)

    request = api.requests[0]
    assert request.url.query == b""
    assert request_json(request) == params
    # JSON bodies are not part of the signature base string
    assert request.headers["Authorization"] == signer.authorization_header(
        method, "https://ads-api.twitter.com/12/things", {}
    )


def test_none_values_are_dropped(settings: Settings, signer: OAuth1Signer) -> None:
    api = FakeAdsAPI()
    api.add("GET", "/12/things", {})
    api.add("POST", "/12/things", {})

    with make_client(settings, signer, api) as client:
        client.get("/things", {"a": "1", "b": None})
        client.post("/things", {"a": "1", "b": None})

    assert dict(api.requests[0].url.params) == {"a": "1"}
    assert request_json(api.requests[1]) == {"a": "1"}


def test_success_returns_body_unmodified(settings: Settings, signer: OAuth1Signer) -> None:
    api = FakeAdsAPI()
    body = {"data": [{"id": "c1"}], "next_cursor": None, "request": {"params": {}}}
    api.add("GET", "/12/things", body)

    with make_client(settings, signer, api) as client:
        assert client.get("/things") == body


def test_api_error_uses_first_error_message(settings: Settings, signer: OAuth1Signer) -> None:
    api = FakeAdsAPI()
    api.add(
        "GET",
        "/12/things",
        {"errors": [{"code": "INVALID_PARAMETER", "message": "Expected an account id"}, {"message": "second"}]},
        status=400,
    )

    with make_client(settings, signer, api) as client:
        with pytest.raises(TwitterAdsError) as exc_info:
            client.get("/things")

    assert exc_info.value.message == "Twitter Ads API error: Expected an account id"
    assert exc_info.value.status_code == 400
    assert exc_info.value.response_body is not None


def test_api_error_without_error_list(settings: Settings, signer: OAuth1Signer) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="Service Unavailable")

    with TwitterAdsClient(settings, signer=signer, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TwitterAdsError) as exc_info:
            client.get("/things")

    assert exc_info.value.message == "Twitter Ads API error: Request failed with status code 503"
    assert exc_info.value.status_code == 503


def test_transport_failure(settings: Settings, signer: OAuth1Signer) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with TwitterAdsClient(settings, signer=signer, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TwitterAdsError) as exc_info:
            client.get("/things")

    assert exc_info.value.message == "Twitter Ads API error: connection refused"
    assert exc_info.value.status_code is None


def test_malformed_json_body(settings: Settings, signer: OAuth1Signer) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="{not json")

    with TwitterAdsClient(settings, signer=signer, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TwitterAdsError) as exc_info:
            client.get("/things")

    assert exc_info.value.message.startswith("Twitter Ads API error: invalid JSON")


def test_empty_success_body(settings: Settings, signer: OAuth1Signer) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    with TwitterAdsClient(settings, signer=signer, transport=httpx.MockTransport(handler)) as client:
        assert client.put("/things", {"a": 1}) == {}


def test_stats_request_shape(settings: Settings, signer: OAuth1Signer) -> None:
    api = FakeAdsAPI()
    api.add("GET", f"/12/stats/accounts/{ACCOUNT_ID}", {"data": []})

    with make_client(settings, signer, api) as client:
        client.stats.fetch("campaign", ["c1", "c2"], "2024-01-01", "2024-01-31")

    assert dict(api.requests[0].url.params) == {
        "entity": "CAMPAIGN",
        "entity_ids": "c1,c2",
        "start_time": "2024-01-01",
        "end_time": "2024-01-31",
        "granularity": "TOTAL",
        "metric_groups": "ENGAGEMENT,BILLING",
        "placement": "ALL_ON_TWITTER",
    }


def test_campaign_id_is_one_path_segment(settings: Settings, signer: OAuth1Signer) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"data": {}})

    with TwitterAdsClient(settings, signer=signer, transport=httpx.MockTransport(handler)) as client:
        client.campaigns.update("c 1/x?with_deleted=true", {"name": "Launch"})

    request = requests[0]
    url = f"https://ads-api.twitter.com/12/accounts/{ACCOUNT_ID}/campaigns/c%201%2Fx%3Fwith_deleted%3Dtrue"
    assert request.url.raw_path == f"/12/accounts/{ACCOUNT_ID}/campaigns/c%201%2Fx%3Fwith_deleted%3Dtrue".encode()
    assert request.url.query == b""
    assert request.headers["Authorization"] == signer.authorization_header("PUT", url, {})


def test_debug_log_redacts_authorization(
    settings: Settings, signer: OAuth1Signer, caplog: pytest.LogCaptureFixture
) -> None:
    api = FakeAdsAPI()
    api.add("GET", "/12/things", {})

    with caplog.at_level("DEBUG", logger="twitter_ads_api.client"):
        with make_client(settings, signer, api) as client:
            client.get("/things")

    assert "***REDACTED***" in caplog.text
    assert "oauth_signature" not in caplog.text
