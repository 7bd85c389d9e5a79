"""Signed HTTP client for the Twitter Ads API."""

import logging
from pathlib import Path
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from twitter_ads_api.exceptions import ConfigurationError, TwitterAdsError
from twitter_ads_api.oauth import OAuth1Signer, to_param_str
from twitter_ads_api.resources import (
    AccountsResource,
    CampaignsResource,
    LineItemsResource,
    PromotedTweetsResource,
    StatsResource,
    TailoredAudiencesResource,
    TargetingResource,
)
from twitter_ads_api.settings import Settings, env_var_name

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT"})

_REDACT_HEADERS = {"authorization"}

# Unset variables, and empty ones rejected by min_length
_MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` that is safe to log."""
    return {key: "***REDACTED***" if key.lower() in _REDACT_HEADERS else value for key, value in headers.items()}


def error_detail(response: httpx.Response) -> tuple[str, dict[str, Any] | None]:
    """Extract a readable message and the decoded body from an error response.

    The first ``errors[].message`` reported by the API wins; otherwise the
    status code is reported.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
            return str(errors[0]["message"]), body
        return f"Request failed with status code {response.status_code}", body
    return f"Request failed with status code {response.status_code}", None


def configuration_error(e: ValidationError) -> ConfigurationError:
    """Turn a settings validation failure into a :class:`ConfigurationError`.

    Unset and empty variables are reported as missing; anything else that
    failed validation is reported as invalid, with pydantic's reason.

    Args:
        e: The error raised while loading :class:`Settings`.

    Returns:
        The error to raise, with ``missing`` listing the unset variables.
    """
    missing: set[str] = set()
    invalid: dict[str, str] = {}
    for err in e.errors():
        if not err["loc"]:
            continue
        name = env_var_name(str(err["loc"][0]))
        if err["type"] in _MISSING_ERROR_TYPES:
            missing.add(name)
        else:
            invalid.setdefault(name, err["msg"])

    parts = []
    if missing:
        parts.append(
            "Missing required Twitter Ads API credentials in environment variables: " + ", ".join(sorted(missing))
        )
    if invalid:
        parts.append(
            "Invalid values in environment variables: "
            + ", ".join(f"{name} ({reason})" for name, reason in sorted(invalid.items()))
        )
    return ConfigurationError("; ".join(parts) or str(e), missing=sorted(missing))


class TwitterAdsClient:
    """Client for the Twitter Ads API.

    Each request is signed with OAuth 1.0a. GET parameters travel in the
    query string and are part of the signature; POST and PUT parameters are
    sent as a JSON body, which OAuth 1.0a does not sign.

    Example:
        with TwitterAdsClient.from_env() as client:
            campaigns = client.campaigns.list()

    Args:
        settings: Credentials, account and endpoint configuration.
        signer: Request signer; built from ``settings`` when omitted.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: Settings,
        signer: OAuth1Signer | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.signer = signer or OAuth1Signer(settings.credentials)
        self._http = httpx.Client(timeout=settings.ads_timeout, transport=transport)

        self.accounts = AccountsResource(self)
        self.campaigns = CampaignsResource(self)
        self.line_items = LineItemsResource(self)
        self.promoted_tweets = PromotedTweetsResource(self)
        self.targeting = TargetingResource(self)
        self.tailored_audiences = TailoredAudiencesResource(self)
        self.stats = StatsResource(self)

    @classmethod
    def from_env(cls, env_file: Path | None = None, **kwargs: Any) -> "TwitterAdsClient":
        """Create a client from ``TWITTER_*`` environment variables.

        Args:
            env_file: Optional ``.env`` file read in addition to the environment.
            **kwargs: Passed on to the constructor.

        Returns:
            A client for the configured ads account.

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid.
        """
        try:
            settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as e:
            raise configuration_error(e) from None
        return cls(settings, **kwargs)

    @property
    def account_id(self) -> str:
        return self.settings.ads_account_id

    def url(self, endpoint: str) -> str:
        """Return the absolute URL of an endpoint below the versioned API root."""
        return f"{self.settings.api_base}{endpoint}"

    def request(self, method: str, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Send a signed request and return the decoded JSON body.

        Args:
            method: ``GET``, ``POST`` or ``PUT``.
            endpoint: Path below the versioned API root, e.g. ``/accounts/123``.
            params: Flat request parameters. ``None`` values are dropped.

        Raises:
            TwitterAdsError: On a non-2xx status, a transport failure or a
                body that is not valid JSON.
        """
        method = method.upper()
        url = self.url(endpoint)
        values = {key: value for key, value in (params or {}).items() if value is not None}

        if method in BODY_METHODS:
            query: dict[str, str] = {}
            body: dict[str, Any] | None = values
        else:
            query = {key: to_param_str(value) for key, value in values.items()}
            body = None

        headers = {
            "Authorization": self.signer.authorization_header(method, url, query),
            "Content-Type": "application/json",
        }
        logger.debug("%s %s params=%s headers=%s", method, url, query or body, redact_headers(headers))

        try:
            response = self._http.request(method, url, params=query or None, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise TwitterAdsError(f"Twitter Ads API error: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)

        if not response.is_success:
            detail, response_body = error_detail(response)
            raise TwitterAdsError(
                f"Twitter Ads API error: {detail}",
                status_code=response.status_code,
                response_body=response_body,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TwitterAdsError(
                f"Twitter Ads API error: invalid JSON in response ({e})",
                status_code=response.status_code,
            ) from e

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Send a signed GET; ``params`` go in the query string."""
        return self.request("GET", endpoint, params)

    def post(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Send a signed POST; ``params`` go in the JSON body."""
        return self.request("POST", endpoint, params)

    def put(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Send a signed PUT; ``params`` go in the JSON body."""
        return self.request("PUT", endpoint, params)

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def __enter__(self) -> "TwitterAdsClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
