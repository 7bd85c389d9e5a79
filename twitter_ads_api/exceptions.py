"""Exceptions raised by the Twitter Ads API client."""

from typing import Any


class TwitterAdsError(Exception):
    """Base error for everything the client reports.

    Attributes:
        message: Human-readable description of the failure.
        status_code: HTTP status code, when a response was received.
        response_body: Decoded response body, when one could be decoded.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


class ConfigurationError(TwitterAdsError):
    """Raised when required settings are missing or invalid."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []
