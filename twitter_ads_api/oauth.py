"""OAuth 1.0a request signing (HMAC-SHA1).

Implements the signature procedure of RFC 5849 section 3.4 for requests made
with a consumer key pair and an access token pair:

    signer = OAuth1Signer(credentials)
    header = signer.authorization_header("GET", url, {"with_deleted": False})

Nonce and timestamp are drawn from injectable callables so that signatures
can be reproduced exactly in tests.
"""

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from twitter_ads_api.settings import Credentials

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def default_nonce() -> str:
    """Return a fresh random nonce."""
    return secrets.token_hex(16)


def percent_encode(value: Any) -> str:
    """Percent-encode a value per RFC 3986.

    Only unreserved characters (``A-Z a-z 0-9 - . _ ~``) are left as is.
    """
    return quote(to_param_str(value), safe="~")


def to_param_str(value: Any) -> str:
    """Render a primitive parameter value as it appears on the wire.

    Booleans become ``true``/``false`` and lists are comma-joined, which is
    how the Ads API expects flags and ``*_ids`` filters.

    Raises:
        TypeError: If the value is a mapping or otherwise not a primitive.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_param_str(item) for item in value)
    raise TypeError(f"Cannot sign parameter value of type {type(value).__name__}")


def normalize_url(url: str) -> str:
    """Return the base string URI: no query, no fragment, no default port."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if parts.port and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"
    return urlunsplit((scheme, host, parts.path or "/", "", ""))


def normalize_parameters(params: Iterable[tuple[str, Any]]) -> str:
    """Encode, sort and join parameters into the normalized parameter string."""
    encoded = sorted((percent_encode(key), percent_encode(value)) for key, value in params)
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(method: str, url: str, params: Iterable[tuple[str, Any]]) -> str:
    """Build the signature base string for a request.

    Args:
        method: HTTP method.
        url: Absolute request URL. Any query parameters it carries are
            signed along with ``params``.
        params: Signable parameters, including the ``oauth_*`` set.

    Returns:
        ``METHOD&encoded-base-url&encoded-parameter-string``.
    """
    query = parse_qsl(urlsplit(url).query, keep_blank_values=True)
    all_params = [(k, v) for k, v in params if k != "oauth_signature"] + query
    return "&".join(
        [
            percent_encode(method.upper()),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(all_params)),
        ]
    )


class OAuth1Signer:
    """Signs requests with a fixed consumer and token key pair.

    Args:
        credentials: Consumer and token keys/secrets.
        clock: Returns the current Unix time in seconds.
        nonce_factory: Returns a fresh nonce for each request.
    """

    def __init__(
        self,
        credentials: Credentials,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = default_nonce,
    ) -> None:
        self.credentials = credentials
        self._clock = clock
        self._nonce_factory = nonce_factory

    @property
    def signing_key(self) -> str:
        """The HMAC key: encoded consumer secret and token secret joined by ``&``."""
        return f"{percent_encode(self.credentials.consumer_secret)}&{percent_encode(self.credentials.token_secret)}"

    def oauth_parameters(self, nonce: str | None = None, timestamp: int | None = None) -> dict[str, str]:
        """Return the protocol parameters for one request (without signature).

        Args:
            nonce: Nonce to use; drawn from the nonce factory when omitted.
            timestamp: Unix time to use; read from the clock when omitted.

        Returns:
            The six ``oauth_*`` parameters other than ``oauth_signature``.
        """
        return {
            "oauth_consumer_key": self.credentials.consumer_key,
            "oauth_nonce": nonce if nonce is not None else self._nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(timestamp if timestamp is not None else int(self._clock())),
            "oauth_token": self.credentials.token_key,
            "oauth_version": OAUTH_VERSION,
        }

    def signature(self, base_string: str) -> str:
        """Sign a base string.

        Args:
            base_string: Output of :func:`signature_base_string`.

        Returns:
            The base64-encoded HMAC-SHA1 digest.
        """
        digest = hmac.new(self.signing_key.encode(), base_string.encode(), hashlib.sha1).digest()
        return base64.b64encode(digest).decode()

    def sign(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> dict[str, str]:
        """Compute the full set of OAuth parameters for a request.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            params: Request parameters that take part in the signature.
            nonce: Overrides the nonce factory for this call.
            timestamp: Overrides the clock for this call.

        Returns:
            The ``oauth_*`` parameters including ``oauth_signature``.
        """
        oauth_params = self.oauth_parameters(nonce=nonce, timestamp=timestamp)
        signable = list(oauth_params.items()) + list((params or {}).items())
        base_string = signature_base_string(method, url, signable)
        oauth_params["oauth_signature"] = self.signature(base_string)
        return oauth_params

    def authorization_header(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> str:
        """Return the ``Authorization`` header value for a request."""
        oauth_params = self.sign(method, url, params, nonce=nonce, timestamp=timestamp)
        return "OAuth " + ", ".join(
            f'{percent_encode(key)}="{percent_encode(value)}"' for key, value in sorted(oauth_params.items())
        )
