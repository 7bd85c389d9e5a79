"""Python client for the Twitter Ads API.

Usage:
    from twitter_ads_api import TwitterAdsClient

    with TwitterAdsClient.from_env() as client:
        account = client.accounts.get()
"""

from twitter_ads_api.client import TwitterAdsClient
from twitter_ads_api.exceptions import ConfigurationError, TwitterAdsError
from twitter_ads_api.oauth import OAuth1Signer
from twitter_ads_api.settings import Credentials, Settings

__all__ = [
    "ConfigurationError",
    "Credentials",
    "OAuth1Signer",
    "Settings",
    "TwitterAdsClient",
    "TwitterAdsError",
]

__version__ = "0.1.0"
