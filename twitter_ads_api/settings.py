"""Client configuration loaded from the environment."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "TWITTER_"


class Credentials(BaseModel):
    """Application (consumer) and account (token) key pairs."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: str
    token_key: str
    token_secret: str


class Settings(BaseSettings):
    """Twitter Ads API settings.

    Every field maps to a ``TWITTER_``-prefixed environment variable, e.g.
    ``api_key`` is read from ``TWITTER_API_KEY`` and ``ads_account_id`` from
    ``TWITTER_ADS_ACCOUNT_ID``. Instances are immutable.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1)
    access_token: str = Field(min_length=1)
    access_secret: str = Field(min_length=1)
    ads_account_id: str = Field(min_length=1)

    ads_api_base: str = "https://ads-api.twitter.com"
    ads_api_version: str = "12"
    ads_timeout: float = Field(default=30.0, gt=0)

    @property
    def api_base(self) -> str:
        """Versioned API root, e.g. ``https://ads-api.twitter.com/12``."""
        return f"{self.ads_api_base.rstrip('/')}/{self.ads_api_version}"

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            consumer_key=self.api_key,
            consumer_secret=self.api_secret,
            token_key=self.access_token,
            token_secret=self.access_secret,
        )


def env_var_name(field: str) -> str:
    """Return the environment variable that feeds a settings field."""
    return f"{ENV_PREFIX}{field.upper()}"
