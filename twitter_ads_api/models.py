"""Request models and enums for the Twitter Ads API."""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

MICROS_PER_UNIT = 1_000_000


class EntityStatus(str, Enum):
    """Lifecycle status of a campaign, line item or promoted tweet."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    DRAFT = "DRAFT"


class EntityType(str, Enum):
    """Entities that analytics can be requested for."""

    ACCOUNT = "ACCOUNT"
    CAMPAIGN = "CAMPAIGN"
    FUNDING_INSTRUMENT = "FUNDING_INSTRUMENT"
    LINE_ITEM = "LINE_ITEM"
    MEDIA_CREATIVE = "MEDIA_CREATIVE"
    ORGANIC_TWEET = "ORGANIC_TWEET"
    PROMOTED_ACCOUNT = "PROMOTED_ACCOUNT"
    PROMOTED_TWEET = "PROMOTED_TWEET"


class Granularity(str, Enum):
    HOUR = "HOUR"
    DAY = "DAY"
    TOTAL = "TOTAL"


class MetricGroup(str, Enum):
    ENGAGEMENT = "ENGAGEMENT"
    BILLING = "BILLING"
    VIDEO = "VIDEO"
    MEDIA = "MEDIA"
    WEB_CONVERSION = "WEB_CONVERSION"
    MOBILE_CONVERSION = "MOBILE_CONVERSION"
    LIFE_TIME_VALUE_MOBILE_CONVERSION = "LIFE_TIME_VALUE_MOBILE_CONVERSION"


class TargetingType(str, Enum):
    """Targeting criteria that can be browsed."""

    INTERESTS = "interests"
    KEYWORDS = "keywords"
    FOLLOWERS = "followers"
    LOCATIONS = "locations"
    DEVICES = "devices"

    @property
    def endpoint(self) -> str:
        return TARGETING_ENDPOINTS[self]


TARGETING_ENDPOINTS = {
    TargetingType.INTERESTS: "/targeting_criteria/interests",
    TargetingType.KEYWORDS: "/targeting_criteria/keywords",
    TargetingType.FOLLOWERS: "/targeting_criteria/user_lookups",
    TargetingType.LOCATIONS: "/targeting_criteria/locations",
    TargetingType.DEVICES: "/targeting_criteria/devices",
}

DEFAULT_PLACEMENT = "ALL_ON_TWITTER"


def to_micros(amount: str | int | float | Decimal) -> int:
    """Convert a currency amount to local micros.

    Examples:
        >>> to_micros("500")
        500000000
        >>> to_micros("12.5")
        12500000

    Raises:
        ValueError: If the amount is not a finite number.
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: '{amount}'") from None
    if not value.is_finite():
        raise ValueError(f"Invalid amount: '{amount}'")
    return int(value * MICROS_PER_UNIT)


def from_micros(micros: int | float) -> float:
    return micros / MICROS_PER_UNIT


def merge_fields(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two flat mappings; keys in ``updates`` win."""
    merged = dict(base)
    merged.update(updates)
    return merged


class CampaignCreate(BaseModel):
    """Payload for creating a campaign."""

    name: str
    objective: str
    total_budget_amount_local_micro: int
    start_time: str
    end_time: str | None = None
    funding_instrument_id: str | None = None
    entity_status: EntityStatus = EntityStatus.PAUSED


class LineItemCreate(BaseModel):
    """Payload for creating a line item.

    ``targeting`` holds extra top-level fields that are merged into the
    payload last and may override the defaults.
    """

    campaign_id: str
    name: str
    bid_amount_local_micro: int
    placements: list[str]
    product_type: str = "PROMOTED_TWEETS"
    entity_status: EntityStatus = EntityStatus.PAUSED
    targeting: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        fields = self.model_dump(mode="json", exclude={"targeting"}, exclude_none=True)
        return merge_fields(fields, self.targeting)


class PromotedTweetCreate(BaseModel):
    line_item_id: str
    tweet_id: str
    entity_status: EntityStatus = EntityStatus.ACTIVE


class TailoredAudienceCreate(BaseModel):
    name: str
    audience_type: str
    description: str | None = None
