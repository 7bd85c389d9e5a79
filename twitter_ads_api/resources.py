"""API resources, one per area of the Ads API.

Each resource is bound to a :class:`~twitter_ads_api.client.TwitterAdsClient`
and to the ads account configured on it.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from twitter_ads_api.models import (
    DEFAULT_PLACEMENT,
    CampaignCreate,
    EntityType,
    Granularity,
    LineItemCreate,
    MetricGroup,
    PromotedTweetCreate,
    TailoredAudienceCreate,
    TargetingType,
    merge_fields,
)

if TYPE_CHECKING:
    from twitter_ads_api.client import TwitterAdsClient


def path_segment(value: str) -> str:
    """Encode an id for use as a single URL path segment.

    ``/``, ``?`` and ``#`` are escaped so an id can neither change the
    endpoint nor add query parameters.
    """
    return quote(value, safe="")


class Resource:
    """Base class for resources scoped to the client's ads account.

    Args:
        client: The client that sends the requests.
    """

    def __init__(self, client: "TwitterAdsClient") -> None:
        self._client = client

    @property
    def account_id(self) -> str:
        return self._client.account_id

    @property
    def account_path(self) -> str:
        """Account root, e.g. ``/accounts/18ce54d4x5t``."""
        return f"/accounts/{path_segment(self.account_id)}"


class AccountsResource(Resource):
    """The ads account and its billing."""

    def get(self) -> Any:
        """Get the ads account.

        Returns:
            The API response with the account under ``data``.
        """
        return self._client.get(self.account_path)

    def funding_instruments(self) -> Any:
        """List the account's funding instruments.

        Returns:
            The API response with the instruments under ``data``.
        """
        return self._client.get(f"{self.account_path}/funding_instruments")

    def authenticated_user_access(self) -> Any:
        """Get the permissions of the authenticated user on the account."""
        return self._client.get(f"{self.account_path}/authenticated_user_access")


class CampaignsResource(Resource):
    """Campaigns of the ads account."""

    def list(self, with_deleted: bool = False) -> Any:
        """List campaigns.

        Args:
            with_deleted: Include deleted campaigns.

        Returns:
            The API response with the campaigns under ``data``.
        """
        params = {"account_id": self.account_id, "with_deleted": with_deleted}
        return self._client.get(f"{self.account_path}/campaigns", params)

    def create(self, data: CampaignCreate) -> Any:
        """Create a campaign.

        Args:
            data: Campaign fields. Unset optional fields are not sent.

        Returns:
            The API response with the new campaign under ``data``.
        """
        payload = merge_fields({"account_id": self.account_id}, data.model_dump(mode="json", exclude_none=True))
        return self._client.post(f"{self.account_path}/campaigns", payload)

    def update(self, campaign_id: str, updates: Mapping[str, Any]) -> Any:
        """Update a campaign.

        The request body is the account id merged with ``updates``; no
        other field is sent.

        Args:
            campaign_id: Campaign to update.
            updates: Fields to change.

        Returns:
            The API response with the updated campaign under ``data``.
        """
        payload = merge_fields({"account_id": self.account_id}, updates)
        return self._client.put(f"{self.account_path}/campaigns/{path_segment(campaign_id)}", payload)


class LineItemsResource(Resource):
    """Line items (ad groups) of the ads account."""

    def list(self, campaign_id: str, with_deleted: bool = False) -> Any:
        """List the line items of a campaign.

        Args:
            campaign_id: Campaign whose line items are listed.
            with_deleted: Include deleted line items.
        """
        params = {
            "account_id": self.account_id,
            "campaign_ids": campaign_id,
            "with_deleted": with_deleted,
        }
        return self._client.get(f"{self.account_path}/line_items", params)

    def create(self, data: LineItemCreate) -> Any:
        """Create a line item.

        Args:
            data: Line item fields; its targeting is merged into the body last.

        Returns:
            The API response with the new line item under ``data``.
        """
        payload = merge_fields({"account_id": self.account_id}, data.to_payload())
        return self._client.post(f"{self.account_path}/line_items", payload)


class PromotedTweetsResource(Resource):
    """Tweets promoted through line items."""

    def list(self, line_item_id: str | None = None, with_deleted: bool = False) -> Any:
        """List promoted tweets.

        Args:
            line_item_id: Only list tweets promoted by this line item.
            with_deleted: Include deleted promoted tweets.
        """
        params: dict[str, Any] = {"account_id": self.account_id, "with_deleted": with_deleted}
        if line_item_id:
            params["line_item_ids"] = line_item_id
        return self._client.get(f"{self.account_path}/promoted_tweets", params)

    def create(self, data: PromotedTweetCreate) -> Any:
        """Promote a tweet under a line item.

        Returns:
            The API response with the promoted tweet under ``data``.
        """
        payload = merge_fields({"account_id": self.account_id}, data.model_dump(mode="json"))
        return self._client.post(f"{self.account_path}/promoted_tweets", payload)


class TargetingResource(Resource):
    """Targeting criteria catalogues."""

    def options(self, targeting_type: TargetingType) -> Any:
        """List the available criteria of one kind.

        Args:
            targeting_type: Kind of criteria, e.g. ``interests``.
        """
        return self._client.get(targeting_type.endpoint)


class TailoredAudiencesResource(Resource):
    """Tailored (custom) audiences of the ads account."""

    def create(self, data: TailoredAudienceCreate) -> Any:
        """Create a tailored audience.

        Args:
            data: Audience fields. An unset description is not sent.

        Returns:
            The API response with the new audience under ``data``.
        """
        payload = merge_fields({"account_id": self.account_id}, data.model_dump(mode="json", exclude_none=True))
        return self._client.post(f"{self.account_path}/tailored_audiences", payload)


class StatsResource(Resource):
    """Synchronous analytics."""

    def fetch(
        self,
        entity: EntityType | str,
        entity_ids: str | Iterable[str],
        start_time: str,
        end_time: str,
        granularity: Granularity = Granularity.TOTAL,
        metric_groups: Iterable[MetricGroup | str] = (MetricGroup.ENGAGEMENT, MetricGroup.BILLING),
        placement: str | None = DEFAULT_PLACEMENT,
    ) -> Any:
        """Fetch synchronous analytics for one or more entities.

        Args:
            entity: Entity type, e.g. ``CAMPAIGN``.
            entity_ids: One id, a comma-separated string or an iterable of ids.
            start_time: ISO-8601 start date or time.
            end_time: ISO-8601 end date or time.
            granularity: Bucket size of the returned series.
            metric_groups: Metric groups to include.
            placement: Placement filter.

        Returns:
            The API response with one ``id_data`` series per entity under ``data``.
        """
        ids = entity_ids if isinstance(entity_ids, str) else ",".join(entity_ids)
        params = {
            "entity": _enum_value(entity).upper(),
            "entity_ids": ids,
            "start_time": start_time,
            "end_time": end_time,
            "granularity": _enum_value(granularity),
            "metric_groups": ",".join(_enum_value(group) for group in metric_groups),
            "placement": placement,
        }
        return self._client.get(f"/stats/accounts/{path_segment(self.account_id)}", params)


def _enum_value(value: Any) -> str:
    return str(value.value) if hasattr(value, "value") else str(value)
