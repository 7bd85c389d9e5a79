"""Metrics and report CLI commands."""

import logging
from typing import Annotated, Any

import typer
from pydantic import BaseModel, Field

from twitter_ads_api import TwitterAdsClient
from twitter_ads_api.exceptions import TwitterAdsError
from twitter_ads_api.models import EntityType, Granularity, MetricGroup, from_micros
from twitter_ads_cli.utils import get_client, handle_api_error, print_json, trailing_window

logger = logging.getLogger(__name__)

RECENT_METRICS_DAYS = 30
RECENT_METRIC_GROUPS = (MetricGroup.ENGAGEMENT, MetricGroup.BILLING)
REPORT_METRIC_GROUPS = (MetricGroup.ENGAGEMENT, MetricGroup.BILLING, MetricGroup.VIDEO)


class CampaignSummary(BaseModel):
    id: str
    name: str | None = None
    status: str | None = None
    objective: str | None = None
    impressions: int = 0
    engagements: int = 0
    spend: float = 0.0
    cpe: float = 0.0


class DateRange(BaseModel):
    start: str
    end: str


class ReportSummary(BaseModel):
    """Account-level performance summary over a date range."""

    date_range: DateRange
    account_id: str
    total_impressions: int = 0
    total_engagements: int = 0
    total_spend: float = 0.0
    average_cpe: float = 0.0
    campaigns: list[CampaignSummary] = Field(default_factory=list)
    metrics_error: str | None = None


def metric_total(value: Any) -> float:
    """Sum a metric value.

    The stats endpoint returns each metric as a series (one value per
    granularity bucket) or ``null``; scalars are accepted as well.
    """
    if value is None:
        return 0
    if isinstance(value, (list, tuple)):
        return sum(metric_total(item) for item in value)
    if isinstance(value, str):
        return float(value) if value.strip() else 0
    return value


def first_metrics(stats: Any) -> dict[str, Any]:
    """Return ``data[0].id_data[0].metrics`` of a stats response, or ``{}``."""
    try:
        metrics = stats["data"][0]["id_data"][0]["metrics"]
    except (KeyError, IndexError, TypeError):
        return {}
    return metrics or {}


def metrics_by_id(stats: Any) -> dict[str, dict[str, Any]]:
    """Index every ``id_data`` entry of a stats response by entity id."""
    indexed: dict[str, dict[str, Any]] = {}
    for item in (stats or {}).get("data") or []:
        for entry in item.get("id_data") or []:
            entity_id = entry.get("id", item.get("id"))
            if entity_id is not None:
                indexed[str(entity_id)] = entry.get("metrics") or {}
    return indexed


def attach_recent_metrics(client: TwitterAdsClient, entity: EntityType, response: Any) -> Any:
    """Add the last 30 days of metrics to every entity in a list response.

    Each entity gets a ``metrics`` field. A failed lookup is recorded as
    ``{"error": ...}`` on that entity and does not fail the listing.
    """
    items = response.get("data") if isinstance(response, dict) else None
    if not items:
        return response

    start, end = trailing_window(RECENT_METRICS_DAYS)
    for item in items:
        try:
            stats = client.stats.fetch(
                entity,
                item["id"],
                start,
                end,
                granularity=Granularity.TOTAL,
                metric_groups=RECENT_METRIC_GROUPS,
            )
            item["metrics"] = first_metrics(stats)
        except TwitterAdsError as e:
            logger.warning("Unable to retrieve metrics for %s %s: %s", entity.value, item.get("id"), e.message)
            item["metrics"] = {"error": "Unable to retrieve metrics"}
    return response


def summarize_campaign(campaign: dict[str, Any], metrics: dict[str, Any]) -> CampaignSummary:
    impressions = int(metric_total(metrics.get("impressions")))
    engagements = int(metric_total(metrics.get("engagements")))
    spend = from_micros(metric_total(metrics.get("billed_charge_local_micro")))
    return CampaignSummary(
        id=str(campaign["id"]),
        name=campaign.get("name"),
        status=campaign.get("entity_status"),
        objective=campaign.get("objective"),
        impressions=impressions,
        engagements=engagements,
        spend=spend,
        cpe=spend / engagements if engagements > 0 else 0,
    )


def build_report(client: TwitterAdsClient, start: str, end: str) -> ReportSummary:
    """Aggregate campaign metrics for the account over a date range.

    Raises:
        TwitterAdsError: If the campaigns cannot be listed.
    """
    campaigns = client.campaigns.list().get("data") or []
    summary = ReportSummary(date_range=DateRange(start=start, end=end), account_id=client.account_id)
    if not campaigns:
        return summary

    try:
        stats = client.stats.fetch(
            EntityType.CAMPAIGN,
            [str(c["id"]) for c in campaigns],
            start,
            end,
            granularity=Granularity.DAY,
            metric_groups=REPORT_METRIC_GROUPS,
        )
    except TwitterAdsError as e:
        logger.warning("Unable to retrieve detailed metrics: %s", e.message)
        summary.metrics_error = "Unable to retrieve detailed metrics"
        return summary

    by_id = metrics_by_id(stats)
    for campaign in campaigns:
        row = summarize_campaign(campaign, by_id.get(str(campaign["id"]), {}))
        summary.campaigns.append(row)
        summary.total_impressions += row.impressions
        summary.total_engagements += row.engagements
        summary.total_spend += row.spend

    if summary.total_engagements > 0:
        summary.average_cpe = summary.total_spend / summary.total_engagements
    return summary


def metrics(
    ctx: typer.Context,
    entity_type: Annotated[str, typer.Argument(help="Entity type, e.g. CAMPAIGN or LINE_ITEM")],
    entity_ids: Annotated[str, typer.Argument(help="Comma-separated entity IDs")],
    start_date: Annotated[str, typer.Argument(help="Start date (YYYY-MM-DD)")],
    end_date: Annotated[str, typer.Argument(help="End date (YYYY-MM-DD)")],
) -> None:
    """Fetch daily engagement, billing and video metrics.

    Examples:
        twads metrics CAMPAIGN abc123,def456 2024-01-01 2024-01-31
    """
    client = get_client(ctx)

    try:
        with client:
            result = client.stats.fetch(
                entity_type,
                entity_ids,
                start_date,
                end_date,
                granularity=Granularity.DAY,
                metric_groups=REPORT_METRIC_GROUPS,
            )
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def report(
    ctx: typer.Context,
    start_date: Annotated[str, typer.Argument(help="Start date (YYYY-MM-DD)")],
    end_date: Annotated[str, typer.Argument(help="End date (YYYY-MM-DD)")],
) -> None:
    """Summarize impressions, engagements, spend and cost per engagement.

    Examples:
        twads report 2024-01-01 2024-01-31
    """
    client = get_client(ctx)

    try:
        with client:
            summary = build_report(client, start_date, end_date)
        print_json(summary)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None
