"""Campaign CLI commands."""

import logging
from typing import Annotated, Any

import typer

from twitter_ads_api import TwitterAdsClient
from twitter_ads_api.exceptions import TwitterAdsError
from twitter_ads_api.models import CampaignCreate, EntityStatus, EntityType
from twitter_ads_cli.reports import attach_recent_metrics
from twitter_ads_cli.utils import (
    get_client,
    handle_api_error,
    iso_timestamp,
    parse_assignments,
    parse_micros,
    print_json,
    utc_now,
)

logger = logging.getLogger(__name__)


def first_funding_instrument_id(client: TwitterAdsClient) -> str | None:
    """Return the id of the account's first funding instrument, if any.

    A failed lookup is logged and treated as "no instrument".
    """
    try:
        instruments = client.accounts.funding_instruments().get("data") or []
    except TwitterAdsError as e:
        logger.warning("Unable to look up funding instruments: %s", e.message)
        return None
    return str(instruments[0]["id"]) if instruments else None


def update_campaign(ctx: typer.Context, campaign_id: str, updates: dict[str, Any]) -> None:
    """Send ``updates`` for one campaign and print the response."""
    client = get_client(ctx)

    try:
        with client:
            result = client.campaigns.update(campaign_id, updates)
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def list_campaigns(ctx: typer.Context) -> None:
    """List campaigns with their metrics for the last 30 days.

    Examples:
        twads campaigns-list
    """
    client = get_client(ctx)

    try:
        with client:
            campaigns = client.campaigns.list()
            attach_recent_metrics(client, EntityType.CAMPAIGN, campaigns)
        print_json(campaigns)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def create_campaign(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Campaign name")],
    objective: Annotated[str, typer.Argument(help="Objective, e.g. ENGAGEMENTS or WEBSITE_CLICKS")],
    budget: Annotated[str, typer.Argument(help="Total budget in account currency")],
    start_date: Annotated[str | None, typer.Argument(help="Start time (ISO 8601), defaults to now")] = None,
    end_date: Annotated[str | None, typer.Argument(help="End time (ISO 8601)")] = None,
) -> None:
    """Create a paused campaign.

    The account's first funding instrument is used when one can be found.

    Examples:
        twads campaign-create "Spring Sale" ENGAGEMENTS 500
        twads campaign-create "Spring Sale" engagements 500 2024-03-01 2024-03-31
    """
    budget_micros = parse_micros(budget, "BUDGET")
    client = get_client(ctx)

    try:
        with client:
            data = CampaignCreate(
                name=name,
                objective=objective.upper(),
                total_budget_amount_local_micro=budget_micros,
                start_time=start_date or iso_timestamp(utc_now()),
                end_time=end_date,
                funding_instrument_id=first_funding_instrument_id(client),
                entity_status=EntityStatus.PAUSED,
            )
            result = client.campaigns.create(data)
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def update_campaign_fields(
    ctx: typer.Context,
    campaign_id: Annotated[str, typer.Argument(help="Campaign ID")],
    updates: Annotated[list[str], typer.Argument(help="Fields to change as field:value")],
) -> None:
    """Update campaign fields.

    Examples:
        twads campaign-update abc123 name:"New name"
        twads campaign-update abc123 entity_status:PAUSED end_time:2024-12-31T00:00:00Z
    """
    update_campaign(ctx, campaign_id, parse_assignments(updates))


def pause_campaign(
    ctx: typer.Context,
    campaign_id: Annotated[str, typer.Argument(help="Campaign ID to pause")],
) -> None:
    """Pause a campaign.

    Examples:
        twads campaign-pause abc123
    """
    update_campaign(ctx, campaign_id, {"entity_status": EntityStatus.PAUSED.value})


def enable_campaign(
    ctx: typer.Context,
    campaign_id: Annotated[str, typer.Argument(help="Campaign ID to enable")],
) -> None:
    """Enable a paused campaign.

    Examples:
        twads campaign-enable abc123
    """
    update_campaign(ctx, campaign_id, {"entity_status": EntityStatus.ACTIVE.value})


def set_budget(
    ctx: typer.Context,
    campaign_id: Annotated[str, typer.Argument(help="Campaign ID")],
    budget: Annotated[str, typer.Argument(help="New total budget in account currency")],
) -> None:
    """Update a campaign's total budget.

    Examples:
        twads budget-update abc123 1000
    """
    update_campaign(ctx, campaign_id, {"total_budget_amount_local_micro": parse_micros(budget, "BUDGET")})
