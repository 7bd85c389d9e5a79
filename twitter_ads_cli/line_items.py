"""Line item CLI commands."""

from typing import Annotated

import typer

from twitter_ads_api.exceptions import TwitterAdsError
from twitter_ads_api.models import EntityStatus, EntityType, LineItemCreate
from twitter_ads_cli.reports import attach_recent_metrics
from twitter_ads_cli.utils import (
    get_client,
    handle_api_error,
    parse_json_object,
    parse_micros,
    print_json,
)


def list_line_items(
    ctx: typer.Context,
    campaign_id: Annotated[str, typer.Argument(help="Campaign ID")],
) -> None:
    """List a campaign's line items with their metrics for the last 30 days.

    Examples:
        twads line-items-list abc123
    """
    client = get_client(ctx)

    try:
        with client:
            line_items = client.line_items.list(campaign_id)
            attach_recent_metrics(client, EntityType.LINE_ITEM, line_items)
        print_json(line_items)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def create_line_item(
    ctx: typer.Context,
    campaign_id: Annotated[str, typer.Argument(help="Campaign ID")],
    name: Annotated[str, typer.Argument(help="Line item name")],
    bid_amount: Annotated[str, typer.Argument(help="Bid amount in account currency")],
    placement: Annotated[str, typer.Argument(help="Placement, e.g. ALL_ON_TWITTER")],
    targeting: Annotated[
        str | None,
        typer.Argument(help="Extra fields as a JSON object, merged into the request"),
    ] = None,
) -> None:
    """Create a paused promoted-tweets line item.

    Examples:
        twads line-item-create abc123 "Launch" 1.50 ALL_ON_TWITTER
        twads line-item-create abc123 "Launch" 2 twitter_timeline '{"bid_type": "MAX"}'
    """
    bid_micros = parse_micros(bid_amount, "BID_AMOUNT")
    extra_fields = parse_json_object(targeting, "TARGETING")
    client = get_client(ctx)

    try:
        with client:
            data = LineItemCreate(
                campaign_id=campaign_id,
                name=name,
                bid_amount_local_micro=bid_micros,
                placements=[placement.upper()],
                entity_status=EntityStatus.PAUSED,
                targeting=extra_fields,
            )
            result = client.line_items.create(data)
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None
