"""Targeting and audience CLI commands."""

from typing import Annotated

import typer

from twitter_ads_api.exceptions import TwitterAdsError
from twitter_ads_api.models import TailoredAudienceCreate, TargetingType
from twitter_ads_cli.utils import get_client, handle_api_error, print_json


def targeting_options(
    ctx: typer.Context,
    targeting_type: Annotated[
        TargetingType,
        typer.Argument(help="Kind of targeting criteria", case_sensitive=False),
    ],
) -> None:
    """Browse available targeting criteria.

    Examples:
        twads targeting-options interests
        twads targeting-options locations
    """
    client = get_client(ctx)

    try:
        with client:
            result = client.targeting.options(targeting_type)
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def create_audience(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Audience name")],
    audience_type: Annotated[str, typer.Argument(help="Audience type, e.g. WEB or HANDLE")],
    description: Annotated[str | None, typer.Argument(help="Audience description")] = None,
) -> None:
    """Create a tailored audience.

    Examples:
        twads audience-create "Site visitors" web
        twads audience-create "Newsletter" email "Subscribers from the newsletter"
    """
    client = get_client(ctx)

    try:
        with client:
            data = TailoredAudienceCreate(
                name=name,
                audience_type=audience_type.upper(),
                description=description or None,
            )
            result = client.tailored_audiences.create(data)
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None
