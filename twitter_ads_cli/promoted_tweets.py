"""Promoted tweet CLI commands."""

from typing import Annotated

import typer

from twitter_ads_api.exceptions import TwitterAdsError
from twitter_ads_api.models import PromotedTweetCreate
from twitter_ads_cli.utils import get_client, handle_api_error, print_json


def list_promoted_tweets(
    ctx: typer.Context,
    line_item_id: Annotated[str | None, typer.Argument(help="Only show tweets of this line item")] = None,
) -> None:
    """List promoted tweets.

    Examples:
        twads promoted-tweets-list
        twads promoted-tweets-list li123
    """
    client = get_client(ctx)

    try:
        with client:
            result = client.promoted_tweets.list(line_item_id)
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def promote_tweet(
    ctx: typer.Context,
    line_item_id: Annotated[str, typer.Argument(help="Line item ID")],
    tweet_id: Annotated[str, typer.Argument(help="Tweet ID to promote")],
) -> None:
    """Promote a tweet under a line item.

    Examples:
        twads promote-tweet li123 1234567890
    """
    client = get_client(ctx)

    try:
        with client:
            result = client.promoted_tweets.create(PromotedTweetCreate(line_item_id=line_item_id, tweet_id=tweet_id))
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None
