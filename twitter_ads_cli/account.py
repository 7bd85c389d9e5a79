"""Account and billing CLI commands."""

import typer

from twitter_ads_api.exceptions import TwitterAdsError
from twitter_ads_cli.utils import get_client, handle_api_error, print_json, soft_call


def account_info(ctx: typer.Context) -> None:
    """Show the ads account with its funding instruments.

    Funding information is best effort: if it cannot be retrieved the
    account is still shown, with an error under ``funding``.

    Examples:
        twads account-info
    """
    client = get_client(ctx)

    try:
        with client:
            result = client.accounts.get()
            result["funding"] = soft_call(
                client.accounts.funding_instruments,
                "Unable to retrieve funding information",
            )
        print_json(result)

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None


def funding(ctx: typer.Context) -> None:
    """Show funding instruments and billing access.

    Examples:
        twads funding
    """
    client = get_client(ctx)

    try:
        with client:
            instruments = client.accounts.funding_instruments()
            billing = soft_call(
                client.accounts.authenticated_user_access,
                "Unable to retrieve billing information",
            )
        print_json({"funding_instruments": instruments, "billing_info": billing})

    except TwitterAdsError as e:
        handle_api_error(e)
        raise typer.Exit(1) from None
