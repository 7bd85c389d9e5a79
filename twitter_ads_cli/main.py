"""Main CLI application."""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from twitter_ads_cli import account, campaigns, line_items, promoted_tweets, reports, targeting
from twitter_ads_cli.utils import CLIState, configure_logging, console, print_error

app = typer.Typer(
    name="twads",
    help="Twitter Ads API CLI - Manage campaigns, line items, promoted tweets, audiences and reports.",
    rich_markup_mode="rich",
)

# Register commands
app.command("account-info")(account.account_info)
app.command("campaigns-list")(campaigns.list_campaigns)
app.command("campaign-create")(campaigns.create_campaign)
app.command("campaign-update")(campaigns.update_campaign_fields)
app.command("campaign-pause")(campaigns.pause_campaign)
app.command("campaign-enable")(campaigns.enable_campaign)
app.command("line-items-list")(line_items.list_line_items)
app.command("line-item-create")(line_items.create_line_item)
app.command("promoted-tweets-list")(promoted_tweets.list_promoted_tweets)
app.command("promote-tweet")(promoted_tweets.promote_tweet)
app.command("targeting-options")(targeting.targeting_options)
app.command("audience-create")(targeting.create_audience)
app.command("metrics")(reports.metrics)
app.command("budget-update")(campaigns.set_budget)
app.command("report")(reports.report)
app.command("funding")(account.funding)

COMMANDS = [command.name for command in app.registered_commands]

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from twitter_ads_api import __version__ as api_version

        from twitter_ads_cli import __version__ as cli_version

        console.print(f"twitter-ads-cli {cli_version} (twitter-ads-api {api_version})")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Log requests and responses to stderr"),
    ] = False,
    env_file: Annotated[
        Path | None,
        typer.Option("--env-file", "-e", help="Path to .env file (read if it exists)"),
    ] = Path(".env"),
) -> None:
    """Twitter Ads API CLI.

    Every command prints its result as JSON. Errors are printed as
    JSON on stderr and exit with status 1.

    Set up authentication using environment variables:

        export TWITTER_API_KEY="your-consumer-key"
        export TWITTER_API_SECRET="your-consumer-secret"
        export TWITTER_ACCESS_TOKEN="your-access-token"
        export TWITTER_ACCESS_SECRET="your-access-token-secret"
        export TWITTER_ADS_ACCOUNT_ID="18ce54d4x5t"
    """
    configure_logging(verbose)
    ctx.obj = CLIState(env_file=env_file, verbose=verbose)

    if ctx.invoked_subcommand is None:
        print_error(f"No command specified. Available commands: {', '.join(COMMANDS)}")
        raise typer.Exit(1)


def error_message(e: Exception) -> str:
    """Return the text to report for an exception that ended a command.

    Usage errors carry their own formatting (``format_message``); anything
    else is reported by its string form.
    """
    format_message = getattr(e, "format_message", None)
    if callable(format_message):
        return str(format_message())
    return str(e) or type(e).__name__


def run(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status.

    Usage errors and unexpected failures are reported as JSON on stderr
    like every other error.

    Args:
        argv: Arguments without the program name; defaults to ``sys.argv[1:]``.

    Returns:
        The exit status: 0 on success, 1 on any error.
    """
    try:
        rv = app(args=argv, prog_name="twads", standalone_mode=False)
    except typer.Abort:
        print_error("Aborted")
        return 1
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print_error(error_message(e))
        return 1
    return rv if isinstance(rv, int) else 0


def cli() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    cli()
