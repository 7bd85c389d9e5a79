"""Shared utilities for CLI commands."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from twitter_ads_api import TwitterAdsClient
from twitter_ads_api.exceptions import ConfigurationError, TwitterAdsError
from twitter_ads_api.models import to_micros

# Custom theme for consistent styling
TWADS_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "muted": "dim",
    }
)

console = Console(theme=TWADS_THEME)
error_console = Console(stderr=True, theme=TWADS_THEME)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CLIState:
    """Options given before the subcommand."""

    env_file: Path | None = None
    verbose: bool = False


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO; keep it out of normal output
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_client(ctx: typer.Context) -> TwitterAdsClient:
    """Get an authenticated client from environment variables.

    Returns:
        A TwitterAdsClient for the configured ads account.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    state = ctx.obj if isinstance(ctx.obj, CLIState) else CLIState()
    env_file = state.env_file if state.env_file and state.env_file.exists() else None
    try:
        return TwitterAdsClient.from_env(env_file=env_file)
    except ConfigurationError as e:
        print_error(e.message)
        raise typer.Exit(1) from None


def handle_api_error(e: TwitterAdsError) -> None:
    """Report a failed primary request.

    Args:
        e: The exception to handle.
    """
    if e.status_code:
        logger.debug("Request failed with status %s: %s", e.status_code, e.response_body)
    print_error(e.message)


def soft_call(fetch: Callable[[], T], placeholder: str) -> T | dict[str, str]:
    """Run a secondary lookup, replacing a failure with an inline error.

    Args:
        fetch: The request to run.
        placeholder: Message stored under ``error`` when it fails.

    Returns:
        The lookup result, or ``{"error": placeholder}``.
    """
    try:
        return fetch()
    except TwitterAdsError as e:
        logger.warning("%s: %s", placeholder, e.message)
        return {"error": placeholder}


# ============================================================================
# JSON Output
# ============================================================================


def to_jsonable(data: Any) -> Any:
    """Turn pydantic models (or lists of them) into plain data."""
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json", exclude_none=True)
    if isinstance(data, list) and data and hasattr(data[0], "model_dump"):
        return [item.model_dump(mode="json", exclude_none=True) for item in data]
    return data


def print_json(data: Any) -> None:
    """Print a command result as JSON with two-space indentation.

    Args:
        data: Data to print as JSON.
    """
    console.print_json(json.dumps(to_jsonable(data), indent=2, default=str), indent=2)


def print_error(message: str) -> None:
    """Print ``{"error": message}`` as JSON on stderr.

    Args:
        message: The error message.
    """
    error_console.print_json(json.dumps({"error": message}), indent=2)


# ============================================================================
# Argument Helpers
# ============================================================================


def parse_micros(value: str, param_hint: str) -> int:
    """Parse a currency amount argument into local micros.

    Raises:
        typer.BadParameter: If the amount is not a number.
    """
    try:
        return to_micros(value)
    except ValueError:
        raise typer.BadParameter(
            f"Invalid amount: '{value}'. Use a number such as 500 or 12.50.",
            param_hint=param_hint,
        ) from None


def parse_assignments(values: list[str]) -> dict[str, str]:
    """Parse ``field:value`` arguments into a mapping.

    Only the first ``:`` separates field from value, so values may contain
    colons (e.g. timestamps).

    Raises:
        typer.BadParameter: If an argument has no ``:`` or an empty field.
    """
    updates: dict[str, str] = {}
    for item in values:
        field, sep, value = item.partition(":")
        if not sep or not field:
            raise typer.BadParameter(f"Expected field:value, got '{item}'", param_hint="UPDATES")
        updates[field] = value
    return updates


def parse_json_object(value: str | None, param_hint: str) -> dict[str, Any]:
    """Parse an optional JSON object argument.

    Raises:
        typer.BadParameter: If the value is not valid JSON or not an object.
    """
    if not value:
        return {}
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Invalid JSON: {e.msg}", param_hint=param_hint) from None
    if not isinstance(parsed, dict):
        raise typer.BadParameter("Expected a JSON object", param_hint=param_hint)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format a UTC datetime like ``2024-01-31T12:00:00.000Z``."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def trailing_window(days: int, today: datetime | None = None) -> tuple[str, str]:
    """Return ``(start, end)`` dates covering the last ``days`` days.

    Args:
        days: Window length.
        today: Reference time; defaults to now (UTC).
    """
    now = today or utc_now()
    return (now - timedelta(days=days)).date().isoformat(), now.date().isoformat()
