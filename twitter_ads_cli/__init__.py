"""Command-line interface for Twitter Ads.

This module provides a CLI for interacting with the Twitter Ads API.

Usage:
    twads --help
    twads campaigns-list
    twads report 2024-01-01 2024-01-31
"""

from twitter_ads_cli.main import app, run

__all__ = ["app", "run"]

__version__ = "0.1.0"
