from twitter_ads_cli.main import cli

cli()
