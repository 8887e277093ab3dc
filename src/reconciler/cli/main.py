#!/usr/bin/env python3
"""
Main CLI Entry Point for the Reconciler

Command-line interface for matching ledger transactions to retailer orders and
annotating their memos.
"""

import logging
import os
from pathlib import Path

import click

from ..amazon.loader import load_orders as load_amazon_orders
from ..amazon.loader import load_refunds
from ..amazon.models import AmazonOrder
from ..core.config import get_config, reload_config
from ..core.dates import FinancialDate
from ..core.errors import ReconcilerError
from ..core.json_utils import write_json
from ..matching.matcher import TransactionMatcher
from ..matching.models import ConfidenceThresholds
from ..processing.processor import TransactionProcessor
from ..processing.runner import ReconciliationRunner
from ..processing.tracker import JsonDedupTracker
from ..walmart.loader import load_orders as load_walmart_orders
from ..ynab.loader import load_transactions
from ..ynab.updater import EditFileUpdater


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Reconciler - match ledger transactions to Amazon and Walmart orders.

    Confident matches get the order id and a product summary appended to the
    transaction memo.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["RECONCILER_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger("reconciler").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = reload_config() if config_env or debug else get_config()

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")
        click.echo(f"Data directory: {ctx.obj['config'].data_dir}")


@main.command()
def version() -> None:
    """Show version information."""
    from reconciler import __version__

    click.echo(f"Reconciler v{__version__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Cache Directory: {config_obj.cache_dir}")
    click.echo(f"  Output Directory: {config_obj.output_dir}")
    click.echo(f"  YNAB Cache: {config_obj.ynab.cache_dir}")
    click.echo(f"  YNAB Edits: {config_obj.ynab.edits_dir}")
    click.echo(f"  Tracker File: {config_obj.tracker_file}")
    click.echo(f"  Amount Tolerance: {config_obj.matching.amount_tolerance_ratio:.0%}")
    click.echo(f"  Date Window: {config_obj.matching.date_window_days} days")
    click.echo(
        f"  Confidence: high >= {config_obj.processing.high_confidence}, "
        f"medium >= {config_obj.processing.medium_confidence}"
    )
    click.echo(f"  Dry Run: {config_obj.processing.dry_run}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


@main.command()
@click.option("--dry-run", is_flag=True, help="Compute matches and statistics without writing any edits")
@click.option("--since", help="Only consider transactions on or after this date (YYYY-MM-DD)")
@click.option("--amazon-csv", type=click.Path(path_type=Path), help="Amazon order history CSV or export directory")
@click.option("--amazon-refunds", type=click.Path(path_type=Path), help="Amazon refunds JSON file")
@click.option("--walmart-orders", type=click.Path(path_type=Path), help="Walmart orders JSON file")
@click.option("--ynab-cache", type=click.Path(path_type=Path), help="Override YNAB cache directory")
@click.option("--tracker-file", type=click.Path(path_type=Path), help="Override processed transactions file")
@click.option("--output", type=click.Path(path_type=Path), help="Write match results JSON to this file")
@click.pass_context
def run(
    ctx: click.Context,
    dry_run: bool,
    since: str | None,
    amazon_csv: Path | None,
    amazon_refunds: Path | None,
    walmart_orders: Path | None,
    ynab_cache: Path | None,
    tracker_file: Path | None,
    output: Path | None,
) -> None:
    """
    Match transactions to orders and annotate confident matches.

    Examples:
      reconciler run --amazon-csv data/amazon/orders.csv --dry-run
      reconciler run --walmart-orders data/walmart/orders.json --since 2024-01-01
    """
    config_obj = ctx.obj["config"]
    dry_run = dry_run or config_obj.processing.dry_run

    if not (amazon_csv or amazon_refunds or walmart_orders):
        raise click.UsageError("Provide at least one of --amazon-csv, --amazon-refunds or --walmart-orders")

    try:
        since_date = FinancialDate.from_string(since) if since else None
    except ValueError as e:
        raise click.BadParameter(f"Invalid date '{since}', expected YYYY-MM-DD", param_hint="--since") from e

    try:
        transactions = load_transactions(ynab_cache or config_obj.ynab.cache_dir, since=since_date)

        amazon_orders: list[AmazonOrder] = []
        if amazon_csv:
            amazon_orders.extend(load_amazon_orders(amazon_csv))
        if amazon_refunds:
            amazon_orders.extend(load_refunds(amazon_refunds))
        walmart = load_walmart_orders(walmart_orders) if walmart_orders else []

        tracker = JsonDedupTracker(tracker_file or config_obj.tracker_file)
        updater = None if dry_run else EditFileUpdater(config_obj.ynab.edits_dir)
        processor = TransactionProcessor(
            tracker,
            updater,
            thresholds=ConfidenceThresholds.from_config(config_obj.processing),
            dry_run=dry_run,
        )
        runner = ReconciliationRunner(TransactionMatcher(config_obj.matching), processor)
        report = runner.run(transactions, amazon_orders=amazon_orders, walmart_orders=walmart)
    except (FileNotFoundError, ValueError, ReconcilerError) as e:
        raise click.ClickException(str(e)) from e

    if ctx.obj.get("verbose"):
        click.echo(f"Transactions: {len(transactions)}")
        click.echo(f"Amazon orders: {len(amazon_orders)}")
        click.echo(f"Walmart orders: {len(walmart)}")
        click.echo()

    click.echo(f"Reconciliation Summary{' (dry run)' if dry_run else ''}")
    click.echo(f"  Matches found: {len(report.matches)}")
    for key, value in report.result.stats.to_dict().items():
        click.echo(f"  {key.replace('_', ' ').capitalize()}: {value}")

    if updater is not None and updater.edits:
        click.echo(f"Edits written to: {updater.output_file}")

    if output:
        write_json(output, report.to_dict())
        click.echo(f"Match results written to: {output}")


if __name__ == "__main__":
    main()
