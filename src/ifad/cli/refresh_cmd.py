"""Refresh commands: download the annotation source and re-ingest it.

- refresh: run one fetch + ingest cycle and report the result
- watch:   load once, then refresh on the configured schedule
"""

import logging
import sys
from datetime import timedelta

import click

from ifad.config.loader import load_config, load_config_with_overrides
from ifad.queries import segment_counts
from ifad.refresh import DatasetStore, SourceFetcher

logger = logging.getLogger(__name__)


def _build_store(config) -> DatasetStore:
    return DatasetStore(
        fetch_source=SourceFetcher.from_config(config),
        evidence_codes=config.evidence_codes,
    )


@click.command('refresh')
@click.pass_context
def refresh(ctx):
    """Download the annotation source once and ingest it.

    Fails with a non-zero exit code if the download or parse fails.
    """
    config_path = ctx.obj['config_path']
    click.echo(click.style("=== IFAD Refresh ===", bold=True))
    click.echo()

    try:
        config = load_config(config_path)
        click.echo(f"Source: {config.source.annotations_url}")

        store = _build_store(config)
        snapshot = store.load()
    except Exception as e:
        click.echo(click.style(f"Refresh failed: {e}", fg='red'), err=True)
        logger.exception("Refresh command failed")
        sys.exit(1)

    summary = segment_counts(snapshot)
    click.echo(click.style("  Dataset loaded", fg='green'))
    click.echo(f"  Genes: {summary['total_genes']}")
    click.echo(f"  Annotations: {len(snapshot.annotations.records)}")
    for aspect in ("F", "P", "C"):
        click.echo(f"  {aspect}: {summary[aspect]['all']} annotated, "
                   f"{summary[aspect]['unannotated']} unannotated")


@click.command('watch')
@click.option(
    '--interval',
    type=int,
    default=None,
    help='Override refresh interval in seconds'
)
@click.option(
    '--lifetime',
    type=int,
    default=None,
    help='Override lifetime in seconds (stop refreshing afterwards)'
)
@click.option(
    '--no-align',
    is_flag=True,
    help='Start refreshing immediately instead of at the next midnight'
)
@click.pass_context
def watch(ctx, interval, lifetime, no_align):
    """Load the dataset, then keep refreshing it periodically.

    The initial load must succeed. Later refresh failures are logged and
    the previously loaded dataset stays in use.
    """
    config_path = ctx.obj['config_path']

    overrides = {}
    if interval is not None:
        overrides["refresh.interval_seconds"] = interval
    if lifetime is not None:
        overrides["refresh.lifetime_seconds"] = lifetime
    if no_align:
        overrides["refresh.align_to_midnight"] = False

    try:
        config = load_config_with_overrides(config_path, overrides)
    except Exception as e:
        click.echo(click.style(f"Invalid configuration: {e}", fg='red'), err=True)
        sys.exit(1)

    try:
        store = _build_store(config)
        store.load()
    except Exception as e:
        click.echo(click.style(f"Initial load failed: {e}", fg='red'), err=True)
        logger.exception("Initial dataset load failed")
        sys.exit(1)

    schedule = config.refresh
    caller = store.start_periodic_refresh(
        interval=timedelta(seconds=schedule.interval_seconds),
        lifetime=(
            timedelta(seconds=schedule.lifetime_seconds)
            if schedule.lifetime_seconds else None
        ),
        align_to_midnight=schedule.align_to_midnight,
    )
    click.echo(click.style(
        f"Refreshing every {schedule.interval_seconds}s"
        + (" starting at midnight" if schedule.align_to_midnight else ""),
        fg='green'
    ))

    try:
        while caller.is_alive():
            caller.join(timeout=1.0)
    except KeyboardInterrupt:
        click.echo("Stopping refresh schedule")
        caller.stop()

    click.echo(f"Refresh schedule ended ({caller.state.value}, {caller.call_count} cycles)")
