"""Main CLI entry point for ifad.

Provides command group with global options and subcommands for loading,
querying and refreshing the annotation dataset.
"""

import logging
from pathlib import Path

import click

from ifad import __version__
from ifad.config.loader import load_config
from ifad.cli.query_cmd import counts, query
from ifad.cli.refresh_cmd import refresh, watch


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """IFAD: faceted queries over GO gene annotations.

    Ingests a gene catalog and a GAF annotation file, classifies every gene
    per aspect (known-experimental, known-other, unknown, unannotated), and
    answers union/intersection queries over those segments.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display version and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"IFAD v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        config_hash = config.config_hash()
        click.echo(f"Config Hash: {config_hash[:16]}...")
        click.echo()

        click.echo(click.style("Sources:", bold=True))
        click.echo(f"  Gene Catalog:     {config.source.genes_path}")
        click.echo(f"  Annotations File: {config.annotations_file}")
        click.echo(f"  Annotations URL:  {config.source.annotations_url}")
        click.echo()

        click.echo(click.style("Refresh Schedule:", bold=True))
        click.echo(f"  Interval: {config.refresh.interval_seconds}s")
        click.echo(f"  Align To Midnight: {config.refresh.align_to_midnight}")
        lifetime = config.refresh.lifetime_seconds
        click.echo(f"  Lifetime: {f'{lifetime}s' if lifetime else 'unlimited'}")
        click.echo()

        click.echo(click.style("Evidence Codes:", bold=True))
        click.echo(f"  Experimental: {', '.join(config.evidence_codes.known_experimental)}")
        click.echo(f"  Unknown:      {', '.join(config.evidence_codes.unknown)}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


# Register commands
cli.add_command(query)
cli.add_command(counts)
cli.add_command(refresh)
cli.add_command(watch)


if __name__ == '__main__':
    cli()
