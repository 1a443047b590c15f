"""Query commands: select genes and annotations by segment.

Segments are given as ASPECT,STATUS tokens, e.g. "C,EXP" or "P,UNANNOTATED",
where ASPECT is F, P or C and STATUS is EXP, OTHER, UNKNOWN or UNANNOTATED.
Tokens are validated here; the query engine only ever sees valid values.
"""

import json
import logging
import sys
from pathlib import Path

import click

from ifad.config.loader import load_config
from ifad.ingest import Aspect, AnnotationStatus, ParseError, Snapshot, ingest_data
from ifad.queries import (
    GeneProductTypeFilter,
    Query,
    QueryGetAll,
    QueryWith,
    Segment,
    Strategy,
    query_dataset,
    segment_counts_frame,
)

logger = logging.getLogger(__name__)

STATUS_TOKENS = {
    "EXP": AnnotationStatus.KNOWN_EXP,
    "OTHER": AnnotationStatus.KNOWN_OTHER,
    "UNKNOWN": AnnotationStatus.UNKNOWN,
    "UNANNOTATED": AnnotationStatus.UNANNOTATED,
}


def parse_segment_token(token: str) -> Segment:
    """Parse an "ASPECT,STATUS" token into a Segment.

    Raises:
        click.BadParameter: If the token is malformed
    """
    parts = token.split(",")
    if len(parts) != 2:
        raise click.BadParameter(
            f"'{token}': each segment must have exactly two parts, an Aspect "
            "and an Annotation Status, separated by a comma"
        )

    aspect, status = parts
    if aspect not in {a.value for a in Aspect}:
        raise click.BadParameter(
            f"'{token}': the Aspect given in a segment must be exactly 'P', 'C', or 'F'"
        )
    if status not in STATUS_TOKENS:
        raise click.BadParameter(
            f"'{token}': the Annotation Status given in a segment must be exactly "
            "'EXP', 'OTHER', 'UNKNOWN', or 'UNANNOTATED'"
        )

    return Segment(aspect=Aspect(aspect), annotation_status=STATUS_TOKENS[status])


def _parse_segments(ctx, param, value):
    return tuple(parse_segment_token(token) for token in value)


def _load_snapshot(ctx, genes_path: Path | None, annotations_path: Path | None) -> Snapshot:
    """Ingest the given files, falling back to the configured sources."""
    config = load_config(ctx.obj['config_path'])
    genes_path = genes_path or config.source.genes_path
    annotations_path = annotations_path or config.annotations_file

    logger.info(f"Ingesting {genes_path} and {annotations_path}")
    return ingest_data(
        Path(genes_path).read_text(),
        Path(annotations_path).read_text(),
        config.evidence_codes,
    )


source_options = [
    click.option(
        '--genes',
        'genes_path',
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help='Gene catalog file (default: source.genes_path from config)'
    ),
    click.option(
        '--annotations',
        'annotations_path',
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help='GAF annotation file (default: source.annotations_path under data_dir)'
    ),
]


def with_source_options(fn):
    for option in reversed(source_options):
        fn = option(fn)
    return fn


@click.command('query')
@with_source_options
@click.option(
    '--segment',
    'segments',
    multiple=True,
    callback=_parse_segments,
    help='Segment as ASPECT,STATUS (repeatable). No segments selects everything.'
)
@click.option(
    '--strategy',
    type=click.Choice([s.value for s in Strategy]),
    default=Strategy.UNION.value,
    show_default=True,
    help='Combine segments by union or intersection'
)
@click.option(
    '--filter',
    'product_filter',
    type=click.Choice([f.value for f in GeneProductTypeFilter]),
    default=GeneProductTypeFilter.ALL.value,
    show_default=True,
    help='Gene product type filter'
)
@click.option(
    '--show-genes',
    is_flag=True,
    help='Include the selected gene ids in the output'
)
@click.pass_context
def query(ctx, genes_path, annotations_path, segments, strategy, product_filter, show_genes):
    """Select genes and annotations by segment and print a JSON summary.

    Examples:

        # Genes with experimental cellular-component evidence
        ifad query --segment C,EXP

        # Genes annotated with predictive evidence in both C and P
        ifad query --segment C,OTHER --segment P,OTHER --strategy intersection
    """
    try:
        snapshot = _load_snapshot(ctx, genes_path, annotations_path)
    except (OSError, ParseError) as e:
        click.echo(click.style(f"Failed to load dataset: {e}", fg='red'), err=True)
        logger.exception("Dataset load failed")
        sys.exit(1)

    if segments:
        option = QueryWith(strategy=Strategy(strategy), segments=segments)
    else:
        option = QueryGetAll()

    result = query_dataset(
        snapshot,
        Query(option=option, filter=GeneProductTypeFilter(product_filter)),
    )

    summary = {
        "filter": product_filter,
        "gene_count": len(result.genes.records),
        "annotation_count": len(result.annotations.records),
    }
    if segments:
        summary["strategy"] = strategy
        summary["segments"] = [
            f"{s.aspect.value}-{s.annotation_status.value}" for s in segments
        ]
    if show_genes:
        summary["genes"] = [gene.gene_id for gene in result.genes.records]

    click.echo(json.dumps(summary, indent=2))


@click.command('counts')
@with_source_options
@click.pass_context
def counts(ctx, genes_path, annotations_path):
    """Print the number of genes in every (aspect, status) segment."""
    try:
        snapshot = _load_snapshot(ctx, genes_path, annotations_path)
    except (OSError, ParseError) as e:
        click.echo(click.style(f"Failed to load dataset: {e}", fg='red'), err=True)
        logger.exception("Dataset load failed")
        sys.exit(1)

    frame = segment_counts_frame(snapshot)

    click.echo(click.style("=== Segment Counts ===", bold=True))
    click.echo(f"Total genes: {len(snapshot.genes.index)}")
    click.echo()
    for row in frame.iter_rows(named=True):
        click.echo(f"  {row['aspect']}  {row['annotation_status']:<12} {row['gene_count']}")
