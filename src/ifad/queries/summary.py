"""Whole-genome segment counts: how many genes fall in each facet."""

import polars as pl

from ifad.ingest.indexer import segment_gene_ids
from ifad.ingest.models import AnnotationStatus, Aspect
from ifad.ingest.snapshot import Snapshot


def segment_counts(snapshot: Snapshot) -> dict:
    """Count genes per aspect and annotation bucket.

    Returns:
        Dict keyed by aspect letter ("F", "P", "C"), each holding counts for
        all, unknown, known.all, known.exp, known.other and unannotated,
        plus a "total_genes" entry. unannotated is total_genes minus all.

    Example:
        {"P": {"all": 6, "unknown": 0,
               "known": {"all": 6, "exp": 1, "other": 5},
               "unannotated": 3},
         ...,
         "total_genes": 9}
    """
    total_genes = len(snapshot.genes.index)
    counts: dict = {}

    for aspect in Aspect:
        index = snapshot.annotations.index[aspect]
        counts[aspect.value] = {
            "all": len(index.all),
            "unknown": len(index.unknown),
            "known": {
                "all": len(index.known.all),
                "exp": len(index.known.exp),
                "other": len(index.known.other),
            },
            "unannotated": total_genes - len(index.all),
        }

    counts["total_genes"] = total_genes
    return counts


def segment_counts_frame(snapshot: Snapshot) -> pl.DataFrame:
    """One row per (aspect, status) segment with its gene count.

    Columns: aspect (str), annotation_status (str), gene_count (int).
    Rows are ordered by aspect (F, P, C) then status.
    """
    rows = []
    for aspect in Aspect:
        index = snapshot.annotations.index[aspect]
        for status in AnnotationStatus:
            rows.append({
                "aspect": aspect.value,
                "annotation_status": status.value,
                "gene_count": len(segment_gene_ids(index, status)),
            })

    return pl.DataFrame(rows)
