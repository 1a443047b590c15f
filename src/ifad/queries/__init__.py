"""Faceted queries over an ingested dataset."""

from ifad.queries.engine import (
    empty_result,
    filter_product_type,
    intersect,
    query_all,
    query_annotated,
    query_dataset,
    query_segment,
    union,
)
from ifad.queries.models import (
    GeneProductTypeFilter,
    Query,
    QueryGetAll,
    QueryOption,
    QueryWith,
    Segment,
    Strategy,
)
from ifad.queries.summary import segment_counts, segment_counts_frame

__all__ = [
    "Segment",
    "Strategy",
    "GeneProductTypeFilter",
    "Query",
    "QueryGetAll",
    "QueryWith",
    "QueryOption",
    "empty_result",
    "filter_product_type",
    "intersect",
    "query_all",
    "query_annotated",
    "query_dataset",
    "query_segment",
    "union",
    "segment_counts",
    "segment_counts_frame",
]
