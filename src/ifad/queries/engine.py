"""Segment query engine: union and intersection over annotation facets.

Every operation takes a Snapshot and returns a new, reduced Snapshot. The
reduced snapshot keeps the parent's raw text, metadata and headers, while
its records are narrowed and its indices are rebuilt from scratch through
the indexer, so the bucket invariants hold for every intermediate result.
"""

from collections.abc import Callable, Iterable
from dataclasses import replace
from functools import reduce

from ifad.ingest.indexer import (
    build_gene_index,
    index_annotations,
    resolve_gene_id,
    segment_gene_ids,
)
from ifad.ingest.models import Annotation, Gene
from ifad.ingest.snapshot import AnnotationData, GeneData, Snapshot
from ifad.queries.models import (
    GeneProductTypeFilter,
    Query,
    QueryGetAll,
    QueryOption,
    QueryWith,
    Segment,
    Strategy,
)

PROTEIN_CODING = "protein_coding"
PSEUDOGENE = "pseudogene"


def _derive(
    parent: Snapshot,
    genes: Iterable[Gene],
    annotations: Iterable[Annotation],
) -> Snapshot:
    """Build a snapshot over a reduced scope of the parent's data."""
    genes = tuple(genes)
    annotations = tuple(annotations)
    gene_index, annotation_index = index_annotations(build_gene_index(genes), annotations)

    return Snapshot(
        raw=parent.raw,
        genes=replace(parent.genes, records=tuple(e.gene for e in gene_index.values()), index=gene_index),
        annotations=replace(parent.annotations, records=annotations, index=annotation_index),
    )


def _names_any(annotation: Annotation, gene_ids) -> bool:
    return any(name in gene_ids for name in annotation.gene_names)


def query_all(snapshot: Snapshot) -> Snapshot:
    """All annotations plus every gene that at least one of them names.

    Genes that no annotation refers to are left out.
    """
    annotations = snapshot.annotations.records
    referenced = {name for annotation in annotations for name in annotation.gene_names}
    genes = [
        entry.gene
        for gene_id, entry in snapshot.genes.index.items()
        if gene_id in referenced
    ]
    return _derive(snapshot, genes, annotations)


def query_segment(snapshot: Snapshot, segment: Segment) -> Snapshot:
    """The genes in one (aspect, status) bucket and their matching annotations.

    Only annotations whose own aspect and status equal the segment are kept;
    a selected gene's annotations in other aspects do not leak into the
    result.
    """
    aspect_index = snapshot.annotations.index[segment.aspect]
    gene_ids = segment_gene_ids(aspect_index, segment.annotation_status)
    parent_index = snapshot.genes.index

    genes = [entry.gene for gene_id, entry in parent_index.items() if gene_id in gene_ids]
    annotations = [
        annotation
        for annotation in snapshot.annotations.records
        if annotation.aspect == segment.aspect
        and annotation.annotation_status == segment.annotation_status
        and resolve_gene_id(annotation, parent_index) in gene_ids
    ]
    return _derive(snapshot, genes, annotations)


def union(one: Snapshot, two: Snapshot) -> Snapshot:
    """Genes from either result together with all of both results' annotations.

    On a gene id present in both, ``two``'s entry wins. Annotations are
    de-duplicated by full-field equality, keeping first-seen order.
    """
    merged = {gene_id: entry.gene for gene_id, entry in one.genes.index.items()}
    merged.update((gene_id, entry.gene) for gene_id, entry in two.genes.index.items())

    annotations = dict.fromkeys((*one.annotations.records, *two.annotations.records))
    return _derive(one, merged.values(), annotations)


def intersect(one: Snapshot, two: Snapshot) -> Snapshot:
    """Genes present in both results, with both results' annotations on them."""
    other_ids = two.genes.index
    genes = [entry.gene for gene_id, entry in one.genes.index.items() if gene_id in other_ids]
    kept_ids = {gene.gene_id for gene in genes}

    annotations = [
        annotation
        for annotation in dict.fromkeys((*one.annotations.records, *two.annotations.records))
        if _names_any(annotation, kept_ids)
    ]
    return _derive(one, genes, annotations)


def empty_result(snapshot: Snapshot) -> Snapshot:
    """A result with the snapshot's metadata and headers but no records."""
    return _derive(snapshot, (), ())


def query_annotated(snapshot: Snapshot, option: QueryOption) -> Snapshot:
    """Return the subset of genes and annotations a query option selects.

    QueryGetAll returns every annotation and the genes they reference.
    QueryWith evaluates each segment independently and folds the results
    left to right with union or intersect. No segments gives an empty result.
    """
    if isinstance(option, QueryGetAll):
        return query_all(snapshot)

    if not option.segments:
        return empty_result(snapshot)

    combine: Callable[[Snapshot, Snapshot], Snapshot]
    if option.strategy == Strategy.INTERSECTION:
        combine = intersect
    else:
        combine = union

    results = [query_segment(snapshot, segment) for segment in option.segments]
    return reduce(combine, results)


def filter_product_type(snapshot: Snapshot, product_filter: GeneProductTypeFilter) -> Snapshot:
    """Restrict a result by the gene product type of its genes.

    ALL returns the snapshot unchanged. Otherwise genes are filtered first,
    then annotations are kept only if they still name a surviving gene.
    """
    if product_filter == GeneProductTypeFilter.ALL:
        return snapshot

    if product_filter == GeneProductTypeFilter.INCLUDE_PROTEIN:
        def keep(product_type: str) -> bool:
            return product_type == PROTEIN_CODING
    else:
        def keep(product_type: str) -> bool:
            return product_type != PSEUDOGENE

    genes = [
        entry.gene
        for entry in snapshot.genes.index.values()
        if keep(entry.gene.gene_product_type)
    ]
    kept_ids = {gene.gene_id for gene in genes}
    annotations = [a for a in snapshot.annotations.records if _names_any(a, kept_ids)]
    return _derive(snapshot, genes, annotations)


def query_dataset(snapshot: Snapshot, query: Query) -> Snapshot:
    """Run a query option, then apply its product-type filter."""
    return filter_product_type(query_annotated(snapshot, query.option), query.filter)
