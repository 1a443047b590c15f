"""Parsing and indexing of gene catalog and GAF annotation text."""

from ifad.ingest.indexer import (
    AnnotationIndex,
    AspectIndex,
    GeneEntry,
    GeneIndex,
    KnownIndex,
    build_gene_index,
    find_unresolved_annotations,
    index_annotations,
    resolve_gene_id,
    segment_gene_ids,
)
from ifad.ingest.models import Annotation, AnnotationStatus, Aspect, Gene
from ifad.ingest.parser import (
    ParseError,
    ParsedText,
    classify_evidence_code,
    parse_annotations_text,
    parse_genes_text,
    slice_header,
    split_metadata_text,
)
from ifad.ingest.snapshot import (
    AnnotationData,
    GeneData,
    RawText,
    Snapshot,
    ingest_data,
)

__all__ = [
    "Annotation",
    "AnnotationStatus",
    "Aspect",
    "Gene",
    "ParseError",
    "ParsedText",
    "classify_evidence_code",
    "parse_annotations_text",
    "parse_genes_text",
    "slice_header",
    "split_metadata_text",
    "GeneEntry",
    "GeneIndex",
    "KnownIndex",
    "AspectIndex",
    "AnnotationIndex",
    "build_gene_index",
    "find_unresolved_annotations",
    "index_annotations",
    "resolve_gene_id",
    "segment_gene_ids",
    "RawText",
    "GeneData",
    "AnnotationData",
    "Snapshot",
    "ingest_data",
]
