"""Index genes and classify them into per-aspect annotation buckets.

For every aspect (F, P, C) each gene lands in the AnnotationIndex as follows:

    all          genes with at least one annotation in the aspect
    unknown      genes with an UNKNOWN-status annotation
    known.all    genes with a KNOWN_EXP or KNOWN_OTHER annotation
    known.exp    genes with a KNOWN_EXP annotation
    known.other  known.all - known.exp
    unannotated  every indexed gene not in `all`

Indices are always rebuilt from scratch; nothing here mutates its inputs.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ifad.ingest.models import Annotation, AnnotationStatus, Aspect, Gene


@dataclass(frozen=True)
class GeneEntry:
    """A gene together with the annotations that resolved to it."""
    gene: Gene
    annotations: frozenset[Annotation] = frozenset()


GeneIndex = dict[str, GeneEntry]


@dataclass(frozen=True)
class KnownIndex:
    all: frozenset[str] = frozenset()
    exp: frozenset[str] = frozenset()
    other: frozenset[str] = frozenset()


@dataclass(frozen=True)
class AspectIndex:
    """Gene ids bucketed by annotation status for one aspect."""
    all: frozenset[str] = frozenset()
    unknown: frozenset[str] = frozenset()
    known: KnownIndex = KnownIndex()
    unannotated: frozenset[str] = frozenset()


AnnotationIndex = dict[Aspect, AspectIndex]


def build_gene_index(genes: Iterable[Gene]) -> GeneIndex:
    """Create one annotation-free entry per gene id.

    When a gene id occurs more than once the last row wins; the id keeps
    the position of its first occurrence.
    """
    return {gene.gene_id: GeneEntry(gene=gene) for gene in genes}


def resolve_gene_id(annotation: Annotation, gene_index: GeneIndex) -> str | None:
    """Return the first of the annotation's gene names that is indexed."""
    for name in annotation.gene_names:
        if name in gene_index:
            return name
    return None


def find_unresolved_annotations(
    gene_index: GeneIndex,
    annotations: Iterable[Annotation],
) -> list[Annotation]:
    """Annotations whose gene names match no indexed gene."""
    return [a for a in annotations if resolve_gene_id(a, gene_index) is None]


def index_annotations(
    gene_index: GeneIndex,
    annotations: Iterable[Annotation],
) -> tuple[GeneIndex, AnnotationIndex]:
    """Attach annotations to their genes and bucket genes per aspect.

    Each annotation belongs to the first gene named in its gene_names that
    is present in ``gene_index``; annotations naming no indexed gene are
    dropped from both outputs.

    Args:
        gene_index: genes in scope. Any annotations already on its entries
            are ignored.
        annotations: annotation records to distribute

    Returns:
        (new gene index whose entries carry exactly the resolved
        annotations, annotation index over the same genes)
    """
    owned: dict[str, list[Annotation]] = {gene_id: [] for gene_id in gene_index}
    all_ids = {aspect: set() for aspect in Aspect}
    unknown_ids = {aspect: set() for aspect in Aspect}
    known_ids = {aspect: set() for aspect in Aspect}
    exp_ids = {aspect: set() for aspect in Aspect}

    for annotation in annotations:
        gene_id = resolve_gene_id(annotation, gene_index)
        if gene_id is None:
            continue

        owned[gene_id].append(annotation)

        aspect = annotation.aspect
        all_ids[aspect].add(gene_id)
        if annotation.annotation_status == AnnotationStatus.UNKNOWN:
            unknown_ids[aspect].add(gene_id)
        else:
            known_ids[aspect].add(gene_id)
            if annotation.annotation_status == AnnotationStatus.KNOWN_EXP:
                exp_ids[aspect].add(gene_id)

    annotation_index: AnnotationIndex = {}
    for aspect in Aspect:
        annotation_index[aspect] = AspectIndex(
            all=frozenset(all_ids[aspect]),
            unknown=frozenset(unknown_ids[aspect]),
            known=KnownIndex(
                all=frozenset(known_ids[aspect]),
                exp=frozenset(exp_ids[aspect]),
                other=frozenset(known_ids[aspect] - exp_ids[aspect]),
            ),
            unannotated=frozenset(
                gene_id for gene_id in gene_index if gene_id not in all_ids[aspect]
            ),
        )

    new_gene_index: GeneIndex = {
        gene_id: GeneEntry(gene=entry.gene, annotations=frozenset(owned[gene_id]))
        for gene_id, entry in gene_index.items()
    }

    return new_gene_index, annotation_index


def segment_gene_ids(
    aspect_index: AspectIndex,
    status: AnnotationStatus,
) -> frozenset[str]:
    """Gene ids in the bucket that corresponds to an annotation status."""
    if status == AnnotationStatus.KNOWN_EXP:
        return aspect_index.known.exp
    if status == AnnotationStatus.KNOWN_OTHER:
        return aspect_index.known.other
    if status == AnnotationStatus.UNKNOWN:
        return aspect_index.unknown
    return aspect_index.unannotated
