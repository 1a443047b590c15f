"""Query descriptions accepted by the segment query engine."""

from dataclasses import dataclass, field
from enum import Enum

from ifad.ingest.models import AnnotationStatus, Aspect


@dataclass(frozen=True)
class Segment:
    """Exactly one Aspect and one AnnotationStatus.

    A segment is one addressable slice of the genome dataset and is the
    building block of every faceted query. Plain values such as "C" or
    "KNOWN_EXP" are converted to their enum members; unknown values raise
    ValueError.
    """
    aspect: Aspect
    annotation_status: AnnotationStatus

    def __post_init__(self):
        # Index lookups are keyed by enum member, not by its string value
        object.__setattr__(self, "aspect", Aspect(self.aspect))
        object.__setattr__(self, "annotation_status", AnnotationStatus(self.annotation_status))


class Strategy(str, Enum):
    """How multiple segments combine.

    UNION keeps items matching at least one segment; INTERSECTION keeps
    genes matching every segment.
    """

    UNION = "union"
    INTERSECTION = "intersection"


class GeneProductTypeFilter(str, Enum):
    """Post-filter on the gene product type of a query result."""

    ALL = "all"
    INCLUDE_PROTEIN = "include_protein"
    EXCLUDE_PSEUDOGENE = "exclude_pseudogene"


@dataclass(frozen=True)
class QueryGetAll:
    """Every annotation and every gene referenced by one."""


@dataclass(frozen=True)
class QueryWith:
    """The genes and annotations matching segments under a strategy."""
    strategy: Strategy
    segments: tuple[Segment, ...] = ()


QueryOption = QueryGetAll | QueryWith


@dataclass(frozen=True)
class Query:
    """A query option plus the product-type filter applied to its result."""
    option: QueryOption = field(default_factory=QueryGetAll)
    filter: GeneProductTypeFilter = GeneProductTypeFilter.ALL
