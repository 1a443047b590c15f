"""Record models for the gene catalog and GAF annotation files."""

import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

# Positional schema of a GAF 2.x annotation row
ANNOTATION_COLUMNS = [
    "db",
    "database_id",
    "db_object_symbol",
    "invert",
    "go_term",
    "reference",
    "evidence_code",
    "additional_evidence",
    "aspect",
    "unique_gene_name",
    "alternative_gene_name",
    "gene_product_type",
    "taxon",
    "date",
    "assigned_by",
    "annotation_extension",
    "gene_product_form_id",
]

# Positional schema of a gene catalog row
GENE_COLUMNS = ["gene_id", "gene_product_type"]


class Aspect(str, Enum):
    """GO aspect an annotation belongs to."""

    MOLECULAR_FUNCTION = "F"
    BIOLOGICAL_PROCESS = "P"
    CELLULAR_COMPONENT = "C"


class AnnotationStatus(str, Enum):
    """Classification of the research behind a gene's annotations.

    KNOWN_EXP:   backed by experimental data.
    KNOWN_OTHER: backed by predictive data only. A gene with both kinds of
                 evidence for an aspect is KNOWN_EXP for that aspect.
    UNKNOWN:     a search was performed and nothing was found.
    UNANNOTATED: the gene has no annotation at all for the aspect. Never
                 carried by an Annotation; derived from absence.
    """

    KNOWN_EXP = "KNOWN_EXP"
    KNOWN_OTHER = "KNOWN_OTHER"
    UNKNOWN = "UNKNOWN"
    UNANNOTATED = "UNANNOTATED"


class Gene(BaseModel):
    """One row of the gene catalog. Identity is gene_id."""

    model_config = ConfigDict(frozen=True)

    gene_id: str
    gene_product_type: str


class Annotation(BaseModel):
    """One evidence record from a GAF file.

    Attributes:
        invert: True when the qualifier column is exactly "NOT"
        additional_evidence: "With/From" column split on "|"
        alternative_gene_name: synonyms column split on "|"
        date: annotation date, None if the raw token was not a YYYYMMDD date
        annotation_status: derived from evidence_code by the parser

    Two annotations are equal when every field is equal; instances are
    hashable so they can be collected into sets.
    """

    model_config = ConfigDict(frozen=True)

    db: str
    database_id: str
    db_object_symbol: str
    invert: bool
    go_term: str
    reference: str
    evidence_code: str
    additional_evidence: tuple[str, ...]
    aspect: Aspect
    unique_gene_name: str
    alternative_gene_name: tuple[str, ...]
    gene_product_type: str
    taxon: str
    date: datetime.date | None
    assigned_by: str
    annotation_extension: str
    gene_product_form_id: str
    annotation_status: AnnotationStatus

    @property
    def gene_names(self) -> tuple[str, ...]:
        """Candidate gene ids, in the order used to resolve the owning gene."""
        return (self.unique_gene_name, *self.alternative_gene_name)
