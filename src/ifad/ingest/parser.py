"""Parse gene catalog and GAF annotation text into structured records.

Both file types share the same layout:

    !gaf-version: 2.1          <- optional metadata block ("!" lines)
    !Last updated Jan 1
    DB Object ID ...           <- optional header line
    TAIR<TAB>locus:2117706...  <- tab-delimited data rows

The metadata block and header are preserved verbatim so results can be
re-serialized with the source's own preamble.
"""

from dataclasses import dataclass, field

import polars as pl
import structlog
from pydantic import ValidationError

from ifad.config.schema import EvidenceCodes
from ifad.ingest.models import (
    ANNOTATION_COLUMNS,
    GENE_COLUMNS,
    Annotation,
    AnnotationStatus,
    Gene,
)

logger = structlog.get_logger()

ANNOTATION_HEADER_MARKER = "DB Object ID"
GENE_HEADER_MARKER = "gene_model_type"

# GAF dates are YYYYMMDD
GAF_DATE_FORMAT = "%Y%m%d"

DEFAULT_EVIDENCE_CODES = EvidenceCodes()


class ParseError(ValueError):
    """Raised when gene or annotation text cannot be parsed."""


@dataclass
class ParsedText:
    """Structured contents of one input file.

    Attributes:
        metadata: leading "!" block, verbatim (may be empty)
        header: column header line, or "" when the file has none
        records: parsed Gene or Annotation rows, in file order
    """
    metadata: str
    header: str
    records: list = field(default_factory=list)


def split_metadata_text(text: str) -> tuple[str, str]:
    """Split file text into its metadata block and the remaining body.

    The metadata block is every leading line that is blank or starts with
    "!" (leading whitespace allowed). An empty metadata block is valid.

    Returns:
        (metadata_text, body_text); concatenated they equal the input
    """
    lines = text.splitlines(keepends=True)
    boundary = 0
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith("!"):
            break
        boundary += 1

    return "".join(lines[:boundary]), "".join(lines[boundary:])


def slice_header(body: str, marker: str) -> tuple[str, str] | None:
    """Slice the first line from a body of text if it is a header.

    The first line counts as a header whenever it contains ``marker`` (a
    column name known to appear in the header), including when it is the
    only line. Without the marker the body is assumed to be all data and
    None is returned.
    """
    first_line, _, rest = body.partition("\n")
    if marker not in first_line:
        return None
    return first_line.rstrip("\r"), rest


def classify_evidence_code(
    evidence_code: str,
    evidence_codes: EvidenceCodes = DEFAULT_EVIDENCE_CODES,
) -> AnnotationStatus:
    """Map an evidence code to the annotation status it implies."""
    if evidence_code in evidence_codes.unknown:
        return AnnotationStatus.UNKNOWN
    if evidence_code in evidence_codes.known_experimental:
        return AnnotationStatus.KNOWN_EXP
    return AnnotationStatus.KNOWN_OTHER


def split_rows(text: str) -> pl.DataFrame:
    """Tab-split every non-blank line of a file body.

    Columns are kept exactly as written: no quoting, no type inference, and
    empty fields stay empty strings. Ragged rows are kept so callers can
    decide whether to skip or reject them.

    Returns:
        DataFrame with columns:
        - line_number: 1-based position in ``text`` (blank lines counted)
        - fields: list[str] of tab-separated values
        - n_fields: number of values on the line
    """
    return (
        pl.DataFrame({"line": text.splitlines()}, schema={"line": pl.String})
        .with_row_index("line_number", offset=1)
        .filter(pl.col("line").str.strip_chars() != "")
        .with_columns(fields=pl.col("line").str.split("\t"))
        .with_columns(n_fields=pl.col("fields").list.len())
        .drop("line")
    )


def _field_columns(columns: list[str]) -> list[pl.Expr]:
    """Expressions naming each position of the fields list."""
    return [pl.col("fields").list.get(i).alias(name) for i, name in enumerate(columns)]


def parse_genes_data(text: str) -> list[Gene]:
    """Parse gene catalog rows (without metadata or header).

    Rows must have exactly two tab-separated columns. Blank lines and
    malformed rows are skipped.
    """
    rows = split_rows(text)
    valid = rows.filter(pl.col("n_fields") == len(GENE_COLUMNS))

    skipped = rows.height - valid.height
    if skipped:
        logger.warning("parse_genes_skipped_rows", skipped=skipped)

    genes_df = valid.select(_field_columns(GENE_COLUMNS))
    return [Gene(**row) for row in genes_df.iter_rows(named=True)]


def parse_annotations_data(
    text: str,
    evidence_codes: EvidenceCodes = DEFAULT_EVIDENCE_CODES,
) -> list[Annotation]:
    """Parse GAF annotation rows (without metadata or header).

    Casts applied per row:
    - invert: True only when the qualifier is exactly "NOT"
    - additional_evidence, alternative_gene_name: split on "|"
      (an empty field gives [""])
    - date: YYYYMMDD, null when the token is not a real date
    - annotation_status: derived from evidence_code

    Args:
        text: tab-delimited rows, 17 columns each
        evidence_codes: tables used to derive each row's annotation status

    Returns:
        Annotations in file order

    Raises:
        ParseError: If a non-blank row does not have 17 columns or carries
            an invalid aspect. Line numbers are relative to ``text``.
    """
    rows = split_rows(text)

    malformed = rows.filter(pl.col("n_fields") != len(ANNOTATION_COLUMNS))
    if malformed.height:
        first = malformed.row(0, named=True)
        raise ParseError(
            f"Annotation line {first['line_number']}: expected {len(ANNOTATION_COLUMNS)} "
            f"columns, got {first['n_fields']}"
        )

    annotations_df = rows.select(
        pl.col("line_number"),
        *_field_columns(ANNOTATION_COLUMNS),
    ).with_columns(
        invert=pl.col("invert") == "NOT",
        additional_evidence=pl.col("additional_evidence").str.split("|"),
        alternative_gene_name=pl.col("alternative_gene_name").str.split("|"),
        date=pl.col("date").str.strptime(pl.Date, GAF_DATE_FORMAT, strict=False),
    )

    annotations = []
    for row in annotations_df.iter_rows(named=True):
        line_number = row.pop("line_number")
        row["annotation_status"] = classify_evidence_code(
            row["evidence_code"], evidence_codes
        )
        try:
            annotations.append(Annotation(**row))
        except ValidationError as e:
            raise ParseError(f"Annotation line {line_number}: {e}") from e

    return annotations


def parse_genes_text(text: str) -> ParsedText:
    """Parse a complete gene catalog file (metadata, header, rows)."""
    metadata, body = split_metadata_text(text)

    header = ""
    sliced = slice_header(body, GENE_HEADER_MARKER)
    if sliced:
        header, body = sliced

    return ParsedText(metadata=metadata, header=header, records=parse_genes_data(body))


def parse_annotations_text(
    text: str,
    evidence_codes: EvidenceCodes = DEFAULT_EVIDENCE_CODES,
) -> ParsedText:
    """Parse a complete GAF file (metadata, header, rows).

    Raises:
        ParseError: If any annotation row is malformed
    """
    metadata, body = split_metadata_text(text)

    header = ""
    sliced = slice_header(body, ANNOTATION_HEADER_MARKER)
    if sliced:
        header, body = sliced

    return ParsedText(
        metadata=metadata,
        header=header,
        records=parse_annotations_data(body, evidence_codes),
    )
