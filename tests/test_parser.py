"""Tests for gene catalog and GAF text parsing."""

import datetime

import pytest

from ifad.config.schema import EvidenceCodes
from ifad.ingest import (
    AnnotationStatus,
    Aspect,
    ParseError,
    classify_evidence_code,
    ingest_data,
    parse_annotations_text,
    parse_genes_text,
    slice_header,
    split_metadata_text,
)
from ifad.ingest.parser import split_rows

from conftest import ANNOTATION_LINES, GENES_TEXT, gaf_line


def test_split_metadata_text_separates_bang_lines():
    """Leading '!' lines form the metadata block, kept verbatim."""
    text = "!gaf-version: 2.1\n!Last updated\n!\nAT1\tprotein_coding\n"

    metadata, body = split_metadata_text(text)

    assert metadata == "!gaf-version: 2.1\n!Last updated\n!\n"
    assert body == "AT1\tprotein_coding\n"
    assert metadata + body == text


def test_split_metadata_text_without_metadata():
    """Zero metadata lines is a valid split with an empty block."""
    metadata, body = split_metadata_text("AT1\tprotein_coding\n")

    assert metadata == ""
    assert body == "AT1\tprotein_coding\n"


def test_split_metadata_text_stops_at_first_data_line():
    """A '!' line after data belongs to the body."""
    metadata, body = split_metadata_text("!meta\nAT1\tx\n!not metadata\n")

    assert metadata == "!meta\n"
    assert body == "AT1\tx\n!not metadata\n"


def test_split_metadata_text_includes_blank_lines():
    metadata, body = split_metadata_text("!a\n\n  !b\nrow\n")

    assert metadata == "!a\n\n  !b\n"
    assert body == "row\n"


def test_slice_header_with_marker():
    sliced = slice_header("name\tgene_model_type\nAT1\tpseudogene\n", "gene_model_type")

    assert sliced == ("name\tgene_model_type", "AT1\tpseudogene\n")


def test_slice_header_without_marker():
    """No marker in the first line means there is no header."""
    assert slice_header("AT1\tpseudogene\n", "gene_model_type") is None


def test_parse_genes_text_with_header():
    parsed = parse_genes_text(GENES_TEXT)

    assert parsed.metadata == "!gene metadata\n"
    assert parsed.header == "name\tgene_model_type"
    assert len(parsed.records) == 9
    assert parsed.records[0].gene_id == "AT4G18120"
    assert parsed.records[0].gene_product_type == "pseudogene"


def test_parse_genes_text_without_header():
    parsed = parse_genes_text("AT1G01010\tprotein_coding\nAT1G01020\tpseudogene\n")

    assert parsed.header == ""
    assert [g.gene_id for g in parsed.records] == ["AT1G01010", "AT1G01020"]


def test_parse_genes_skips_malformed_rows():
    """Rows without exactly two columns are skipped, not fatal."""
    text = (
        "AT1G01010\tprotein_coding\n"
        "AT1G01020\n"
        "AT1G01030\tprotein_coding\textra\n"
        "\n"
        "AT1G01040\tpseudogene\n"
    )

    parsed = parse_genes_text(text)

    assert [g.gene_id for g in parsed.records] == ["AT1G01010", "AT1G01040"]


def test_parse_annotations_field_casts():
    """Invert, list fields, date, gene names and status are cast."""
    text = gaf_line(
        "locus:1", "GO:0005634", "IDA", "C", "AT4G18120", "AML3|ML3",
        additional_evidence="PANTHER:1|SGD:2", date="20060519", invert="NOT",
    ) + "\n"

    parsed = parse_annotations_text(text)

    assert parsed.header == ""
    (annotation,) = parsed.records
    assert annotation.invert is True
    assert annotation.additional_evidence == ("PANTHER:1", "SGD:2")
    assert annotation.alternative_gene_name == ("AML3", "ML3")
    assert annotation.date == datetime.date(2006, 5, 19)
    assert annotation.aspect == Aspect.CELLULAR_COMPONENT
    assert annotation.gene_names == ("AT4G18120", "AML3", "ML3")
    assert annotation.annotation_status == AnnotationStatus.KNOWN_EXP


def test_parse_annotations_invert_requires_exact_not():
    text = gaf_line("locus:1", "GO:1", "IDA", "C", "AT1", "", invert="not") + "\n"

    (annotation,) = parse_annotations_text(text).records

    assert annotation.invert is False


def test_parse_annotations_empty_list_field_keeps_empty_string():
    """An empty pipe-delimited field becomes a one-element list of ''."""
    text = gaf_line("locus:1", "GO:1", "ND", "F", "AT1", "") + "\n"

    (annotation,) = parse_annotations_text(text).records

    assert annotation.additional_evidence == ("",)
    assert annotation.alternative_gene_name == ("",)
    assert annotation.gene_names == ("AT1", "")
    assert annotation.annotation_status == AnnotationStatus.UNKNOWN


def test_parse_annotations_strips_header_line():
    text = (
        "!gaf-version: 2.1\n"
        "DB\tDB Object ID\tSymbol\n"
        + ANNOTATION_LINES[0] + "\n"
    )

    parsed = parse_annotations_text(text)

    assert parsed.metadata == "!gaf-version: 2.1\n"
    assert parsed.header == "DB\tDB Object ID\tSymbol"
    assert len(parsed.records) == 1


def test_parse_annotations_wrong_column_count_fails():
    text = ANNOTATION_LINES[0] + "\n" + "TAIR\tlocus:1\tonly-three\n"

    with pytest.raises(ParseError, match="line 2"):
        parse_annotations_text(text)


def test_parse_annotations_invalid_aspect_fails():
    text = gaf_line("locus:1", "GO:1", "IDA", "X", "AT1", "") + "\n"

    with pytest.raises(ParseError):
        parse_annotations_text(text)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("20180831", datetime.date(2018, 8, 31)),
        ("", None),
        ("20181340", None),
        ("not-a-date", None),
    ],
)
def test_parse_annotations_date_tolerates_bad_tokens(token, expected):
    text = gaf_line("locus:1", "GO:1", "IDA", "C", "AT1", "", date=token) + "\n"

    (annotation,) = parse_annotations_text(text).records

    assert annotation.date == expected


def test_split_rows_keeps_empty_fields_and_line_numbers():
    rows = split_rows("a\t\tb\n\nc\n")

    assert rows["line_number"].to_list() == [1, 3]
    assert rows["fields"].to_list() == [["a", "", "b"], ["c"]]
    assert rows["n_fields"].to_list() == [3, 1]


def test_split_rows_does_not_interpret_quotes():
    rows = split_rows('"quoted\tvalue\n')

    assert rows["fields"].to_list() == [['"quoted', "value"]]


def test_slice_header_on_last_line_without_newline():
    """A marker-bearing first line is a header even when nothing follows it."""
    assert slice_header("name\tgene_model_type", "gene_model_type") == (
        "name\tgene_model_type",
        "",
    )


def test_parse_genes_text_header_only():
    parsed = parse_genes_text("!meta\nname\tgene_model_type")

    assert parsed.metadata == "!meta\n"
    assert parsed.header == "name\tgene_model_type"
    assert parsed.records == []


def test_parse_annotations_text_header_only():
    """A GAF file with metadata and a header but no rows is empty, not invalid."""
    parsed = parse_annotations_text("!gaf-version: 2.1\nDB\tDB Object ID\tSymbol")

    assert parsed.header == "DB\tDB Object ID\tSymbol"
    assert parsed.records == []


def test_ingest_data_header_only_files():
    snapshot = ingest_data(
        "name\tgene_model_type",
        "!gaf-version: 2.1\nDB\tDB Object ID\tSymbol",
    )

    assert snapshot.genes.records == ()
    assert snapshot.annotations.records == ()
    assert all(not bucket.all for bucket in snapshot.annotations.index.values())


def test_classify_evidence_code_default_tables():
    assert classify_evidence_code("IDA") == AnnotationStatus.KNOWN_EXP
    assert classify_evidence_code("HEP") == AnnotationStatus.KNOWN_EXP
    assert classify_evidence_code("ND") == AnnotationStatus.UNKNOWN
    assert classify_evidence_code("IBA") == AnnotationStatus.KNOWN_OTHER
    assert classify_evidence_code("TAS") == AnnotationStatus.KNOWN_OTHER


def test_classify_evidence_code_custom_tables():
    codes = EvidenceCodes(known_experimental=["TAS"], unknown=["IEA"])

    assert classify_evidence_code("TAS", codes) == AnnotationStatus.KNOWN_EXP
    assert classify_evidence_code("IEA", codes) == AnnotationStatus.UNKNOWN
    assert classify_evidence_code("IDA", codes) == AnnotationStatus.KNOWN_OTHER


def test_ingest_data_builds_snapshot(genes_text, annotations_text):
    snapshot = ingest_data(genes_text, annotations_text)

    assert snapshot.raw.genes_text == genes_text
    assert snapshot.raw.annotations_text == annotations_text
    assert snapshot.genes.metadata == "!gene metadata\n"
    assert snapshot.genes.header == "name\tgene_model_type"
    assert snapshot.annotations.metadata == "!gaf-version: 2.1\n!annotation metadata\n!\n"
    assert len(snapshot.genes.records) == 9
    assert len(snapshot.genes.index) == 9
    assert len(snapshot.annotations.records) == 9


def test_ingest_data_fails_whole_on_bad_annotations(genes_text):
    """A malformed annotation file produces no snapshot at all."""
    with pytest.raises(ParseError):
        ingest_data(genes_text, "TAIR\tbroken\n")
