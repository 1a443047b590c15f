"""Shared fixtures: a nine-gene Arabidopsis dataset as raw file text.

Layout of the fixture (aspect / status per annotation):

    AT4G18120   pseudogene          C KNOWN_EXP (IDA)
    AT5G40395   small_nuclear_rna   P KNOWN_OTHER (TAS)
    AT5G46315   small_nuclear_rna   P KNOWN_OTHER (TAS)
    AT1G67070   protein_coding      P KNOWN_OTHER (IBA)
    AT3G02570   protein_coding      P KNOWN_OTHER (IBA)
    AT1G65290   protein_coding      F KNOWN_OTHER (IBA)
    AT1G09440   protein_coding      C KNOWN_OTHER (ISM), empty unique name
    AT1G08845   protein_coding      C KNOWN_OTHER (ISM) and P KNOWN_OTHER (ISM)
    ATBLAHBLAH  Dummy               no annotations
"""

import pytest

from ifad.ingest import ingest_data

GENES_TEXT = """!gene metadata
name\tgene_model_type
AT4G18120\tpseudogene
AT5G40395\tsmall_nuclear_rna
AT5G46315\tsmall_nuclear_rna
AT1G67070\tprotein_coding
AT3G02570\tprotein_coding
AT1G65290\tprotein_coding
AT1G09440\tprotein_coding
AT1G08845\tprotein_coding
ATBLAHBLAH\tDummy
"""


def gaf_line(
    database_id: str,
    go_term: str,
    evidence_code: str,
    aspect: str,
    unique_gene_name: str,
    alternative_gene_name: str,
    additional_evidence: str = "",
    reference: str = "TAIR:AnalysisReference:501780126",
    date: str = "20180831",
    assigned_by: str = "TAIR",
    invert: str = "",
) -> str:
    """Build one 17-column GAF row."""
    return "\t".join([
        "TAIR", database_id, unique_gene_name or "sym", invert, go_term,
        reference, evidence_code, additional_evidence, aspect,
        unique_gene_name, alternative_gene_name, "protein", "taxon:3702",
        date, assigned_by, "", "",
    ])


ANNOTATION_LINES = [
    gaf_line("locus:2117706", "GO:0005634", "IDA", "C", "AT4G18120",
             "AT4G18120|AML3|ML3|MEI2-like 3|F15J5.90|F15J5_90",
             reference="TAIR:Publication:501713238|PMID:15356386", date="20060519"),
    gaf_line("locus:1005716828", "GO:0000398", "TAS", "P", "AT5G40395",
             "AT5G40395|U6acat|67751.snRNA00001", date="20060207"),
    gaf_line("locus:1005716827", "GO:0000398", "TAS", "P", "AT5G46315",
             "AT5G46315|U6-29|U6 small nucleolar RNA29|67796.snRNA00001", date="20060207"),
    gaf_line("locus:2019748", "GO:0000032", "IBA", "P", "AT1G67070",
             "AT1G67070|DIN9|PMI2|DARK INDUCIBLE 9", date="20180615",
             additional_evidence="PANTHER:PTN000034017|SGD:S000000805", assigned_by="GOC"),
    gaf_line("locus:2076864", "GO:0000032", "IBA", "P", "AT3G02570",
             "AT3G02570|MEE31|PMI1", date="20181101",
             additional_evidence="PANTHER:PTN000034017|SGD:S000000805", assigned_by="GOC"),
    gaf_line("locus:2206300", "GO:0000035", "IBA", "F", "AT1G65290",
             "AT1G65290|mtACP2|T8F5.6", date="20180803",
             additional_evidence="PANTHER:PTN000466551|EcoGene:EG50003", assigned_by="GOC"),
    gaf_line("locus:2012325", "GO:0005576", "ISM", "C", "",
             "AT1G09440|AT1G09440.2"),
    gaf_line("locus:1005716736", "GO:0005576", "ISM", "C", "Heartstopper",
             "AT1G08845|AT1G08845.2"),
    gaf_line("locus:1111111111", "GO:0005576", "ISM", "P", "Heartstopper",
             "AT1G08845|AT1G08845.2"),
]

ANNOTATIONS_TEXT = (
    "!gaf-version: 2.1\n"
    "!annotation metadata\n"
    "!\n"
    + "\n".join(ANNOTATION_LINES)
    + "\n"
)

ALL_GENE_IDS = [
    "AT4G18120", "AT5G40395", "AT5G46315", "AT1G67070", "AT3G02570",
    "AT1G65290", "AT1G09440", "AT1G08845", "ATBLAHBLAH",
]


@pytest.fixture
def genes_text() -> str:
    return GENES_TEXT


@pytest.fixture
def annotations_text() -> str:
    return ANNOTATIONS_TEXT


@pytest.fixture
def snapshot():
    """The nine-gene dataset, parsed and indexed."""
    return ingest_data(GENES_TEXT, ANNOTATIONS_TEXT)
