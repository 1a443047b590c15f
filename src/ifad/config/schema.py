"""Pydantic models for service configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_ANNOTATIONS_URL = "http://current.geneontology.org/annotations/tair.gaf.gz"


class EvidenceCodes(BaseModel):
    """Static evidence-code tables used to derive an annotation's status.

    Codes in neither table are classified as KNOWN_OTHER.
    """

    known_experimental: list[str] = Field(
        default_factory=lambda: [
            "EXP", "IDA", "IPI", "IMP", "IGI", "IEP",
            "HTP", "HDA", "HMP", "HGI", "HEP",
        ],
        description="Evidence codes backed by experimental data",
    )
    unknown: list[str] = Field(
        default_factory=lambda: ["ND"],
        description="Evidence codes meaning 'searched, nothing found'",
    )

    @model_validator(mode="after")
    def check_disjoint(self) -> "EvidenceCodes":
        """Reject codes listed as both experimental and unknown."""
        overlap = set(self.known_experimental) & set(self.unknown)
        if overlap:
            raise ValueError(
                f"Evidence codes cannot be both experimental and unknown: {sorted(overlap)}"
            )
        return self


class SourceConfig(BaseModel):
    """Locations of the gene catalog and the annotation source."""

    genes_path: Path = Field(
        ...,
        description="Local gene catalog (GeneID<TAB>GeneProductType)",
    )
    annotations_path: Path = Field(
        ...,
        description="Where the downloaded, decompressed GAF file is written (relative to data_dir)",
    )
    annotations_url: str = Field(
        default=DEFAULT_ANNOTATIONS_URL,
        description="Remote GAF source (gzip-compressed if it ends in .gz)",
    )


class RefreshConfig(BaseModel):
    """Periodic refresh schedule."""

    interval_seconds: int = Field(
        default=86400,
        ge=1,
        description="Seconds between refresh cycles",
    )
    align_to_midnight: bool = Field(
        default=True,
        description="Start the first scheduled refresh at the next local midnight",
    )
    lifetime_seconds: int | None = Field(
        default=None,
        ge=1,
        description="Stop scheduling refreshes after this many seconds (None = forever)",
    )


class FetchConfig(BaseModel):
    """Download behaviour for the annotation source."""

    max_retries: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum download attempts per refresh cycle",
    )
    timeout_seconds: int = Field(
        default=120,
        ge=1,
        description="HTTP timeout in seconds",
    )


class IfadConfig(BaseModel):
    """Main service configuration."""

    data_dir: Path = Field(
        ...,
        description="Directory for downloaded data",
    )
    source: SourceConfig = Field(
        ...,
        description="Gene catalog and annotation source locations",
    )
    refresh: RefreshConfig = Field(
        default_factory=RefreshConfig,
        description="Refresh schedule",
    )
    fetch: FetchConfig = Field(
        default_factory=FetchConfig,
        description="Download configuration",
    )
    evidence_codes: EvidenceCodes = Field(
        default_factory=EvidenceCodes,
        description="Evidence-code classification tables",
    )

    @field_validator("data_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def annotations_file(self) -> Path:
        """Annotation file location, with relative paths resolved under data_dir."""
        return self.data_dir / self.source.annotations_path

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        useful for telling which configuration produced a dataset.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
