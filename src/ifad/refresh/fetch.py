"""Download the annotation source and read both input files as text."""

import gzip
import shutil
from pathlib import Path

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ifad.config.schema import DEFAULT_ANNOTATIONS_URL, IfadConfig
from ifad.ingest.snapshot import RawText

logger = structlog.get_logger()


class SourceFetcher:
    """
    Fetch collaborator for refresh cycles.

    Each call re-downloads the annotation file (decompressing .gz sources),
    then returns the gene catalog and annotation texts. The download is
    streamed to a temp file and only moved into place once complete, so a
    failed download never leaves a truncated annotation file behind.
    """

    def __init__(
        self,
        genes_path: Path,
        annotations_path: Path,
        url: str = DEFAULT_ANNOTATIONS_URL,
        max_retries: int = 5,
        timeout: int = 120,
    ):
        """
        Args:
            genes_path: Local gene catalog
            annotations_path: Destination of the decompressed annotation file
            url: Annotation source URL
            max_retries: Maximum download attempts
            timeout: HTTP timeout in seconds
        """
        self.genes_path = Path(genes_path)
        self.annotations_path = Path(annotations_path)
        self.url = url
        self.max_retries = max_retries
        self.timeout = timeout

    def _create_retry_decorator(self):
        """Create retry decorator with exponential backoff."""
        return retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=4, max=60),
            retry=retry_if_exception_type(
                (httpx.HTTPStatusError, httpx.ConnectError, httpx.TimeoutException)
            ),
            reraise=True,
        )

    def download(self) -> Path:
        """Download (and decompress) the annotation source.

        Returns:
            Path to the annotation file

        Raises:
            httpx.HTTPStatusError: On HTTP errors (after retries)
            httpx.ConnectError: On connection errors (after retries)
            httpx.TimeoutException: On timeout (after retries)
            gzip.BadGzipFile: If a .gz source is not valid gzip data
        """
        output_path = self.annotations_path
        output_path.parent.mkdir(parents=True, exist_ok=True)

        is_compressed = self.url.endswith(".gz")
        temp_path = output_path.with_suffix(output_path.suffix + ".tmp")

        @self._create_retry_decorator()
        def _download_with_retry():
            logger.info("annotations_download_start", url=self.url, compressed=is_compressed)
            with httpx.stream("GET", self.url, timeout=self.timeout, follow_redirects=True) as response:
                response.raise_for_status()
                with open(temp_path, "wb") as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)

        unpacked_path = output_path.with_suffix(output_path.suffix + ".unpacked")
        try:
            _download_with_retry()

            if is_compressed:
                with gzip.open(temp_path, "rb") as f_in:
                    with open(unpacked_path, "wb") as f_out:
                        shutil.copyfileobj(f_in, f_out)
                unpacked_path.replace(output_path)
            else:
                temp_path.replace(output_path)
        finally:
            # Partial downloads and unpacks never outlive the call
            temp_path.unlink(missing_ok=True)
            unpacked_path.unlink(missing_ok=True)

        logger.info(
            "annotations_download_complete",
            path=str(output_path),
            size_mb=round(output_path.stat().st_size / 1024 / 1024, 2),
        )
        return output_path

    def read_text(self) -> RawText:
        """Read the gene catalog and the current annotation file."""
        return RawText(
            genes_text=self.genes_path.read_text(),
            annotations_text=self.annotations_path.read_text(),
        )

    def __call__(self) -> RawText:
        self.download()
        return self.read_text()

    @classmethod
    def from_config(cls, config: IfadConfig) -> "SourceFetcher":
        """Create a fetcher from service configuration."""
        return cls(
            genes_path=config.source.genes_path,
            annotations_path=config.annotations_file,
            url=config.source.annotations_url,
            max_retries=config.fetch.max_retries,
            timeout=config.fetch.timeout_seconds,
        )
