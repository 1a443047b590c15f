"""IFAD: faceted gene annotation queries over GAF data."""

__version__ = "0.1.0"
