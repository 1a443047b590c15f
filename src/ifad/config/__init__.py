from .loader import load_config, load_config_with_overrides
from .schema import (
    EvidenceCodes,
    FetchConfig,
    IfadConfig,
    RefreshConfig,
    SourceConfig,
)

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "IfadConfig",
    "EvidenceCodes",
    "SourceConfig",
    "RefreshConfig",
    "FetchConfig",
]
