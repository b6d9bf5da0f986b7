"""Core building blocks for the refundscan package."""
from refundscan.core.config import ScanSettings, get_config_value, load_env_file, settings_from_env
from refundscan.core.errors import (
    PermissionDeniedError,
    RefundScanError,
    StorageError,
    TransportError,
    TransportUnavailableError,
)
from refundscan.core.logging import configure_logging
from refundscan.core.models import (
    AccountDescriptor,
    Channel,
    ExtractedFields,
    FetchOptions,
    RawMessage,
    RefundRecord,
    RefundStatus,
)

__all__ = [
    "AccountDescriptor",
    "Channel",
    "ExtractedFields",
    "FetchOptions",
    "PermissionDeniedError",
    "RawMessage",
    "RefundRecord",
    "RefundScanError",
    "RefundStatus",
    "ScanSettings",
    "StorageError",
    "TransportError",
    "TransportUnavailableError",
    "configure_logging",
    "get_config_value",
    "load_env_file",
    "settings_from_env",
]
