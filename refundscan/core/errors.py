class RefundScanError(Exception):
    pass


class TransportError(RefundScanError):
    """Fetching messages from a transport failed."""


class PermissionDeniedError(TransportError):
    pass


class TransportUnavailableError(TransportError):
    """The transport cannot run here (no native capability or nothing connected)."""


class StorageError(RefundScanError):
    pass
