"""Exception types raised by tablebridge services."""


class TableBridgeError(Exception):
    """Base class for tablebridge errors."""


class ServiceError(TableBridgeError):
    """The ingestion API rejected a request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UploadTooLargeError(ServiceError):
    """A file exceeds the upload size limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"File size exceeds limit of {limit} bytes")
        self.limit = limit
