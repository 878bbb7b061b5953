"""Error taxonomy for the memoized-generation core.

Every error here is reported synchronously to the caller of the service
layer; the handler layer maps each one to an HTTP status.
"""


class CodegenCacheError(RuntimeError):
    pass


class InvalidRequestError(CodegenCacheError):
    """A required request field is missing or empty."""


class DeviceNotFoundError(CodegenCacheError):
    """No entry is stored for the requested device."""

    def __init__(self, device_name: str) -> None:
        super().__init__(f"device not found: {device_name}")
        self.device_name = device_name


class UpstreamError(CodegenCacheError):
    """The generation provider could not be reached or answered non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageError(CodegenCacheError):
    """The entry store failed to read or write."""
