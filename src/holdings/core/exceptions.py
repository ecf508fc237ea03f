"""Application-level exceptions."""

from typing import Optional, Sequence


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


# =============================================================================
# Transport errors (remote source). Always retryable by fetching again.
# =============================================================================


class TransportError(AppError):
    """Base class for failures of the remote holdings source."""

    def __init__(self, message: str, code: str = "TRANSPORT_ERROR"):
        super().__init__(message, code=code)


class InvalidURLError(TransportError):
    """Raised when the configured endpoint URL cannot be used."""

    def __init__(self, url: str = ""):
        self.url = url
        super().__init__("Invalid URL" + (f": {url}" if url else ""), code="INVALID_URL")


class NoDataError(TransportError):
    """Raised when the response carried an empty body."""

    def __init__(self):
        super().__init__("No data received", code="NO_DATA")


class DecodingError(TransportError):
    """Raised when the response body does not match the wire format."""

    def __init__(self, detail: str):
        super().__init__(f"Failed to decode response: {detail}", code="DECODING_ERROR")


class ServerError(TransportError):
    """Raised for transport failures that fit no narrower category."""

    def __init__(self, detail: str):
        super().__init__(f"Server error: {detail}", code="SERVER_ERROR")


class HttpError(TransportError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.reason = message
        super().__init__(f"HTTP {status_code}: {message}", code="HTTP_ERROR")


class NetworkTimeoutError(TransportError):
    """Raised when the request did not complete within its timeout."""

    def __init__(self):
        super().__init__("Request timed out", code="TIMEOUT")


class NoInternetConnectionError(TransportError):
    """Raised when the endpoint cannot be reached at all."""

    def __init__(self):
        super().__init__("No internet connection", code="NO_INTERNET_CONNECTION")


# =============================================================================
# Cache errors. Treated as "no cached data", never fatal.
# =============================================================================


class CacheError(AppError):
    """Base class for cache persistence failures."""

    def __init__(self, message: str, code: str = "CACHE_ERROR"):
        super().__init__(message, code=code)


class CacheReadError(CacheError):
    """Raised when reading the cache store fails."""

    def __init__(self, key: str, detail: str):
        self.key = key
        super().__init__(f"Failed to read cache '{key}': {detail}", code="CACHE_READ_ERROR")


class CacheWriteError(CacheError):
    """Raised when a cache write fails; the write has been rolled back."""

    def __init__(self, key: str, detail: str):
        self.key = key
        super().__init__(f"Failed to write cache '{key}': {detail}", code="CACHE_WRITE_ERROR")


# =============================================================================
# Orchestration errors. Terminal for a single fetch call.
# =============================================================================


class OrchestrationError(AppError):
    """Base class for errors surfaced to the presentation layer."""


class NoDataAvailableError(OrchestrationError):
    """Raised when neither the network nor the cache yielded data."""

    def __init__(self, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__("No data available from any source", code="NO_DATA_AVAILABLE")


class AllSourcesFailedError(OrchestrationError):
    """Raised when every source raised; carries each source's error."""

    def __init__(self, errors: Sequence[Exception]):
        self.errors = list(errors)
        details = ", ".join(str(e) for e in self.errors)
        super().__init__(f"All data sources failed: {details}", code="ALL_SOURCES_FAILED")
