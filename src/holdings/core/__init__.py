"""Core utilities and exceptions."""

from holdings.core.exceptions import (
    AppError,
    ValidationError,
    TransportError,
    InvalidURLError,
    NoDataError,
    DecodingError,
    ServerError,
    HttpError,
    NetworkTimeoutError,
    NoInternetConnectionError,
    CacheError,
    CacheReadError,
    CacheWriteError,
    OrchestrationError,
    NoDataAvailableError,
    AllSourcesFailedError,
)

__all__ = [
    "AppError",
    "ValidationError",
    "TransportError",
    "InvalidURLError",
    "NoDataError",
    "DecodingError",
    "ServerError",
    "HttpError",
    "NetworkTimeoutError",
    "NoInternetConnectionError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "OrchestrationError",
    "NoDataAvailableError",
    "AllSourcesFailedError",
]
