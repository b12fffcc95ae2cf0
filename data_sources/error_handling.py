"""
Error taxonomy for POI Finder
Provider failures, geocoding misses and rejected search requests
"""

import asyncio
from typing import Callable, Optional, Type
from functools import wraps

from logging_config import get_logger

logger = get_logger(__name__)


class PoiFinderError(Exception):
    """Base exception for POI Finder errors."""
    pass


class APIError(PoiFinderError):
    """Exception for API-related errors."""
    def __init__(self, message: str, api_name: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.api_name = api_name
        self.status_code = status_code


class GeocodingTransportError(APIError):
    """Geocoding provider unreachable or returned a non-success response."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, "nominatim", status_code)


class ProviderError(APIError):
    """POI provider unreachable or returned a non-success response."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, "overpass", status_code)


class GeocodingNotFound(PoiFinderError):
    """The geocoding provider returned zero candidates for an address."""
    def __init__(self, address: str):
        super().__init__(f"No results for that address: {address}")
        self.address = address


class InvalidSearchRequest(PoiFinderError):
    """The trigger input was rejected before any provider was contacted."""
    pass


class SearchInProgress(PoiFinderError):
    """Another search is still running on the same controller."""
    def __init__(self):
        super().__init__("A search is already in progress. Try again when it finishes.")


def handle_api_timeout(timeout_seconds: float, error_cls: Type[APIError]):
    """
    Decorator bounding a provider coroutine with asyncio.wait_for.

    A timeout is re-raised as ``error_cls`` with status 408 so callers only
    ever see the provider's own error type.

    Args:
        timeout_seconds: Timeout in seconds
        error_cls: APIError subclass taking (message, status_code)
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_seconds)
            except asyncio.TimeoutError:
                logger.warning(f"Function {func.__name__} timed out after {timeout_seconds}s")
                raise error_cls(f"Request timed out after {timeout_seconds} seconds", 408)
        return async_wrapper
    return decorator
