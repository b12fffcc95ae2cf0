"""
Async Geocoding API Client
Async address lookup using Nominatim (OpenStreetMap)
"""

import aiohttp
import os
from typing import Optional

from .error_handling import GeocodingNotFound, GeocodingTransportError, handle_api_timeout
from .models import GeoPoint, Location
from logging_config import get_logger, log_api_call

logger = get_logger(__name__)

NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
NOMINATIM_TIMEOUT_S = float(os.getenv("NOMINATIM_TIMEOUT_S", "15"))
USER_AGENT = os.getenv("POIFINDER_USER_AGENT", "POIFinder/1.0")

# Global session for connection reuse
_session = None


async def get_session():
    """Get or create aiohttp session for connection reuse."""
    global _session
    if _session is None or _session.closed:
        connector = aiohttp.TCPConnector(limit=50, limit_per_host=10)
        timeout = aiohttp.ClientTimeout(total=NOMINATIM_TIMEOUT_S, connect=5, sock_read=10)
        _session = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT}
        )
    return _session


async def close_session():
    """Close the global session."""
    global _session
    if _session and not _session.closed:
        await _session.close()
        _session = None


class NominatimGeocoder:
    """Resolves a free-text address to its best Nominatim match."""

    def __init__(self, url: str = NOMINATIM_URL, session: Optional[aiohttp.ClientSession] = None):
        self.url = url
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None:
            return self._session
        return await get_session()

    @handle_api_timeout(timeout_seconds=NOMINATIM_TIMEOUT_S, error_cls=GeocodingTransportError)
    async def geocode(self, address: str) -> Location:
        """
        Geocode an address to its first (best) match.

        Args:
            address: Free-text address

        Returns:
            Location with the match coordinates and display label

        Raises:
            GeocodingNotFound: the provider has no candidate for the address
            GeocodingTransportError: the provider is unreachable or errored
        """
        params = {
            "q": address,
            "format": "json",
            "limit": 1
        }
        session = await self._get_session()
        log_api_call(logger, "nominatim", self.url, address=address)

        try:
            async with session.get(self.url, params=params,
                                   headers={"Accept-Language": "en"}) as response:
                if response.status != 200:
                    raise GeocodingTransportError(
                        f"Geocoding request failed (HTTP {response.status})", response.status
                    )
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise GeocodingTransportError(
                        f"Geocoding returned a non-JSON response: {e}", response.status
                    ) from e
        except aiohttp.ClientError as e:
            raise GeocodingTransportError(f"Geocoding request failed: {e}") from e

        if not data:
            raise GeocodingNotFound(address)

        result = data[0]
        try:
            point = GeoPoint(float(result["lat"]), float(result["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingTransportError(f"Geocoding returned an unusable match: {e}") from e

        return Location(point=point, label=result.get("display_name") or address)
