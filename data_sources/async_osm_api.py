"""
Async OpenStreetMap API Client
Runs category queries against the Overpass interpreter
"""

import aiohttp
import os
from typing import Any, Dict, List, Optional

from .error_handling import ProviderError, handle_api_timeout
from .models import GeoPoint, RawEntity, SearchOptions
from .overpass_query import CENTER_QUERY_RADIUS_M, build_overpass_query
from logging_config import get_logger, log_api_call

logger = get_logger(__name__)

OVERPASS_URL = os.getenv("OVERPASS_URL", "https://overpass.kumi.systems/api/interpreter")
OVERPASS_TIMEOUT_S = float(os.getenv("OVERPASS_TIMEOUT_S", "35"))
USER_AGENT = os.getenv("POIFINDER_USER_AGENT", "POIFinder/1.0")

# Global session for connection reuse
_session = None


async def get_session():
    """Get or create aiohttp session for connection reuse."""
    global _session
    if _session is None or _session.closed:
        connector = aiohttp.TCPConnector(limit=100, limit_per_host=30)
        timeout = aiohttp.ClientTimeout(total=OVERPASS_TIMEOUT_S + 5, connect=10)
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


class OverpassClient:
    """Posts Overpass QL and returns the decoded JSON body."""

    def __init__(self, url: str = OVERPASS_URL, session: Optional[aiohttp.ClientSession] = None):
        self.url = url
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None:
            return self._session
        return await get_session()

    @handle_api_timeout(timeout_seconds=OVERPASS_TIMEOUT_S, error_cls=ProviderError)
    async def run_query(self, query: str) -> Dict[str, Any]:
        """
        Execute a query.

        Raises:
            ProviderError: on network failure, non-200 status or a non-JSON body
        """
        session = await self._get_session()
        log_api_call(logger, "overpass", self.url)
        try:
            async with session.post(self.url, data={"data": query}) as resp:
                if resp.status != 200:
                    logger.warning(f"Overpass query failed with status {resp.status}", extra={
                        "api_name": "overpass",
                        "status_code": resp.status,
                    })
                    raise ProviderError(f"Overpass API request failed (HTTP {resp.status})", resp.status)
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise ProviderError(f"Overpass API returned a non-JSON response: {e}", resp.status) from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Overpass API unreachable: {e}") from e


def parse_elements(data: Optional[Dict[str, Any]]) -> List[RawEntity]:
    """
    Convert an Overpass JSON body into RawEntity records.

    Malformed elements are skipped and logged at DEBUG; the rest of the
    body is still used.
    """
    elements = (data or {}).get("elements") or []
    entities = []
    for el in elements:
        try:
            entities.append(RawEntity.from_element(el))
        except (TypeError, ValueError) as e:
            key = f"{el.get('type')}/{el.get('id')}" if isinstance(el, dict) else "?"
            logger.debug(f"Skipping malformed element {key}: {e}", extra={"entity_key": key})
    return entities


class ResultFetcher:
    """
    Area search and center-point query against the POI provider.

    Both calls short-circuit to an empty list when no category is enabled.
    An area failure is raised; a center-query failure is logged and
    treated as "nothing at the center".
    """

    def __init__(self, client: Optional[OverpassClient] = None):
        self.client = client or OverpassClient()

    async def fetch_area(self, center: GeoPoint, radius_m: float,
                         options: SearchOptions) -> List[RawEntity]:
        query = build_overpass_query(center, radius_m, options)
        if query is None:
            return []

        data = await self.client.run_query(query)
        entities = parse_elements(data)
        logger.info(f"Overpass area query returned {len(entities)} elements", extra={
            "lat": center.lat,
            "lon": center.lon,
            "radius_m": radius_m,
            "element_count": len(entities),
        })
        return entities

    async def fetch_at_center(self, center: GeoPoint, options: SearchOptions) -> List[RawEntity]:
        query = build_overpass_query(center, CENTER_QUERY_RADIUS_M, options)
        if query is None:
            return []

        try:
            data = await self.client.run_query(query)
        except ProviderError as e:
            logger.warning(f"Center-point query failed, continuing without it: {e}", extra={
                "lat": center.lat,
                "lon": center.lon,
                "api_name": "overpass",
                "status_code": e.status_code,
            })
            return []
        return parse_elements(data)
