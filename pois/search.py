"""
Search controller
Geocode -> area search + center query -> merge -> categorize -> count -> display
"""

import asyncio
import os
import time
from typing import Optional, Tuple

from data_sources.async_geocoding import NominatimGeocoder
from data_sources.async_osm_api import ResultFetcher
from data_sources.error_handling import (
    InvalidSearchRequest,
    PoiFinderError,
    SearchInProgress,
)
from data_sources.models import SearchOptions
from data_sources.telemetry import record_error, record_search_metrics
from logging_config import get_logger, log_error, log_performance
from .aggregation import accumulate, counts_as_json
from .categorizer import categorize_all
from .dedup import merge_unique
from .display import DisplaySink, DisplayState

logger = get_logger(__name__)


def _parse_radii(raw: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in raw.split(",") if part.strip())


# Radius choices offered to the user, in metres
ALLOWED_RADII_M: Tuple[int, ...] = _parse_radii(os.getenv("ALLOWED_RADII_M", "500,1000,1609,3219,8047"))


class SearchController:
    """
    Runs one search at a time and publishes the result to a DisplaySink.

    A second search started while one is in flight is rejected rather than
    queued, so the display is never written by two searches.
    """

    def __init__(self, geocoder: NominatimGeocoder, fetcher: ResultFetcher,
                 sink: Optional[DisplaySink] = None,
                 allowed_radii_m: Tuple[int, ...] = ALLOWED_RADII_M):
        self.geocoder = geocoder
        self.fetcher = fetcher
        self.sink = sink or DisplaySink()
        self.allowed_radii_m = allowed_radii_m
        self._lock = asyncio.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    def validate(self, address: str, radius_m: float) -> str:
        address = (address or "").strip()
        if not address:
            raise InvalidSearchRequest("Please enter an address.")
        if self.allowed_radii_m and radius_m not in self.allowed_radii_m:
            allowed = ", ".join(str(r) for r in self.allowed_radii_m)
            raise InvalidSearchRequest(f"radius_m must be one of: {allowed}")
        return address

    async def search(self, address: str, radius_m: float, options: SearchOptions,
                     request_id: Optional[str] = None) -> DisplayState:
        address = self.validate(address, radius_m)
        if self._lock.locked():
            raise SearchInProgress()

        async with self._lock:
            start_time = time.time()
            try:
                state, raw_count = await self._run(address, radius_m, options, request_id)
            except PoiFinderError as e:
                error_type = type(e).__name__
                record_error(error_type, address)
                log_error(logger, error_type, f"Search failed for {address!r}: {e}",
                          request_id=request_id, address=address)
                raise

            response_time = time.time() - start_time
            self.sink.replace(state)
            record_search_metrics(
                address, state.center.point.lat, state.center.point.lon, radius_m,
                raw_count, counts_as_json(state.counts), response_time,
            )
            log_performance(logger, "search", response_time, request_id=request_id,
                            address=address, radius_m=radius_m)
            return state

    async def _run(self, address: str, radius_m: float, options: SearchOptions,
                   request_id: Optional[str]) -> Tuple[DisplayState, int]:
        location = await self.geocoder.geocode(address)
        center = location.point
        logger.info("Location geocoded successfully", extra={
            "request_id": request_id,
            "lat": center.lat,
            "lon": center.lon,
        })

        area_task = asyncio.create_task(self.fetcher.fetch_area(center, radius_m, options))
        center_task = asyncio.create_task(self.fetcher.fetch_at_center(center, options))
        try:
            area_elements = await area_task
            center_elements = await center_task
        except BaseException:
            # An area failure (or cancellation of the search) ends both fetches
            area_task.cancel()
            center_task.cancel()
            await asyncio.gather(area_task, center_task, return_exceptions=True)
            raise

        unique = merge_unique(area_elements, center_elements)
        points = categorize_all(unique)
        counts = accumulate(points)
        logger.info(f"Search found {len(points)} POIs ({len(unique)} unique elements)", extra={
            "request_id": request_id,
            "radius_m": radius_m,
            "element_count": len(unique),
        })

        state = DisplayState(
            center=location,
            radius_m=radius_m,
            points=tuple(points),
            counts=counts,
        )
        return state, len(unique)
