from dotenv import load_dotenv

# Provider endpoints and radii are read at import time
load_dotenv()

import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from logging_config import setup_logging, get_logger
from data_sources import async_geocoding, async_osm_api
from data_sources.async_geocoding import NominatimGeocoder
from data_sources.async_osm_api import ResultFetcher
from data_sources.error_handling import (
    APIError,
    GeocodingNotFound,
    InvalidSearchRequest,
    SearchInProgress,
)
from data_sources.models import SearchOptions
from data_sources.telemetry import get_telemetry_stats
from pois.categories import CATEGORY_STYLES
from pois.search import ALLOWED_RADII_M, SearchController

setup_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    json_format=os.getenv("LOG_JSON", "true").lower() == "true",
)
logger = get_logger(__name__)

controller = SearchController(NominatimGeocoder(), ResultFetcher())


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await async_geocoding.close_session()
    await async_osm_api.close_session()


app = FastAPI(
    title="POI Finder API",
    description="Places of worship, schools, parks and daycares around an address",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "service": "POI Finder API",
        "status": "running",
        "version": "1.0.0",
        "categories": [category.value for category in CATEGORY_STYLES],
        "allowed_radii_m": list(ALLOWED_RADII_M),
        "endpoints": {
            "search": "/search?address=ADDRESS&radius_m=1000",
            "display": "/display",
            "docs": "/docs"
        }
    }


@app.get("/health")
def health_check():
    """Provider configuration and search state."""
    return {
        "status": "healthy",
        "checks": {
            "geocoding": f"Nominatim at {async_geocoding.NOMINATIM_URL} (no credentials required)",
            "pois": f"Overpass at {async_osm_api.OVERPASS_URL} (no credentials required)",
        },
        "search_in_progress": controller.in_progress,
        "version": "1.0.0",
    }


@app.get("/categories")
def categories():
    """Marker colour and label per category."""
    return {category.value: style.to_dict() for category, style in CATEGORY_STYLES.items()}


@app.get("/search")
async def search(address: str,
                 radius_m: int,
                 worship: bool = True,
                 schools: bool = True,
                 parks: bool = True,
                 daycare: bool = True):
    """
    Find categorized POIs within radius_m of an address.

    Parameters:
        address: Free-text address
        radius_m: Search radius in metres, one of the allowed radii
        worship, schools, parks, daycare: Category toggles

    Returns:
        Center marker, radius overlay, POI markers and per-category counts.
        With every toggle off the search still succeeds with no POIs.
    """
    request_id = f"req_{int(time.time() * 1000)}"
    options = SearchOptions(worship=worship, schools=schools, parks=parks, daycare=daycare)
    logger.info("Starting POI search", extra={
        "request_id": request_id,
        "address": address,
        "radius_m": radius_m,
    })

    try:
        state = await controller.search(address, radius_m, options, request_id=request_id)
    except InvalidSearchRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GeocodingNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SearchInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except APIError as e:
        raise HTTPException(status_code=502, detail=f"{e} ({e.api_name})")

    return state.to_dict()


@app.get("/display")
def current_display():
    """The display state left by the last completed search."""
    state = controller.sink.current
    if state is None:
        raise HTTPException(status_code=404, detail="No search has completed yet.")
    return state.to_dict()


@app.get("/telemetry")
def telemetry_endpoint():
    """Get telemetry and analytics data."""
    return {
        "status": "success",
        "telemetry": get_telemetry_stats()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
