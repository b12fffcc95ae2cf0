"""
Data Sources Package
API clients for the geocoding and POI providers
"""

from . import models
from . import overpass_query
from . import async_osm_api
from . import async_geocoding
from . import telemetry

__all__ = ['models', 'overpass_query', 'async_osm_api', 'async_geocoding', 'telemetry']
