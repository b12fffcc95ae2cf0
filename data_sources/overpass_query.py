"""
Overpass QL query construction
Turns a center, radius and category toggles into one union query
"""

import os
from typing import List, Optional, Tuple

from .models import GeoPoint, SearchOptions

# Server-side execution bound embedded in every query
OVERPASS_QUERY_TIMEOUT_S = int(os.getenv("OVERPASS_QUERY_TIMEOUT_S", "25"))

# Radius used by the center-point query: effectively "at this point"
CENTER_QUERY_RADIUS_M = 5

# (SearchOptions flag, tag key, tag value), in clause order
CATEGORY_FILTERS: Tuple[Tuple[str, str, str], ...] = (
    ("worship", "amenity", "place_of_worship"),
    ("schools", "amenity", "school"),
    ("parks", "leisure", "park"),
    ("daycare", "amenity", "childcare"),
)


def build_clauses(center: GeoPoint, radius_m: float, options: SearchOptions) -> List[str]:
    """
    One ``nwr`` clause per enabled category, each bounded to the radius.

    Raises:
        ValueError: if radius_m is not positive
    """
    if radius_m <= 0:
        raise ValueError(f"radius_m must be positive, got {radius_m}")

    around = f"(around:{_format_number(radius_m)},{center.lat},{center.lon})"
    return [
        f'nwr["{key}"="{value}"]{around};'
        for flag, key, value in CATEGORY_FILTERS
        if getattr(options, flag)
    ]


def build_overpass_query(center: GeoPoint, radius_m: float, options: SearchOptions,
                         timeout_s: int = OVERPASS_QUERY_TIMEOUT_S) -> Optional[str]:
    """
    Build the Overpass QL union query for the enabled categories.

    ``out center`` makes ways and relations report a centroid alongside the
    node coordinates.

    Returns:
        The query text, or None when no category is enabled (skip the fetch).
    """
    clauses = build_clauses(center, radius_m, options)
    if not clauses:
        return None

    body = "\n      ".join(clauses)
    return f"""
    [out:json][timeout:{timeout_s}];
    (
      {body}
    );
    out center;
    """


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
