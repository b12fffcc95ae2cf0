"""
POI Categorizer
Maps tagged OSM entities onto the fixed category taxonomy

Tag combinations are assumed mutually exclusive upstream. If an entity
matches more than one rule, the first rule in CATEGORY_RULES wins.
"""

from typing import Iterable, List, Optional, Tuple

from data_sources.models import GeoPoint, RawEntity
from logging_config import get_logger
from .categories import CategorizedPoint, Category

logger = get_logger(__name__)

UNNAMED = "(Unnamed)"

# (tag key, tag value, category), checked in order
CATEGORY_RULES: Tuple[Tuple[str, str, Category], ...] = (
    ("amenity", "place_of_worship", Category.WORSHIP),
    ("amenity", "school", Category.SCHOOL),
    ("leisure", "park", Category.PARK),
    ("amenity", "childcare", Category.DAYCARE),
)

# (tag key, line label), in display order
DETAIL_TAGS: Tuple[Tuple[str, str], ...] = (
    ("denomination", "Denomination"),
    ("religion", "Religion"),
    ("operator", "Operator"),
)


def classify(entity: RawEntity) -> Category:
    """Return the entity's category, or Category.UNCATEGORIZED."""
    tags = entity.tags or {}
    for key, value, category in CATEGORY_RULES:
        if tags.get(key) == value:
            return category
    return Category.UNCATEGORIZED


def resolve_position(entity: RawEntity) -> Optional[GeoPoint]:
    """Own coordinates first, then the way/relation centroid."""
    if entity.lat is not None and entity.lon is not None:
        return GeoPoint(entity.lat, entity.lon)
    return entity.center


def detail_lines(entity: RawEntity) -> Tuple[str, ...]:
    tags = entity.tags or {}
    return tuple(f"{label}: {tags[key]}" for key, label in DETAIL_TAGS if tags.get(key))


def to_categorized_point(entity: RawEntity) -> Optional[CategorizedPoint]:
    """
    Build a map point for an entity.

    Returns None for geometry-less or uncategorized entities; both are
    expected in Overpass output and are not errors.
    """
    position = resolve_position(entity)
    if position is None:
        logger.debug(f"Dropping {entity.key}: no position", extra={"entity_key": entity.key})
        return None

    category = classify(entity)
    if category is Category.UNCATEGORIZED:
        logger.debug(f"Dropping {entity.key}: uncategorized", extra={"entity_key": entity.key})
        return None

    return CategorizedPoint(
        position=position,
        category=category,
        display_name=(entity.tags or {}).get("name") or UNNAMED,
        detail_lines=detail_lines(entity),
        entity_key=entity.key,
    )


def categorize_all(entities: Iterable[RawEntity]) -> List[CategorizedPoint]:
    points = []
    for entity in entities:
        point = to_categorized_point(entity)
        if point is not None:
            points.append(point)
    return points
