"""
Category taxonomy and display styles
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from data_sources.models import GeoPoint


class Category(Enum):
    """Fixed POI buckets, plus a sentinel for anything that matches none."""
    WORSHIP = "worship"
    SCHOOL = "school"
    PARK = "park"
    DAYCARE = "daycare"
    UNCATEGORIZED = "uncategorized"

    @classmethod
    def real(cls) -> Tuple["Category", ...]:
        return (cls.WORSHIP, cls.SCHOOL, cls.PARK, cls.DAYCARE)


@dataclass(frozen=True)
class CategoryStyle:
    color: str
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {"color": self.color, "label": self.label}


CATEGORY_STYLES: Dict[Category, CategoryStyle] = {
    Category.WORSHIP: CategoryStyle("#f56565", "Place of Worship"),
    Category.SCHOOL: CategoryStyle("#ecc94b", "School"),
    Category.PARK: CategoryStyle("#48bb78", "Park"),
    Category.DAYCARE: CategoryStyle("#9f7aea", "Daycare"),
}


@dataclass(frozen=True)
class CategorizedPoint:
    """A POI ready for a map marker."""
    position: GeoPoint
    category: Category
    display_name: str
    detail_lines: Tuple[str, ...] = ()
    entity_key: str = ""

    def to_dict(self) -> Dict:
        style = CATEGORY_STYLES[self.category]
        return {
            "key": self.entity_key,
            **self.position.to_dict(),
            "category": self.category.value,
            "category_label": style.label,
            "color": style.color,
            "name": self.display_name,
            "details": list(self.detail_lines),
        }
