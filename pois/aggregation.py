"""
Per-category result counts for the summary panel
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping

from .categories import CategorizedPoint, Category

CountsByCategory = Mapping[Category, int]


def accumulate(points: Iterable[CategorizedPoint]) -> CountsByCategory:
    """
    Count points per category.

    All four real categories are always present; UNCATEGORIZED never is.
    The result is a read-only view.
    """
    counts: Dict[Category, int] = {category: 0 for category in Category.real()}
    for point in points:
        if point.category in counts:
            counts[point.category] += 1
    return MappingProxyType(counts)


def counts_as_json(counts: CountsByCategory) -> Dict[str, int]:
    return {category.value: counts.get(category, 0) for category in Category.real()}
