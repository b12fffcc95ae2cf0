"""
Result deduplication
Area and center-point results overlap; (type, id) identifies an OSM entity.
"""

from typing import List

from data_sources.models import RawEntity


def merge_unique(list_a: List[RawEntity], list_b: List[RawEntity]) -> List[RawEntity]:
    """
    Concatenate two result lists and keep the first entity seen per key.

    Later duplicates are dropped whole; no fields are merged.
    """
    seen = set()
    unique = []
    for entity in [*list_a, *list_b]:
        if entity.key in seen:
            continue
        seen.add(entity.key)
        unique.append(entity)
    return unique
