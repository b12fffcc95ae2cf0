"""
POIs Package
Deduplication, categorization and aggregation of provider results
"""

from . import categories
from . import categorizer
from . import dedup
from . import aggregation
from . import display
from . import search

__all__ = [
    'categories',
    'categorizer',
    'dedup',
    'aggregation',
    'display',
    'search',
]
