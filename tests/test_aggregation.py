import pytest

from data_sources.models import GeoPoint
from pois.aggregation import accumulate, counts_as_json
from pois.categories import CategorizedPoint, Category


def _point(category):
    return CategorizedPoint(position=GeoPoint(1.0, 2.0), category=category, display_name="x")


def test_empty_has_all_four_zero():
    counts = accumulate([])
    assert counts == {
        Category.WORSHIP: 0,
        Category.SCHOOL: 0,
        Category.PARK: 0,
        Category.DAYCARE: 0,
    }
    assert Category.UNCATEGORIZED not in counts


def test_counts_per_category_sum_to_total():
    points = [
        _point(Category.PARK),
        _point(Category.PARK),
        _point(Category.SCHOOL),
        _point(Category.DAYCARE),
        _point(Category.PARK),
    ]
    counts = accumulate(points)

    assert counts[Category.PARK] == 3
    assert counts[Category.SCHOOL] == 1
    assert counts[Category.DAYCARE] == 1
    assert counts[Category.WORSHIP] == 0
    assert sum(counts.values()) == len(points)


def test_each_call_returns_a_fresh_mapping():
    first = accumulate([_point(Category.WORSHIP)])
    second = accumulate([])
    assert first[Category.WORSHIP] == 1
    assert second[Category.WORSHIP] == 0


def test_counts_as_json_uses_string_keys_in_fixed_order():
    counts = accumulate([_point(Category.DAYCARE)])
    assert list(counts_as_json(counts).items()) == [
        ("worship", 0),
        ("school", 0),
        ("park", 0),
        ("daycare", 1),
    ]


def test_counts_are_read_only():
    counts = accumulate([_point(Category.PARK)])
    with pytest.raises(TypeError):
        counts[Category.PARK] = 5
    assert counts[Category.PARK] == 1
