import asyncio
import unittest

from data_sources.async_osm_api import ResultFetcher, parse_elements
from data_sources.error_handling import ProviderError
from data_sources.models import GeoPoint, SearchOptions
from fakes import FakeOverpassClient, node, provider_down, way

CENTER = GeoPoint(32.8407, -83.6324)
ALL_ON = SearchOptions(worship=True, schools=True, parks=True, daycare=True)


class TestResultFetcher(unittest.TestCase):
    """Unit test (no network): canned Overpass bodies."""

    def test_no_categories_skips_provider(self):
        client = FakeOverpassClient()
        fetcher = ResultFetcher(client)

        area = asyncio.run(fetcher.fetch_area(CENTER, 1000, SearchOptions()))
        at_center = asyncio.run(fetcher.fetch_at_center(CENTER, SearchOptions()))

        self.assertEqual(area, [])
        self.assertEqual(at_center, [])
        self.assertEqual(client.queries, [])

    def test_area_parses_elements(self):
        client = FakeOverpassClient(area={"elements": [
            node(55, 1.0, 2.0, amenity="school", name="Oak School"),
            way(9, center=(3.0, 4.0), amenity="place_of_worship"),
        ]})
        entities = asyncio.run(ResultFetcher(client).fetch_area(CENTER, 1000, ALL_ON))

        self.assertEqual([e.key for e in entities], ["node/55", "way/9"])
        self.assertEqual(entities[1].center, GeoPoint(3.0, 4.0))
        self.assertIn("(around:1000,", client.queries[0])

    def test_missing_elements_is_empty(self):
        client = FakeOverpassClient(area={"version": 0.6})
        self.assertEqual(asyncio.run(ResultFetcher(client).fetch_area(CENTER, 1000, ALL_ON)), [])

    def test_area_failure_raises(self):
        client = FakeOverpassClient(area=provider_down(504))
        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(ResultFetcher(client).fetch_area(CENTER, 1000, ALL_ON))
        self.assertEqual(ctx.exception.status_code, 504)
        self.assertEqual(ctx.exception.api_name, "overpass")

    def test_center_query_failure_is_empty(self):
        client = FakeOverpassClient(center=provider_down())
        self.assertEqual(asyncio.run(ResultFetcher(client).fetch_at_center(CENTER, ALL_ON)), [])

    def test_malformed_area_element_is_dropped(self):
        client = FakeOverpassClient(area={"elements": [
            way(9, center=(95.0, 4.0), amenity="place_of_worship"),
            node(55, 1.0, 2.0, amenity="school"),
        ]})
        entities = asyncio.run(ResultFetcher(client).fetch_area(CENTER, 1000, ALL_ON))
        self.assertEqual([e.key for e in entities], ["node/55"])

    def test_malformed_center_element_is_dropped(self):
        client = FakeOverpassClient(center={"elements": [
            {"type": "node", "id": 2, "lat": "n/a", "lon": "n/a", "tags": {"amenity": "school"}},
        ]})
        self.assertEqual(asyncio.run(ResultFetcher(client).fetch_at_center(CENTER, ALL_ON)), [])

    def test_center_query_uses_tiny_radius(self):
        client = FakeOverpassClient(center={"elements": [node(1, 32.8407, -83.6324, amenity="school")]})
        entities = asyncio.run(ResultFetcher(client).fetch_at_center(CENTER, SearchOptions(schools=True)))

        self.assertEqual([e.key for e in entities], ["node/1"])
        self.assertIn("(around:5,32.8407,-83.6324)", client.queries[0])


def test_parse_elements_tolerates_none():
    assert parse_elements(None) == []
    assert parse_elements({"elements": None}) == []


def test_parse_elements_skips_malformed_and_keeps_the_rest():
    entities = parse_elements({"elements": [
        node(1, 1.0, 2.0, leisure="park"),
        {"type": "node", "id": 2, "lat": "n/a", "lon": "n/a"},
        way(3, center=(95.0, 4.0), amenity="school"),
        {"type": "node", "lat": 1.0, "lon": 2.0, "tags": {"amenity": "school"}},
        {"type": "way", "id": None, "center": {"lat": 1.0, "lon": 2.0}},
        "not an element",
        way(4, center=(3.0, 4.0), amenity="school"),
    ]})
    assert [e.key for e in entities] == ["node/1", "way/4"]


def test_id_less_elements_are_not_merged_into_one():
    entities = parse_elements({"elements": [
        {"type": "node", "lat": 1.0, "lon": 2.0, "tags": {"leisure": "park"}},
        {"type": "node", "lat": 3.0, "lon": 4.0, "tags": {"leisure": "park"}},
    ]})
    assert entities == []
