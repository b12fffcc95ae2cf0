import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

import main
from data_sources.async_osm_api import ResultFetcher
from data_sources.error_handling import GeocodingNotFound, GeocodingTransportError
from pois.display import DisplaySink
from pois.search import SearchController
from fakes import FakeGeocoder, FakeOverpassClient, node, provider_down, way


def _controller(geocoder=None, client=None):
    return SearchController(
        geocoder or FakeGeocoder(),
        ResultFetcher(client or FakeOverpassClient()),
        sink=DisplaySink(),
        allowed_radii_m=(500, 1000),
    )


class TestSearchEndpoint(unittest.TestCase):
    """API test (no network): the module-level controller is swapped for fakes."""

    def _get(self, controller, path, **params):
        with patch.object(main, "controller", controller):
            return TestClient(main.app).get(path, params=params)

    def test_search_returns_display_state(self):
        client = FakeOverpassClient(area={"elements": [
            node(55, 1.0, 2.0, amenity="school", name="Oak School"),
            way(9, center=(3.0, 4.0), amenity="place_of_worship", denomination="baptist"),
        ]})
        resp = self._get(_controller(client=client), "/search", address="1 Main St", radius_m=1000)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["center"]["label"], "Macon, Georgia")
        self.assertEqual(body["radius_m"], 1000)
        self.assertEqual(body["counts"], {"worship": 1, "school": 1, "park": 0, "daycare": 0})
        worship = [p for p in body["pois"] if p["category"] == "worship"][0]
        self.assertEqual(worship["name"], "(Unnamed)")
        self.assertEqual(worship["details"], ["Denomination: baptist"])
        self.assertEqual(worship["color"], "#f56565")
        self.assertEqual(body["styles"]["park"]["label"], "Park")

    def test_category_flags_are_forwarded(self):
        client = FakeOverpassClient()
        self._get(_controller(client=client), "/search", address="1 Main St", radius_m=500,
                  worship="false", schools="false", parks="true", daycare="false")
        self.assertTrue(client.queries)
        for query in client.queries:
            self.assertEqual(query.count("nwr["), 1)
            self.assertIn('"leisure"="park"', query)

    def test_error_mapping(self):
        cases = [
            (_controller(), {"address": " ", "radius_m": 1000}, 400),
            (_controller(), {"address": "1 Main St", "radius_m": 42}, 400),
            (_controller(geocoder=FakeGeocoder(error=GeocodingNotFound("x"))),
             {"address": "x", "radius_m": 1000}, 404),
            (_controller(geocoder=FakeGeocoder(error=GeocodingTransportError("down", 503))),
             {"address": "x", "radius_m": 1000}, 502),
            (_controller(client=FakeOverpassClient(area=provider_down())),
             {"address": "x", "radius_m": 1000}, 502),
        ]
        for controller, params, expected in cases:
            resp = self._get(controller, "/search", **params)
            self.assertEqual(resp.status_code, expected, params)
            self.assertTrue(resp.json()["detail"])

    def test_display_endpoint(self):
        controller = _controller()
        self.assertEqual(self._get(controller, "/display").status_code, 404)

        self._get(controller, "/search", address="1 Main St", radius_m=500)
        resp = self._get(controller, "/display")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["radius_m"], 500)


def test_root_and_categories():
    client = TestClient(main.app)
    root = client.get("/").json()
    assert root["categories"] == ["worship", "school", "park", "daycare"]

    categories = client.get("/categories").json()
    assert categories["daycare"] == {"color": "#9f7aea", "label": "Daycare"}


def test_health_and_telemetry():
    client = TestClient(main.app)
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/telemetry").json()["status"] == "success"
