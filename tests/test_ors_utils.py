import unittest
from unittest.mock import MagicMock

from openrouteservice.exceptions import ApiError

from directionsheet.gmaps_utils import RouteUnavailable, fetch_directions
from directionsheet.ors_utils import lookup_route, to_directions_response

ORS_ANSWER = {
    "routes": [{
        "summary": {"distance": 1500.0},
        "segments": [{
            "distance": 1500.0,
            "steps": [
                {"distance": 400.0, "instruction": "Head south on Lisburn Road"},
                {"distance": 1100.0, "instruction": "Turn left onto University Road"},
                {"distance": 0.0, "instruction": "Arrive at University Road, on the left"},
            ],
        }],
    }],
}


def feature(lon, lat):
    return {"features": [{"geometry": {"coordinates": [lon, lat]}}]}


class TestOrsProvider(unittest.TestCase):

    def setUp(self):
        self.client = MagicMock()
        self.client.pelias_search.side_effect = [feature(-5.95, 54.58), feature(-5.93, 54.58)]
        self.client.directions.return_value = ORS_ANSWER

    def test_lookup_route_reshapes_answer(self):
        result = lookup_route("Belfast City Hospital", "Queen's University", client=self.client)

        self.assertEqual(result["status"], "OK")
        leg = result["routes"][0]["legs"][0]
        self.assertEqual(leg["distance"]["value"], 1500.0)
        self.assertEqual(leg["steps"][1]["html_instructions"], "Turn left onto University Road")
        coords = self.client.directions.call_args.args[0]
        self.assertEqual(coords, [[-5.95, 54.58], [-5.93, 54.58]])

    def test_feeds_fetch_directions(self):
        provider = lambda o, d: lookup_route(o, d, client=self.client)
        itinerary = fetch_directions("A", "B", provider=provider)
        self.assertEqual(len(itinerary.steps), 3)
        self.assertEqual(itinerary.distance_meters, 1500.0)

    def test_geocode_miss_is_not_found(self):
        self.client.pelias_search.side_effect = [{"features": []}]
        result = lookup_route("Atlantis", "B", client=self.client)
        self.assertEqual(result["status"], "NOT_FOUND")
        self.assertIn("Atlantis", result["error_message"])
        self.client.directions.assert_not_called()

    def test_api_error_becomes_route_unavailable(self):
        self.client.directions.side_effect = ApiError(404, {"error": "Route could not be found"})
        provider = lambda o, d: lookup_route(o, d, client=self.client)
        with self.assertRaises(RouteUnavailable) as ctx:
            fetch_directions("A", "B", provider=provider)
        self.assertIn("Route could not be found", ctx.exception.message)

    def test_geocode_api_error_becomes_route_unavailable(self):
        self.client.pelias_search.side_effect = ApiError(403, {"error": "quota"})
        provider = lambda o, d: lookup_route(o, d, client=self.client)
        with self.assertRaises(RouteUnavailable) as ctx:
            fetch_directions("A", "B", provider=provider)
        self.assertEqual(ctx.exception.status, "ROUTE_ERROR")
        self.assertIn("quota", ctx.exception.message)
        self.client.directions.assert_not_called()

    def test_empty_answer_has_no_routes(self):
        self.assertEqual(to_directions_response({}), {"status": "OK", "routes": []})


if __name__ == "__main__":
    unittest.main()
