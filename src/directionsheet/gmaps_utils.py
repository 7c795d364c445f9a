# gmaps_utils.py
import os
import logging
from typing import Callable, Optional

import requests

from .formatter import strip_markup
from .itinerary import Itinerary, Step

logger = logging.getLogger(__name__)

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"

LookupRoute = Callable[[str, str], dict]


class RouteUnavailable(Exception):
    """The routing provider answered with something other than an OK status."""

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status


# ─── Provider call: Google Directions API ──────────────────────────────────────
def lookup_route(origin: str, destination: str, api_key: Optional[str] = None, timeout=None) -> dict:
    """
    Asks the Google Directions API for a driving route and returns the JSON
    body untouched. HTTP-level failures raise requests exceptions; route-level
    failures are reported through the body's "status" field.
    """
    api_key = api_key or os.getenv("GMAPS_API_KEY")
    if not api_key:
        raise EnvironmentError("GMAPS_API_KEY environment variable is required")

    params = {
        "origin": origin,
        "destination": destination,
        "mode": "driving",
        "key": api_key,
    }
    logger.debug("Requesting Google directions: %s -> %s", origin, destination)
    response = requests.get(DIRECTIONS_URL, params=params, timeout=timeout)
    response.raise_for_status()
    return response.json()


# ─── Response → Itinerary ──────────────────────────────────────────────────────
def itinerary_from_response(data: dict) -> Itinerary:
    """
    Validates a Directions-shaped response and builds an Itinerary from the
    first leg of the first route.
    """
    status = data.get("status")
    if status != "OK":
        raise RouteUnavailable(data.get("error_message") or f"Directions request failed: {status}", status=status)

    routes = data.get("routes") or []
    legs = routes[0].get("legs") if routes else None
    if not legs:
        raise RouteUnavailable("Provider returned no route", status=status)

    leg = legs[0]
    steps = tuple(
        Step(
            instruction=strip_markup(step.get("html_instructions", "")),
            distance_meters=step["distance"]["value"],
        )
        for step in leg.get("steps", [])
    )
    if not steps:
        raise RouteUnavailable("Provider returned a route without steps", status=status)

    return Itinerary(distance_meters=leg["distance"]["value"], steps=steps)


def fetch_directions(origin: str, destination: str, provider: Optional[LookupRoute] = None) -> Itinerary:
    """
    Fetches driving directions between two addresses.

    Makes a single provider call; nothing is retried and a non-OK status is
    raised straight back to the caller as RouteUnavailable.
    """
    provider = provider or lookup_route
    return itinerary_from_response(provider(origin, destination))


def get_provider(name: str) -> LookupRoute:
    """Maps a provider name ("google" or "ors") to its lookup function."""
    name = (name or "google").strip().lower()
    if name == "google":
        return lookup_route
    if name == "ors":
        from .ors_utils import lookup_route as ors_lookup_route
        return ors_lookup_route
    raise ValueError(f"Unknown directions provider: {name}")
