# ors_utils.py
# OpenRouteService as an alternative routing provider. Answers are reshaped
# into the Google Directions layout so the same validation applies.

import os
import logging
from typing import Optional

import openrouteservice
from openrouteservice.exceptions import ApiError

logger = logging.getLogger(__name__)


def _client(api_key: Optional[str] = None) -> openrouteservice.Client:
    api_key = api_key or os.getenv("ORS_API_KEY")
    if not api_key:
        raise EnvironmentError("ORS_API_KEY environment variable is required")
    return openrouteservice.Client(key=api_key)


def geocode(client: openrouteservice.Client, address: str) -> Optional[list]:
    """Returns [lon, lat] for the top pelias hit, or None if nothing matched."""
    result = client.pelias_search(text=address, size=1)
    features = result.get("features", [])
    if not features:
        return None
    lon, lat = features[0]["geometry"]["coordinates"][:2]
    return [lon, lat]


def to_directions_response(data: dict) -> dict:
    """
    Converts an ORS v2 directions JSON answer into the Google Directions
    shape: routes[].legs[].distance.value / steps[].html_instructions.
    """
    routes = []
    for route in data.get("routes", []):
        legs = []
        for segment in route.get("segments", []):
            legs.append({
                "distance": {"value": segment.get("distance", 0)},
                "steps": [
                    {
                        "html_instructions": step.get("instruction", ""),
                        "distance": {"value": step.get("distance", 0)},
                    }
                    for step in segment.get("steps", [])
                ],
            })
        routes.append({"legs": legs})
    return {"status": "OK", "routes": routes}


def lookup_route(origin: str, destination: str, api_key: Optional[str] = None,
                 client: Optional[openrouteservice.Client] = None) -> dict:
    client = client or _client(api_key)

    try:
        start = geocode(client, origin)
        if start is None:
            return {"status": "NOT_FOUND", "error_message": f"Could not geocode origin: {origin}"}
        end = geocode(client, destination)
        if end is None:
            return {"status": "NOT_FOUND", "error_message": f"Could not geocode destination: {destination}"}

        logger.debug("Requesting ORS directions: %s -> %s", start, end)
        data = client.directions([start, end], profile="driving-car", format="json", instructions=True)
    except ApiError as e:
        return {"status": "ROUTE_ERROR", "error_message": str(e)}

    return to_directions_response(data)
