# cloud_function.py
import logging

from flask import Request

from .config import get_setting
from .formatter import format_itinerary
from .gmaps_utils import RouteUnavailable, fetch_directions, get_provider
from .units import meters_to_miles

logger = logging.getLogger(__name__)


def entry_point(request: Request):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return {"error": "request body must be a JSON object"}, 400

    origin = data.get("origin") or ""
    destination = data.get("destination") or ""
    if not isinstance(origin, str) or not isinstance(destination, str):
        return {"error": "origin and destination must be strings"}, 400

    origin, destination = origin.strip(), destination.strip()
    if not origin or not destination:
        return {"error": "origin and destination are required"}, 400

    try:
        provider = get_provider(data.get("provider") or get_setting("DIRECTIONS_PROVIDER", "google"))
    except ValueError as e:
        return {"error": str(e)}, 400

    try:
        itinerary = fetch_directions(origin, destination, provider=provider)
    except RouteUnavailable as e:
        logger.warning("No route %s -> %s: %s", origin, destination, e.message)
        return {"error": e.message, "status": e.status}, 502

    return {
        "distance_meters": itinerary.distance_meters,
        "distance_miles": meters_to_miles(itinerary.distance_meters),
        "rows": [
            {"instruction": row.instruction, "meters": row.meters, "miles": row.miles}
            for row in format_itinerary(itinerary)
        ],
    }
