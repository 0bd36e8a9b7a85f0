import logging
from typing import Iterable, List, Optional, Tuple

import requests

from aidrelief.errors import GeolocationUnavailable
from aidrelief.schemas import AidRequest, Location, MapPoint, MapView
from aidrelief.settings import settings

logger = logging.getLogger("maps")

GEOLOCATE_URL = "https://www.googleapis.com/geolocation/v1/geolocate"

SEVERITY_WEIGHTS = {"High": 5, "Low": 1}
DEFAULT_WEIGHT = 3


def severity_weight(severity: Optional[str]) -> int:
    return SEVERITY_WEIGHTS.get(severity or "", DEFAULT_WEIGHT)


def heatmap_points(items: Iterable[AidRequest]) -> List[MapPoint]:
    return [
        MapPoint(location=x.location, weight=severity_weight(x.severity))
        for x in items
        if x.location is not None
    ]


def average_center(items: Iterable[AidRequest]) -> Optional[Location]:
    locs = [x.location for x in items if x.location is not None]
    if not locs:
        return None
    return Location(
        latitude=sum(p.latitude for p in locs) / len(locs),
        longitude=sum(p.longitude for p in locs) / len(locs),
    )


def locate() -> Location:
    """Best-effort position from the Google Geolocation API."""
    if not settings.GOOGLE_MAPS_API_KEY:
        raise GeolocationUnavailable("GOOGLE_MAPS_API_KEY not configured.")

    try:
        r = requests.post(
            GEOLOCATE_URL,
            params={"key": settings.GOOGLE_MAPS_API_KEY},
            json={"considerIp": True},
            timeout=settings.GEOLOCATION_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise GeolocationUnavailable(f"Geolocation request failed: {e}") from e

    if r.status_code >= 400:
        try:
            j = r.json()
        except ValueError:
            j = {"raw": r.text}
        raise GeolocationUnavailable(f"Geolocation API error ({r.status_code}): {j}")

    try:
        loc = r.json()["location"]
        return Location(latitude=float(loc["lat"]), longitude=float(loc["lng"]))
    except (ValueError, KeyError, TypeError) as e:

        raise GeolocationUnavailable(f"Unexpected geolocation payload: {e}") from e

def resolve_map_center(items: List[AidRequest], current: Optional[Location] = None) -> Tuple[Location, str]:
    """Pick the map center and report where it came from.

    ``current`` is the admin's own position as read by their browser. Without
    it the center is the mean of the request locations; the server-side
    Geolocation API (which locates this host, not the admin) and the
    configured default are last resorts.
    """
    if current is not None:
        return current, "client"

    avg = average_center(items)
    if avg is not None:
        return avg, "requests"

    try:
        return locate(), "geolocation"
    except GeolocationUnavailable as e:
        logger.warning("Geolocation unavailable, using default center: %s", e)
    return Location(latitude=settings.DEFAULT_MAP_LAT, longitude=settings.DEFAULT_MAP_LNG), "default"


def map_view(items: List[AidRequest], current: Optional[Location] = None) -> MapView:
    center, source = resolve_map_center(items, current)
    return MapView(center=center, centerSource=source, points=heatmap_points(items))
