"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import Coordinate
from .routing.exceptions import InvalidCoordinate

EARTH_RADIUS_KM = 6371.0


def validate_coordinate(lat: float, lon: float) -> None:
    """Raise InvalidCoordinate unless (lat, lon) is a finite WGS84 position."""

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinate(f"Coordinate ({lat}, {lon}) is not finite.")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude {lat} is outside [-90, 90].")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"Longitude {lon} is outside [-180, 180].")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    if not all(math.isfinite(value) for value in (lat1, lon1, lat2, lon2)):
        raise InvalidCoordinate(f"Cannot measure distance between ({lat1}, {lon1}) and ({lat2}, {lon2}).")

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_between(origin: Coordinate, destination: Coordinate) -> float:
    return haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
