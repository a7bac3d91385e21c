"""Selection cost for the nearest-neighbor heuristic.

Lower cost means a more attractive next stop. The cost blends straight-line
travel distance with a time-window compliance penalty and scales the result by
a priority multiplier so that high-priority visits are preferred.
"""

from __future__ import annotations

import math

from ...models.domain import Coordinate, Priority, RouteSettings, TimeWindow, Visit
from ..geospatial import distance_between
from .exceptions import InvalidSpeed

DISTANCE_WEIGHT = 0.7
TIME_WINDOW_WEIGHT = 0.3

PRIORITY_MULTIPLIERS: dict[Priority, float] = {
    Priority.HIGH: 0.8,
    Priority.MEDIUM: 1.0,
    Priority.LOW: 1.2,
}


def effective_speed_kmh(settings: RouteSettings) -> float:
    speed = settings.average_speed_kmh
    if settings.include_traffic_buffer:
        speed *= 1 - settings.traffic_buffer_percent / 100
    if not math.isfinite(speed) or speed <= 0:
        raise InvalidSpeed(f"Effective travel speed must be a positive number, got {speed:.2f} km/h.")
    return speed


def travel_time_minutes(distance_km: float, speed_kmh: float) -> float:
    return distance_km / speed_kmh * 60


def priority_multiplier(priority: Priority) -> float:
    return PRIORITY_MULTIPLIERS[priority]


def time_window_cost(window: TimeWindow, arrival_min: float) -> float:
    """Zero inside the window, linear when early, quadratic (in hours) when late."""

    if window.start_min <= arrival_min <= window.end_min:
        return 0.0
    if arrival_min < window.start_min:
        return (window.start_min - arrival_min) / 60
    return ((arrival_min - window.end_min) / 60) ** 2


def selection_cost(
    current_location: Coordinate,
    current_time_min: float,
    visit: Visit,
    settings: RouteSettings,
    *,
    speed_kmh: float | None = None,
) -> float:
    distance_km = distance_between(current_location, visit.location)
    cost = distance_km
    if settings.prioritize_time_windows:
        speed = speed_kmh if speed_kmh is not None else effective_speed_kmh(settings)
        arrival = current_time_min + travel_time_minutes(distance_km, speed)
        cost = DISTANCE_WEIGHT * distance_km + TIME_WINDOW_WEIGHT * time_window_cost(visit.time_window, arrival)
    return cost * priority_multiplier(visit.priority)
