"""Summary metrics for a route."""

from __future__ import annotations

import math

from ...models.domain import Route, RouteStats


def calculate_route_stats(route: Route) -> RouteStats:
    """Aggregate a route into summary metrics.

    ``efficiency`` is a legacy 0-100 heuristic kept for compatibility with
    existing dashboards: 100 minus five points per average km per visit,
    averaged with 100 minus half the average minutes per visit. The constants
    have no formal justification and are reproduced as-is.
    """

    stops = route.stops
    if not stops:
        return RouteStats()

    count = len(stops)
    total_distance = sum(stop.travel_distance_km for stop in stops)
    total_time = sum(stop.travel_time_min + stop.visit_duration_min for stop in stops)
    average_duration = sum(stop.visit_duration_min for stop in stops) / count
    furthest = max(stop.travel_distance_km for stop in stops)

    distance_efficiency = max(0.0, 100 - (total_distance / count) * 5)
    time_efficiency = max(0.0, 100 - (total_time / count) / 2)
    efficiency = math.floor((distance_efficiency + time_efficiency) / 2 + 0.5)

    return RouteStats(
        total_visits=count,
        total_distance_km=total_distance,
        total_time_min=total_time,
        average_visit_duration_min=average_duration,
        furthest_distance_km=furthest,
        efficiency=min(100, max(0, efficiency)),
    )
