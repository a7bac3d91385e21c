"""Manual re-sequencing of an existing route.

Every operation returns a new ``Route``; the input route is never modified.
Only legs whose "previous" location changed are recomputed. Arrival and
departure estimates are then re-derived from the first affected position to
the end of the route, reusing the legs that did not change.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from ...models.domain import OptimizationMethod, Route, RouteStatus, RouteStop, Visit
from ..geospatial import validate_coordinate
from .cost import effective_speed_kmh
from .exceptions import InvalidInput, InvalidStatusTransition, VisitNotFound
from .optimizer import compute_leg, route_totals, visit_duration

_ALLOWED_TRANSITIONS = {
    RouteStatus.DRAFT: {RouteStatus.DRAFT, RouteStatus.ACTIVE},
    RouteStatus.ACTIVE: {RouteStatus.ACTIVE, RouteStatus.COMPLETED},
    RouteStatus.COMPLETED: {RouteStatus.COMPLETED},
}


def insert_visit(route: Route, visit: Visit, position: int) -> Route:
    """Insert ``visit`` before the stop at 0-based ``position`` (clamped)."""

    if visit.visit_id in route.visit_ids():
        raise InvalidInput(f"Visit '{visit.visit_id}' is already on route {route.route_id}.")
    validate_coordinate(visit.location.lat, visit.location.lng)

    stops = list(route.stops)
    index = max(0, min(position, len(stops)))
    placeholder = RouteStop(
        visit=visit,
        order=0,
        arrival_min=0.0,
        departure_min=0.0,
        travel_time_min=0.0,
        travel_distance_km=0.0,
        visit_duration_min=visit_duration(visit, route.settings),
    )
    stops.insert(index, placeholder)
    return _rebuild(route, stops, affected=(index, index + 1), first_dirty=index)


def remove_visit(route: Route, visit_id: str) -> Route:
    index = _index_of(route, visit_id)
    stops = list(route.stops)
    del stops[index]
    # the stop that slid into ``index`` now departs from the removed stop's predecessor
    return _rebuild(route, stops, affected=(index,), first_dirty=index)


def move_visit(route: Route, visit_id: str, new_position: int) -> Route:
    """Move a stop to 0-based ``new_position`` of the route without it."""

    visit = route.stops[_index_of(route, visit_id)].visit
    return insert_visit(remove_visit(route, visit_id), visit, new_position)


def set_status(route: Route, status: RouteStatus) -> Route:
    if status not in _ALLOWED_TRANSITIONS[route.status]:
        raise InvalidStatusTransition(
            f"Route {route.route_id} cannot move from '{route.status.value}' to '{status.value}'."
        )
    return replace(route, status=status)


def _index_of(route: Route, visit_id: str) -> int:
    for index, stop in enumerate(route.stops):
        if stop.visit_id == visit_id:
            return index
    raise VisitNotFound(visit_id)


def _rebuild(route: Route, stops: list[RouteStop], *, affected: Iterable[int], first_dirty: int) -> Route:
    settings = route.settings
    speed = effective_speed_kmh(settings)
    recompute = {index for index in affected if 0 <= index < len(stops)}

    rebuilt: list[RouteStop] = []
    for index, stop in enumerate(stops):
        updates: dict = {"order": index + 1}

        if index in recompute:
            origin = settings.start_location.location if index == 0 else stops[index - 1].visit.location
            distance_km, travel_min = compute_leg(origin, stop.visit, speed)
            updates["travel_distance_km"] = distance_km
            updates["travel_time_min"] = travel_min
        else:
            travel_min = stop.travel_time_min

        if index >= first_dirty:
            previous_departure = settings.start_time_min if index == 0 else rebuilt[index - 1].departure_min
            arrival = previous_departure + travel_min
            updates["arrival_min"] = arrival
            updates["departure_min"] = arrival + stop.visit_duration_min

        rebuilt.append(replace(stop, **updates))

    total_distance, total_time = route_totals(rebuilt)
    return replace(
        route,
        stops=tuple(rebuilt),
        total_distance_km=total_distance,
        total_time_min=total_time,
        total_visits=len(rebuilt),
        optimization_method=OptimizationMethod.MANUAL,
    )
