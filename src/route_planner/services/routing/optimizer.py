"""Nearest-neighbor route optimization with time-window and priority penalties.

The heuristic repeatedly appends the cheapest remaining visit (see ``cost.py``)
from the current position and clock. It never backtracks: once a stop is
placed it stays where it is. Ties are broken by input order, so the first
visit with the minimal cost wins and the result is deterministic for a given
input sequence.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, Sequence

from ...models.domain import (
    Coordinate,
    OptimizationMethod,
    Route,
    RouteSettings,
    RouteStatus,
    RouteStop,
    Visit,
)
from ..geospatial import distance_between
from .cost import effective_speed_kmh, selection_cost, travel_time_minutes
from .planning import validate_optimization_inputs

logger = logging.getLogger(__name__)


def visit_duration(visit: Visit, settings: RouteSettings) -> int:
    """On-site duration, falling back to the settings average."""

    if visit.estimated_duration_min is None:
        return settings.average_visit_duration_min
    return visit.estimated_duration_min


def compute_leg(origin: Coordinate, visit: Visit, speed_kmh: float) -> tuple[float, float]:
    """Return (distance_km, travel_time_min) from origin to the visit."""

    distance_km = distance_between(origin, visit.location)
    return distance_km, travel_time_minutes(distance_km, speed_kmh)


def route_totals(stops: Iterable[RouteStop]) -> tuple[float, float]:
    """Sum leg distances and travel-plus-on-site minutes."""

    total_distance = 0.0
    total_time = 0.0
    for stop in stops:
        total_distance += stop.travel_distance_km
        total_time += stop.travel_time_min + stop.visit_duration_min
    return total_distance, total_time


def optimize_stops(visits: Sequence[Visit], settings: RouteSettings) -> list[RouteStop]:
    """Order visits greedily by selection cost and derive the schedule."""

    if not visits:
        return []

    speed = effective_speed_kmh(settings)
    current_location = settings.start_location.location
    current_time = float(settings.start_time_min)
    unvisited = list(visits)
    stops: list[RouteStop] = []

    while unvisited:
        best_index = 0
        best_cost = math.inf
        for index, candidate in enumerate(unvisited):
            cost = selection_cost(current_location, current_time, candidate, settings, speed_kmh=speed)
            if cost < best_cost:
                best_cost = cost
                best_index = index

        selected = unvisited.pop(best_index)
        distance_km, travel_min = compute_leg(current_location, selected, speed)
        arrival = current_time + travel_min
        duration = visit_duration(selected, settings)
        departure = arrival + duration

        stops.append(
            RouteStop(
                visit=selected,
                order=len(stops) + 1,
                arrival_min=arrival,
                departure_min=departure,
                travel_time_min=travel_min,
                travel_distance_km=distance_km,
                visit_duration_min=duration,
            )
        )
        logger.debug(
            "Selected visit %s as stop %d (cost=%.3f, leg=%.2fkm)",
            selected.visit_id,
            len(stops),
            best_cost,
            distance_km,
        )

        current_location = selected.location
        current_time = departure

    return stops


def empty_route(
    settings: RouteSettings,
    *,
    route_id: str | None = None,
    agent_id: str | None = None,
    route_date: date | None = None,
) -> Route:
    return Route(
        route_id=route_id or new_route_id(),
        stops=(),
        start_location=settings.start_location,
        settings=settings,
        total_distance_km=0.0,
        total_time_min=0.0,
        total_visits=0,
        optimization_method=OptimizationMethod.MANUAL,
        created_at=datetime.now(timezone.utc),
        status=RouteStatus.DRAFT,
        agent_id=agent_id,
        route_date=route_date,
    )


def build_route(
    visits: Sequence[Visit],
    settings: RouteSettings,
    *,
    route_id: str | None = None,
    agent_id: str | None = None,
    route_date: date | None = None,
) -> Route:
    """Validate inputs, run the heuristic and wrap the stops in a draft Route."""

    validate_optimization_inputs(visits, settings)
    stops = optimize_stops(visits, settings)
    total_distance, total_time = route_totals(stops)

    if agent_id is None and visits:
        agent_id = visits[0].agent_id
    if route_date is None and visits:
        route_date = visits[0].visit_date

    route = Route(
        route_id=route_id or new_route_id(),
        stops=tuple(stops),
        start_location=settings.start_location,
        settings=settings,
        total_distance_km=total_distance,
        total_time_min=total_time,
        total_visits=len(stops),
        optimization_method=OptimizationMethod.NEAREST_NEIGHBOR,
        created_at=datetime.now(timezone.utc),
        status=RouteStatus.DRAFT,
        agent_id=agent_id,
        route_date=route_date,
    )
    logger.info(
        "Optimized route %s: %d stops, %.1f km, %.0f min",
        route.route_id,
        route.total_visits,
        route.total_distance_km,
        route.total_time_min,
    )
    return route


def new_route_id() -> str:
    return f"route-{uuid.uuid4().hex[:12]}"
