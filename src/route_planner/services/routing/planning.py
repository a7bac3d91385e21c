"""Visit selection, grouping and input checks used around the optimizer."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from ...models.domain import Priority, Route, RouteSettings, Visit
from ..geospatial import validate_coordinate
from .exceptions import InvalidInput, InvalidSpeed

_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def _is_non_negative(value: float) -> bool:
    return math.isfinite(value) and value >= 0


def validate_optimization_inputs(visits: Sequence[Visit], settings: RouteSettings) -> None:
    """Reject inputs that cannot be routed before any optimization work starts."""

    speed = settings.average_speed_kmh
    if not math.isfinite(speed) or speed <= 0:
        raise InvalidSpeed(f"Average speed must be a positive number, got {speed} km/h.")
    buffer = settings.traffic_buffer_percent
    if not _is_non_negative(buffer) or buffer >= 100:
        raise InvalidInput(f"Traffic buffer must be within [0, 100), got {buffer}%.")
    if not _is_non_negative(settings.average_visit_duration_min):
        raise InvalidInput("Average visit duration must be a non-negative number.")
    for label, limit in (
        ("Maximum route distance", settings.max_route_distance_km),
        ("Maximum route time", settings.max_route_time_hours),
    ):
        if limit is not None and not _is_non_negative(limit):
            raise InvalidInput(f"{label} must be a non-negative number, got {limit}.")

    start = settings.start_location.location
    validate_coordinate(start.lat, start.lng)

    seen: set[str] = set()
    for visit in visits:
        if visit.visit_id in seen:
            raise InvalidInput(f"Visit '{visit.visit_id}' appears more than once.")
        seen.add(visit.visit_id)
        validate_coordinate(visit.location.lat, visit.location.lng)
        if visit.estimated_duration_min is not None and not _is_non_negative(visit.estimated_duration_min):
            raise InvalidInput(f"Visit '{visit.visit_id}' has an invalid estimated duration.")


def select_visits_for_optimization(visits: Sequence[Visit], *, confirmed_only: bool) -> list[Visit]:
    if not confirmed_only:
        return list(visits)
    return [visit for visit in visits if visit.confirmed]


def sort_visits_by_priority(visits: Sequence[Visit]) -> list[Visit]:
    """High priority first; equal priorities ordered by window start."""

    return sorted(visits, key=lambda visit: (_PRIORITY_RANK[visit.priority], visit.time_window.start_min))


def group_visits_by_agent(visits: Sequence[Visit]) -> Dict[str, List[Visit]]:
    groups: Dict[str, List[Visit]] = {}
    for visit in visits:
        groups.setdefault(visit.agent_id or "", []).append(visit)
    return groups


def routes_overlap(first: Route, second: Route) -> bool:
    """True when two routes of the same agent and day overlap in time."""

    if first.route_date != second.route_date or first.agent_id != second.agent_id:
        return False
    if not first.stops or not second.stops:
        return False

    start1, end1 = first.stops[0].arrival_min, first.stops[-1].departure_min
    start2, end2 = second.stops[0].arrival_min, second.stops[-1].departure_min
    return not (end1 <= start2 or start1 >= end2)
