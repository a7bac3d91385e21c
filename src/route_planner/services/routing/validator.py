"""Diagnostics for a completed route.

Hard constraint breaches become errors, schedule risks become warnings or
suggestions. Nothing here raises or modifies the route.
"""

from __future__ import annotations

import math

from ...config import settings as app_settings
from ...models.domain import Priority, Route, RouteSettings, ValidationReport
from .stats import calculate_route_stats
from .timeutils import format_time_from_minutes


def validate_route(
    route: Route,
    settings: RouteSettings | None = None,
    *,
    expect_stops: bool = True,
) -> ValidationReport:
    settings = settings or route.settings
    report = ValidationReport()

    if not route.stops and expect_stops:
        report.errors.append("The route must contain at least one visit.")

    for stop in route.stops:
        lat, lng = stop.visit.location.lat, stop.visit.location.lng
        if not (math.isfinite(lat) and math.isfinite(lng)) or not (-90 <= lat <= 90 and -180 <= lng <= 180):
            report.errors.append(f"Stop {stop.order}: invalid coordinate ({lat}, {lng}).")

    if settings.max_route_distance_km and route.total_distance_km > settings.max_route_distance_km:
        report.errors.append(
            f"Route exceeds the maximum distance ({route.total_distance_km:.1f}km > "
            f"{settings.max_route_distance_km:g}km)."
        )

    if settings.max_route_time_hours and route.total_time_min > settings.max_route_time_hours * 60:
        report.errors.append(
            f"Route exceeds the maximum duration ({route.total_time_min / 60:.1f}h > "
            f"{settings.max_route_time_hours:g}h)."
        )

    for stop in route.stops:
        window = stop.visit.time_window
        arrival = stop.arrival_min
        if arrival < window.start_min:
            report.warnings.append(
                f"Stop {stop.order}: early arrival ({format_time_from_minutes(arrival)} < "
                f"{format_time_from_minutes(window.start_min)}, {window.start_min - arrival:.0f} min early)."
            )
        elif arrival > window.end_min:
            report.warnings.append(
                f"Stop {stop.order}: late arrival ({format_time_from_minutes(arrival)} > "
                f"{format_time_from_minutes(window.end_min)}, {arrival - window.end_min:.0f} min late)."
            )

    high_priority = sum(1 for stop in route.stops if stop.visit.priority is Priority.HIGH)
    if high_priority > len(route.stops) * app_settings.high_priority_share_warning:
        report.warnings.append("Most visits are high priority. Consider redistributing priorities.")

    stats = calculate_route_stats(route)
    if stats.efficiency < app_settings.efficiency_suggestion_threshold:
        report.suggestions.append("Consider reordering the visits to improve route efficiency.")
    if stats.furthest_distance_km > app_settings.long_leg_suggestion_km:
        report.suggestions.append(
            f"The longest leg is over {app_settings.long_leg_suggestion_km:g}km. "
            "Consider splitting the visits into multiple routes."
        )

    return report
