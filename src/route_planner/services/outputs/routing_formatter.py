"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io

from ...models.domain import Route, RouteStats, ValidationReport
from ..routing.timeutils import (
    format_distance,
    format_duration,
    format_time_from_minutes,
    format_time_window,
)

EXPORT_HEADERS = [
    "Order",
    "Client",
    "Property",
    "Address",
    "Time Window",
    "Estimated Arrival",
    "Estimated Departure",
    "Travel Time",
    "Distance",
    "Priority",
    "Estimated Duration",
    "Notes",
]


def route_to_json(route: Route, stats: RouteStats, validation: ValidationReport) -> dict:
    return {
        "route_id": route.route_id,
        "agent_id": route.agent_id,
        "date": route.route_date.isoformat() if route.route_date else None,
        "status": route.status.value,
        "optimization_method": route.optimization_method.value,
        "created_at": route.created_at.isoformat(),
        "total_distance_km": route.total_distance_km,
        "total_time_min": route.total_time_min,
        "total_visits": route.total_visits,
        "stops": [
            {
                "order": stop.order,
                "visit_id": stop.visit_id,
                "arrival": format_time_from_minutes(stop.arrival_min),
                "departure": format_time_from_minutes(stop.departure_min),
                "travel_time_min": stop.travel_time_min,
                "travel_distance_km": stop.travel_distance_km,
                "visit_duration_min": stop.visit_duration_min,
            }
            for stop in route.stops
        ],
        "stats": {
            "total_visits": stats.total_visits,
            "total_distance_km": stats.total_distance_km,
            "total_time_min": stats.total_time_min,
            "average_visit_duration_min": stats.average_visit_duration_min,
            "furthest_distance_km": stats.furthest_distance_km,
            "efficiency": stats.efficiency,
        },
        "validation": {
            "is_valid": validation.is_valid,
            "errors": list(validation.errors),
            "warnings": list(validation.warnings),
            "suggestions": list(validation.suggestions),
        },
    }


def route_to_csv(route: Route) -> str:
    """One row per stop. Cells containing commas, quotes or newlines are quoted."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for stop in route.stops:
        visit = stop.visit
        writer.writerow(
            [
                stop.order,
                visit.client_name,
                visit.property_title,
                visit.property_address,
                format_time_window(visit.time_window),
                format_time_from_minutes(stop.arrival_min),
                format_time_from_minutes(stop.departure_min),
                format_duration(stop.travel_time_min),
                format_distance(stop.travel_distance_km),
                visit.priority.value,
                format_duration(stop.visit_duration_min),
                visit.notes or "",
            ]
        )
    return buffer.getvalue()
