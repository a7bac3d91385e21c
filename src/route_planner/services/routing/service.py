"""Routing orchestration service."""

from __future__ import annotations

import logging

from ...config import settings as app_settings
from ...models.domain import (
    Coordinate,
    Priority,
    Route,
    RouteSettings,
    RouteStats,
    RouteStatus,
    StartLocation,
    ValidationReport,
    Visit,
)
from ...persistence.filesystem import FileStorage
from ...schemas.routing import (
    InsertVisitRequest,
    MoveVisitRequest,
    OptimizeRequest,
    RemoveVisitRequest,
    RouteModel,
    RouteResponse,
    RouteSettingsModel,
    RouteStatsModel,
    RouteStopModel,
    StartLocationModel,
    StatusUpdateRequest,
    ValidationReportModel,
    VisitModel,
)
from ..outputs.routing_formatter import route_to_csv, route_to_json
from .exceptions import RouteNotFound
from .mutator import insert_visit, move_visit, remove_visit, set_status
from .optimizer import build_route, new_route_id
from .planning import select_visits_for_optimization
from .stats import calculate_route_stats
from .store import RouteStore, route_store
from .timeutils import format_time_from_minutes, format_time_window, parse_time_string, parse_time_window
from .validator import validate_route


def _build_settings(overrides: RouteSettingsModel | None) -> RouteSettings:
    overrides = overrides or RouteSettingsModel()

    if overrides.start_location is not None:
        start = StartLocation(
            location=Coordinate(lat=overrides.start_location.lat, lng=overrides.start_location.lng),
            name=overrides.start_location.name,
            address=overrides.start_location.address,
        )
    else:
        start = StartLocation(
            location=Coordinate(lat=app_settings.default_start_lat, lng=app_settings.default_start_lng),
            name=app_settings.default_start_name,
            address=app_settings.default_start_address,
        )

    def pick(value, default):
        return default if value is None else value

    return RouteSettings(
        start_location=start,
        start_time_min=parse_time_string(pick(overrides.start_time, app_settings.default_start_time)),
        average_visit_duration_min=pick(overrides.average_visit_duration, app_settings.default_visit_duration_min),
        average_speed_kmh=pick(overrides.average_speed_kmh, app_settings.default_speed_kmh),
        include_traffic_buffer=pick(overrides.include_traffic_buffer, app_settings.default_include_traffic_buffer),
        traffic_buffer_percent=pick(overrides.traffic_buffer_percent, app_settings.default_traffic_buffer_percent),
        prioritize_time_windows=pick(
            overrides.prioritize_time_windows, app_settings.default_prioritize_time_windows
        ),
        max_route_distance_km=overrides.max_route_distance,
        max_route_time_hours=overrides.max_route_time,
    )


def _to_visit(model: VisitModel) -> Visit:
    return Visit(
        visit_id=model.id,
        location=Coordinate(lat=model.lat, lng=model.lng),
        time_window=parse_time_window(model.time_window),
        priority=Priority(model.priority),
        estimated_duration_min=model.estimated_duration,
        client_id=model.client_id,
        client_name=model.client_name,
        property_id=model.property_id,
        property_title=model.property_title,
        property_address=model.property_address,
        agent_id=model.agent_id,
        agent_name=model.agent_name,
        visit_date=model.date,
        notes=model.notes,
        confirmed=model.confirmed,
    )


def _visit_to_model(visit: Visit) -> VisitModel:
    return VisitModel(
        id=visit.visit_id,
        lat=visit.location.lat,
        lng=visit.location.lng,
        time_window=format_time_window(visit.time_window),
        priority=visit.priority.value,
        estimated_duration=visit.estimated_duration_min,
        client_id=visit.client_id,
        client_name=visit.client_name,
        property_id=visit.property_id,
        property_title=visit.property_title,
        property_address=visit.property_address,
        agent_id=visit.agent_id,
        agent_name=visit.agent_name,
        date=visit.visit_date,
        notes=visit.notes,
        confirmed=visit.confirmed,
    )


def _route_to_model(route: Route) -> RouteModel:
    start = route.start_location
    return RouteModel(
        route_id=route.route_id,
        agent_id=route.agent_id,
        date=route.route_date,
        status=route.status.value,
        optimization_method=route.optimization_method.value,
        created_at=route.created_at,
        start_location=StartLocationModel(
            lat=start.location.lat,
            lng=start.location.lng,
            name=start.name,
            address=start.address,
        ),
        total_distance_km=route.total_distance_km,
        total_time_min=route.total_time_min,
        total_visits=route.total_visits,
        stops=[
            RouteStopModel(
                visit_id=stop.visit_id,
                order=stop.order,
                visit=_visit_to_model(stop.visit),
                estimated_arrival=format_time_from_minutes(stop.arrival_min),
                estimated_departure=format_time_from_minutes(stop.departure_min),
                arrival_min=stop.arrival_min,
                departure_min=stop.departure_min,
                travel_time_min=stop.travel_time_min,
                travel_distance_km=stop.travel_distance_km,
                visit_duration_min=stop.visit_duration_min,
            )
            for stop in route.stops
        ],
    )


def _stats_to_model(stats: RouteStats) -> RouteStatsModel:
    return RouteStatsModel(
        total_visits=stats.total_visits,
        total_distance_km=stats.total_distance_km,
        total_time_min=stats.total_time_min,
        average_visit_duration_min=stats.average_visit_duration_min,
        furthest_distance_km=stats.furthest_distance_km,
        efficiency=stats.efficiency,
    )


def _validation_to_model(report: ValidationReport) -> ValidationReportModel:
    return ValidationReportModel(
        is_valid=report.is_valid,
        errors=list(report.errors),
        warnings=list(report.warnings),
        suggestions=list(report.suggestions),
    )


def _build_response(route: Route, *, metadata: dict | None = None) -> RouteResponse:
    """Response for a stored route; an emptied route is not reported as an error."""

    return RouteResponse(
        route=_route_to_model(route),
        stats=_stats_to_model(calculate_route_stats(route)),
        validation=_validation_to_model(validate_route(route, expect_stops=False)),
        metadata=metadata or {},
    )


def _require_route(route_id: str, store: RouteStore) -> Route:
    route = store.get(route_id)
    if route is None:
        raise RouteNotFound(route_id)
    return route


def _persist_run(route: Route, stats: RouteStats, validation: ValidationReport) -> str | None:
    try:
        storage = FileStorage()
        run_dir = storage.make_run_directory(prefix=f"route_{route.route_id}")
        storage.write_json(run_dir / "summary.json", route_to_json(route, stats, validation))
        storage.write_csv(run_dir / "route.csv", route_to_csv(route))
        return str(run_dir)
    except Exception as exc:
        # the optimized route is returned even when artifacts cannot be written
        logging.warning(f"Failed to persist route run for {route.route_id}: {exc}")
        return None


def optimize_route(payload: OptimizeRequest, store: RouteStore = route_store) -> RouteResponse:
    route_settings = _build_settings(payload.settings)
    visits = [_to_visit(model) for model in payload.visits]
    selected = select_visits_for_optimization(visits, confirmed_only=payload.confirmed_only)
    if payload.confirmed_only and len(selected) < len(visits):
        logging.info(f"Skipping {len(visits) - len(selected)} unconfirmed visits")

    route_id = payload.route_id or new_route_id()
    ticket = store.begin_optimization(route_id)
    route = build_route(
        selected,
        route_settings,
        route_id=route_id,
        agent_id=payload.agent_id,
        route_date=payload.date,
    )
    committed = store.commit_optimization(route_id, ticket, route)

    stats = calculate_route_stats(route)
    validation = validate_route(route, expect_stops=bool(payload.visits))
    if not validation.is_valid:
        logging.warning(f"Route {route_id} has validation errors: {validation.errors}")

    metadata: dict = {
        "status": "complete" if committed else "superseded",
        "visits_requested": len(visits),
        "visits_routed": len(selected),
    }
    if payload.run_label:
        metadata["run_label"] = payload.run_label
    if payload.requested_by:
        metadata["author"] = payload.requested_by

    persist = payload.persist if payload.persist is not None else app_settings.persist_outputs_by_default
    if persist and committed:
        run_dir = _persist_run(route, stats, validation)
        if run_dir:
            metadata["output_dir"] = run_dir

    return RouteResponse(
        route=_route_to_model(route),
        stats=_stats_to_model(stats),
        validation=_validation_to_model(validation),
        metadata=metadata,
    )


def get_route(route_id: str, store: RouteStore = route_store) -> RouteResponse:
    return _build_response(_require_route(route_id, store))


def list_routes(agent_id: str | None = None, store: RouteStore = route_store) -> list[RouteModel]:
    routes = sorted(store.list_routes(agent_id), key=lambda route: route.created_at)
    return [_route_to_model(route) for route in routes]


def insert_into_route(route_id: str, payload: InsertVisitRequest, store: RouteStore = route_store) -> RouteResponse:
    visit = _to_visit(payload.visit)
    route = store.update(route_id, lambda current: insert_visit(current, visit, payload.position))
    return _build_response(route)


def remove_from_route(route_id: str, payload: RemoveVisitRequest, store: RouteStore = route_store) -> RouteResponse:
    route = store.update(route_id, lambda current: remove_visit(current, payload.visit_id))
    return _build_response(route)


def move_within_route(route_id: str, payload: MoveVisitRequest, store: RouteStore = route_store) -> RouteResponse:
    route = store.update(route_id, lambda current: move_visit(current, payload.visit_id, payload.position))
    return _build_response(route)


def update_route_status(
    route_id: str, payload: StatusUpdateRequest, store: RouteStore = route_store
) -> RouteResponse:
    route = store.update(route_id, lambda current: set_status(current, RouteStatus(payload.status)))
    return _build_response(route)


def get_route_stats(route_id: str, store: RouteStore = route_store) -> RouteStatsModel:
    return _stats_to_model(calculate_route_stats(_require_route(route_id, store)))


def get_route_validation(route_id: str, store: RouteStore = route_store) -> ValidationReportModel:
    return _validation_to_model(validate_route(_require_route(route_id, store), expect_stops=False))


def export_route_csv(route_id: str, store: RouteStore = route_store) -> str:
    return route_to_csv(_require_route(route_id, store))


def delete_route(route_id: str, store: RouteStore = route_store) -> None:
    if not store.delete(route_id):
        raise RouteNotFound(route_id)
