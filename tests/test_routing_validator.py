from datetime import datetime, timezone

from src.route_planner.models.domain import (
    Coordinate,
    OptimizationMethod,
    Priority,
    Route,
    RouteSettings,
    RouteStop,
    StartLocation,
    TimeWindow,
    Visit,
)
from src.route_planner.services.routing.optimizer import build_route, empty_route
from src.route_planner.services.routing.validator import validate_route


def _visit(vid: str, lat: float, lng: float, window=(8 * 60, 20 * 60), priority=Priority.MEDIUM, duration=30) -> Visit:
    return Visit(
        visit_id=vid,
        location=Coordinate(lat=lat, lng=lng),
        time_window=TimeWindow(start_min=window[0], end_min=window[1]),
        priority=priority,
        estimated_duration_min=duration,
    )


def _settings(**overrides) -> RouteSettings:
    values = dict(
        start_location=StartLocation(location=Coordinate(lat=0.0, lng=0.0)),
        start_time_min=9 * 60,
        average_speed_kmh=30.0,
        prioritize_time_windows=False,
    )
    values.update(overrides)
    return RouteSettings(**values)


def test_empty_route_is_an_error_only_when_stops_expected():
    route = empty_route(_settings())

    assert validate_route(route).errors == ["The route must contain at least one visit."]
    assert validate_route(route, expect_stops=False).errors == []


def test_distance_budget_exceeded_still_returns_full_route():
    # about 10 km north and 10 km south of the start
    visits = [_visit("A", 0.09, 0.0), _visit("B", -0.09, 0.0)]
    settings = _settings(max_route_distance_km=5)
    route = build_route(visits, settings)

    report = validate_route(route, settings)

    assert len(route.stops) == 2
    assert not report.is_valid
    assert any("maximum distance" in error for error in report.errors)


def test_time_budget_uses_hours():
    visits = [_visit("A", 0.0, 0.0, duration=50), _visit("B", 0.0, 0.0001, duration=50)]
    route = build_route(visits, _settings())

    over = validate_route(route, _settings(max_route_time_hours=1))
    under = validate_route(route, _settings(max_route_time_hours=2))

    assert any("maximum duration" in error for error in over.errors)
    assert under.errors == []


def test_early_and_late_arrivals_are_warnings():
    early = _visit("EARLY", 0.0, 0.0, window=(10 * 60, 11 * 60), duration=30)
    route = build_route([early], _settings(start_time_min=9 * 60))
    report = validate_route(route)

    assert report.is_valid
    assert report.warnings[0] == "Stop 1: early arrival (09:00 < 10:00, 60 min early)."

    late = _visit("LATE", 0.0, 0.0, window=(7 * 60, 8 * 60), duration=30)
    route = build_route([late], _settings(start_time_min=9 * 60))
    report = validate_route(route)

    assert report.warnings[0] == "Stop 1: late arrival (09:00 > 08:00, 60 min late)."


def test_on_time_arrival_has_no_window_warning():
    route = build_route([_visit("A", 0.0, 0.0, window=(9 * 60, 10 * 60))], _settings())
    assert not any("arrival" in warning for warning in validate_route(route).warnings)


def test_priority_skew_warning():
    skewed = [_visit(f"H{i}", 0.0, i * 0.0001, priority=Priority.HIGH) for i in range(3)]
    balanced = skewed[:2] + [_visit("M", 0.0, 0.0003)]

    skewed_report = validate_route(build_route(skewed, _settings()))
    balanced_report = validate_route(build_route(balanced, _settings()))

    assert any("high priority" in warning for warning in skewed_report.warnings)
    assert not any("high priority" in warning for warning in balanced_report.warnings)


def test_long_leg_and_low_efficiency_suggestions():
    far = build_route([_visit("FAR", 0.3, 0.0, duration=30)], _settings())
    report = validate_route(far)

    assert any("multiple routes" in suggestion for suggestion in report.suggestions)

    slow = build_route([_visit("SLOW", 0.0, 0.0, duration=200)], _settings())
    quick = build_route([_visit("QUICK", 0.0, 0.0, duration=60)], _settings())

    assert any("reordering" in suggestion for suggestion in validate_route(slow).suggestions)
    assert validate_route(quick).suggestions == []


def test_invalid_coordinates_on_a_hand_built_route():
    visit = _visit("BAD", 120.0, 0.0)
    stop = RouteStop(
        visit=visit,
        order=1,
        arrival_min=540.0,
        departure_min=570.0,
        travel_time_min=0.0,
        travel_distance_km=0.0,
        visit_duration_min=30,
    )
    settings = _settings()
    route = Route(
        route_id="R",
        stops=(stop,),
        start_location=settings.start_location,
        settings=settings,
        total_distance_km=0.0,
        total_time_min=30.0,
        total_visits=1,
        optimization_method=OptimizationMethod.MANUAL,
        created_at=datetime.now(timezone.utc),
    )

    assert validate_route(route).errors == ["Stop 1: invalid coordinate (120.0, 0.0)."]


def test_validation_does_not_change_route():
    route = build_route([_visit("A", 0.09, 0.0)], _settings(max_route_distance_km=1))
    snapshot = (route.stops, route.total_distance_km, route.total_time_min, route.status)

    validate_route(route)

    assert (route.stops, route.total_distance_km, route.total_time_min, route.status) == snapshot
