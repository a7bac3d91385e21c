import pytest

from src.route_planner.models.domain import (
    Coordinate,
    Priority,
    RouteSettings,
    StartLocation,
    TimeWindow,
    Visit,
)
from src.route_planner.services.routing.cost import (
    effective_speed_kmh,
    priority_multiplier,
    selection_cost,
    time_window_cost,
    travel_time_minutes,
)
from src.route_planner.services.routing.exceptions import InvalidSpeed


def _settings(**overrides) -> RouteSettings:
    values = dict(
        start_location=StartLocation(location=Coordinate(lat=0.0, lng=0.0)),
        start_time_min=9 * 60,
        average_speed_kmh=30.0,
        include_traffic_buffer=False,
        traffic_buffer_percent=0.0,
        prioritize_time_windows=True,
    )
    values.update(overrides)
    return RouteSettings(**values)


def _visit(lat: float, lng: float, window=(540, 600), priority=Priority.MEDIUM) -> Visit:
    return Visit(
        visit_id="V1",
        location=Coordinate(lat=lat, lng=lng),
        time_window=TimeWindow(start_min=window[0], end_min=window[1]),
        priority=priority,
    )


def test_effective_speed_applies_traffic_buffer():
    assert effective_speed_kmh(_settings()) == 30.0
    assert effective_speed_kmh(_settings(include_traffic_buffer=True, traffic_buffer_percent=20)) == pytest.approx(24.0)
    # the percentage is ignored while the buffer is switched off
    assert effective_speed_kmh(_settings(include_traffic_buffer=False, traffic_buffer_percent=50)) == 30.0


def test_effective_speed_must_be_positive():
    with pytest.raises(InvalidSpeed):
        effective_speed_kmh(_settings(average_speed_kmh=0))
    with pytest.raises(InvalidSpeed):
        effective_speed_kmh(_settings(include_traffic_buffer=True, traffic_buffer_percent=100))


def test_travel_time_minutes():
    assert travel_time_minutes(15.0, 30.0) == pytest.approx(30.0)


def test_priority_multipliers():
    assert priority_multiplier(Priority.HIGH) == 0.8
    assert priority_multiplier(Priority.MEDIUM) == 1.0
    assert priority_multiplier(Priority.LOW) == 1.2


@pytest.mark.parametrize(
    "arrival, expected",
    [
        (540, 0.0),
        (570, 0.0),
        (600, 0.0),
        (480, 1.0),
        (510, 0.5),
        (660, 1.0),
        (720, 4.0),
    ],
)
def test_time_window_cost(arrival, expected):
    window = TimeWindow(start_min=540, end_min=600)
    assert time_window_cost(window, arrival) == pytest.approx(expected)


def test_lateness_grows_faster_than_earliness():
    window = TimeWindow(start_min=540, end_min=600)
    three_hours_early = time_window_cost(window, 540 - 180)
    three_hours_late = time_window_cost(window, 600 + 180)
    assert three_hours_early == pytest.approx(3.0)
    assert three_hours_late == pytest.approx(9.0)


def test_distance_only_cost_uses_priority_multiplier():
    settings = _settings(prioritize_time_windows=False)
    current = Coordinate(lat=0.0, lng=0.0)

    high = selection_cost(current, 540, _visit(1.0, 0.0, priority=Priority.HIGH), settings)
    low = selection_cost(current, 540, _visit(1.0, 0.0, priority=Priority.LOW), settings)

    assert high == pytest.approx(111.195 * 0.8, rel=1e-4)
    assert low == pytest.approx(111.195 * 1.2, rel=1e-4)


def test_time_window_cost_is_blended_with_distance():
    settings = _settings(start_time_min=540)
    current = Coordinate(lat=0.0, lng=0.0)
    # zero distance, two hours before the window opens
    visit = _visit(0.0, 0.0, window=(660, 720))

    assert selection_cost(current, 540, visit, settings) == pytest.approx(0.3 * 2.0)

    on_time = _visit(0.0, 0.0, window=(540, 600), priority=Priority.HIGH)
    assert selection_cost(current, 540, on_time, settings) == 0.0


@pytest.mark.parametrize("speed", [float("nan"), float("inf")])
def test_effective_speed_must_be_finite(speed):
    with pytest.raises(InvalidSpeed):
        effective_speed_kmh(_settings(average_speed_kmh=speed))
