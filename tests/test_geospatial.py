import math

import pytest

from src.route_planner.models.domain import Coordinate
from src.route_planner.services.geospatial import distance_between, haversine_km, validate_coordinate
from src.route_planner.services.routing.exceptions import InvalidCoordinate, InvalidInput


def test_one_degree_of_latitude():
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, rel=1e-4)


def test_distance_is_symmetric_and_zero_for_same_point():
    madrid = Coordinate(lat=40.4168, lng=-3.7038)
    malasana = Coordinate(lat=40.4255, lng=-3.7025)

    assert distance_between(madrid, madrid) == 0.0
    assert distance_between(madrid, malasana) == pytest.approx(distance_between(malasana, madrid))
    assert 0.9 < distance_between(madrid, malasana) < 1.1


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_inputs_are_rejected(bad):
    with pytest.raises(InvalidCoordinate):
        haversine_km(bad, 0.0, 1.0, 1.0)


def test_validate_coordinate_checks_ranges():
    validate_coordinate(90.0, -180.0)
    with pytest.raises(InvalidCoordinate):
        validate_coordinate(91.0, 0.0)
    with pytest.raises(InvalidCoordinate):
        validate_coordinate(0.0, 181.0)


def test_invalid_coordinate_is_an_input_error():
    with pytest.raises(InvalidInput):
        validate_coordinate(math.nan, 0.0)
