"""Errors raised before any routing work is attempted."""

from __future__ import annotations


class InvalidInput(ValueError):
    """Input that cannot be routed. Raised before optimization starts."""


class InvalidCoordinate(InvalidInput):
    pass


class InvalidTimeFormat(InvalidInput):
    pass


class InvalidSpeed(InvalidInput):
    pass


class VisitNotFound(InvalidInput):
    def __init__(self, visit_id: str) -> None:
        super().__init__(f"Visit '{visit_id}' is not on the route.")
        self.visit_id = visit_id


class InvalidStatusTransition(InvalidInput):
    pass


class RouteNotFound(LookupError):
    def __init__(self, route_id: str) -> None:
        super().__init__(f"Route '{route_id}' not found.")
        self.route_id = route_id
