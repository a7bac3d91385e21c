"""In-memory route registry with last-request-wins optimization tickets."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from ...models.domain import Route
from .exceptions import RouteNotFound

logger = logging.getLogger(__name__)


class RouteStore:
    """Holds immutable Route values keyed by route id.

    Writers swap whole values under a lock, so readers always see either the
    previous route or the next one, never a half-applied mutation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._routes: dict[str, Route] = {}
        self._tickets: dict[str, int] = {}

    def begin_optimization(self, route_id: str) -> int:
        with self._lock:
            ticket = self._tickets.get(route_id, 0) + 1
            self._tickets[route_id] = ticket
            return ticket

    def commit_optimization(self, route_id: str, ticket: int, route: Route) -> bool:
        """Store ``route`` only if no newer optimization was requested meanwhile."""

        with self._lock:
            if self._tickets.get(route_id) != ticket:
                logger.info(
                    "Discarding stale optimization for route %s (ticket %d, latest %s)",
                    route_id,
                    ticket,
                    self._tickets.get(route_id),
                )
                return False
            self._routes[route_id] = route
            return True

    def get(self, route_id: str) -> Route | None:
        with self._lock:
            return self._routes.get(route_id)

    def put(self, route: Route) -> None:
        with self._lock:
            self._routes[route.route_id] = route

    def update(self, route_id: str, mutation: Callable[[Route], Route]) -> Route:
        """Apply a pure mutation atomically. Raises RouteNotFound for unknown ids."""

        with self._lock:
            current = self._routes.get(route_id)
            if current is None:
                raise RouteNotFound(route_id)
            updated = mutation(current)
            self._routes[route_id] = updated
            return updated

    def delete(self, route_id: str) -> bool:
        with self._lock:
            self._tickets.pop(route_id, None)
            return self._routes.pop(route_id, None) is not None

    def list_routes(self, agent_id: str | None = None) -> list[Route]:
        with self._lock:
            routes = list(self._routes.values())
        if agent_id:
            routes = [route for route in routes if route.agent_id == agent_id]
        return routes

    def clear(self) -> None:
        with self._lock:
            self._routes.clear()
            self._tickets.clear()


route_store = RouteStore()
