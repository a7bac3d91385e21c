"""Route planning endpoints."""

from __future__ import annotations

import logging
from typing import Callable, List, TypeVar

from fastapi import APIRouter, HTTPException, Query, Response, status

from ...schemas.routing import (
    InsertVisitRequest,
    MoveVisitRequest,
    OptimizeRequest,
    RemoveVisitRequest,
    RouteModel,
    RouteResponse,
    RouteStatsModel,
    StatusUpdateRequest,
    ValidationReportModel,
)
from ...services.routing import service as routing_service
from ...services.routing.exceptions import RouteNotFound, VisitNotFound

router = APIRouter(prefix="/routes", tags=["routes"])

T = TypeVar("T")


def _handle(action: str, call: Callable[[], T]) -> T:
    try:
        return call()
    except (RouteNotFound, VisitNotFound) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error while trying to {action}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}: {str(exc)}",
        ) from exc


@router.post("/optimize", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizeRequest) -> RouteResponse:
    return _handle("optimize route", lambda: routing_service.optimize_route(payload))


@router.get("", response_model=List[RouteModel], status_code=status.HTTP_200_OK)
def list_routes(
    agent_id: str | None = Query(default=None, description="Filter routes by agent ID"),
) -> List[RouteModel]:
    return _handle("list routes", lambda: routing_service.list_routes(agent_id))


@router.get("/{route_id}", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def get_route(route_id: str) -> RouteResponse:
    return _handle("load route", lambda: routing_service.get_route(route_id))


@router.delete("/{route_id}", status_code=status.HTTP_200_OK)
def delete_route(route_id: str) -> dict:
    _handle("delete route", lambda: routing_service.delete_route(route_id))
    return {"success": True, "message": f"Route {route_id} deleted"}


@router.post("/{route_id}/insert", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def insert_visit(route_id: str, payload: InsertVisitRequest) -> RouteResponse:
    """Insert a visit at a 0-based position and recompute the affected legs."""
    return _handle("insert visit", lambda: routing_service.insert_into_route(route_id, payload))


@router.post("/{route_id}/remove", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def remove_visit(route_id: str, payload: RemoveVisitRequest) -> RouteResponse:
    return _handle("remove visit", lambda: routing_service.remove_from_route(route_id, payload))


@router.post("/{route_id}/move", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def move_visit(route_id: str, payload: MoveVisitRequest) -> RouteResponse:
    return _handle("move visit", lambda: routing_service.move_within_route(route_id, payload))


@router.post("/{route_id}/status", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def update_status(route_id: str, payload: StatusUpdateRequest) -> RouteResponse:
    return _handle("update route status", lambda: routing_service.update_route_status(route_id, payload))


@router.get("/{route_id}/stats", response_model=RouteStatsModel, status_code=status.HTTP_200_OK)
def route_stats(route_id: str) -> RouteStatsModel:
    return _handle("compute route stats", lambda: routing_service.get_route_stats(route_id))


@router.get("/{route_id}/validation", response_model=ValidationReportModel, status_code=status.HTTP_200_OK)
def route_validation(route_id: str) -> ValidationReportModel:
    return _handle("validate route", lambda: routing_service.get_route_validation(route_id))


@router.get("/{route_id}/export", status_code=status.HTTP_200_OK)
def export_route(route_id: str) -> Response:
    """Download the route as CSV, one row per stop."""
    content = _handle("export route", lambda: routing_service.export_route_csv(route_id))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{route_id}.csv"'},
    )
