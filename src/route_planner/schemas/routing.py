"""Routing request/response schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PriorityLiteral = Literal["high", "medium", "low"]
StatusLiteral = Literal["draft", "active", "completed"]


class StartLocationModel(BaseModel):
    lat: float
    lng: float
    address: Optional[str] = None
    name: Optional[str] = None


class RouteSettingsModel(BaseModel):
    """Optimization options. Omitted fields fall back to the configured defaults."""

    start_location: Optional[StartLocationModel] = None
    start_time: Optional[str] = Field(default=None, description="Day start as HH:MM.")
    average_visit_duration: Optional[int] = Field(
        default=None, ge=0, description="Minutes on site for visits without their own estimate."
    )
    average_speed_kmh: Optional[float] = None
    include_traffic_buffer: Optional[bool] = None
    traffic_buffer_percent: Optional[float] = Field(default=None, ge=0, le=100)
    prioritize_time_windows: Optional[bool] = None
    max_route_distance: Optional[float] = Field(default=None, ge=0, description="Kilometres.")
    max_route_time: Optional[float] = Field(default=None, ge=0, description="Hours.")


class VisitModel(BaseModel):
    id: str
    lat: float
    lng: float
    time_window: str = Field(..., description="Arrival window, e.g. '09:00 - 10:00'.")
    priority: PriorityLiteral = "medium"
    estimated_duration: Optional[int] = Field(default=None, ge=0, description="Minutes on site.")
    client_id: Optional[str] = None
    client_name: str = ""
    property_id: Optional[str] = None
    property_title: str = ""
    property_address: str = ""
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    date: Optional[dt.date] = None
    notes: Optional[str] = None
    confirmed: bool = False


class OptimizeRequest(BaseModel):
    visits: List[VisitModel]
    settings: Optional[RouteSettingsModel] = None
    route_id: Optional[str] = Field(
        default=None,
        description="Re-optimize into this route id. A newer request for the same id supersedes older ones.",
    )
    agent_id: Optional[str] = None
    date: Optional[dt.date] = None
    confirmed_only: bool = Field(default=False, description="Only route visits flagged as confirmed.")
    persist: Optional[bool] = Field(default=None, description="Write run artifacts to the data root.")
    requested_by: Optional[str] = None
    run_label: Optional[str] = None


class RouteStopModel(BaseModel):
    visit_id: str
    order: int
    visit: VisitModel
    estimated_arrival: str
    estimated_departure: str
    arrival_min: float
    departure_min: float
    travel_time_min: float
    travel_distance_km: float
    visit_duration_min: int


class RouteModel(BaseModel):
    route_id: str
    agent_id: Optional[str] = None
    date: Optional[dt.date] = None
    status: StatusLiteral
    optimization_method: Literal["nearest-neighbor", "manual"]
    created_at: dt.datetime
    start_location: StartLocationModel
    total_distance_km: float
    total_time_min: float
    total_visits: int
    stops: List[RouteStopModel]


class RouteStatsModel(BaseModel):
    total_visits: int
    total_distance_km: float
    total_time_min: float
    average_visit_duration_min: float
    furthest_distance_km: float
    efficiency: int


class ValidationReportModel(BaseModel):
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    suggestions: List[str]


class RouteResponse(BaseModel):
    route: RouteModel
    stats: RouteStatsModel
    validation: ValidationReportModel
    metadata: dict = Field(default_factory=dict)


class InsertVisitRequest(BaseModel):
    visit: VisitModel
    position: int = Field(..., description="0-based index; clamped to the route length.")


class RemoveVisitRequest(BaseModel):
    visit_id: str


class MoveVisitRequest(BaseModel):
    visit_id: str
    position: int = Field(..., description="0-based index in the route without the moved visit.")


class StatusUpdateRequest(BaseModel):
    status: StatusLiteral
