"""Domain models for visits, routing settings and routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RouteStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class OptimizationMethod(str, Enum):
    NEAREST_NEIGHBOR = "nearest-neighbor"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Permitted arrival interval, in minutes since midnight."""

    start_min: int
    end_min: int


@dataclass(frozen=True, slots=True)
class Visit:
    """A scheduled property visit. Owned by the visit directory and never mutated here."""

    visit_id: str
    location: Coordinate
    time_window: TimeWindow
    priority: Priority = Priority.MEDIUM
    estimated_duration_min: Optional[int] = None
    client_id: Optional[str] = None
    client_name: str = ""
    property_id: Optional[str] = None
    property_title: str = ""
    property_address: str = ""
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    visit_date: Optional[date] = None
    notes: Optional[str] = None
    confirmed: bool = False


@dataclass(frozen=True, slots=True)
class StartLocation:
    location: Coordinate
    name: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RouteSettings:
    start_location: StartLocation
    start_time_min: int = 9 * 60
    average_visit_duration_min: int = 60
    average_speed_kmh: float = 30.0
    include_traffic_buffer: bool = False
    traffic_buffer_percent: float = 0.0
    prioritize_time_windows: bool = True
    max_route_distance_km: Optional[float] = None
    max_route_time_hours: Optional[float] = None


@dataclass(frozen=True, slots=True)
class RouteStop:
    visit: Visit
    order: int
    arrival_min: float
    departure_min: float
    travel_time_min: float
    travel_distance_km: float
    visit_duration_min: int

    @property
    def visit_id(self) -> str:
        return self.visit.visit_id


@dataclass(frozen=True, slots=True)
class Route:
    route_id: str
    stops: tuple[RouteStop, ...]
    start_location: StartLocation
    settings: RouteSettings
    total_distance_km: float
    total_time_min: float
    total_visits: int
    optimization_method: OptimizationMethod
    created_at: datetime
    status: RouteStatus = RouteStatus.DRAFT
    agent_id: Optional[str] = None
    route_date: Optional[date] = None

    def visit_ids(self) -> list[str]:
        return [stop.visit_id for stop in self.stops]


@dataclass(frozen=True, slots=True)
class RouteStats:
    total_visits: int = 0
    total_distance_km: float = 0.0
    total_time_min: float = 0.0
    average_visit_duration_min: float = 0.0
    furthest_distance_km: float = 0.0
    efficiency: int = 0


@dataclass(slots=True)
class ValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
