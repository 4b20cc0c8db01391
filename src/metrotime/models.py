"""Data models for WMATA timetable lookups."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

LINE_CODE_KEYS = ("LineCode1", "LineCode2", "LineCode3", "LineCode4")


@dataclass(frozen=True)
class Station:
    """Represents one Metrorail platform entry from the station list."""
    code: str
    name: str
    line_codes: Tuple[str, ...] = ()  # LineCode1..4, nulls dropped
    station_together: Optional[str] = None  # Sibling platform code, if any

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Station":
        code = data.get("Code")
        name = data.get("Name")
        if not isinstance(code, str) or not code or not isinstance(name, str) or not name:
            raise ValueError(f"station record needs a Code and Name, got {code!r}, {name!r}")

        line_codes = tuple(data[key] for key in LINE_CODE_KEYS if data.get(key))
        return cls(
            code=code,
            name=name,
            line_codes=line_codes,
            station_together=data.get("StationTogether1") or None,
        )


@dataclass
class TrainPrediction:
    """Represents a real-time train arrival at a platform."""
    line: str
    destination: str
    minutes: str  # "BRD", "ARR", "---" or a number of minutes
    location_code: str  # Platform code the prediction belongs to
    group: Optional[str] = None
    car: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "TrainPrediction":
        return cls(
            line=data.get("Line") or "",
            destination=data.get("Destination") or "",
            minutes=str(data.get("Min") or "").strip(),
            location_code=data.get("LocationCode") or "",
            group=data.get("Group"),
            car=data.get("Car"),
        )


@dataclass
class BusPrediction:
    """Represents a real-time bus arrival at a stop."""
    route_id: str
    direction_text: str
    minutes: int
    vehicle_id: Optional[str] = None
    trip_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "BusPrediction":
        return cls(
            route_id=data.get("RouteID") or "",
            direction_text=data.get("DirectionText") or "",
            minutes=int(data.get("Minutes") or 0),
            vehicle_id=data.get("VehicleID"),
            trip_id=data.get("TripID"),
        )


@dataclass
class Incident:
    """Represents an active rail service disruption."""
    incident_id: str
    description: str
    lines_affected: str  # Delimiter-joined line codes, e.g. "RD;OR;"
    incident_type: Optional[str] = None
    date_updated: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Incident":
        return cls(
            incident_id=data.get("IncidentID") or "",
            description=data.get("Description") or "",
            lines_affected=data.get("LinesAffected") or "",
            incident_type=data.get("IncidentType"),
            date_updated=data.get("DateUpdated"),
        )


@dataclass
class BusIncident:
    """Represents an active bus service disruption."""
    incident_id: str
    description: str
    routes_affected: List[str] = field(default_factory=list)
    incident_type: Optional[str] = None
    date_updated: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "BusIncident":
        return cls(
            incident_id=data.get("IncidentID") or "",
            description=data.get("Description") or "",
            routes_affected=list(data.get("RoutesAffected") or []),
            incident_type=data.get("IncidentType"),
            date_updated=data.get("DateUpdated"),
        )


@dataclass
class BusStop:
    """Predictions for a single bus stop as returned by the bus feed."""
    stop_id: str
    name: str
    predictions: List[BusPrediction]


class LookupStatus(Enum):
    """Outcome of a timetable lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    UPSTREAM_FAILURE = "upstream_failure"


@dataclass
class Timetable:
    """Complete answer for a station or stop query."""
    status: LookupStatus
    name: Optional[str] = None
    predictions: List[Union[TrainPrediction, BusPrediction]] = field(default_factory=list)
    incidents: List[Union[Incident, BusIncident]] = field(default_factory=list)
    failed_feeds: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=datetime.now)

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def degraded(self) -> bool:
        """True when at least one feed failed and was treated as empty."""
        return bool(self.failed_feeds)
