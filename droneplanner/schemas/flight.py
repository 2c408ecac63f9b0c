#!/usr/bin/env python3
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from droneplanner.core.timeutils import ensure_utc
from droneplanner.schemas.common import CamelModel, format_document_id
from droneplanner.schemas.waypoint import SegmentSpeed, Waypoint, WaypointAction


class FlightMetadata(CamelModel):
    total_waypoints: int = 0
    total_distance: float = 0.0
    estimated_duration: float = 0.0


class FlightRequest(CamelModel):
    """Client-settable flight fields. id, owner and timestamps are ignored if sent."""
    name: str = ""
    date: Optional[datetime] = None
    waypoints: list[Waypoint] = Field(default_factory=list)
    segment_speeds: list[SegmentSpeed] = Field(default_factory=list)
    metadata: FlightMetadata = Field(default_factory=FlightMetadata)

    # Mission settings
    mission_type: str = ""
    max_flight_speed: float = 0.0
    auto_flight_speed: float = 0.0
    finished_action: str = ""
    heading_home: str = ""
    flightpath_mode: str = ""
    repeat_times: int = 0
    turn_mode: str = ""
    actions: list[WaypointAction] = Field(default_factory=list)

    @field_validator("date")
    def make_aware(cls, value):
        return ensure_utc(value)


class FlightResponse(FlightRequest):
    id: str
    user_id: str
    date: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("date", "created_at", "updated_at")
    def make_aware(cls, value):
        return ensure_utc(value)

    @staticmethod
    def from_orm(flight) -> "FlightResponse":
        return FlightResponse(
            id=format_document_id(flight.id),
            user_id=flight.user_id,
            name=flight.name,
            date=flight.date,
            waypoints=flight.waypoints or [],
            segment_speeds=flight.segment_speeds or [],
            metadata=flight.flight_metadata or {},
            mission_type=flight.mission_type,
            max_flight_speed=flight.max_flight_speed,
            auto_flight_speed=flight.auto_flight_speed,
            finished_action=flight.finished_action,
            heading_home=flight.heading_home,
            flightpath_mode=flight.flightpath_mode,
            repeat_times=flight.repeat_times,
            turn_mode=flight.turn_mode,
            actions=flight.actions or [],
            created_at=flight.created_at,
            updated_at=flight.updated_at,
        )
