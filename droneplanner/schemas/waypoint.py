#!/usr/bin/env python3
from typing import Optional

from pydantic import ConfigDict, Field

from droneplanner.schemas.common import CamelModel


class PlanModel(CamelModel):
    # Client-only keys survive a save and reload
    model_config = ConfigDict(extra="allow")


class Coordinate(PlanModel):
    latitude: float = 0.0
    longitude: float = 0.0

    @property
    def is_unset(self) -> bool:
        # (0, 0) means the client never placed the point
        return self.latitude == 0 and self.longitude == 0


class Target(PlanModel):
    """Point of interest the camera can track."""
    id: str = ""
    name: str = ""
    lat: float = 0.0
    lng: float = 0.0


class WaypointAction(PlanModel):
    action_type: str = ""
    action_param: float = 0.0


class Waypoint(PlanModel):
    id: Optional[str] = None
    coordinate: Coordinate = Field(default_factory=Coordinate)
    altitude: float = 0.0
    heading: float = 0.0
    gimbal_pitch: float = 0.0
    speed: float = 0.0
    corner_radius: float = 0.0
    turn_mode: str = ""
    targets: list[Target] = Field(default_factory=list)
    actions: list[WaypointAction] = Field(default_factory=list)


class SegmentSpeed(PlanModel):
    from_id: int = 0
    to_id: int = 0
    speed: float = 0.0
    interpolate_heading: bool = False
    is_curved: bool = False
    curve_tightness: int = 0
