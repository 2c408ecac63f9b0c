#!/usr/bin/env python3
"""Field-level rules checked before a flight or mission is written.

The same rules run on create and on update.
"""
import logging

from droneplanner.core.errors import ValidationError
from droneplanner.schemas.flight import FlightRequest
from droneplanner.schemas.mission import (
    WAYPOINT_MISSION_MESSAGE,
    WAYPOINT_MISSION_MIN_WAYPOINTS,
    MissionRequest,
    WaypointMissionElement,
)


logger = logging.getLogger(__name__)

MIN_FLIGHT_WAYPOINTS = 2


def reject(message: str) -> ValidationError:
    logger.info("Validation error: %s", message)
    return ValidationError(message)


def validate_flight(payload: FlightRequest) -> None:
    if not payload.name:
        raise reject("Flight name is required")

    if len(payload.waypoints) < MIN_FLIGHT_WAYPOINTS:
        raise reject(f"At least {MIN_FLIGHT_WAYPOINTS} waypoints are required")

    for i, waypoint in enumerate(payload.waypoints):
        if waypoint.coordinate.is_unset:
            raise reject(f"Invalid coordinates for waypoint {i}")


def validate_mission(payload: MissionRequest) -> None:
    if not payload.name:
        raise reject("Mission name is required")

    if not payload.timeline_elements:
        raise reject("At least one timeline element is required")

    has_waypoint_mission = False
    for element in payload.timeline_elements:
        if not isinstance(element, WaypointMissionElement):
            continue
        has_waypoint_mission = True
        if len(element.config.waypoints) < WAYPOINT_MISSION_MIN_WAYPOINTS:
            raise reject(WAYPOINT_MISSION_MESSAGE)

    if not has_waypoint_mission:
        raise reject("At least one waypoint mission is required")
