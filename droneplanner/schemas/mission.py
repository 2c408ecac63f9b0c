#!/usr/bin/env python3
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import ConfigDict, Discriminator, Field, Tag, field_validator
from pydantic_core import PydanticCustomError

from droneplanner.core.timeutils import ensure_utc
from droneplanner.schemas.common import CamelModel, format_document_id
from droneplanner.schemas.waypoint import Target


WAYPOINT_MISSION = "waypoint-mission"
RECORD_VIDEO = "record-video"
SHOOT_PHOTO = "shoot-photo"
CHANGE_HEADING = "change-heading"
OPAQUE = "opaque"

KNOWN_ELEMENT_TYPES = (WAYPOINT_MISSION, RECORD_VIDEO, SHOOT_PHOTO, CHANGE_HEADING)

WAYPOINT_MISSION_MIN_WAYPOINTS = 2
WAYPOINT_MISSION_ERROR = "waypoint_mission_waypoints"
WAYPOINT_MISSION_MESSAGE = "Waypoint mission must have at least 2 waypoints"


# === Per-type configuration payloads ===

class ElementConfig(CamelModel):
    # Unknown keys are kept so newer clients do not lose data
    model_config = ConfigDict(extra="allow")


class WaypointMissionConfig(ElementConfig):
    auto_flight_speed: float = 0.0
    max_flight_speed: float = 0.0
    finished_action: str = ""
    repeat_times: int = 0
    global_turn_mode: str = ""
    gimbal_pitch_rotation_enabled: bool = False
    heading_mode: str = ""
    flight_path_mode: str = ""
    targets: list[Target] = Field(default_factory=list)
    # Entries are kept as sent; clients attach their own keys (lat, lng, focusTargetId)
    waypoints: list[Any] = Field(default_factory=list)

    @field_validator("waypoints", mode="before")
    def waypoints_must_be_list(cls, value):
        if not isinstance(value, list):
            raise PydanticCustomError(WAYPOINT_MISSION_ERROR, WAYPOINT_MISSION_MESSAGE)
        return value


class RecordVideoConfig(ElementConfig):
    action_type: str = "RecordVideoAction"
    camera_index: int = 0


class TakePhotoConfig(ElementConfig):
    photo_type: str = "single"           # "single" or "interval"
    photo_count: Optional[int] = None    # interval mode only
    time_interval: Optional[int] = None  # seconds between photos


class ChangeHeadingConfig(ElementConfig):
    angle: float = 0.0                   # -180..180 degrees
    angular_velocity: float = 0.0        # degrees per second


# === Timeline elements ===

class TimelineElementBase(CamelModel):
    id: Optional[str] = None
    order: Optional[int] = None


class WaypointMissionElement(TimelineElementBase):
    type: Literal["waypoint-mission"] = WAYPOINT_MISSION
    config: WaypointMissionConfig = Field(default_factory=WaypointMissionConfig)


class RecordVideoElement(TimelineElementBase):
    type: Literal["record-video"] = RECORD_VIDEO
    config: RecordVideoConfig = Field(default_factory=RecordVideoConfig)


class ShootPhotoElement(TimelineElementBase):
    type: Literal["shoot-photo"] = SHOOT_PHOTO
    config: TakePhotoConfig = Field(default_factory=TakePhotoConfig)


class ChangeHeadingElement(TimelineElementBase):
    type: Literal["change-heading"] = CHANGE_HEADING
    config: ChangeHeadingConfig = Field(default_factory=ChangeHeadingConfig)


class OpaqueElement(TimelineElementBase):
    """Element of a type this server does not know yet; config kept verbatim."""
    type: str
    config: dict[str, Any] = Field(default_factory=dict)


def element_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return kind if kind in KNOWN_ELEMENT_TYPES else OPAQUE


TimelineElement = Annotated[
    Union[
        Annotated[WaypointMissionElement, Tag(WAYPOINT_MISSION)],
        Annotated[RecordVideoElement, Tag(RECORD_VIDEO)],
        Annotated[ShootPhotoElement, Tag(SHOOT_PHOTO)],
        Annotated[ChangeHeadingElement, Tag(CHANGE_HEADING)],
        Annotated[OpaqueElement, Tag(OPAQUE)],
    ],
    Discriminator(element_kind),
]


# === Mission ===

class GlobalMissionSettings(CamelModel):
    # Battery and safety
    battery_action: str = ""
    battery_threshold: int = 0
    signal_lost_action: str = ""

    # Home location
    home_lat: Optional[float] = None
    home_lng: Optional[float] = None

    drone_type: str = ""


class MissionMetadata(CamelModel):
    total_timeline_elements: int = 0
    has_waypoint_mission: bool = False
    total_waypoints: int = 0
    total_distance: float = 0.0
    estimated_duration: float = 0.0


class MissionRequest(CamelModel):
    """Client-settable mission fields. id, owner, date and timestamps are server-set."""
    name: str = ""
    timeline_elements: list[TimelineElement] = Field(default_factory=list)
    global_settings: GlobalMissionSettings = Field(default_factory=GlobalMissionSettings)
    metadata: MissionMetadata = Field(default_factory=MissionMetadata)

    def waypoint_missions(self) -> list[WaypointMissionElement]:
        return [e for e in self.timeline_elements if isinstance(e, WaypointMissionElement)]

    def has_waypoint_mission(self) -> bool:
        return bool(self.waypoint_missions())


class MissionResponse(MissionRequest):
    id: str
    user_id: str
    date: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("date", "created_at", "updated_at")
    def make_aware(cls, value):
        return ensure_utc(value)

    @staticmethod
    def from_orm(mission) -> "MissionResponse":
        return MissionResponse(
            id=format_document_id(mission.id),
            user_id=mission.user_id,
            name=mission.name,
            date=mission.date,
            timeline_elements=mission.timeline_elements or [],
            global_settings=mission.global_settings or {},
            metadata=mission.mission_metadata or {},
            created_at=mission.created_at,
            updated_at=mission.updated_at,
        )
