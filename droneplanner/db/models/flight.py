#!/usr/bin/env python3
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONDocument, SequenceKey


class Flight(Base):
    __tablename__ = "flights"

    # Insertion order, used to break ties between equal dates
    seq: Mapped[int] = mapped_column(SequenceKey, primary_key=True, autoincrement=True)

    # Public identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, index=True, default=uuid.uuid4)

    # Owner (JWT subject)
    user_id: Mapped[str] = mapped_column(String, index=True, nullable=False)

    name: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)

    # Flight path
    waypoints: Mapped[list] = mapped_column(JSONDocument, default=list)
    segment_speeds: Mapped[list] = mapped_column(JSONDocument, default=list)

    # Mission settings
    mission_type: Mapped[str] = mapped_column(String, default="")
    max_flight_speed: Mapped[float] = mapped_column(Float, default=0.0)
    auto_flight_speed: Mapped[float] = mapped_column(Float, default=0.0)
    finished_action: Mapped[str] = mapped_column(String, default="")
    heading_home: Mapped[str] = mapped_column(String, default="")
    flightpath_mode: Mapped[str] = mapped_column(String, default="")
    repeat_times: Mapped[int] = mapped_column(Integer, default=0)
    turn_mode: Mapped[str] = mapped_column(String, default="")
    actions: Mapped[list] = mapped_column(JSONDocument, default=list)

    # Computed by the client, stored as-is ("metadata" is reserved on declarative classes)
    flight_metadata: Mapped[dict] = mapped_column("metadata", JSONDocument, default=dict)

    # Created/Updated timestamp
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
