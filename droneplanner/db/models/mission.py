#!/usr/bin/env python3
import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONDocument, SequenceKey


class Mission(Base):
    __tablename__ = "missions"

    # Insertion order, used to break ties between equal dates
    seq: Mapped[int] = mapped_column(SequenceKey, primary_key=True, autoincrement=True)

    # Public identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, index=True, default=uuid.uuid4)

    # Owner (JWT subject)
    user_id: Mapped[str] = mapped_column(String, index=True, nullable=False)

    name: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)

    # Ordered timeline elements, each {id, type, order, config}
    timeline_elements: Mapped[list] = mapped_column(JSONDocument, default=list)

    global_settings: Mapped[dict] = mapped_column(JSONDocument, default=dict)
    mission_metadata: Mapped[dict] = mapped_column("metadata", JSONDocument, default=dict)

    # Created/Updated timestamp
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
