#!/usr/bin/env python3
import logging
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from droneplanner.core import timeutils
from droneplanner.core.errors import NotFoundError
from droneplanner.db.models.flight import Flight
from droneplanner.schemas.flight import FlightRequest
from droneplanner.services.validation import validate_flight


logger = logging.getLogger(__name__)

FLIGHT_NOT_FOUND = "Flight not found"


def editable_fields(payload: FlightRequest) -> dict:
    """Columns a client may replace on update; id, owner, date and created_at never change."""
    return {
        "name": payload.name,
        "waypoints": [w.to_storage() for w in payload.waypoints],
        "segment_speeds": [s.to_storage() for s in payload.segment_speeds],
        "flight_metadata": payload.metadata.to_storage(),
        "mission_type": payload.mission_type,
        "max_flight_speed": payload.max_flight_speed,
        "auto_flight_speed": payload.auto_flight_speed,
        "finished_action": payload.finished_action,
        "heading_home": payload.heading_home,
        "flightpath_mode": payload.flightpath_mode,
        "repeat_times": payload.repeat_times,
        "turn_mode": payload.turn_mode,
        "actions": [a.to_storage() for a in payload.actions],
    }


def column_values(payload: FlightRequest) -> dict:
    values = {getattr(Flight, key): value for key, value in editable_fields(payload).items()}
    values[Flight.updated_at] = timeutils.utcnow()
    return values


async def create_flight(db: AsyncSession, owner_id: str, payload: FlightRequest) -> Flight:
    validate_flight(payload)

    now = timeutils.utcnow()
    flight = Flight(
        id=uuid.uuid4(),
        user_id=owner_id,
        date=payload.date or now,
        created_at=now,
        updated_at=now,
        **editable_fields(payload),
    )

    db.add(flight)
    await db.commit()
    await db.refresh(flight)

    logger.info("Created flight %s for user %s", flight.id.hex, owner_id)
    return flight


async def list_flights(db: AsyncSession, owner_id: str) -> list[Flight]:
    result = await db.execute(
        select(Flight)
        .where(Flight.user_id == owner_id)
        .order_by(Flight.date.desc(), Flight.seq.asc())
    )
    return list(result.scalars().all())


async def get_flight(db: AsyncSession, owner_id: str, flight_id: uuid.UUID) -> Flight:
    result = await db.execute(
        select(Flight)
        .where(Flight.id == flight_id, Flight.user_id == owner_id)
        .execution_options(populate_existing=True)
    )
    flight = result.scalar_one_or_none()
    if flight is None:
        logger.info("Flight %s not found for user %s", flight_id.hex, owner_id)
        raise NotFoundError(FLIGHT_NOT_FOUND)
    return flight


async def update_flight(
    db: AsyncSession, owner_id: str, flight_id: uuid.UUID, payload: FlightRequest
) -> Flight:
    validate_flight(payload)

    result = await db.execute(
        update(Flight)
        .where(Flight.id == flight_id, Flight.user_id == owner_id)
        .values(column_values(payload))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        logger.info("Flight %s not found for user %s", flight_id.hex, owner_id)
        raise NotFoundError(FLIGHT_NOT_FOUND)
    await db.commit()

    return await get_flight(db, owner_id, flight_id)


async def delete_flight(db: AsyncSession, owner_id: str, flight_id: uuid.UUID) -> None:
    result = await db.execute(
        delete(Flight)
        .where(Flight.id == flight_id, Flight.user_id == owner_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        logger.info("Flight %s not found for user %s", flight_id.hex, owner_id)
        raise NotFoundError(FLIGHT_NOT_FOUND)
    await db.commit()

    logger.info("Deleted flight %s for user %s", flight_id.hex, owner_id)
