#!/usr/bin/env python3
import logging
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from droneplanner.core import timeutils
from droneplanner.core.errors import NotFoundError
from droneplanner.db.models.mission import Mission
from droneplanner.schemas.mission import MissionRequest, TimelineElementBase
from droneplanner.services.validation import validate_mission


logger = logging.getLogger(__name__)

MISSION_NOT_FOUND = "Mission not found"


def new_element_id() -> str:
    return uuid.uuid4().hex


def prepare_timeline(elements: list[TimelineElementBase], assign_order: bool) -> list[dict]:
    """Give every element an id and an order, returning the storage form.

    On create the order is the element's index. On update client orders are
    kept as sent (gaps allowed) and elements without one are appended after
    the highest order present.
    """
    stored = [element.to_storage() for element in elements]
    known = [doc["order"] for doc in stored if doc.get("order") is not None]
    next_order = max(known) + 1 if known else 0

    for index, doc in enumerate(stored):
        if not doc.get("id"):
            doc["id"] = new_element_id()
        if assign_order:
            doc["order"] = index
        elif doc.get("order") is None:
            doc["order"] = next_order
            next_order += 1
    return stored


def column_values(payload: MissionRequest, assign_order: bool) -> dict:
    return {
        Mission.name: payload.name,
        Mission.timeline_elements: prepare_timeline(payload.timeline_elements, assign_order),
        Mission.global_settings: payload.global_settings.to_storage(),
        Mission.mission_metadata: payload.metadata.to_storage(),
    }


async def create_mission(db: AsyncSession, owner_id: str, payload: MissionRequest) -> Mission:
    validate_mission(payload)

    now = timeutils.utcnow()
    mission = Mission(
        id=uuid.uuid4(),
        user_id=owner_id,
        name=payload.name,
        date=now,
        timeline_elements=prepare_timeline(payload.timeline_elements, assign_order=True),
        global_settings=payload.global_settings.to_storage(),
        mission_metadata=payload.metadata.to_storage(),
        created_at=now,
        updated_at=now,
    )

    db.add(mission)
    await db.commit()
    await db.refresh(mission)

    logger.info(
        "Created mission %s with %d timeline elements for user %s",
        mission.id.hex, len(mission.timeline_elements), owner_id,
    )
    return mission


async def list_missions(db: AsyncSession, owner_id: str) -> list[Mission]:
    result = await db.execute(
        select(Mission)
        .where(Mission.user_id == owner_id)
        .order_by(Mission.date.desc(), Mission.seq.asc())
    )
    return list(result.scalars().all())


async def get_mission(db: AsyncSession, owner_id: str, mission_id: uuid.UUID) -> Mission:
    result = await db.execute(
        select(Mission)
        .where(Mission.id == mission_id, Mission.user_id == owner_id)
        .execution_options(populate_existing=True)
    )
    mission = result.scalar_one_or_none()
    if mission is None:
        logger.info("Mission %s not found for user %s", mission_id.hex, owner_id)
        raise NotFoundError(MISSION_NOT_FOUND)
    return mission


async def update_mission(
    db: AsyncSession, owner_id: str, mission_id: uuid.UUID, payload: MissionRequest
) -> Mission:
    validate_mission(payload)

    values = column_values(payload, assign_order=False)
    values[Mission.updated_at] = timeutils.utcnow()

    result = await db.execute(
        update(Mission)
        .where(Mission.id == mission_id, Mission.user_id == owner_id)
        .values(values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        logger.info("Mission %s not found for user %s", mission_id.hex, owner_id)
        raise NotFoundError(MISSION_NOT_FOUND)
    await db.commit()

    return await get_mission(db, owner_id, mission_id)


async def delete_mission(db: AsyncSession, owner_id: str, mission_id: uuid.UUID) -> None:
    result = await db.execute(
        delete(Mission)
        .where(Mission.id == mission_id, Mission.user_id == owner_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        logger.info("Mission %s not found for user %s", mission_id.hex, owner_id)
        raise NotFoundError(MISSION_NOT_FOUND)
    await db.commit()

    logger.info("Deleted mission %s for user %s", mission_id.hex, owner_id)
