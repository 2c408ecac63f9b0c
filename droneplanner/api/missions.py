#!/usr/bin/env python3
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from droneplanner.core.security import Principal, get_current_principal
from droneplanner.db.session import get_db
from droneplanner.schemas.common import parse_document_id
from droneplanner.schemas.mission import MissionRequest, MissionResponse
from droneplanner.services import mission_service


router = APIRouter(prefix="/missions", tags=["missions"])


@router.post("", response_model=MissionResponse, status_code=status.HTTP_201_CREATED)
async def create_mission(
    payload: MissionRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Timeline must hold at least one waypoint mission with 2+ waypoints."""
    mission = await mission_service.create_mission(db, principal.user_id, payload)
    return MissionResponse.from_orm(mission)


@router.get("", response_model=list[MissionResponse])
async def list_missions(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    missions = await mission_service.list_missions(db, principal.user_id)
    return [MissionResponse.from_orm(m) for m in missions]


@router.get("/{mission_id}", response_model=MissionResponse)
async def get_mission(
    mission_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    mission = await mission_service.get_mission(
        db, principal.user_id, parse_document_id(mission_id, "mission")
    )
    return MissionResponse.from_orm(mission)


@router.put("/{mission_id}", response_model=MissionResponse)
async def update_mission(
    mission_id: str,
    payload: MissionRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    mission = await mission_service.update_mission(
        db, principal.user_id, parse_document_id(mission_id, "mission"), payload
    )
    return MissionResponse.from_orm(mission)


@router.delete("/{mission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_mission(
    mission_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await mission_service.delete_mission(
        db, principal.user_id, parse_document_id(mission_id, "mission")
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
