#!/usr/bin/env python3
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from droneplanner.core.security import Principal, get_current_principal
from droneplanner.db.session import get_db
from droneplanner.schemas.common import parse_document_id
from droneplanner.schemas.flight import FlightRequest, FlightResponse
from droneplanner.services import flight_service


router = APIRouter(prefix="/flights", tags=["flights"])


"""Save a new flight plan for the authenticated user.

Args:
    payload (FlightRequest): name, waypoints (>= 2, none at 0,0), speeds, settings, metadata
    principal (Principal): caller identity, becomes the flight owner

Returns:
    FlightResponse: the stored flight with server-assigned id and timestamps
"""
@router.post("", response_model=FlightResponse, status_code=status.HTTP_201_CREATED)
async def create_flight(
    payload: FlightRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    flight = await flight_service.create_flight(db, principal.user_id, payload)
    return FlightResponse.from_orm(flight)


@router.get("", response_model=list[FlightResponse])
async def list_flights(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    flights = await flight_service.list_flights(db, principal.user_id)
    return [FlightResponse.from_orm(f) for f in flights]


@router.get("/{flight_id}", response_model=FlightResponse)
async def get_flight(
    flight_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    flight = await flight_service.get_flight(
        db, principal.user_id, parse_document_id(flight_id, "flight")
    )
    return FlightResponse.from_orm(flight)


@router.put("/{flight_id}", response_model=FlightResponse)
async def update_flight(
    flight_id: str,
    payload: FlightRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    flight = await flight_service.update_flight(
        db, principal.user_id, parse_document_id(flight_id, "flight"), payload
    )
    return FlightResponse.from_orm(flight)


@router.delete("/{flight_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_flight(
    flight_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await flight_service.delete_flight(
        db, principal.user_id, parse_document_id(flight_id, "flight")
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
