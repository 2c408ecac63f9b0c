#!/usr/bin/env python3
import math

from fastapi import APIRouter, Depends, Request

from droneplanner.core.errors import BadRequestError
from droneplanner.schemas.timezone import TimezoneResponse
from droneplanner.services.timezone_service import TimezoneService


router = APIRouter(tags=["timezone"])


def get_timezone_service(request: Request) -> TimezoneService:
    return request.app.state.timezone_service


@router.get("/timezone", response_model=TimezoneResponse)
async def get_timezone(
    lat: float | None = None,
    lng: float | None = None,
    service: TimezoneService = Depends(get_timezone_service),
):
    if lat is None or lng is None:
        raise BadRequestError("Missing lat or lng parameters")
    if not math.isfinite(lat):
        raise BadRequestError("Invalid lat parameter")
    if not math.isfinite(lng):
        raise BadRequestError("Invalid lng parameter")

    return await service.lookup(lat, lng)
