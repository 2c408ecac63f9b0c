#!/usr/bin/env python3
from fastapi import APIRouter

from droneplanner.api.flights import router as flights_router
from droneplanner.api.missions import router as missions_router


# Everything under /api requires a bearer token (enforced per route)
router = APIRouter(prefix="/api")

# Include routers
router.include_router(flights_router)
router.include_router(missions_router)
