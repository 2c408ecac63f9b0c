#!/usr/bin/env python3
from typing import Optional

from pydantic import field_validator

from droneplanner.schemas.common import CamelModel


class TimezoneResponse(CamelModel):
    """Shape of a TimeZoneDB ``get-time-zone`` answer."""
    status: str = ""
    message: str = ""
    country_code: str = ""
    country_name: str = ""
    zone_name: str = ""
    abbreviation: str = ""
    gmt_offset: int = 0
    dst: str = "0"
    zone_start: Optional[int] = None
    zone_end: Optional[int] = None
    next_abbreviation: Optional[str] = None
    timestamp: int = 0
    formatted: str = ""

    @field_validator("dst", mode="before")
    def dst_as_string(cls, value):
        # TimeZoneDB sends "0"/"1"
        return str(value) if value is not None else "0"
