#!/usr/bin/env python3
import logging
import math
import threading
import time
from typing import Callable

import httpx
import orjson
import pydantic

from droneplanner.core import timeutils
from droneplanner.core.config import Settings
from droneplanner.schemas.timezone import TimezoneResponse


logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 24 * 60 * 60


class TimezoneLookupError(Exception):
    pass


def round_coordinate(value: float) -> float:
    """Round to 2 decimals (~1.1 km), halves away from zero."""
    rounded = math.copysign(math.floor(abs(value) * 100 + 0.5), value) / 100
    return rounded + 0.0   # folds -0.0 into 0.0


def cache_key(lat: float, lng: float) -> str:
    return f"{round_coordinate(lat):.2f}:{round_coordinate(lng):.2f}"


class TimezoneCache:
    """Coordinate cell -> timezone answer, valid for ``ttl`` seconds after insertion.

    Expired entries read as misses and are replaced by the next ``put``;
    nothing else is evicted.
    """

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[str, tuple[float, TimezoneResponse]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> TimezoneResponse | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        inserted_at, data = entry
        if self.clock() - inserted_at >= self.ttl:
            return None
        return data

    def put(self, key: str, data: TimezoneResponse) -> None:
        with self._lock:
            self._entries[key] = (self.clock(), data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def utc_fallback() -> TimezoneResponse:
    now = timeutils.utcnow()
    return TimezoneResponse(
        status="OK",
        zone_name="UTC",
        abbreviation="UTC",
        gmt_offset=0,
        timestamp=int(now.timestamp()),
        formatted=now.strftime("%Y-%m-%d %H:%M:%S"),
    )


class TimezoneService:
    """Read-through cache in front of the TimeZoneDB position lookup.

    Upstream failures are answered with UTC and never cached.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 5.0,
        cache: TimezoneCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.cache = cache if cache is not None else TimezoneCache()
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimezoneService":
        return cls(
            api_key=settings.TIMEZONEDB_API_KEY,
            base_url=settings.TIMEZONEDB_URL,
            timeout=settings.TIMEZONE_TIMEOUT_S,
            cache=TimezoneCache(ttl=settings.TIMEZONE_CACHE_TTL_HOURS * 3600),
        )

    async def lookup(self, lat: float, lng: float) -> TimezoneResponse:
        key = cache_key(lat, lng)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for coordinates %s", key)
            return cached

        logger.info("Cache miss for coordinates %s, fetching from TimeZoneDB", key)
        try:
            data = await self.fetch(lat, lng)
        except TimezoneLookupError as e:
            logger.warning("Error fetching timezone data: %s, falling back to UTC", e)
            return utc_fallback()

        self.cache.put(key, data)
        return data

    async def fetch(self, lat: float, lng: float) -> TimezoneResponse:
        if not self.api_key:
            raise TimezoneLookupError("TIMEZONEDB_API_KEY is not set")

        params = {
            "key": self.api_key,
            "format": "json",
            "by": "position",
            "lat": f"{lat:.6f}",
            "lng": f"{lng:.6f}",
        }
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise TimezoneLookupError(f"failed to call TimeZoneDB API: {e}") from e

        if response.status_code != 200:
            raise TimezoneLookupError(f"TimeZoneDB API returned status {response.status_code}")

        try:
            data = TimezoneResponse.model_validate(orjson.loads(response.content))
        except (ValueError, pydantic.ValidationError) as e:
            raise TimezoneLookupError(f"failed to decode TimeZoneDB response: {e}") from e

        if data.status != "OK":
            raise TimezoneLookupError(f"TimeZoneDB API error: {data.message}")

        return data
