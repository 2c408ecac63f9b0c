#!/usr/bin/env python3
# tests/units/test_flights.py
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from factories import flight_payload, waypoint


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create_flight(client: AsyncClient, headers: dict, **kwargs) -> dict:
    response = await client.post("/api/flights", json=flight_payload(**kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_flight_round_trip(client: AsyncClient, auth_headers):
    headers = auth_headers("user-a")
    payload = flight_payload(date="2024-05-01T10:00:00Z")

    created = (await client.post("/api/flights", json=payload, headers=headers)).json()
    response = await client.get(f"/api/flights/{created['id']}", headers=headers)
    assert response.status_code == 200
    data = response.json()

    # Server-assigned fields
    assert len(data["id"]) == 32 and data["id"] == data["id"].lower()
    uuid.UUID(data["id"])
    assert data["userId"] == "user-a"
    assert data["createdAt"] == data["updatedAt"]

    # Client-settable fields come back unchanged
    assert parse_ts(data["date"]) == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert data["name"] == payload["name"]
    assert data["segmentSpeeds"] == payload["segmentSpeeds"]
    assert data["metadata"] == payload["metadata"]
    for key in ("missionType", "maxFlightSpeed", "autoFlightSpeed", "finishedAction",
                "headingHome", "flightpathMode", "repeatTimes", "turnMode", "actions"):
        assert data[key] == payload[key]
    for sent, stored in zip(payload["waypoints"], data["waypoints"]):
        for key, value in sent.items():
            assert stored[key] == value


@pytest.mark.asyncio
async def test_create_flight_forces_owner_and_ignores_server_fields(client: AsyncClient, auth_headers):
    payload = flight_payload(userId="someone-else", id="deadbeef", createdAt="2000-01-01T00:00:00Z")
    response = await client.post("/api/flights", json=payload, headers=auth_headers("user-a"))
    assert response.status_code == 201
    data = response.json()
    assert data["userId"] == "user-a"
    assert data["id"] != "deadbeef"
    assert parse_ts(data["createdAt"]).year > 2000


@pytest.mark.asyncio
async def test_create_flight_defaults_date_to_now(client: AsyncClient, auth_headers):
    before = datetime.now(timezone.utc) - timedelta(seconds=5)
    data = await create_flight(client, auth_headers())
    assert parse_ts(data["date"]) >= before
    assert parse_ts(data["date"]) == parse_ts(data["createdAt"])


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 1])
async def test_create_flight_needs_two_waypoints(client: AsyncClient, auth_headers, count):
    waypoints = [waypoint(40.0 + i, -74.0) for i in range(count)]
    response = await client.post(
        "/api/flights", json=flight_payload(waypoints=waypoints), headers=auth_headers()
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "At least 2 waypoints are required"


@pytest.mark.asyncio
async def test_create_flight_rejects_zero_coordinates(client: AsyncClient, auth_headers):
    waypoints = [waypoint(40.7, -74.0), waypoint(0.0, 0.0, altitude=120.0, speed=3.0)]
    response = await client.post(
        "/api/flights", json=flight_payload(waypoints=waypoints), headers=auth_headers()
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid coordinates for waypoint 1"


@pytest.mark.asyncio
async def test_equator_and_prime_meridian_alone_are_valid(client: AsyncClient, auth_headers):
    waypoints = [waypoint(0.0, 12.5), waypoint(51.5, 0.0)]
    response = await client.post(
        "/api/flights", json=flight_payload(waypoints=waypoints), headers=auth_headers()
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_flight_requires_name(client: AsyncClient, auth_headers):
    response = await client.post("/api/flights", json=flight_payload(name=""), headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["detail"] == "Flight name is required"


@pytest.mark.asyncio
async def test_malformed_body_is_bad_request(client: AsyncClient, auth_headers):
    headers = {**auth_headers(), "Content-Type": "application/json"}
    response = await client.post("/api/flights", content=b"{not json", headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request body"

    response = await client.post(
        "/api/flights", json=flight_payload(waypoints="nope"), headers=auth_headers()
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_flight_id(client: AsyncClient, auth_headers):
    response = await client.get("/api/flights/not-an-id", headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid flight ID"


@pytest.mark.asyncio
async def test_list_flights_by_date_descending(client: AsyncClient, auth_headers):
    headers = auth_headers("user-a")
    await create_flight(client, headers, name="old", date="2024-01-01T00:00:00Z")
    await create_flight(client, headers, name="new", date="2024-03-01T00:00:00Z")
    await create_flight(client, headers, name="tie-1", date="2024-02-01T00:00:00Z")
    await create_flight(client, headers, name="tie-2", date="2024-02-01T00:00:00Z")
    await create_flight(client, auth_headers("user-b"), name="other user")

    response = await client.get("/api/flights", headers=headers)
    assert response.status_code == 200
    assert [f["name"] for f in response.json()] == ["new", "tie-1", "tie-2", "old"]


@pytest.mark.asyncio
async def test_update_flight_replaces_whitelisted_fields(client: AsyncClient, auth_headers):
    headers = auth_headers()
    created = await create_flight(client, headers, date="2024-05-01T10:00:00Z")

    update = flight_payload(
        name="Harbor survey v2",
        waypoints=[waypoint(40.1, -74.1), waypoint(40.2, -74.2), waypoint(40.3, -74.3)],
        metadata={"totalWaypoints": 3, "totalDistance": 300.0, "estimatedDuration": 40.0},
        date="1999-01-01T00:00:00Z",
        userId="intruder",
        repeatTimes=3,
    )
    response = await client.put(f"/api/flights/{created['id']}", json=update, headers=headers)
    assert response.status_code == 200
    data = response.json()

    assert data["id"] == created["id"]
    assert data["userId"] == created["userId"]
    assert data["createdAt"] == created["createdAt"]
    assert data["date"] == created["date"]
    assert parse_ts(data["updatedAt"]) >= parse_ts(created["updatedAt"])
    assert data["name"] == "Harbor survey v2"
    assert len(data["waypoints"]) == 3
    assert data["metadata"]["totalWaypoints"] == 3
    assert data["repeatTimes"] == 3


@pytest.mark.asyncio
async def test_update_flight_refreshes_updated_at(client: AsyncClient, auth_headers, monkeypatch):
    from droneplanner.core import timeutils

    headers = auth_headers()
    created = await create_flight(client, headers)

    later = datetime.now(timezone.utc) + timedelta(hours=1)
    monkeypatch.setattr(timeutils, "utcnow", lambda: later)
    response = await client.put(f"/api/flights/{created['id']}", json=flight_payload(), headers=headers)
    assert parse_ts(response.json()["updatedAt"]) == later
    assert response.json()["createdAt"] == created["createdAt"]


@pytest.mark.asyncio
async def test_update_flight_revalidates(client: AsyncClient, auth_headers):
    headers = auth_headers()
    created = await create_flight(client, headers)

    response = await client.put(
        f"/api/flights/{created['id']}", json=flight_payload(waypoints=[waypoint()]), headers=headers
    )
    assert response.status_code == 400
    response = await client.put(
        f"/api/flights/{created['id']}", json=flight_payload(name=""), headers=headers
    )
    assert response.status_code == 400

    # Nothing was written
    stored = (await client.get(f"/api/flights/{created['id']}", headers=headers)).json()
    assert stored["name"] == created["name"]


@pytest.mark.asyncio
async def test_other_owner_sees_not_found(client: AsyncClient, auth_headers):
    created = await create_flight(client, auth_headers("user-a"))
    intruder = auth_headers("user-b")
    missing = uuid.uuid4().hex

    for path in (f"/api/flights/{created['id']}", f"/api/flights/{missing}"):
        get = await client.get(path, headers=intruder)
        put = await client.put(path, json=flight_payload(), headers=intruder)
        delete = await client.delete(path, headers=intruder)
        for response in (get, put, delete):
            assert response.status_code == 404
            assert response.json() == {"detail": "Flight not found"}

    # Still there for its owner, untouched
    response = await client.get(f"/api/flights/{created['id']}", headers=auth_headers("user-a"))
    assert response.status_code == 200
    assert response.json()["updatedAt"] == created["updatedAt"]


@pytest.mark.asyncio
async def test_delete_flight(client: AsyncClient, auth_headers):
    headers = auth_headers()
    created = await create_flight(client, headers)

    response = await client.delete(f"/api/flights/{created['id']}", headers=headers)
    assert response.status_code == 204
    assert response.content == b""

    response = await client.get(f"/api/flights/{created['id']}", headers=headers)
    assert response.status_code == 404
    response = await client.delete(f"/api/flights/{created['id']}", headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_waypoint_client_keys_are_kept(client: AsyncClient, auth_headers):
    headers = auth_headers()
    waypoints = [
        waypoint(40.7, -74.0, focusTargetId="poi-1", coordinate={"latitude": 40.7, "longitude": -74.0, "alt": 3}),
        waypoint(40.8, -74.1, id="wp-2"),
    ]
    created = await create_flight(client, headers, waypoints=waypoints)

    stored = (await client.get(f"/api/flights/{created['id']}", headers=headers)).json()["waypoints"]
    assert stored[0]["focusTargetId"] == "poi-1"
    assert stored[0]["coordinate"]["alt"] == 3
    assert stored[1]["id"] == "wp-2"
