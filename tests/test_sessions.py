import uuid
from datetime import datetime, timedelta, timezone

import pytest


def _iso(value: datetime) -> str:
    return value.isoformat()


@pytest.mark.asyncio
async def test_start_and_complete_session(client):
    start = datetime.now(timezone.utc) - timedelta(minutes=25)
    response = await client.post("/sessions", json={
        "type": "pomodoro",
        "start_time": _iso(start),
        "duration": 25,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["completed"] is False
    assert data["end_time"] is None

    response = await client.patch(f"/sessions/{data['id']}/complete", json={})
    assert response.status_code == 200
    assert response.json()["completed"] is True
    assert response.json()["end_time"] is not None


@pytest.mark.asyncio
async def test_completed_session_is_immutable(client):
    start = datetime.now(timezone.utc) - timedelta(minutes=5)
    create_resp = await client.post("/sessions", json={
        "type": "short-break",
        "start_time": _iso(start),
        "end_time": _iso(start + timedelta(minutes=5)),
        "duration": 5,
        "completed": True,
    })
    assert create_resp.status_code == 201

    response = await client.patch(
        f"/sessions/{create_resp.json()['id']}/complete", json={}
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_session_validation(client):
    now = datetime.now(timezone.utc)

    # Completed without an end
    response = await client.post("/sessions", json={
        "type": "pomodoro", "start_time": _iso(now), "duration": 25, "completed": True,
    })
    assert response.status_code == 422

    # End before start
    response = await client.post("/sessions", json={
        "type": "pomodoro",
        "start_time": _iso(now),
        "end_time": _iso(now - timedelta(minutes=1)),
        "duration": 25,
    })
    assert response.status_code == 422

    # Unknown type
    response = await client.post("/sessions", json={
        "type": "nap", "start_time": _iso(now), "duration": 25,
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_complete_before_start_rejected(client):
    start = datetime.now(timezone.utc)
    create_resp = await client.post("/sessions", json={
        "type": "pomodoro", "start_time": _iso(start), "duration": 25,
    })
    response = await client.patch(
        f"/sessions/{create_resp.json()['id']}/complete",
        json={"end_time": _iso(start - timedelta(minutes=10))},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_complete_nonexistent_session(client):
    response = await client.patch(f"/sessions/{uuid.uuid4()}/complete", json={})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_session_linked_to_task(client):
    task = await client.post("/tasks", json={"title": "Deep work"})
    task_id = task.json()["id"]

    response = await client.post("/sessions", json={
        "type": "pomodoro",
        "start_time": _iso(datetime.now(timezone.utc)),
        "duration": 25,
        "task_id": task_id,
    })
    assert response.status_code == 201
    assert response.json()["task_id"] == task_id

    response = await client.post("/sessions", json={
        "type": "pomodoro",
        "start_time": _iso(datetime.now(timezone.utc)),
        "duration": 25,
        "task_id": str(uuid.uuid4()),
    })
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_sessions_pagination(client):
    now = datetime.now(timezone.utc)
    for i in range(5):
        await client.post("/sessions", json={
            "type": "pomodoro",
            "start_time": _iso(now - timedelta(hours=i)),
            "duration": 25,
        })

    response = await client.get("/sessions?limit=2&offset=0")
    assert response.status_code == 200
    assert len(response.json()) == 2
