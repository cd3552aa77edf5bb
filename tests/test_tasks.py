import uuid

import pytest


@pytest.mark.asyncio
async def test_create_task(client):
    response = await client.post("/tasks", json={
        "title": "Write unit tests",
        "estimated_pomodoros": 3,
        "priority": "high",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Write unit tests"
    assert data["project"] == "No Project"
    assert data["estimated_pomodoros"] == 3
    assert data["completed_pomodoros"] == 0
    assert data["priority"] == "high"
    assert data["completed"] is False
    assert data["completed_at"] is None
    assert data["user_id"] is not None


@pytest.mark.asyncio
async def test_blank_project_falls_back_to_default(client):
    response = await client.post("/tasks", json={"title": "Loose end", "project": "   "})
    assert response.status_code == 201
    assert response.json()["project"] == "No Project"


@pytest.mark.asyncio
async def test_create_task_validation(client):
    # Empty title
    response = await client.post("/tasks", json={"title": ""})
    assert response.status_code == 422

    # Estimate out of range
    response = await client.post("/tasks", json={"title": "Test", "estimated_pomodoros": 11})
    assert response.status_code == 422

    # Unknown priority
    response = await client.post("/tasks", json={"title": "Test", "priority": "urgent"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_tasks_filters(client):
    await client.post("/tasks", json={"title": "Write", "project": "Book"})
    await client.post("/tasks", json={"title": "Edit", "project": "Book", "priority": "low"})
    other = await client.post("/tasks", json={"title": "Laundry"})
    await client.patch(f"/tasks/{other.json()['id']}/toggle")

    response = await client.get("/tasks")
    assert response.status_code == 200
    assert len(response.json()) == 3

    response = await client.get("/tasks?project=Book")
    assert {t["title"] for t in response.json()} == {"Write", "Edit"}

    response = await client.get("/tasks?completed=true")
    assert [t["title"] for t in response.json()] == ["Laundry"]

    response = await client.get("/tasks?priority=low")
    assert [t["title"] for t in response.json()] == ["Edit"]


@pytest.mark.asyncio
async def test_update_task(client):
    create_resp = await client.post("/tasks", json={"title": "Original"})
    task_id = create_resp.json()["id"]

    response = await client.put(f"/tasks/{task_id}", json={
        "title": "Updated",
        "project": "Work",
    })
    assert response.status_code == 200
    assert response.json()["title"] == "Updated"
    assert response.json()["project"] == "Work"

    response = await client.put(f"/tasks/{task_id}", json={"title": "   "})
    assert response.status_code == 422

    response = await client.put(f"/tasks/{task_id}", json={"title": "  Trimmed  "})
    assert response.status_code == 200
    assert response.json()["title"] == "Trimmed"


@pytest.mark.asyncio
async def test_update_nonexistent_task(client):
    fake_id = str(uuid.uuid4())
    response = await client.put(f"/tasks/{fake_id}", json={"title": "Nope"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_keeps_completed_at_in_sync(client):
    create_resp = await client.post("/tasks", json={"title": "Ship it"})
    task_id = create_resp.json()["id"]

    done = await client.patch(f"/tasks/{task_id}/toggle")
    assert done.status_code == 200
    assert done.json()["completed"] is True
    assert done.json()["completed_at"] is not None

    undone = await client.patch(f"/tasks/{task_id}/toggle")
    assert undone.json()["completed"] is False
    assert undone.json()["completed_at"] is None


@pytest.mark.asyncio
async def test_set_completed_pomodoros(client):
    create_resp = await client.post("/tasks", json={"title": "Focus", "estimated_pomodoros": 2})
    task_id = create_resp.json()["id"]

    response = await client.patch(f"/tasks/{task_id}/pomodoros", json={"completed_pomodoros": 3})
    assert response.status_code == 200
    # Going past the estimate is allowed
    assert response.json()["completed_pomodoros"] == 3

    response = await client.patch(f"/tasks/{task_id}/pomodoros", json={"completed_pomodoros": -1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_task(client):
    create_resp = await client.post("/tasks", json={"title": "Temporary"})
    task_id = create_resp.json()["id"]

    response = await client.delete(f"/tasks/{task_id}")
    assert response.status_code == 200

    response = await client.delete(f"/tasks/{task_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cannot_touch_other_users_task(client, db_session, second_user):
    from pomotrack.models.task import Task

    foreign = Task(user_id=second_user.id, title="Not yours")
    db_session.add(foreign)
    await db_session.commit()

    assert (await client.patch(f"/tasks/{foreign.id}/toggle")).status_code == 404
    assert (await client.delete(f"/tasks/{foreign.id}")).status_code == 404


@pytest.mark.asyncio
async def test_task_stats_all_time(client):
    empty = await client.get("/tasks/stats")
    assert empty.status_code == 200
    assert empty.json()["overall"] == {
        "totalTasks": 0,
        "completedTasks": 0,
        "totalPomodoros": 0,
        "completedPomodoros": 0,
    }
    assert empty.json()["projects"] == []

    await client.post("/tasks", json={"title": "A", "project": "Alpha", "estimated_pomodoros": 2})
    await client.post("/tasks", json={"title": "B", "project": "Alpha", "estimated_pomodoros": 1})
    done = await client.post("/tasks", json={"title": "C", "project": "Beta", "estimated_pomodoros": 4})
    await client.patch(f"/tasks/{done.json()['id']}/toggle")
    await client.patch(f"/tasks/{done.json()['id']}/pomodoros", json={"completed_pomodoros": 4})

    data = (await client.get("/tasks/stats")).json()
    assert data["overall"] == {
        "totalTasks": 3,
        "completedTasks": 1,
        "totalPomodoros": 7,
        "completedPomodoros": 4,
    }
    assert [p["project"] for p in data["projects"]] == ["Alpha", "Beta"]
    assert data["projects"][0]["totalTasks"] == 2
