from datetime import timedelta

from services import clock


def create_task(client, assignee=21, count=3, **extra):
    payload = {
        "assigned_employee_id": assignee,
        "title": "Settlement report",
        "components": [{"type": "Feature", "complexity": "Medium", "count": count}],
        **extra,
    }
    return client.post("/api/v1/tasks", json=payload)


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_create_and_fetch_task(client):
    client.login(20)

    response = create_task(client)

    assert response.status_code == 201
    body = response.json()
    assert body["workload_hours"] == 15
    assert body["status"] == "Pending"
    assert client.get(f"/api/v1/tasks/{body['id']}").json()["title"] == "Settlement report"


def test_manager_cannot_assign_outside_direct_reports(client):
    client.login(10)

    response = create_task(client, assignee=31)

    assert response.status_code == 403
    assert response.json()["error_code"] == "AUTHORIZATION_ERROR"


def test_blank_title_rejected(client):
    client.login(20)

    response = client.post("/api/v1/tasks", json={"assigned_employee_id": 21, "title": "   "})

    assert response.status_code == 422


def test_status_transition_and_worklogs(client):
    client.login(21)
    task = create_task(client).json()
    component_id = task["components"][0]["id"]

    logged = client.post(
        f"/api/v1/tasks/components/{component_id}/worklogs",
        json={"hours_logged": 10, "log_date": clock.today().isoformat()},
    )
    assert logged.status_code == 201

    over = client.post(
        f"/api/v1/tasks/components/{component_id}/worklogs",
        json={"hours_logged": 6, "log_date": clock.today().isoformat()},
    )
    assert over.status_code == 422
    assert over.json()["error_code"] == "CAPACITY_EXCEEDED"

    exact = client.put(
        f"/api/v1/tasks/worklogs/{logged.json()['id']}",
        json={"hours_logged": 15, "log_date": clock.today().isoformat()},
    )
    assert exact.status_code == 409
    assert exact.json()["error_code"] == "MUST_USE_STATUS_TRANSITION"

    done = client.patch(f"/api/v1/tasks/components/{component_id}/status", json={"status": "Live"})
    assert done.status_code == 200
    assert done.json()["work_item"]["status"] == "Completed"

    logs = client.get(f"/api/v1/tasks/components/{component_id}/worklogs").json()
    assert sum(log["hours_logged"] for log in logs) == 15

    locked = client.post(
        f"/api/v1/tasks/components/{component_id}/worklogs",
        json={"hours_logged": 1, "log_date": clock.today().isoformat()},
    )
    assert locked.status_code == 409
    assert locked.json()["error_code"] == "COMPONENT_LOCKED"


def test_unknown_component_status_rejected(client):
    client.login(21)
    component_id = create_task(client).json()["components"][0]["id"]

    response = client.patch(f"/api/v1/tasks/components/{component_id}/status", json={"status": "Shipped"})

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_other_employee_cannot_touch_task(client):
    client.login(21)
    task = create_task(client).json()

    client.login(22)
    assert client.get(f"/api/v1/tasks/{task['id']}").status_code == 403
    assert client.delete(f"/api/v1/tasks/{task['id']}").status_code == 403


def test_list_with_scope_and_status_filter(client):
    client.login(20)
    create_task(client, assignee=21)
    create_task(client, assignee=22)

    client.login(1)
    everyone = client.get("/api/v1/tasks").json()
    payments = client.get("/api/v1/tasks", params={"application_name": "payments"}).json()
    completed = client.get("/api/v1/tasks", params={"status": "Completed"}).json()
    ignored = client.get("/api/v1/tasks", params={"tl_id": "not-a-number"}).json()

    assert len(everyone) == 2
    assert [t["assigned_employee_id"] for t in payments] == [21]
    assert completed == []
    assert len(ignored) == 2


def test_overdue_lists_unfinished_past_due(client):
    client.login(20)
    yesterday = (clock.today() - timedelta(days=1)).isoformat()
    tomorrow = (clock.today() + timedelta(days=1)).isoformat()
    late = create_task(client, due_date=yesterday).json()
    create_task(client, due_date=tomorrow)

    overdue = client.get("/api/v1/tasks/overdue").json()

    assert [t["id"] for t in overdue] == [late["id"]]


def test_delete_task(client):
    client.login(20)
    task = create_task(client).json()

    assert client.delete(f"/api/v1/tasks/{task['id']}").status_code == 200
    assert client.get(f"/api/v1/tasks/{task['id']}").status_code == 404


def test_live_issue_routes(client):
    client.login(20)

    response = client.post(
        "/api/v1/live-issues",
        json={
            "assigned_employee_id": 22,
            "title": "Refund job failing",
            "components": [{"type": "Report", "complexity": "Simple"}],
        },
    )

    assert response.status_code == 201
    assert response.json()["workload_hours"] == 1
    assert client.get("/api/v1/tasks").json() == []
    assert len(client.get("/api/v1/live-issues").json()) == 1


def test_effort_mapping_crud(client):
    client.login(10)

    created = client.post("/api/v1/effort-mappings", json={"type": "Migration", "values": {"Simple": 3}})
    assert created.status_code == 201

    duplicate = client.post("/api/v1/effort-mappings", json={"type": "Feature", "values": {"Simple": 1}})
    assert duplicate.status_code == 409
    assert duplicate.json()["error_code"] == "CONFLICT"

    renamed = client.put(
        "/api/v1/effort-mappings/Migration",
        json={"new_type": "Data_Migration", "values": {"Simple": 4}},
    )
    assert renamed.json() == {"type": "Data_Migration", "values": {"Simple": 4.0}}

    negative = client.post("/api/v1/effort-mappings", json={"type": "Bad", "values": {"Simple": -1}})
    assert negative.status_code == 422

    assert client.delete("/api/v1/effort-mappings/Data_Migration").status_code == 200
    assert client.delete("/api/v1/effort-mappings/Data_Migration").status_code == 404
    types = [m["type"] for m in client.get("/api/v1/effort-mappings").json()]
    assert types == ["Feature", "Report"]
